"""
Request and response models for the retrieval API.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional


class RetrieveRequest(BaseModel):
    query: str
    top_k: Optional[int] = Field(default=None, ge=1, le=100)
    index_name: Optional[str] = None
    namespace: Optional[str] = None

    @field_validator('query')
    @classmethod
    def query_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('query cannot be empty')
        return v


class RetrieveResponse(BaseModel):
    result: str
    status: Literal["ok", "no_matches", "error"]
    top_k: int


class HealthResponse(BaseModel):
    status: str
    version: str
    embedding_model: str
    embedding_loaded: bool
    vector_provider: str
    config_issues: list[str] = []
