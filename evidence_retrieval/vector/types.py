"""
Value types shared by the embedding and vector query adapters.
"""

from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass, field


class EmbeddingShape(Enum):
    """Output shapes accepted from a feature-extraction model, in probe order."""

    BUFFER = "buffer"
    """Object exposing a raw numeric buffer field `data`"""

    TOLIST = "tolist"
    """Object exposing a callable `tolist()`"""

    SEQUENCE = "sequence"
    """Already a list or tuple"""

    ITERABLE = "iterable"
    """Anything else, coerced generically"""


@dataclass
class VectorRecord:
    """Represents a vector record with metadata."""

    id: str
    """Unique identifier for the vector record"""

    values: List[float]
    """The vector representation of the passage"""

    metadata: Dict[str, object] = field(default_factory=dict)
    """Additional metadata, normally including the source `chunk` text"""


@dataclass
class QueryMatch:
    """Represents a match returned by a vector index query."""

    id: str
    """Identifier for the matching record"""

    score: float
    """Similarity score of the match"""

    metadata: Optional[Dict[str, object]] = None
    """Metadata associated with the matched record, if requested"""


@dataclass
class QueryResponse:
    """Ranked matches for one query, highest score first."""

    matches: List[QueryMatch] = field(default_factory=list)
    namespace: str = ""
