"""
HTTP surface for evidence retrieval.
"""

from fastapi import FastAPI, HTTPException

from util.logging import logger
from .schemas import RetrieveRequest, RetrieveResponse, HealthResponse
from ..core import config as config_module
from ..core.config import VERSION, debug_enabled, validate_retrieval_config, ConfigurationError
from ..core.render import classify_answer
from ..core.retrieval_service import query_vector_store
from ..vector.embeddings import get_embedding_service

# Initialize the FastAPI application
app = FastAPI(
    title="Evidence Retrieval API",
    version=VERSION,
    description="Embeds a query, searches a namespaced vector index and returns numbered findings",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)

logger.set_debug(debug_enabled())


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint():
    """Report configuration and whether the embedding model is loaded."""
    issues = validate_retrieval_config()

    return HealthResponse(
        status="healthy" if not issues else "degraded",
        version=VERSION,
        embedding_model=config_module.EMBED_MODEL_NAME,
        embedding_loaded=get_embedding_service().is_initialized,
        vector_provider=config_module.VECTOR_PROVIDER,
        config_issues=issues
    )


@app.post("/retrieve", response_model=RetrieveResponse)
def retrieve_endpoint(request: RetrieveRequest):
    """Return the formatted top matches for a query.

    Retrieval failures are reported through `status`, not HTTP errors; only
    a missing index or unusable client configuration is a 503.
    """
    index_name = request.index_name or config_module.PINECONE_INDEX_NAME
    if not index_name:
        raise HTTPException(status_code=503, detail="No index configured. Set PINECONE_INDEX_NAME or pass index_name")

    try:
        client = config_module.get_vector_client()
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e))

    namespace = request.namespace if request.namespace is not None else config_module.PINECONE_NAMESPACE
    top_k = request.top_k if request.top_k is not None else config_module.get_default_top_k()

    result = query_vector_store(client, index_name, namespace, request.query, top_k=top_k)

    return RetrieveResponse(
        result=result,
        status=classify_answer(result),
        top_k=top_k
    )
