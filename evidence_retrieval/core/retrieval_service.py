"""
Query -> ranked evidence passages.
Embeds the query, queries a namespaced index and renders the matches as text.
"""

from typing import Optional

from util.logging import logger
# Import config module to read settings dynamically
from . import config as config_module
from .render import render_matches, log_matches, error_sentinel
from ..vector.embeddings import EmbeddingService, get_embedding_service
from ..vector.index import query_index


def query_vector_store(client, index_name: str, namespace: str, query: str, top_k: int = 5,
                       embedding_service: Optional[EmbeddingService] = None) -> str:
    """
    Retrieve the top_k passages for a query as a single formatted string.

    Never raises. Failures in embedding, the index call or formatting come
    back as "<error: message>"; an empty result comes back as "<nomatches>".

    Args:
        client: Vector database client exposing Index(name)
        index_name: Name of the index to query
        namespace: Partition within the index
        query: Free-text query
        top_k: Maximum number of matches to request
        embedding_service: Service to embed with, defaults to the shared one

    Returns:
        Numbered findings, "<nomatches>" or "<error: ...>"
    """
    try:
        logger.info(f"Generating embedding for query: {query}")
        service = embedding_service if embedding_service is not None else get_embedding_service()
        vector = service.get_embedding_vector(query)

        matches = query_index(client, index_name, namespace, vector, top_k=top_k)
        log_matches(matches)

        return render_matches(matches)
    except Exception as e:
        logger.log_retrieval_error(e, {"index_name": index_name, "namespace": namespace})
        return error_sentinel(e)


def retrieve_and_format(query: str, index_name: str = None, namespace: str = None, top_k: int = None,
                        embedding_service: Optional[EmbeddingService] = None) -> str:
    """Run query_vector_store against the configured client, index and namespace."""
    try:
        client = config_module.get_vector_client()
    except Exception as e:
        logger.log_retrieval_error(e, {"stage": "client"})
        return error_sentinel(e)

    index_name = index_name or config_module.PINECONE_INDEX_NAME
    if not index_name:
        e = config_module.ConfigurationError("No index configured. Set PINECONE_INDEX_NAME or pass index_name")
        logger.log_retrieval_error(e, {"stage": "config"})
        return error_sentinel(e)

    return query_vector_store(
        client,
        index_name,
        namespace if namespace is not None else config_module.PINECONE_NAMESPACE,
        query,
        top_k=top_k if top_k is not None else config_module.get_default_top_k(),
        embedding_service=embedding_service
    )
