"""
Evidence retrieval: embed a query, search a namespaced vector index and
render the top matches as numbered findings.
"""

from .core.retrieval_service import query_vector_store, retrieve_and_format
from .core.render import NO_MATCHES, classify_answer

__all__ = [
    'query_vector_store',
    'retrieve_and_format',
    'NO_MATCHES',
    'classify_answer'
]
