"""
Embedding and vector index adapters for evidence retrieval.
"""

# Package initialization for vector module
from .index import (
    IVectorIndex,
    NamespacedIndex,
    SimpleInMemoryVectorIndex,
    InMemoryVectorClient,
    VectorQueryError,
    resolve_namespace,
    query_index
)
from .types import EmbeddingShape, VectorRecord, QueryMatch, QueryResponse
from .embeddings import (
    IEmbeddingProvider,
    DeterministicHashEmbedding,
    FeatureExtractionEmbedding,
    EmbeddingService,
    InvalidEmbeddingError,
    classify_embedding_output,
    normalize_embedding_output,
    get_embedding_service
)

__all__ = [
    'IVectorIndex',
    'NamespacedIndex',
    'SimpleInMemoryVectorIndex',
    'InMemoryVectorClient',
    'VectorQueryError',
    'resolve_namespace',
    'query_index',
    'EmbeddingShape',
    'VectorRecord',
    'QueryMatch',
    'QueryResponse',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'FeatureExtractionEmbedding',
    'EmbeddingService',
    'InvalidEmbeddingError',
    'classify_embedding_output',
    'normalize_embedding_output',
    'get_embedding_service'
]
