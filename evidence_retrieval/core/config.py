"""
Retrieval configuration - embedding model, vector index and query defaults.
Values are read from the environment; entry points load .env files themselves.
"""

import os

# Embedding pipeline configuration
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "transformer")  # transformer|hash
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "mixedbread-ai/mxbai-embed-large-v1")
EMBED_MODEL_REVISION = os.getenv("EMBED_MODEL_REVISION", "main")
# Pooling and normalization must match what the index was populated with
EMBED_POOLING = os.getenv("EMBED_POOLING", "mean")
EMBED_NORMALIZE = os.getenv("EMBED_NORMALIZE", "true").lower() == "true"
EMBED_QUANTIZED = os.getenv("EMBED_QUANTIZED", "false").lower() == "true"
EMBED_HASH_DIMENSION = int(os.getenv("EMBED_HASH_DIMENSION", "1024"))

# Vector index configuration
VECTOR_PROVIDER = os.getenv("VECTOR_PROVIDER", "pinecone")  # pinecone|memory
PINECONE_API_KEY = os.getenv("PINECONE_API_KEY")
PINECONE_INDEX_NAME = os.getenv("PINECONE_INDEX_NAME")
PINECONE_NAMESPACE = os.getenv("PINECONE_NAMESPACE", "")

# Query defaults
RETRIEVAL_TOP_K = int(os.getenv("RETRIEVAL_TOP_K", "5"))

# Version string
VERSION = "1.0.0"

_memory_client = None


class ConfigurationError(RuntimeError):
    """Raised when the environment does not describe a usable retrieval setup."""


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_default_top_k():
    """Get the default number of matches to request."""
    return RETRIEVAL_TOP_K


def get_embedding_provider():
    """Get configured embedding provider implementation."""
    if EMBED_PROVIDER == "hash":
        from evidence_retrieval.vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(dimension=EMBED_HASH_DIMENSION)

    from evidence_retrieval.vector.embeddings import FeatureExtractionEmbedding
    return FeatureExtractionEmbedding(
        model_name=EMBED_MODEL_NAME,
        revision=EMBED_MODEL_REVISION,
        pooling=EMBED_POOLING,
        normalize=EMBED_NORMALIZE,
        quantized=EMBED_QUANTIZED
    )


def get_vector_client():
    """Get configured vector database client.

    The Pinecone client is created per call (it is cheap and holds only
    credentials); the in-memory client is shared so seeded data survives
    between calls.
    """
    global _memory_client

    if VECTOR_PROVIDER == "memory":
        if _memory_client is None:
            from evidence_retrieval.vector.index import InMemoryVectorClient
            _memory_client = InMemoryVectorClient()
        return _memory_client

    if VECTOR_PROVIDER == "pinecone":
        if not PINECONE_API_KEY:
            raise ConfigurationError("PINECONE_API_KEY is required when VECTOR_PROVIDER=pinecone")
        from pinecone import Pinecone
        return Pinecone(api_key=PINECONE_API_KEY)

    raise ConfigurationError(f"Invalid VECTOR_PROVIDER: {VECTOR_PROVIDER}")


def validate_retrieval_config():
    """Validate retrieval configuration and return any issues."""
    issues = []

    if EMBED_PROVIDER not in ["transformer", "hash"]:
        issues.append(f"Invalid EMBED_PROVIDER: {EMBED_PROVIDER}")

    if EMBED_POOLING not in ["mean", "cls", "max"]:
        issues.append(f"Invalid EMBED_POOLING: {EMBED_POOLING}")

    if EMBED_HASH_DIMENSION < 2:
        issues.append("EMBED_HASH_DIMENSION must be >= 2")

    if VECTOR_PROVIDER not in ["pinecone", "memory"]:
        issues.append(f"Invalid VECTOR_PROVIDER: {VECTOR_PROVIDER}")

    if VECTOR_PROVIDER == "pinecone" and not PINECONE_API_KEY:
        issues.append("VECTOR_PROVIDER=pinecone requires PINECONE_API_KEY")

    if RETRIEVAL_TOP_K < 1:
        issues.append("RETRIEVAL_TOP_K must be >= 1")

    return issues
