"""
Query embeddings for vector retrieval.
Feature-extraction model (mean pooled, normalized) behind a lazily built, shared handle.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
import hashlib
import threading
import numpy as np

from util.logging import logger
from .types import EmbeddingShape

INVALID_EMBEDDING_MESSAGE = "Invalid embedding generated: dimension too small"


class InvalidEmbeddingError(ValueError):
    """Raised when the model produced a degenerate (length <= 1) vector."""


def _output_field(output, name: str):
    if isinstance(output, Mapping):
        return output.get(name)
    return getattr(output, name, None)


def classify_embedding_output(output) -> EmbeddingShape:
    """Work out which of the known output shapes a model returned.

    Probe order matters: numpy arrays and tensors expose both `data` and
    `tolist`, and the raw buffer is preferred. Mapping outputs such as
    {"data": [...]} are probed by key.
    """
    if not isinstance(output, (list, tuple)) and _output_field(output, "data") is not None:
        return EmbeddingShape.BUFFER
    if callable(_output_field(output, "tolist")):
        return EmbeddingShape.TOLIST
    if isinstance(output, (list, tuple)):
        return EmbeddingShape.SEQUENCE
    return EmbeddingShape.ITERABLE


def _flatten(values) -> list[float]:
    return [float(x) for x in np.asarray(values, dtype=np.float64).ravel()]


def normalize_embedding_output(output) -> list[float]:
    """Convert any supported model output into a flat list of floats.

    Batched outputs of shape (1, dim) are flattened to (dim,).
    """
    shape = classify_embedding_output(output)

    if shape is EmbeddingShape.BUFFER:
        return _flatten(_output_field(output, "data"))
    if shape is EmbeddingShape.TOLIST:
        return _flatten(_output_field(output, "tolist")())
    if shape is EmbeddingShape.SEQUENCE:
        return _flatten(output)

    # Non-iterables coerce to an empty vector and fail validation downstream
    if not isinstance(output, Iterable) or isinstance(output, (str, bytes)):
        return []
    return _flatten(list(output))


def validate_embedding(vector: list[float]) -> list[float]:
    """Reject vectors too small to be a real embedding."""
    if len(vector) <= 1:
        raise InvalidEmbeddingError(INVALID_EMBEDDING_MESSAGE)
    return vector


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider for tests and offline runs.

    Expands a SHA-256 digest of the text (re-hashed with a counter) until the
    requested dimension is filled, maps bytes to [-1, 1] and L2-normalizes,
    so vectors look like normalized model output without any model download.
    """

    def __init__(self, dimension: int = 1024):
        self.dimension = dimension

    def embed_text(self, text: str) -> list[float]:
        raw = bytearray()
        counter = 0
        while len(raw) < self.dimension:
            raw.extend(hashlib.sha256(f"{counter}:{text}".encode()).digest())
            counter += 1

        vector = np.frombuffer(bytes(raw[:self.dimension]), dtype=np.uint8).astype(np.float64)
        vector = vector / 127.5 - 1.0

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm
        return vector.tolist()

    def get_dimension(self) -> int:
        return self.dimension


class FeatureExtractionEmbedding(IEmbeddingProvider):
    """Sentence-transformers feature extraction with explicit pooling.

    The model is assembled from a transformer module and a Pooling module so
    that the pooling strategy is fixed here rather than by whatever the hub
    config ships. The model handle is loaded on first use, once.
    """

    def __init__(self, model_name: str = "mixedbread-ai/mxbai-embed-large-v1", revision: str = "main",
                 pooling: str = "mean", normalize: bool = True, quantized: bool = False):
        self.model_name = model_name
        self.revision = revision
        self.pooling = pooling
        self.normalize = normalize
        self.quantized = quantized
        self._model = None
        self._lock = threading.Lock()

    @property
    def model(self):
        if self._model is None:
            with self._lock:
                if self._model is None:
                    self._model = self._load_model()
        return self._model

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def _load_model(self):
        from sentence_transformers import SentenceTransformer, models

        logger.log_operation("embedding.load_model", "started", {
            "model": self.model_name,
            "revision": self.revision,
            "pooling": self.pooling
        })

        revision_args = {"revision": self.revision}
        transformer = models.Transformer(
            self.model_name,
            model_args=revision_args,
            tokenizer_args=revision_args,
            config_args=revision_args
        )
        pooling = models.Pooling(
            transformer.get_word_embedding_dimension(),
            pooling_mode=self.pooling
        )
        model = SentenceTransformer(modules=[transformer, pooling])

        logger.log_operation("embedding.load_model", "success", {"model": self.model_name})
        return model

    def embed_text(self, text: str) -> list[float]:
        output = self.model.encode(
            text,
            convert_to_numpy=True,
            normalize_embeddings=self.normalize,
            precision="int8" if self.quantized else "float32"
        )
        return normalize_embedding_output(output)

    def get_dimension(self) -> int:
        return self.model.get_sentence_embedding_dimension()


class EmbeddingService:
    """
    Owns one embedding provider and turns queries into validated vectors.

    The provider is created at most once per service; overlapping first
    calls wait on the lock instead of building a second model.
    """

    def __init__(self, provider: IEmbeddingProvider = None, provider_factory=None):
        """
        Initialize the embedding service.

        Args:
            provider: Ready provider to use as-is
            provider_factory: Zero-argument callable building the provider on
                first use, defaults to the configured provider
        """
        if provider_factory is None:
            from ..core.config import get_embedding_provider
            provider_factory = get_embedding_provider
        self._provider_factory = provider_factory
        self._provider = provider
        self._lock = threading.Lock()

    @property
    def provider(self) -> IEmbeddingProvider:
        """Lazy-loaded embedding provider."""
        if self._provider is None:
            with self._lock:
                if self._provider is None:
                    self._provider = self._provider_factory()
        return self._provider

    @property
    def is_initialized(self) -> bool:
        """True once the underlying model handle exists."""
        if self._provider is None:
            return False
        return getattr(self._provider, "is_loaded", True)

    def get_embedding_vector(self, query: str) -> list[float]:
        """
        Embed a query into a flat, validated vector.

        Raises:
            InvalidEmbeddingError: if the vector has length <= 1
        """
        vector = normalize_embedding_output(self.provider.embed_text(query))

        try:
            validate_embedding(vector)
        except InvalidEmbeddingError:
            logger.log_embedding(query, len(vector), status="invalid")
            raise

        logger.log_embedding(query, len(vector), sample=vector[:5])
        return vector


_default_service = None
_default_service_lock = threading.Lock()


def get_embedding_service() -> EmbeddingService:
    """Get the process-wide embedding service, creating it on first use."""
    global _default_service
    if _default_service is None:
        with _default_service_lock:
            if _default_service is None:
                _default_service = EmbeddingService()
    return _default_service


def reset_embedding_service() -> None:
    """Drop the process-wide service so the next call rebuilds it."""
    global _default_service
    with _default_service_lock:
        _default_service = None
