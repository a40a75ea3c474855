"""
Vector index access - namespace-scoped nearest neighbour queries.
Pinecone in production; a Pinecone-shaped in-memory client for local runs and tests.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Dict, List, Optional
import threading
import numpy as np

from util.logging import logger
from .types import VectorRecord, QueryMatch, QueryResponse


class VectorQueryError(RuntimeError):
    """Raised when the index answered with something that is not a match list."""


class IVectorIndex(ABC):
    """Abstract interface matching the query side of a Pinecone index."""

    @abstractmethod
    def query(self, vector: List[float], top_k: int = 5, namespace: str = "",
              include_metadata: bool = False) -> QueryResponse:
        """Search for similar vectors and return ranked matches."""
        pass


class NamespacedIndex:
    """An index handle with the namespace bound at construction.

    Queries never take a namespace argument; every query goes to the
    partition this handle was scoped to.
    """

    def __init__(self, index, namespace: str):
        self.index = index
        self.namespace = namespace

    def query(self, vector: List[float], top_k: int = 5):
        return self.index.query(
            vector=vector,
            top_k=top_k,
            namespace=self.namespace,
            include_metadata=True
        )


def resolve_namespace(client, index_name: str, namespace: str) -> NamespacedIndex:
    """Resolve a named index on the client and scope it to a namespace."""
    return NamespacedIndex(client.Index(index_name), namespace)


def extract_matches(response) -> list:
    """Pull the ranked match list out of a query response.

    Accepts attribute-style (Pinecone QueryResponse) and mapping-style
    responses. A missing or null match list means no matches.
    """
    matches = getattr(response, "matches", None)
    if matches is None and isinstance(response, Mapping):
        matches = response.get("matches")
    if matches is None:
        return []
    if isinstance(matches, (str, bytes, Mapping)):
        raise VectorQueryError(f"Unexpected matches payload of type {type(matches).__name__}")
    return list(matches)


def query_index(client, index_name: str, namespace: str, vector: List[float], top_k: int = 5) -> list:
    """
    Query a namespaced index for the top_k nearest neighbours.

    Matches are returned exactly as ranked by the index; nothing is
    re-sorted, filtered or deduplicated here.
    """
    scoped = resolve_namespace(client, index_name, namespace)
    response = scoped.query(vector, top_k=top_k)
    matches = extract_matches(response)

    logger.log_vector_query(index_name, namespace, top_k, len(matches))
    logger.debug(f"Full query response structure: {response}")
    return matches


class SimpleInMemoryVectorIndex(IVectorIndex):
    """In-memory index using cosine similarity, partitioned by namespace."""

    def __init__(self, name: str, dimension: Optional[int] = None):
        self.name = name
        self.dimension = dimension
        self._namespaces: Dict[str, Dict[str, VectorRecord]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _as_record(item) -> VectorRecord:
        if isinstance(item, VectorRecord):
            return item
        if isinstance(item, Mapping):
            return VectorRecord(id=item["id"], values=list(item["values"]), metadata=dict(item.get("metadata") or {}))
        # (id, values) or (id, values, metadata) tuples, as Pinecone accepts
        record_id, values, *rest = item
        return VectorRecord(id=record_id, values=list(values), metadata=dict(rest[0]) if rest else {})

    def upsert(self, vectors, namespace: str = "") -> int:
        """Insert or replace records in a namespace. Returns the upserted count."""
        records = [self._as_record(v) for v in vectors]

        with self._lock:
            partition = self._namespaces.setdefault(namespace, {})
            for record in records:
                if self.dimension is None:
                    self.dimension = len(record.values)
                if len(record.values) != self.dimension:
                    raise ValueError(
                        f"Vector dimension {len(record.values)} does not match index dimension {self.dimension}"
                    )
                partition[record.id] = record

        return len(records)

    def query(self, vector: List[float], top_k: int = 5, namespace: str = "",
              include_metadata: bool = False) -> QueryResponse:
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")

        with self._lock:
            records = list(self._namespaces.get(namespace, {}).values())

        if not records:
            return QueryResponse(matches=[], namespace=namespace)

        if self.dimension is not None and len(vector) != self.dimension:
            raise ValueError(
                f"Query vector dimension {len(vector)} does not match index dimension {self.dimension}"
            )

        query_vector = np.asarray(vector, dtype=np.float64)
        norm = np.linalg.norm(query_vector)
        if norm == 0:
            # Return empty results if query vector is zero
            return QueryResponse(matches=[], namespace=namespace)

        matrix = np.asarray([r.values for r in records], dtype=np.float64)
        row_norms = np.linalg.norm(matrix, axis=1)
        row_norms[row_norms == 0] = 1.0
        scores = (matrix @ query_vector) / (row_norms * norm)

        # Stable sort so ties keep insertion order
        order = np.argsort(-scores, kind="stable")[:top_k]

        matches = [
            QueryMatch(
                id=records[i].id,
                score=float(scores[i]),
                metadata=dict(records[i].metadata) if include_metadata else None
            )
            for i in order
        ]
        return QueryResponse(matches=matches, namespace=namespace)


class InMemoryVectorClient:
    """Pinecone-shaped client holding named in-memory indexes."""

    def __init__(self):
        self._indexes: Dict[str, SimpleInMemoryVectorIndex] = {}
        self._lock = threading.Lock()

    def Index(self, name: str) -> SimpleInMemoryVectorIndex:
        with self._lock:
            if name not in self._indexes:
                self._indexes[name] = SimpleInMemoryVectorIndex(name)
            return self._indexes[name]
