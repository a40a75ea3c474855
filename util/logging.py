"""
Structured logging for the retrieval pipeline.
Embedding generation, vector index queries and per-chunk diagnostics.
"""

import logging
from typing import Any, Dict, List

class StructuredLogger:
    """Structured logger for embedding, vector query and rendering operations."""

    def __init__(self, name: str = "evidence_retrieval"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def set_debug(self, enabled: bool) -> None:
        """Toggle debug-level output (sample values, full match dumps)."""
        self.logger.setLevel(logging.DEBUG if enabled else logging.INFO)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.info(message)

    def log_embedding(self, query: str, dimension: int, sample: List[float] = None, status: str = "success"):
        """Log an embedding generation for a query."""
        details = {
            "query": query[:50] + "..." if len(query) > 50 else query,
            "dimension": dimension
        }
        self.log_operation("embedding.generate", status, details)

        if sample is not None:
            self.logger.debug(f"Embedding sample values: {sample}")

    def log_vector_query(self, index_name: str, namespace: str, top_k: int, match_count: int, status: str = "success"):
        """Log a vector index query."""
        details = {
            "index_name": index_name,
            "namespace": namespace,
            "top_k": top_k,
            "match_count": match_count
        }
        self.log_operation("vector.query", status, details)

    def log_chunk(self, position: int, match_id: Any, score: Any, metadata: Any, content: str):
        """Log one fetched chunk. Debug level only, content can be long."""
        self.logger.debug(
            f"Chunk {position}: ID (tried multiple properties): {match_id}, "
            f"Score (tried multiple properties): {score}, Metadata: {metadata}, "
            f"Content: {content}"
        )

    def log_retrieval_error(self, error: Exception, details: Dict[str, Any] = None):
        """Log a failure that was converted to an error sentinel."""
        log_details = {
            "error_type": type(error).__name__,
            "message": str(error)[:200]
        }
        if details:
            log_details.update(details)

        self.logger.error(f"Operation: retrieval.query, Status: failed, Details: {log_details}")

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()
