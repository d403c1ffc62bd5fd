"""Compare rendered chunks against the embeddings indexed for a volume."""

from volume_fetch.healthcheck.embedding_store import EmbeddingStore, HealthCheckLog
from volume_fetch.healthcheck.reconciler import (
    HealthCheckReport,
    PageHealthCheck,
    extract_chunk_slugs,
    perform_health_check,
)

__all__ = [
    "EmbeddingStore",
    "HealthCheckLog",
    "HealthCheckReport",
    "PageHealthCheck",
    "extract_chunk_slugs",
    "perform_health_check",
]
