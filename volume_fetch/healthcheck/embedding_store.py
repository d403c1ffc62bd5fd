"""Supabase access for indexed embeddings and health check logs."""

from typing import Any

import structlog
from supabase import Client, create_client

from volume_fetch.healthcheck.reconciler import HealthCheckReport, extract_chunk_slugs
from volume_fetch.utils.exceptions import TransportError

logger = structlog.get_logger(__name__)


class EmbeddingStore:
    """Read the chunk slugs indexed for a volume.

    Embeddings live in the ``embeddings`` table; each row's ``text`` column
    holds the volume slug and ``chunk`` the chunk slug.
    """

    TABLE_NAME = "embeddings"
    # Requested rows per range; the server may return fewer when its max_rows
    # cap is lower, so paging only ends on an empty batch
    PAGE_SIZE = 1000

    def __init__(self, url: str, api_key: str, client: Client | None = None) -> None:
        """Initialize store.

        Args:
            url: Supabase project URL
            api_key: Supabase API key
            client: Pre-built client (for testing)

        Raises:
            TransportError: If the client cannot be created
        """
        self.logger = logger.bind(component="embedding_store")
        try:
            self.client = client or create_client(url, api_key)
        except Exception as e:
            raise TransportError(f"Failed to create Supabase client: {e}") from e

    def fetch_records(self, volume_slug: str) -> list[dict[str, Any]]:
        """Fetch every embedding record of a volume.

        Raises:
            TransportError: If any request fails
        """
        records: list[dict[str, Any]] = []
        start = 0

        while True:
            end = start + self.PAGE_SIZE - 1
            try:
                response = (
                    self.client.table(self.TABLE_NAME)
                    .select("chunk")
                    .eq("text", volume_slug)
                    .order("chunk")
                    .range(start, end)
                    .execute()
                )
            except Exception as e:
                self.logger.error(
                    "embedding_fetch_failed",
                    volume_slug=volume_slug,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise TransportError(
                    f"Failed to fetch embeddings from Supabase: {e}", is_retryable=True
                ) from e

            batch = response.data or []
            if not isinstance(batch, list):
                raise TransportError("Supabase response cannot be converted into an array")

            if not batch:
                break
            records.extend(batch)
            start += len(batch)

        self.logger.info("embeddings_fetched", volume_slug=volume_slug, records=len(records))
        return records

    def fetch_chunk_slugs(self, volume_slug: str) -> list[str]:
        """Fetch the slugs of all chunks of a volume that have an embedding."""
        return extract_chunk_slugs(self.fetch_records(volume_slug))


class HealthCheckLog:
    """Persist health check reports to the ``log_rs`` table."""

    TABLE_NAME = "log_rs"

    def __init__(self, url: str, api_key: str, client: Client | None = None) -> None:
        self.logger = logger.bind(component="health_check_log")
        try:
            self.client = client or create_client(url, api_key)
        except Exception as e:
            raise TransportError(f"Failed to create Supabase client: {e}") from e

    def save(self, report: HealthCheckReport) -> None:
        """Insert ``{"data": report}`` as a new log row.

        Raises:
            TransportError: If the insert fails
        """
        try:
            self.client.table(self.TABLE_NAME).insert({"data": report.to_dict()}).execute()
        except Exception as e:
            raise TransportError(
                f"Failed to save health check to Supabase log table: {e}"
            ) from e

        self.logger.info(
            "health_check_saved",
            volume_slug=report.volume_slug,
            missing=report.missing_chunks_count,
        )
