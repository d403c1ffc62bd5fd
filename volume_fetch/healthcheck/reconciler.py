"""Chunk/embedding reconciliation."""

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from typing import Any

import structlog

from volume_fetch.cms.models import Volume

logger = structlog.get_logger(__name__)


@dataclass
class PageHealthCheck:
    """Embedding coverage of one page.

    Attributes:
        page_slug: Page slug
        page_title: Page title
        existing_chunks: Chunk slugs with an indexed embedding, in chunk order
        missing_chunks: Chunk slugs without one, in chunk order
    """

    page_slug: str
    page_title: str
    existing_chunks: list[str] = field(default_factory=list)
    missing_chunks: list[str] = field(default_factory=list)


@dataclass
class HealthCheckReport:
    """Embedding coverage of a whole volume.

    Attributes:
        volume_id: CMS document id the volume was fetched with
        volume_slug: Volume slug
        volume_title: Volume title
        total_chunks: Number of chunks in the volume
        existing_chunks_count: Chunks with an indexed embedding
        missing_chunks_count: Chunks without one
        pages: Per-page breakdown in volume order
    """

    volume_id: str
    volume_slug: str
    volume_title: str
    total_chunks: int = 0
    existing_chunks_count: int = 0
    missing_chunks_count: int = 0
    pages: list[PageHealthCheck] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True when every chunk has an embedding."""
        return self.missing_chunks_count == 0

    def pages_with_missing_chunks(self) -> list[PageHealthCheck]:
        return [page for page in self.pages if page.missing_chunks]

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary for JSON serialization."""
        return asdict(self)


def extract_chunk_slugs(records: Iterable[Any]) -> list[str]:
    """Pull the ``chunk`` slug out of embedding records.

    Records without a string ``chunk`` field are ignored.
    """
    return [
        record["chunk"]
        for record in records
        if isinstance(record, dict) and isinstance(record.get("chunk"), str)
    ]


def perform_health_check(
    volume_id: str,
    volume: Volume,
    embedding_slugs: Iterable[str],
) -> HealthCheckReport:
    """Partition every chunk of the volume into existing and missing embeddings.

    All chunk types are checked. Duplicate embedding slugs collapse.

    Args:
        volume_id: CMS document id, recorded in the report
        volume: Parsed volume
        embedding_slugs: Chunk slugs known to the embedding store

    Returns:
        HealthCheckReport with per-page and total counts
    """
    indexed = set(embedding_slugs)
    report = HealthCheckReport(
        volume_id=volume_id,
        volume_slug=volume.slug,
        volume_title=volume.title,
    )

    for page in volume.pages:
        page_check = PageHealthCheck(page_slug=page.slug, page_title=page.title)
        for chunk in page.chunks:
            if chunk.slug in indexed:
                page_check.existing_chunks.append(chunk.slug)
            else:
                page_check.missing_chunks.append(chunk.slug)

        report.existing_chunks_count += len(page_check.existing_chunks)
        report.missing_chunks_count += len(page_check.missing_chunks)
        report.pages.append(page_check)

    report.total_chunks = report.existing_chunks_count + report.missing_chunks_count

    logger.info(
        "health_check_complete",
        volume_slug=volume.slug,
        total_chunks=report.total_chunks,
        existing=report.existing_chunks_count,
        missing=report.missing_chunks_count,
    )
    return report
