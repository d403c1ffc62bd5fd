"""Fetch, render and health check stages for one volume."""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from volume_fetch.cms.client import StrapiClient
from volume_fetch.cms.models import Volume
from volume_fetch.cms.parser import parse_volume
from volume_fetch.healthcheck.embedding_store import EmbeddingStore, HealthCheckLog
from volume_fetch.healthcheck.reconciler import HealthCheckReport, perform_health_check
from volume_fetch.rendering.writer import DocumentWriter, reset_output_dir
from volume_fetch.utils.exceptions import TransportError

logger = structlog.get_logger(__name__)


@dataclass
class RenderStatistics:
    """Statistics for one render run.

    Attributes:
        volume_slug: Slug of the rendered volume
        pages_written: Number of page documents written
        chunks_rendered: Number of chunks across written pages
        output_dir: Directory the documents were written to
        duration_seconds: Time spent rendering and writing
    """

    volume_slug: str
    pages_written: int = 0
    chunks_rendered: int = 0
    output_dir: str = ""
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert statistics to dictionary for JSON serialization."""
        return {
            "volume_slug": self.volume_slug,
            "pages_written": self.pages_written,
            "chunks_rendered": self.chunks_rendered,
            "output_dir": self.output_dir,
            "duration_seconds": round(self.duration_seconds, 3),
        }


class VolumeFetchPipeline:
    """Fetch a volume from Strapi and render it to Markdown documents.

    The stages are independent: ``fetch`` produces a fully validated Volume,
    ``render`` writes it out, and ``HealthChecker`` reconciles it against the
    embedding store. Nothing is shared between them except the Volume value.

    Example:
        >>> pipeline = VolumeFetchPipeline(StrapiClient(), Path("output/textbook"))
        >>> volume = pipeline.fetch("k3x9...")
        >>> stats = pipeline.render(volume)
    """

    def __init__(
        self,
        cms_client: StrapiClient,
        output_dir: str | Path,
        show_progress: bool = True,
    ) -> None:
        """Initialize pipeline.

        Args:
            cms_client: Strapi client used to fetch the raw volume
            output_dir: Directory that receives volume.yaml and page documents
            show_progress: Display a progress bar while writing pages
        """
        self.cms_client = cms_client
        self.output_dir = Path(output_dir)
        self.show_progress = show_progress
        self.logger = logger.bind(component="volume_fetch_pipeline")

    def fetch(self, volume_id: str) -> Volume:
        """Fetch and parse a volume.

        Raises:
            TransportError: If Strapi cannot be reached or answers with an error
            ValidationError: If the response is missing required fields
        """
        document = self.cms_client.fetch_volume(volume_id)
        return parse_volume(document)

    def render(self, volume: Volume, clean: bool = True) -> RenderStatistics:
        """Write ``volume.yaml`` and one document per page.

        Args:
            volume: Parsed volume
            clean: Recreate the output directory before writing

        Returns:
            RenderStatistics for the run

        Raises:
            OutputWriteError: If the directory or any document cannot be written
        """
        start_time = time.time()
        if clean:
            reset_output_dir(self.output_dir)

        writer = DocumentWriter(self.output_dir, show_progress=self.show_progress)
        writer.write_volume(volume)
        writer.write_pages(volume.pages)

        stats = RenderStatistics(
            volume_slug=volume.slug,
            pages_written=len(volume.pages),
            chunks_rendered=volume.total_chunks,
            output_dir=str(self.output_dir),
            duration_seconds=time.time() - start_time,
        )
        self.logger.info("volume_rendered", **stats.to_dict())
        return stats


class HealthChecker:
    """Reconcile a volume's chunks against the embedding store."""

    def __init__(
        self,
        embedding_store: EmbeddingStore,
        report_log: HealthCheckLog | None = None,
    ) -> None:
        """Initialize checker.

        Args:
            embedding_store: Source of indexed chunk slugs
            report_log: Optional sink that persists each report
        """
        self.embedding_store = embedding_store
        self.report_log = report_log
        self.logger = logger.bind(component="health_checker")

    def check(self, volume_id: str, volume: Volume) -> HealthCheckReport:
        """Build the health check report.

        Raises:
            TransportError: If the embedding store cannot be reached
        """
        embedding_slugs = self.embedding_store.fetch_chunk_slugs(volume.slug)
        return perform_health_check(volume_id, volume, embedding_slugs)

    def save_report(self, report: HealthCheckReport) -> bool:
        """Persist a report when a log is configured.

        A failed save does not change the outcome of the check, so it is
        logged and reported through the return value.

        Returns:
            True if the report was saved
        """
        if self.report_log is None:
            self.logger.debug("health_check_log_disabled", volume_slug=report.volume_slug)
            return False

        try:
            self.report_log.save(report)
        except TransportError as e:
            self.logger.error(
                "health_check_save_failed", volume_slug=report.volume_slug, error=e.message
            )
            return False
        return True
