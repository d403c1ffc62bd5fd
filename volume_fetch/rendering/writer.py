"""Write rendered documents into the output directory."""

import shutil
from pathlib import Path

import structlog
from tqdm import tqdm

from volume_fetch.cms.models import Page, Volume
from volume_fetch.rendering.renderer import link_next_slugs, render_page, render_volume_metadata
from volume_fetch.utils.exceptions import OutputWriteError

logger = structlog.get_logger(__name__)

VOLUME_METADATA_FILENAME = "volume.yaml"


def reset_output_dir(output_dir: Path) -> None:
    """Remove ``output_dir`` if it exists and create it empty.

    Raises:
        OutputWriteError: If the directory cannot be removed or created
    """
    try:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)
    except OSError as e:
        raise OutputWriteError(f"failed to create output directory {output_dir}: {e}") from e


class DocumentWriter:
    """Write volume and page documents without overwriting existing files.

    Every file is opened in exclusive-create mode, so a name collision (for
    example two pages sharing a slug, or a directory that was not cleaned)
    fails instead of silently replacing a document.
    """

    def __init__(self, output_dir: str | Path, show_progress: bool = True) -> None:
        """Initialize writer.

        Args:
            output_dir: Existing directory to write documents into
            show_progress: Display a tqdm progress bar while writing pages
        """
        self.output_dir = Path(output_dir)
        self.show_progress = show_progress
        self.logger = logger.bind(component="document_writer")

    def _create(self, path: Path, content: str) -> Path:
        try:
            with path.open("x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError as e:
            raise OutputWriteError(f"refusing to overwrite existing file {path}") from e
        except OSError as e:
            raise OutputWriteError(f"failed to write {path}: {e}") from e
        return path

    def page_path(self, page: Page) -> Path:
        """Return ``<output_dir>/<slug>.md``.

        Raises:
            OutputWriteError: If the slug would place the file outside ``output_dir``
        """
        path = self.output_dir / f"{page.slug}.md"
        if path.resolve().parent != self.output_dir.resolve():
            raise OutputWriteError(
                f"page slug '{page.slug}' resolves outside {self.output_dir}"
            )
        return path

    def write_volume(self, volume: Volume) -> Path:
        """Write ``volume.yaml``."""
        path = self._create(
            self.output_dir / VOLUME_METADATA_FILENAME, render_volume_metadata(volume)
        )
        self.logger.info("volume_metadata_written", path=str(path))
        return path

    def write_page(self, page: Page, next_slug: str | None) -> Path:
        """Write ``<slug>.md`` for one page.

        Raises:
            OutputWriteError: If the file exists or cannot be written
        """
        try:
            path = self._create(self.page_path(page), render_page(page, next_slug))
        except OutputWriteError as e:
            raise OutputWriteError(f"error writing page {page.slug}: {e.message}") from e
        self.logger.debug("page_written", page_slug=page.slug, path=str(path))
        return path

    def write_pages(self, pages: list[Page]) -> list[Path]:
        """Write every page in order, stopping at the first failure.

        Returns:
            Paths of the written documents, in reading order

        Raises:
            OutputWriteError: From the first page that could not be written
        """
        written: list[Path] = []
        linked = link_next_slugs(pages)

        with tqdm(
            total=len(linked),
            desc="Writing pages",
            unit="page",
            disable=not self.show_progress,
        ) as pbar:
            for page, next_slug in linked:
                written.append(self.write_page(page, next_slug))
                pbar.update(1)

        self.logger.info("pages_written", count=len(written), output_dir=str(self.output_dir))
        return written
