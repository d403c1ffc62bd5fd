"""CLI command for fetching a volume and rendering it to Markdown."""

from pathlib import Path

import click
import structlog

from volume_fetch.cli.utils import (
    build_health_checker,
    build_strapi_client,
    display_health_check_summary,
    echo_error,
)
from volume_fetch.pipeline import VolumeFetchPipeline
from volume_fetch.utils.config import Config
from volume_fetch.utils.exceptions import VolumeFetchError
from volume_fetch.utils.logger import bind_run_context, configure_logging

logger = structlog.get_logger(__name__)

DEFAULT_OUTPUT_DIR = "output/textbook"


@click.command()
@click.argument("volume_id")
@click.argument(
    "output_dir",
    required=False,
    default=DEFAULT_OUTPUT_DIR,
    type=click.Path(file_okay=False, path_type=Path),
)
@click.option(
    "--skip-health-check",
    is_flag=True,
    help="Do not compare chunks against the embedding store",
)
@click.option(
    "--no-progress",
    is_flag=True,
    help="Hide the page writing progress bar",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from the environment",
)
def fetch_volume(
    volume_id: str,
    output_dir: Path,
    skip_health_check: bool,
    no_progress: bool,
    log_level: str | None,
) -> None:
    """Fetch a volume from Strapi and render its pages to Markdown.

    VOLUME_ID is the volume's `documentId` in Strapi. OUTPUT_DIR is recreated
    from scratch (default: output/textbook).

    When EMBEDDINGS_SUPABASE_URL and EMBEDDINGS_SUPABASE_API_KEY are set, every
    chunk is then checked against the embedding store and the command exits
    with status 1 if any are missing.

    Examples:

        \b
        # Render a volume into the default directory
        fetch-volume k3x9abc

        \b
        # Render without the embedding health check
        fetch-volume k3x9abc output/intro-to-computing --skip-health-check
    """
    try:
        config = Config()
    except VolumeFetchError as e:
        echo_error("invalid configuration", e)
        raise SystemExit(1) from e

    configure_logging(log_level or config.log_level)
    bind_run_context("fetch-volume", volume_id)

    pipeline = VolumeFetchPipeline(
        build_strapi_client(config), output_dir, show_progress=not no_progress
    )

    try:
        volume = pipeline.fetch(volume_id)
    except VolumeFetchError as e:
        echo_error(
            f"failed to fetch volume data with id {volume_id}, make sure you provide "
            f"the correct `documentId` found at {config.strapi_base_url}",
            e,
        )
        logger.error("volume_fetch_failed", volume_id=volume_id, error=e.message)
        raise SystemExit(1) from e

    try:
        stats = pipeline.render(volume)
    except VolumeFetchError as e:
        echo_error(f"failed to write volume {volume.slug}", e)
        logger.error("volume_render_failed", volume_slug=volume.slug, error=e.message)
        raise SystemExit(1) from e

    click.echo(f"Volume: {volume.title} ({volume.slug})")
    click.echo(f"Created {stats.pages_written} pages in {stats.output_dir}")
    click.echo()

    if skip_health_check or not config.health_check_enabled:
        reason = "--skip-health-check" if skip_health_check else "Supabase credentials not provided"
        click.echo(click.style(f"Skipping vector validation ({reason})", fg="yellow"))
        click.echo(click.style("Content fetched successfully", fg="green"))
        return

    click.echo(click.style("Starting vector validation...", fg="yellow"))
    try:
        checker = build_health_checker(config)
        report = checker.check(volume_id, volume)
    except VolumeFetchError as e:
        echo_error("failed to perform health check", e)
        logger.error("health_check_failed", volume_slug=volume.slug, error=e.message)
        raise SystemExit(1) from e

    passed = display_health_check_summary(report)
    if checker.report_log is not None:
        if checker.save_report(report):
            click.echo("Health check data saved to Supabase log table")
        else:
            click.echo(click.style("Failed to save health check data", fg="yellow"), err=True)

    if not passed:
        click.echo(click.style("Vector validation failed!", fg="red"))
        raise SystemExit(1)
    click.echo(click.style("Vector validation passed!", fg="green"))


if __name__ == "__main__":
    fetch_volume()
