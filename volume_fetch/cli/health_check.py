"""CLI command for checking a volume's embeddings without rendering it."""

import click
import structlog

from volume_fetch.cli.utils import (
    build_health_checker,
    build_strapi_client,
    display_health_check_summary,
    echo_error,
)
from volume_fetch.cms.parser import parse_volume
from volume_fetch.utils.config import Config
from volume_fetch.utils.exceptions import VolumeFetchError
from volume_fetch.utils.logger import bind_run_context, configure_logging

logger = structlog.get_logger(__name__)


@click.command()
@click.argument("volume_id")
@click.option(
    "--save/--no-save",
    default=True,
    help="Save the report to the Supabase log table when LOG_SUPABASE_* is set",
)
def health_check(volume_id: str, save: bool) -> None:
    """Check that every chunk of a volume has an indexed embedding.

    Exits with status 1 when chunks are missing or the check cannot run.
    """
    try:
        config = Config()
        configure_logging(config.log_level)
        bind_run_context("health-check", volume_id)
        checker = build_health_checker(config)
        volume = parse_volume(build_strapi_client(config).fetch_volume(volume_id))
        report = checker.check(volume_id, volume)
    except VolumeFetchError as e:
        echo_error(f"health check for volume {volume_id} failed", e)
        logger.error("health_check_failed", volume_id=volume_id, error=e.message)
        raise SystemExit(1) from e

    passed = display_health_check_summary(report)
    if save and checker.save_report(report):
        click.echo("Health check data saved to Supabase log table")

    if not passed:
        raise SystemExit(1)


if __name__ == "__main__":
    health_check()
