"""Shared utilities for CLI commands."""

import click

from volume_fetch.cms.client import StrapiClient
from volume_fetch.healthcheck.embedding_store import EmbeddingStore, HealthCheckLog
from volume_fetch.healthcheck.reconciler import HealthCheckReport
from volume_fetch.pipeline import HealthChecker
from volume_fetch.utils.config import Config
from volume_fetch.utils.exceptions import ConfigurationError, format_error_chain

PUBLISH_TIP = (
    "Tip: Verify that all pages have been successfully published. If there was "
    "an issue, try publishing the page with missing chunks again."
)


def echo_error(context: str, error: BaseException) -> None:
    """Print an error and the chain of causes that led to it."""
    click.echo(click.style(f"Error: {context}", fg="red", bold=True), err=True)
    for message in format_error_chain(error):
        click.echo(click.style(f"  caused by: {message}", fg="red"), err=True)


def build_strapi_client(config: Config) -> StrapiClient:
    return StrapiClient(base_url=config.strapi_base_url, timeout=config.request_timeout)


def build_health_checker(config: Config) -> HealthChecker:
    """Create a HealthChecker from configured Supabase credentials.

    Raises:
        ConfigurationError: If embedding store credentials are missing
        TransportError: If a Supabase client cannot be created
    """
    if config.embeddings_supabase_url is None or config.embeddings_supabase_api_key is None:
        raise ConfigurationError(
            "EMBEDDINGS_SUPABASE_URL and EMBEDDINGS_SUPABASE_API_KEY must be set"
        )

    store = EmbeddingStore(config.embeddings_supabase_url, config.embeddings_supabase_api_key)
    report_log = None
    if config.log_supabase_url is not None and config.log_supabase_api_key is not None:
        report_log = HealthCheckLog(config.log_supabase_url, config.log_supabase_api_key)
    return HealthChecker(store, report_log)


def display_health_check_summary(report: HealthCheckReport) -> bool:
    """Print the health check summary.

    Returns:
        True if every chunk has an embedding
    """
    click.echo("-" * 80)
    click.echo(click.style("Health Check Summary", bold=True))
    click.echo("-" * 80)
    click.echo(f"  Volume: {report.volume_title} (Slug: {report.volume_slug})")
    click.echo(f"  Total chunks: {report.total_chunks:,}")
    click.echo(f"  Existing in Supabase: {report.existing_chunks_count:,}")

    if report.passed:
        click.echo("  All chunks found in Supabase!")
    else:
        click.echo(
            "  Missing from Supabase: "
            + click.style(f"{report.missing_chunks_count:,}", bold=True)
        )
        click.echo()
        click.echo("Missing chunks by page:")
        for page in report.pages_with_missing_chunks():
            click.echo(f"  Page '{page.page_title}': {len(page.missing_chunks)} missing")
            for chunk_slug in page.missing_chunks:
                click.echo(f"    - {chunk_slug}")
        click.echo()
        click.echo(PUBLISH_TIP)

    click.echo()
    return report.passed
