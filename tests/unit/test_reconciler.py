"""Unit tests for chunk/embedding reconciliation."""

from typing import Any

import pytest

from volume_fetch.cms.models import Chunk, Page, Volume
from volume_fetch.cms.parser import parse_volume
from volume_fetch.healthcheck.reconciler import (
    HealthCheckReport,
    PageHealthCheck,
    extract_chunk_slugs,
    perform_health_check,
)


def make_page(slug: str, chunk_slugs: list[str]) -> Page:
    return Page(
        title=slug.title(),
        slug=slug,
        order=1,
        chunks=[Chunk(title=s, slug=s, depth=2, content="") for s in chunk_slugs],
    )


class TestPerformHealthCheck:
    """Test set-difference reconciliation."""

    def test_partial_coverage(self) -> None:
        """Test the single-page example with one missing chunk."""
        volume = Volume(
            title="Vol", description="", slug="vol", pages=[make_page("start", ["intro", "body"])]
        )

        report = perform_health_check("doc-1", volume, ["intro"])

        assert report.pages == [
            PageHealthCheck(
                page_slug="start",
                page_title="Start",
                existing_chunks=["intro"],
                missing_chunks=["body"],
            )
        ]
        assert report.existing_chunks_count == 1
        assert report.missing_chunks_count == 1
        assert report.total_chunks == 2
        assert report.passed is False

    def test_full_coverage(self, raw_volume: dict[str, Any]) -> None:
        """Test that a fully indexed volume passes, including video chunks."""
        volume = parse_volume(raw_volume)

        report = perform_health_check(
            "vol-intro", volume, ["binary", "counting-video", "overview", "unrelated"]
        )

        assert report.passed is True
        assert report.total_chunks == 3
        assert report.pages_with_missing_chunks() == []
        assert report.volume_id == "vol-intro"
        assert report.volume_slug == "intro-to-computing"
        assert report.volume_title == "Introduction to Computing"

    def test_pages_follow_volume_order(self, raw_volume: dict[str, Any]) -> None:
        """Test that the per-page breakdown keeps volume order, empty pages included."""
        volume = parse_volume(raw_volume)

        report = perform_health_check("vol-intro", volume, [])

        assert [page.page_slug for page in report.pages] == [
            "bits-and-bytes",
            "what-is-a-computer",
            "review",
        ]
        assert report.pages[0].missing_chunks == ["binary", "counting-video"]
        assert report.pages[2].missing_chunks == []
        assert [p.page_slug for p in report.pages_with_missing_chunks()] == [
            "bits-and-bytes",
            "what-is-a-computer",
        ]

    def test_duplicate_embeddings_collapse(self) -> None:
        """Test that repeated embedding slugs count once."""
        volume = Volume(title="V", description="", slug="v", pages=[make_page("p", ["a", "b"])])

        report = perform_health_check("id", volume, ["a", "a", "a"])

        assert report.existing_chunks_count == 1
        assert report.missing_chunks_count == 1

    @pytest.mark.parametrize(
        "embedding_slugs",
        [[], ["a"], ["a", "c", "e"], ["a", "b", "c", "d", "e"], ["x", "y"]],
    )
    def test_counts_add_up(self, embedding_slugs: list[str]) -> None:
        """Test that existing plus missing always equals the chunk count."""
        volume = Volume(
            title="V",
            description="",
            slug="v",
            pages=[
                make_page("p1", ["a", "b"]),
                make_page("p2", []),
                make_page("p3", ["c", "d", "e"]),
            ],
        )

        report = perform_health_check("id", volume, embedding_slugs)

        assert report.existing_chunks_count + report.missing_chunks_count == report.total_chunks
        assert report.total_chunks == volume.total_chunks
        for page, page_check in zip(volume.pages, report.pages, strict=True):
            assert len(page_check.existing_chunks) + len(page_check.missing_chunks) == len(
                page.chunks
            )

    def test_empty_volume_passes(self) -> None:
        """Test that a volume without chunks has nothing missing."""
        report = perform_health_check("id", Volume(title="V", description="", slug="v"), ["a"])

        assert report.total_chunks == 0
        assert report.passed is True


class TestHealthCheckReport:
    """Test report serialization."""

    def test_to_dict(self) -> None:
        """Test that the report serializes with nested pages."""
        report = HealthCheckReport(
            volume_id="id",
            volume_slug="v",
            volume_title="V",
            total_chunks=1,
            missing_chunks_count=1,
            pages=[PageHealthCheck(page_slug="p", page_title="P", missing_chunks=["a"])],
        )

        assert report.to_dict() == {
            "volume_id": "id",
            "volume_slug": "v",
            "volume_title": "V",
            "total_chunks": 1,
            "existing_chunks_count": 0,
            "missing_chunks_count": 1,
            "pages": [
                {
                    "page_slug": "p",
                    "page_title": "P",
                    "existing_chunks": [],
                    "missing_chunks": ["a"],
                }
            ],
        }


class TestExtractChunkSlugs:
    """Test embedding record parsing."""

    def test_ignores_malformed_records(self) -> None:
        """Test that records without a string chunk are skipped."""
        records = [
            {"chunk": "a"},
            {"chunk": None},
            {"text": "vol"},
            "junk",
            {"chunk": 3},
            {"chunk": "b"},
        ]

        assert extract_chunk_slugs(records) == ["a", "b"]
