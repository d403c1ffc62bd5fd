"""Page and volume document rendering."""

from typing import Any

import yaml

from volume_fetch.cms.models import Chunk, Heading, Page, Volume
from volume_fetch.rendering.slugger import Slugger
from volume_fetch.rendering.transform import reserve_explicit_ids, transform_content

HIDDEN_HEADER_CLASS = ".sr-only"


def _dump_yaml(data: dict[str, Any]) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)


def _heading_meta(heading: Heading) -> dict[str, Any]:
    return {"level": heading.level, "slug": heading.slug, "title": heading.title}


def _chunk_meta(chunk: Chunk, headings: list[Heading]) -> dict[str, Any]:
    meta: dict[str, Any] = {
        "title": chunk.title,
        "slug": chunk.slug,
        "type": chunk.chunk_type.value,
    }
    if headings:
        meta["headings"] = [_heading_meta(heading) for heading in headings]
    return meta


def render_chunk_header(chunk: Chunk) -> str:
    """Render the heading line of a chunk, e.g. ``## Intro {#intro .sr-only}``.

    Hidden headers stay in the document for screen readers and only get the
    visually-hidden class.
    """
    attributes = f"#{chunk.slug}"
    if not chunk.show_header:
        attributes += f" {HIDDEN_HEADER_CLASS}"
    return f"{'#' * chunk.depth} {chunk.title} {{{attributes}}}"


def render_page(page: Page, next_slug: str | None = None) -> str:
    """Render a page into a Markdown document with YAML frontmatter.

    Args:
        page: Parsed page
        next_slug: Slug of the following page in reading order, if any

    Returns:
        ``---`` delimited frontmatter, a blank line, then the Markdown body
    """
    slugger = Slugger()
    cri: list[dict[str, str]] = []
    chunks: list[dict[str, Any]] = []
    body_parts: list[str] = []

    for chunk in page.chunks:
        reserve_explicit_ids(chunk.content, slugger)

    for chunk in page.chunks:
        if chunk.cri is not None:
            cri.append(
                {"question": chunk.cri.question, "answer": chunk.cri.answer, "slug": chunk.cri.slug}
            )

        content, headings = transform_content(chunk.content, slugger)
        chunks.append(_chunk_meta(chunk, headings))
        body_parts.append(f"{render_chunk_header(chunk)}\n\n{content}\n\n")

    frontmatter: dict[str, Any] = {
        "title": page.title,
        "slug": page.slug,
        "next_slug": next_slug,
        "order": page.order,
        "assignments": list(page.assignments),
        "parent": (
            {"title": page.parent.title, "slug": page.parent.slug} if page.parent else None
        ),
        "quiz": (
            [item.model_dump(mode="json") for item in page.quiz] if page.quiz is not None else None
        ),
        "cri": cri,
        "chunks": chunks,
    }

    return f"---\n{_dump_yaml(frontmatter)}---\n\n{''.join(body_parts)}"


def render_volume_metadata(volume: Volume) -> str:
    """Render the ``volume.yaml`` document."""
    return _dump_yaml(
        {
            "title": volume.title,
            "slug": volume.slug,
            "description": volume.description,
            "free_pages": list(volume.free_pages),
            "summary": volume.summary,
        }
    )


def link_next_slugs(pages: list[Page]) -> list[tuple[Page, str | None]]:
    """Sort pages by order and pair each with the slug of its successor.

    The sort is stable, so pages sharing an order keep their source order.
    The last page has no successor.
    """
    ordered = sorted(pages, key=lambda page: page.order)
    return [
        (page, ordered[index + 1].slug if index + 1 < len(ordered) else None)
        for index, page in enumerate(ordered)
    ]
