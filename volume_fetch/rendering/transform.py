"""Heading anchor injection for chunk bodies."""

import re

from volume_fetch.cms.models import Heading
from volume_fetch.rendering.slugger import Slugger

# Level-2 headings are chunk titles rendered with their own anchors and deeper
# levels stay out of the page table of contents, so only "###" is handled.
HEADING_PATTERN = re.compile(r"^### (.+?)(?:[ \t]*\{#([^}\s]+)\})?[ \t\r]*$", re.MULTILINE)
HEADING_LEVEL = 3


def reserve_explicit_ids(content: str, slugger: Slugger) -> None:
    """Register every explicit ``{#id}`` heading anchor in ``content``.

    Called for all chunks of a page before any of them is transformed, so a
    generated slug never takes an id that a later heading sets explicitly.
    """
    for match in HEADING_PATTERN.finditer(content):
        if match.group(2):
            slugger.reserve(match.group(2))


def transform_content(content: str, slugger: Slugger) -> tuple[str, list[Heading]]:
    """Append ``{#slug}`` anchors to level-3 headings.

    Headings that already carry an explicit anchor keep it, so transforming
    already-transformed text returns it unchanged.

    Args:
        content: Chunk Markdown body
        slugger: Page-scoped slugger shared by every chunk of the page

    Returns:
        Tuple of (rewritten content, headings in document order)

    Example:
        >>> text, headings = transform_content("### Setup\\nrun it", Slugger())
        >>> text
        '### Setup {#setup}\\nrun it'
    """
    headings: list[Heading] = []
    reserve_explicit_ids(content, slugger)

    def _replace(match: re.Match[str]) -> str:
        title, explicit_id = match.group(1), match.group(2)
        if explicit_id:
            slug = explicit_id
        else:
            slug = slugger.slug(title)
        headings.append(Heading(level=HEADING_LEVEL, slug=slug, title=title))
        return f"### {title} {{#{slug}}}"

    return HEADING_PATTERN.sub(_replace, content), headings
