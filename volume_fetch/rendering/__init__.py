"""Render canonical pages into Markdown documents with YAML frontmatter."""

from volume_fetch.rendering.renderer import link_next_slugs, render_page, render_volume_metadata
from volume_fetch.rendering.slugger import Slugger
from volume_fetch.rendering.transform import transform_content
from volume_fetch.rendering.writer import DocumentWriter

__all__ = [
    "DocumentWriter",
    "Slugger",
    "link_next_slugs",
    "render_page",
    "render_volume_metadata",
    "transform_content",
]
