"""Strapi CMS access and normalization into the canonical volume model."""

from volume_fetch.cms.client import StrapiClient
from volume_fetch.cms.models import (
    Chunk,
    ChunkType,
    CriItem,
    Heading,
    Page,
    PageParent,
    QuizAnswer,
    QuizItem,
    Volume,
)
from volume_fetch.cms.parser import parse_volume

__all__ = [
    "Chunk",
    "ChunkType",
    "CriItem",
    "Heading",
    "Page",
    "PageParent",
    "QuizAnswer",
    "QuizItem",
    "StrapiClient",
    "Volume",
    "parse_volume",
]
