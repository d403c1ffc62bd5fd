"""Canonical data model for textbook volumes fetched from the CMS."""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChunkType(str, Enum):
    """Kind of content block a chunk was parsed from."""

    REGULAR = "regular"
    PLAIN = "plain"
    VIDEO = "video"


class QuizAnswer(BaseModel):
    """One answer option of a multiple-choice question."""

    model_config = ConfigDict(frozen=True)

    answer: str
    correct: bool


class QuizItem(BaseModel):
    """A multiple-choice quiz question.

    Both CMS question formats (structured multiple-choice components and
    generated YAML questions) resolve to this shape during ingestion.
    """

    model_config = ConfigDict(frozen=True)

    question: str
    answers: list[QuizAnswer] = Field(min_length=1)


@dataclass(frozen=True)
class CriItem:
    """Constructed-response question attached to a chunk.

    Attributes:
        question: Prompt shown to the reader
        answer: Reference answer
        slug: Slug of the chunk the question belongs to
    """

    question: str
    answer: str
    slug: str


@dataclass(frozen=True)
class Heading:
    """Sub-heading discovered inside a chunk body."""

    level: int
    slug: str
    title: str


@dataclass(frozen=True)
class PageParent:
    """Chapter enclosing a page."""

    title: str
    slug: str


@dataclass(frozen=True)
class Chunk:
    """Content unit within a page.

    Attributes:
        title: Chunk header text
        slug: Anchor id, unique within the page
        depth: Heading level the chunk title renders at (2, 3 or 4)
        content: Markdown body (a generated embed snippet for videos)
        chunk_type: Content block variant
        cri: Constructed-response question, if the chunk has one
        show_header: False when the header should be visually hidden
        video_id: YouTube video id for video chunks
    """

    title: str
    slug: str
    depth: int
    content: str
    chunk_type: ChunkType = ChunkType.REGULAR
    cri: CriItem | None = None
    show_header: bool = False
    video_id: str | None = None

    def __post_init__(self) -> None:
        if self.depth not in (2, 3, 4):
            raise ValueError(f"Chunk depth must be 2, 3 or 4, got {self.depth}")


@dataclass(frozen=True)
class Page:
    """A document-level unit of a volume.

    Attributes:
        title: Page title
        slug: Page slug, unique within the volume
        order: Relative order in the volume
        parent: Enclosing chapter, if any
        assignments: Evaluation assignments, e.g. ["summary", "quiz"]
        quiz: Quiz questions, None when the page has no quiz
        chunks: Content chunks in reading order
    """

    title: str
    slug: str
    order: int
    parent: PageParent | None = None
    assignments: list[str] = field(default_factory=list)
    quiz: list[QuizItem] | None = None
    chunks: list[Chunk] = field(default_factory=list)


@dataclass(frozen=True)
class Volume:
    """A whole textbook."""

    title: str
    description: str
    slug: str
    summary: str | None = None
    free_pages: list[str] = field(default_factory=list)
    pages: list[Page] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.slug or not self.slug.strip():
            raise ValueError("Volume slug cannot be empty")

    @property
    def total_chunks(self) -> int:
        """Number of chunks across all pages."""
        return sum(len(page.chunks) for page in self.pages)
