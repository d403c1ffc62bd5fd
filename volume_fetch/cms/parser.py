"""Normalize Strapi volume responses into the canonical model.

The CMS has gone through several content-type revisions, so one response can
mix chunk components (regular, plain, video) and quiz question formats
(multiple-choice components, generated YAML). Each is resolved here into the
single shapes defined in ``volume_fetch.cms.models``.
"""

from collections import defaultdict
from typing import Any
from urllib.parse import urlsplit

import structlog
import yaml
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from volume_fetch.cms.fields import (
    get_array,
    get_field,
    get_object,
    require_field,
    require_slug,
)
from volume_fetch.cms.models import (
    Chunk,
    ChunkType,
    CriItem,
    Page,
    PageParent,
    QuizAnswer,
    QuizItem,
    Volume,
)
from volume_fetch.utils.exceptions import FormatError, ValidationError

logger = structlog.get_logger(__name__)

VIDEO_TAGS = frozenset({"video"})
PLAIN_TAGS = frozenset({"plain-chunk", "plain"})
MULTIPLE_CHOICE_TAGS = frozenset({"multiple-choice-question", "multiple-choice"})

HEADER_DEPTHS = {"h3": 3, "h4": 4}
DEFAULT_DEPTH = 2

VIDEO_TEMPLATE = (
    '{description}\n\n<i-youtube videoid="{video_id}" height={{400}} width="100%" >'
    "\n\n</i-youtube>\n\n"
)

_QUIZ_ITEMS = TypeAdapter(list[QuizItem])


def _component_tag(obj: Any) -> str | None:
    """Return the last segment of a ``__component`` tag (``page.video`` -> ``video``)."""
    component = get_field(obj, "__component", str)
    if not component:
        return None
    return component.rsplit(".", 1)[-1].lower()


def _parse_cri(obj: Any, slug: str) -> CriItem | None:
    question = get_field(obj, "Question", str)
    answer = get_field(obj, "ConstructedResponse", str)
    if question is None or answer is None:
        return None
    return CriItem(question=question, answer=answer, slug=slug)


def extract_video_id(url: str) -> str:
    """Return the first ``v`` query parameter of a YouTube URL, or "" if absent.

    The value is taken verbatim, without percent or ``+`` decoding.

    Example:
        >>> extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42")
        'dQw4w9WgXcQ'
    """
    for parameter in urlsplit(url).query.split("&"):
        name, _, value = parameter.partition("=")
        if name == "v":
            return value
    return ""


def parse_video(block: Any, index: int) -> Chunk:
    """Parse a video content block.

    Raises:
        ValidationError: If Header, URL or Slug is missing
    """
    entity = f"video chunk {index}"
    title = require_field(block, "Header", str, entity)
    url = require_field(block, "URL", str, entity)
    slug = require_slug(block, entity=entity)
    video_id = extract_video_id(url)
    description = get_field(block, "Description", str, "")

    return Chunk(
        title=title,
        slug=slug,
        depth=DEFAULT_DEPTH,
        content=VIDEO_TEMPLATE.format(description=description, video_id=video_id),
        chunk_type=ChunkType.VIDEO,
        cri=_parse_cri(block, slug),
        show_header=True,
        video_id=video_id,
    )


def parse_chunk(block: Any, index: int) -> Chunk:
    """Parse one entry of a page's Content array.

    Args:
        block: Raw content block
        index: Position of the block within the page, for error messages

    Returns:
        Parsed chunk

    Raises:
        ValidationError: If a required field is missing
    """
    tag = _component_tag(block)
    if tag in VIDEO_TAGS:
        return parse_video(block, index)

    entity = f"chunk {index}"
    title = require_field(block, "Header", str, entity)
    slug = require_slug(block, entity=entity)

    # Older content types stored the body under MDX
    content = get_field(block, "MD", str)
    if content is None:
        content = get_field(block, "MDX", str)
    if content is None:
        raise ValidationError(f"{entity}: missing required field 'MD' (str)", path=("MD",))

    header_level = get_field(block, "HeaderLevel", str, "")

    return Chunk(
        title=title,
        slug=slug,
        depth=HEADER_DEPTHS.get(header_level.lower(), DEFAULT_DEPTH),
        content=content,
        chunk_type=ChunkType.PLAIN if tag in PLAIN_TAGS else ChunkType.REGULAR,
        cri=_parse_cri(block, slug),
        show_header=get_field(block, "ShowHeader", bool, False),
    )


def _parse_multiple_choice(entry: dict[str, Any], label: str) -> QuizItem:
    entity = f"quiz question '{label}'"
    question = require_field(entry, "Question", str, entity)
    answers = get_array(entry, "Answers")
    if not answers:
        raise ValidationError(f"{entity}: has no answers", path=("Answers",))

    quiz_answers: list[QuizAnswer] = []
    for index, raw_answer in enumerate(answers):
        answer_label = get_field(raw_answer, "id", str, str(index))
        answer_entity = f"{entity}, answer '{answer_label}'"
        quiz_answers.append(
            QuizAnswer(
                answer=require_field(raw_answer, "Text", str, answer_entity),
                correct=require_field(raw_answer, "IsCorrect", bool, answer_entity),
            )
        )

    return QuizItem(question=question, answers=quiz_answers)


def parse_generated_question(text: str, label: str = "0") -> QuizItem:
    """Parse a generated quiz question stored as YAML text.

    The text holds a YAML list of quiz items; only the first is used.

    Args:
        text: YAML document, e.g. ``- question: ...\\n  answers: [...]``
        label: Question id for error messages

    Returns:
        First quiz item in the document

    Raises:
        FormatError: If the YAML is malformed, has the wrong shape, or is empty
    """
    entity = f"generated quiz question '{label}'"
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FormatError(
            f"{entity}: quiz format is invalid YAML", path=("GeneratedQuestion",)
        ) from e

    try:
        items = _QUIZ_ITEMS.validate_python(data)
    except PydanticValidationError as e:
        raise FormatError(
            f"{entity}: quiz format does not match [{{question, answers}}]",
            path=("GeneratedQuestion",),
        ) from e

    if not items:
        raise FormatError(f"{entity}: contains no questions", path=("GeneratedQuestion",))
    return items[0]


def parse_quiz(page: Any) -> list[QuizItem] | None:
    """Parse ``Quiz.Questions`` of a page.

    Returns:
        Quiz items in source order, or None when the page has no questions

    Raises:
        ValidationError: If a question matches neither supported format
        FormatError: If a generated question cannot be parsed
    """
    questions = get_array(get_object(page, "Quiz"), "Questions")
    if questions is None:
        return None

    items: list[QuizItem] = []
    for index, entry in enumerate(questions):
        label = get_field(entry, "id", str, str(index))
        generated = get_field(entry, "GeneratedQuestion", str)

        if _component_tag(entry) in MULTIPLE_CHOICE_TAGS:
            items.append(_parse_multiple_choice(entry, label))
        elif generated is not None:
            items.append(parse_generated_question(generated, label))
        else:
            raise ValidationError(
                f"quiz question '{label}': is missing a valid '__component' "
                "or 'GeneratedQuestion' field",
                path=(f"question '{label}'",),
            )

    return items or None


def _parse_chunks(page: Any) -> list[Chunk]:
    chunks: list[Chunk] = []
    seen_slugs: set[str] = set()

    for index, block in enumerate(get_array(page, "Content") or []):
        try:
            chunk = parse_chunk(block, index)
        except ValidationError as e:
            e.path = (f"chunk {index}", *e.path)
            raise

        if chunk.slug in seen_slugs:
            raise ValidationError(
                f"chunk {index}: duplicate slug '{chunk.slug}'",
                path=(f"chunk {index}", "Slug"),
            )
        seen_slugs.add(chunk.slug)
        chunks.append(chunk)

    return chunks


def parse_page(raw: Any) -> Page:
    """Parse one entry of the volume's Pages array.

    Raises:
        ValidationError: If a required page, chapter, quiz or chunk field is missing
    """
    title = require_field(raw, "Title", str)
    slug = require_slug(raw)
    has_summary = require_field(raw, "HasSummary", bool)
    assignments = ["summary"] if has_summary else []

    parent = None
    chapter = raw.get("Chapter")
    if chapter is not None:
        parent = PageParent(
            title=require_field(chapter, "Title", str, "chapter"),
            slug=require_field(chapter, "Slug", str, "chapter"),
        )

    try:
        quiz = parse_quiz(raw)
    except ValidationError as e:
        raise type(e)(f"failed to parse quiz: {e.message}", path=("Quiz", *e.path)) from e
    if quiz:
        assignments.append("quiz")

    chunks = _parse_chunks(raw)
    order = require_field(raw, "Order", int)

    return Page(
        title=title,
        slug=slug,
        order=order,
        parent=parent,
        assignments=assignments,
        quiz=quiz,
        chunks=chunks,
    )


def _warn_cross_page_duplicates(pages: list[Page]) -> None:
    owners: dict[str, list[str]] = defaultdict(list)
    for page in pages:
        for chunk in page.chunks:
            owners[chunk.slug].append(page.slug)

    for chunk_slug, page_slugs in owners.items():
        if len(page_slugs) > 1:
            logger.warning(
                "duplicate_chunk_slug_across_pages",
                chunk_slug=chunk_slug,
                page_slugs=page_slugs,
            )


def parse_pages(raw_pages: list[Any]) -> list[Page]:
    """Parse all pages in source order, aborting on the first invalid page.

    Raises:
        ValidationError: Naming the page by title, or by index when the title
            itself is missing
    """
    pages: list[Page] = []
    seen_slugs: set[str] = set()

    for index, raw in enumerate(raw_pages):
        label = get_field(raw, "Title", str) or str(index)
        try:
            if not isinstance(raw, dict):
                raise ValidationError("page is not an object")
            page = parse_page(raw)
        except ValidationError as e:
            raise type(e)(
                f"failed to parse page '{label}': {e.message}",
                path=(f"page '{label}'", *e.path),
            ) from e

        if page.slug in seen_slugs:
            raise ValidationError(
                f"failed to parse page '{label}': duplicate page slug '{page.slug}'",
                path=(f"page '{label}'", "Slug"),
            )
        seen_slugs.add(page.slug)
        pages.append(page)

    _warn_cross_page_duplicates(pages)
    return pages


def parse_volume(document: Any) -> Volume:
    """Parse a Strapi ``/texts/{id}`` response body into a Volume.

    Args:
        document: Decoded JSON response, ``{"data": {...}}``

    Returns:
        Fully parsed volume; partial results are never returned

    Raises:
        ValidationError: If any required field is missing or malformed
        FormatError: If a generated quiz question is malformed
    """
    data = get_object(document, "data")
    if data is None:
        raise ValidationError("no data in volume response", path=("data",))

    title = require_field(data, "Title", str, "volume")
    description = require_field(data, "Description", str, "volume")
    slug = require_slug(data, entity="volume")

    free_pages_field = get_field(data, "FreePages", str, "")
    free_pages = [s.strip() for s in free_pages_field.split(",") if s.strip()]

    raw_pages = get_array(data, "Pages")
    if raw_pages is None:
        raise ValidationError("no pages in volume response", path=("Pages",))

    pages = parse_pages(raw_pages)

    logger.info(
        "volume_parsed",
        volume_slug=slug,
        pages=len(pages),
        chunks=sum(len(page.chunks) for page in pages),
    )

    return Volume(
        title=title,
        description=description,
        slug=slug,
        summary=get_field(data, "VolumeSummary", str),
        free_pages=free_pages,
        pages=pages,
    )
