"""Pytest configuration and shared fixtures."""

import copy
from typing import Any

import pytest

GENERATED_QUESTION_YAML = """\
- question: Which layer turns CMS JSON into the volume model?
  answers:
    - answer: Ingestion
      correct: true
    - answer: Rendering
      correct: false
"""

RAW_VOLUME: dict[str, Any] = {
    "data": {
        "id": 7,
        "documentId": "vol-intro",
        "Title": "Introduction to Computing",
        "Description": "A first course in computing",
        "Slug": "intro-to-computing",
        "VolumeSummary": "Everything starts with bits.",
        "FreePages": "what-is-a-computer,bits-and-bytes",
        "Pages": [
            {
                "Title": "Bits and Bytes",
                "Slug": "bits-and-bytes",
                "Order": "2",
                "HasSummary": "true",
                "Chapter": {"Title": "Foundations", "Slug": "foundations"},
                "Quiz": {
                    "Questions": [
                        {
                            "id": 11,
                            "__component": "quizzes.multiple-choice-question",
                            "Question": "How many bits are in a byte?",
                            "Answers": [
                                {"id": 1, "Text": "8", "IsCorrect": True},
                                {"id": 2, "Text": "16", "IsCorrect": "false"},
                            ],
                        },
                        {"id": 12, "GeneratedQuestion": GENERATED_QUESTION_YAML},
                    ]
                },
                "Content": [
                    {
                        "__component": "page.chunk",
                        "Header": "Binary",
                        "Slug": "binary",
                        "MD": "Computers count in base two.\n\n### Setup\nFlip a switch.",
                        "ShowHeader": True,
                        "Question": "Why base two?",
                        "ConstructedResponse": "Switches have two states.",
                    },
                    {
                        "__component": "page.video",
                        "Header": "Counting in Binary",
                        "Slug": "counting-video",
                        "URL": "https://www.youtube.com/watch?v=abc123&t=10",
                        "Description": "Watch this first.",
                    },
                ],
            },
            {
                "Title": "What Is a Computer?",
                "Slug": "what-is-a-computer",
                "Order": 1,
                "HasSummary": False,
                "Chapter": None,
                "Content": [
                    {
                        "__component": "page.plain-chunk",
                        "Header": "Overview",
                        "Slug": "overview",
                        "MD": "A computer follows instructions.",
                        "HeaderLevel": "H3",
                    },
                ],
            },
            {
                "Title": "Review",
                "Slug": "review",
                "Order": 3.0,
                "HasSummary": True,
                "Quiz": {"Questions": []},
                "Content": [],
            },
        ],
    }
}


@pytest.fixture
def raw_volume() -> dict[str, Any]:
    """Return a fresh copy of a Strapi volume response covering every block shape."""
    return copy.deepcopy(RAW_VOLUME)


@pytest.fixture
def raw_page(raw_volume: dict[str, Any]) -> dict[str, Any]:
    """Return the first (fully populated) raw page."""
    page: dict[str, Any] = raw_volume["data"]["Pages"][0]
    return page
