"""GitHub-style heading slugs with per-run de-duplication."""

import unicodedata

# Unicode categories kept by GitHub's slugger: letters, marks, numbers and
# connector punctuation such as "_"
_KEPT_CATEGORIES = ("L", "M", "N", "Pc")


def slugify(value: str) -> str:
    """Convert heading text into a GitHub-style anchor slug.

    Lowercases the text, drops punctuation and symbols (keeping letters,
    numbers, "-", "_" and spaces) and turns each space into "-".

    Args:
        value: Heading text

    Returns:
        Slug without de-duplication

    Example:
        >>> slugify("What's New in 2.0?")
        'whats-new-in-20'
    """
    kept = [
        char
        for char in value.lower()
        if char in "- " or unicodedata.category(char).startswith(_KEPT_CATEGORIES)
    ]
    return "".join(kept).replace(" ", "-")


class Slugger:
    """Generate unique slugs for the headings of one document.

    Repeated headings get numeric suffixes (``setup``, ``setup-1``, ...).
    State lives on the instance, so create one per rendered page.
    """

    def __init__(self) -> None:
        self.occurrences: dict[str, int] = {}

    def slug(self, value: str) -> str:
        """Return a slug for ``value`` that is unique within this slugger."""
        original = slugify(value)
        result = original
        while result in self.occurrences:
            self.occurrences[original] += 1
            result = f"{original}-{self.occurrences[original]}"
        self.occurrences[result] = 0
        return result

    def reserve(self, slug: str) -> None:
        """Mark an explicit anchor id as taken."""
        self.occurrences.setdefault(slug, 0)
