"""Typed digest model: a page title plus an ordered list of content items.

Every field except ``entries`` is optional at every level. Absence stays
``None`` here; only the display helpers substitute placeholder text.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

UNTITLED = "Untitled"
DETAILS_SEPARATOR = " - "


class Author(BaseModel):
    """Author of one content item."""

    name: str | None = None
    url: str | None = None

    model_config = ConfigDict(frozen=True)


class ContentItem(BaseModel):
    """One entry of a digest (a story, post, or link). Immutable after creation."""

    title: str | None = None
    content: str | None = None
    url: str | None = None
    discussion_url: str | None = Field(default=None, alias="discussionUrl")
    author: Author | None = None
    timestamp: str | None = None
    score: str | None = None
    tags: tuple[str, ...] | None = None

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @property
    def display_title(self) -> str:
        """Title for the entry list, with the placeholder when absent."""
        return self.title if self.title is not None else UNTITLED

    def details_line(self) -> str:
        """Join the present descriptive fields into one display line."""
        parts: list[str] = []
        for value in (
            self.content,
            self.url,
            self.discussion_url,
            self.author.name if self.author is not None else None,
            self.timestamp,
            self.score,
        ):
            if value:
                parts.append(value)
        return DETAILS_SEPARATOR.join(parts)


class Digest(BaseModel):
    """Structured summary produced for one location."""

    title: str | None = None
    entries: tuple[ContentItem, ...]

    model_config = ConfigDict(frozen=True)

    @property
    def entry_count(self) -> int:
        return len(self.entries)


__all__ = ["Author", "ContentItem", "Digest", "UNTITLED"]
