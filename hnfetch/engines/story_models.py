"""Story data models and retrieval mode definitions."""

from dataclasses import dataclass
from enum import Enum

from hnfetch.config.settings import MAX_COUNT, MIN_COUNT
from hnfetch.engines.errors import ValidationError


class RetrievalMode(str, Enum):
    """Ranking used to pick which stories to list.

    Each mode maps to one listing endpoint of the API.
    """

    HOTTEST = "hottest"
    LATEST = "latest"

    @property
    def endpoint(self) -> str:
        """Return the listing endpoint name for this mode."""
        return _ENDPOINTS[self]

    @classmethod
    def parse(cls, value: "str | RetrievalMode") -> "RetrievalMode":
        """Convert a user-supplied string into a RetrievalMode.

        Raises:
            ValidationError: If the value is not a known mode.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(mode.value for mode in cls)
            raise ValidationError(
                f"Unknown sort mode {value!r}; expected one of: {choices}"
            ) from None


_ENDPOINTS = {
    RetrievalMode.HOTTEST: "topstories",
    RetrievalMode.LATEST: "newstories",
}


def validate_count(count: int) -> int:
    """Check that a requested story count is within [MIN_COUNT, MAX_COUNT].

    Raises:
        ValidationError: If count is not an integer in range.
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValidationError(f"Count must be an integer, got {count!r}")
    if count < MIN_COUNT or count > MAX_COUNT:
        raise ValidationError(
            f"Count must be between {MIN_COUNT} and {MAX_COUNT}, got {count}"
        )
    return count


@dataclass(frozen=True)
class StoryDetail:
    """A story as returned by the item endpoint, with defaults applied.

    Attributes:
        id: Item identifier, always matches the requested id
        title: Story title, empty if the API omitted it
        score: Points, 0 if absent
        url: External link, None for text posts such as Ask HN
        descendants: Total comment count including nested replies
        type: Item kind ("story", "job", "poll", ...)
        by: Submitter username, empty if absent
    """
    id: int
    title: str = ""
    score: int = 0
    url: str | None = None
    descendants: int = 0
    type: str = "story"
    by: str = ""

    @property
    def has_external_url(self) -> bool:
        return bool(self.url)

    def link(self, item_page_url: str) -> str:
        """Return the external URL, or the story's discussion page if it has none."""
        if self.has_external_url:
            return self.url
        return item_page_url.format(id=self.id)
