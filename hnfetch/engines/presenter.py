"""Plain-text rendering of fetched stories.

Feature: hnfetch
Formats StoryDetail objects into the ranked listing printed to stdout.
"""

from hnfetch.config.settings import DEFAULT_ITEM_PAGE_URL
from hnfetch.engines.story_models import RetrievalMode, StoryDetail


# Continuation lines line up under the title column
INDENT = " " * 6


def format_story(rank: int, story: StoryDetail, item_page_url: str = DEFAULT_ITEM_PAGE_URL) -> str:
    """Format a single story as a block of lines.

    Args:
        rank: 1-based position in the result list
        story: The story to format
        item_page_url: Template for the discussion link of stories without a URL

    Returns:
        The formatted block, ending with a blank line

    Example:
        >>> story = StoryDetail(id=8863, title="My YC app: Dropbox", score=111,
        ...                     url="http://www.getdropbox.com/u/2/screencast.html",
        ...                     descendants=71, by="dhouston")
        >>> format_story(1, story).splitlines()
        [' 1. [111 ] My YC app: Dropbox', '      http://www.getdropbox.com/u/2/screencast.html', '      71 comments | by dhouston', '']
    """
    comments = "1 comment" if story.descendants == 1 else f"{story.descendants} comments"
    meta = f"{comments} | by {story.by}" if story.by else comments

    lines = [
        f"{rank:>2}. [{story.score:^4}] {story.title}",
        f"{INDENT}{story.link(item_page_url)}",
        f"{INDENT}{meta}",
        "",
    ]
    return "\n".join(lines) + "\n"


def render_stories(stories: list[StoryDetail], item_page_url: str = DEFAULT_ITEM_PAGE_URL) -> str:
    """Render the ordered story list as text.

    Ranks follow list position, so a story skipped by the pipeline leaves no
    gap in the numbering.

    Args:
        stories: Stories in display order
        item_page_url: Template for the discussion link of stories without a URL

    Returns:
        The listing text, or an empty string for an empty list
    """
    return "".join(
        format_story(rank, story, item_page_url)
        for rank, story in enumerate(stories, start=1)
    )


def render_header(mode: RetrievalMode, count: int) -> str:
    label = "Top" if mode is RetrievalMode.HOTTEST else "New"
    return f"Hacker News - {label} {count} stories\n"


def render_footer(shown: int, requested: int) -> str:
    if shown == 0:
        return "Done! No stories could be fetched.\n"
    return f"Done! Showing {shown} of {requested} requested stories.\n"
