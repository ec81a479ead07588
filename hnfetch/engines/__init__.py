"""Engines module - story models, progress and rendering."""

from hnfetch.engines.errors import (
    DecodeError,
    HackerNewsError,
    NetworkError,
    NotFound,
    ValidationError,
)
from hnfetch.engines.story_models import RetrievalMode, StoryDetail, validate_count

__all__ = [
    # Models
    "RetrievalMode",
    "StoryDetail",
    "validate_count",
    # Exceptions
    "HackerNewsError",
    "NetworkError",
    "DecodeError",
    "NotFound",
    "ValidationError",
]
