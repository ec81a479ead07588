"""Hacker News Firebase API connector.

Issues the two GET requests the client needs, listing ids for a ranking and
fetching one item, and turns their JSON bodies into story models. Every
failure is raised as a NetworkError, DecodeError or NotFound so callers can
decide which ones are fatal.
"""

from typing import Any

import requests
from requests.adapters import DEFAULT_POOLSIZE, HTTPAdapter

from hnfetch.config.settings import Settings
from hnfetch.engines.errors import DecodeError, NetworkError, NotFound
from hnfetch.engines.story_models import RetrievalMode, StoryDetail


class HackerNewsClient:
    """Blocking client for the listing and item endpoints.

    The client holds one requests.Session for connection reuse. It does not
    log, retry or cache; a call is exactly one HTTP request.

    Attributes:
        settings: Configuration with the base URL, timeout and User-Agent
    """

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        """Initialize the client.

        Args:
            settings: Configuration settings
            session: Optional session to use instead of creating one
        """
        self.settings = settings
        self._session = session or requests.Session()
        # One pooled connection per worker
        adapter = HTTPAdapter(pool_maxsize=max(settings.max_workers, DEFAULT_POOLSIZE))
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)
        self._session.headers.update({
            "User-Agent": settings.user_agent,
            "Accept": "application/json",
        })

    def __enter__(self) -> "HackerNewsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def list_ids(self, mode: RetrievalMode) -> list[int]:
        """Fetch the ranked story ids for a retrieval mode.

        Args:
            mode: Which listing endpoint to query

        Returns:
            Story ids in the API's ranking order

        Raises:
            NetworkError: If the request cannot be completed
            DecodeError: If the body is not a JSON array of non-negative integers
        """
        url = f"{self.settings.api_base_url}/{mode.endpoint}.json"
        payload = self._get_json(url)

        if not isinstance(payload, list):
            raise DecodeError(
                f"Expected a list of ids from {mode.endpoint}, got {type(payload).__name__}"
            )
        for value in payload:
            if not _is_non_negative_int(value):
                raise DecodeError(f"Invalid story id in {mode.endpoint}: {value!r}")

        return list(payload)

    def fetch_detail(self, story_id: int) -> StoryDetail:
        """Fetch one item and decode it into a StoryDetail.

        Args:
            story_id: Item identifier from the listing

        Returns:
            StoryDetail with defaults applied to absent fields

        Raises:
            NetworkError: If the request cannot be completed
            NotFound: If the API returns null or marks the item deleted or dead
            DecodeError: If the body is not an object or a field has the wrong type
        """
        url = f"{self.settings.api_base_url}/item/{story_id}.json"
        payload = self._get_json(url)

        if payload is None:
            raise NotFound(story_id)
        return parse_story(story_id, payload)

    def _get_json(self, url: str) -> Any:
        """GET a URL and parse its JSON body.

        Raises:
            NetworkError: On transport failures and non-2xx statuses
            DecodeError: If the body is not valid JSON
        """
        try:
            response = self._session.get(url, timeout=self.settings.request_timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            raise NetworkError(f"GET {url} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {url}: {e}") from e


def _is_non_negative_int(value: Any) -> bool:
    # bool is a subclass of int; JSON true/false are not ids
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _optional_int(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if value is None:
        return 0
    if not _is_non_negative_int(value):
        raise DecodeError(f"Field {key!r} must be a non-negative integer, got {value!r}")
    return value


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"Field {key!r} must be a string, got {value!r}")
    return value


def parse_story(story_id: int, payload: Any) -> StoryDetail:
    """Decode an item payload into a StoryDetail.

    Absent or null optional fields take their defaults. Only a payload that is
    not an object, or a present field with the wrong type, is rejected.

    Args:
        story_id: The id that was requested
        payload: Decoded JSON body of the item endpoint

    Returns:
        StoryDetail for the item

    Raises:
        NotFound: If the payload is null or flagged deleted or dead
        DecodeError: If the payload is structurally invalid
    """
    if payload is None:
        raise NotFound(story_id)
    if not isinstance(payload, dict):
        raise DecodeError(
            f"Expected an object for item {story_id}, got {type(payload).__name__}"
        )

    if payload.get("deleted") is True:
        raise NotFound(story_id, "deleted")
    if payload.get("dead") is True:
        raise NotFound(story_id, "dead")

    item_id = payload.get("id", story_id)
    if not _is_non_negative_int(item_id):
        raise DecodeError(f"Field 'id' must be a non-negative integer, got {item_id!r}")
    if item_id != story_id:
        raise DecodeError(f"Requested item {story_id} but received item {item_id}")

    return StoryDetail(
        id=story_id,
        title=_optional_str(payload, "title") or "",
        score=_optional_int(payload, "score"),
        url=_optional_str(payload, "url") or None,
        descendants=_optional_int(payload, "descendants"),
        type=_optional_str(payload, "type") or "story",
        by=_optional_str(payload, "by") or "",
    )
