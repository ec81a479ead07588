"""Unit tests for the Hacker News API connector.

Feature: hnfetch
Tests id listing, item decoding and failure classification.
"""

from unittest.mock import MagicMock

import pytest
import requests

from hnfetch.config.settings import Settings
from hnfetch.connectors.hn_api import HackerNewsClient, parse_story
from hnfetch.engines.errors import DecodeError, NetworkError, NotFound
from hnfetch.engines.story_models import RetrievalMode, StoryDetail


# Item 8863 as returned by the live API
SAMPLE_ITEM = {
    "by": "dhouston",
    "descendants": 71,
    "id": 8863,
    "kids": [8952, 9224],
    "score": 111,
    "time": 1175714200,
    "title": "My YC app: Dropbox - Throw away your USB drive",
    "type": "story",
    "url": "http://www.getdropbox.com/u/2/screencast.html",
}


def _make_client(payload=None, get_error=None, status_error=None, json_error=None):
    """Build a client whose session returns a canned response."""
    response = MagicMock()
    response.json.return_value = payload
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error

    session = MagicMock(spec=requests.Session)
    session.headers = {}
    if get_error is not None:
        session.get.side_effect = get_error
    else:
        session.get.return_value = response

    return HackerNewsClient(Settings(), session=session), session


class TestListIds:
    """Unit tests for HackerNewsClient.list_ids."""

    def test_hottest_queries_topstories(self):
        client, session = _make_client([3, 1, 2])

        ids = client.list_ids(RetrievalMode.HOTTEST)

        assert ids == [3, 1, 2]
        url = session.get.call_args[0][0]
        assert url == "https://hacker-news.firebaseio.com/v0/topstories.json"

    def test_latest_queries_newstories(self):
        client, session = _make_client([10])

        client.list_ids(RetrievalMode.LATEST)

        url = session.get.call_args[0][0]
        assert url == "https://hacker-news.firebaseio.com/v0/newstories.json"

    def test_request_uses_configured_timeout(self):
        response = MagicMock()
        response.json.return_value = []
        session = MagicMock(spec=requests.Session)
        session.headers = {}
        session.get.return_value = response
        client = HackerNewsClient(Settings(request_timeout_seconds=2.5), session=session)

        client.list_ids(RetrievalMode.HOTTEST)

        assert session.get.call_args[1]["timeout"] == 2.5

    def test_session_gets_user_agent(self):
        client, session = _make_client([])

        assert session.headers["User-Agent"].startswith("hnfetch/")

    def test_empty_list_is_valid(self):
        client, _ = _make_client([])

        assert client.list_ids(RetrievalMode.HOTTEST) == []

    @pytest.mark.parametrize("error", [
        requests.ConnectionError("Name or service not known"),
        requests.Timeout("read timed out"),
        requests.exceptions.SSLError("certificate verify failed"),
    ])
    def test_transport_failure_raises_network_error(self, error):
        client, _ = _make_client(get_error=error)

        with pytest.raises(NetworkError) as exc_info:
            client.list_ids(RetrievalMode.HOTTEST)

        assert exc_info.value.__cause__ is error

    def test_http_error_status_raises_network_error(self):
        client, _ = _make_client([], status_error=requests.HTTPError("503 Service Unavailable"))

        with pytest.raises(NetworkError):
            client.list_ids(RetrievalMode.HOTTEST)

    def test_invalid_json_raises_decode_error(self):
        client, _ = _make_client(json_error=ValueError("Expecting value"))

        with pytest.raises(DecodeError):
            client.list_ids(RetrievalMode.HOTTEST)

    @pytest.mark.parametrize("payload", [
        None,
        {"ids": [1, 2]},
        "1,2,3",
        [1, "2", 3],
        [1, -2],
        [1, 2.5],
        [True, 2],
    ])
    def test_non_integer_list_raises_decode_error(self, payload):
        client, _ = _make_client(payload)

        with pytest.raises(DecodeError):
            client.list_ids(RetrievalMode.HOTTEST)


class TestFetchDetail:
    """Unit tests for HackerNewsClient.fetch_detail."""

    def test_decodes_full_item(self):
        client, session = _make_client(SAMPLE_ITEM)

        story = client.fetch_detail(8863)

        assert story == StoryDetail(
            id=8863,
            title="My YC app: Dropbox - Throw away your USB drive",
            score=111,
            url="http://www.getdropbox.com/u/2/screencast.html",
            descendants=71,
            type="story",
            by="dhouston",
        )
        url = session.get.call_args[0][0]
        assert url == "https://hacker-news.firebaseio.com/v0/item/8863.json"

    def test_null_body_raises_not_found(self):
        client, _ = _make_client(None)

        with pytest.raises(NotFound) as exc_info:
            client.fetch_detail(42)

        assert exc_info.value.story_id == 42

    def test_transport_failure_raises_network_error(self):
        client, _ = _make_client(get_error=requests.ConnectionError("refused"))

        with pytest.raises(NetworkError):
            client.fetch_detail(1)

    def test_not_an_object_raises_decode_error(self):
        client, _ = _make_client([1, 2, 3])

        with pytest.raises(DecodeError):
            client.fetch_detail(1)

    def test_context_manager_closes_session(self):
        client, session = _make_client([])

        with client:
            pass

        session.close.assert_called_once()


class TestParseStory:
    """Unit tests for item payload decoding."""

    def test_missing_optional_fields_use_defaults(self):
        story = parse_story(7, {"id": 7})

        assert story.title == ""
        assert story.score == 0
        assert story.url is None
        assert story.descendants == 0
        assert story.type == "story"
        assert story.by == ""

    def test_null_optional_fields_use_defaults(self):
        story = parse_story(7, {"id": 7, "title": None, "score": None, "descendants": None})

        assert story.title == ""
        assert story.score == 0
        assert story.descendants == 0

    def test_missing_id_uses_requested_id(self):
        story = parse_story(7, {"title": "Ask HN: Anything"})

        assert story.id == 7

    def test_text_post_has_no_url(self):
        story = parse_story(121003, {
            "id": 121003,
            "type": "story",
            "title": "Ask HN: The Arc Effect",
            "text": "<i>or</i> HN: the Next Iteration",
            "score": 25,
        })

        assert story.url is None
        assert not story.has_external_url

    def test_empty_url_treated_as_absent(self):
        story = parse_story(1, {"id": 1, "url": ""})

        assert story.url is None

    def test_mismatched_id_raises_decode_error(self):
        with pytest.raises(DecodeError):
            parse_story(1, {"id": 2})

    @pytest.mark.parametrize("payload", [
        {"id": 1, "score": "100"},
        {"id": 1, "score": -5},
        {"id": 1, "descendants": 1.5},
        {"id": 1, "title": 123},
        {"id": 1, "url": ["http://example.com"]},
        {"id": "1"},
        {"id": 1, "score": True},
    ])
    def test_wrong_field_types_raise_decode_error(self, payload):
        with pytest.raises(DecodeError):
            parse_story(1, payload)

    @pytest.mark.parametrize("payload,reason", [
        ({"id": 5, "deleted": True}, "deleted"),
        ({"id": 5, "dead": True, "title": "[flagged]"}, "dead"),
    ])
    def test_deleted_or_dead_items_raise_not_found(self, payload, reason):
        with pytest.raises(NotFound) as exc_info:
            parse_story(5, payload)

        assert exc_info.value.reason == reason

    def test_extra_fields_are_ignored(self):
        story = parse_story(8863, SAMPLE_ITEM)

        assert story.id == 8863


class TestConnectionPool:
    """The session's connection pool SHALL hold one connection per worker."""

    @pytest.mark.parametrize("workers,expected", [(1, 10), (10, 10), (16, 16), (32, 32)])
    def test_pool_size_follows_max_workers(self, workers, expected):
        client = HackerNewsClient(Settings(max_workers=workers))

        for prefix in ("http://", "https://"):
            adapter = client._session.get_adapter(f"{prefix}hacker-news.firebaseio.com/v0")
            assert adapter._pool_maxsize == expected
            assert adapter.poolmanager.connection_pool_kw["maxsize"] == expected

        client.close()

    def test_adapter_mounted_on_injected_session(self):
        session = requests.Session()

        HackerNewsClient(Settings(max_workers=20), session=session)

        assert session.get_adapter("https://example.com")._pool_maxsize == 20
