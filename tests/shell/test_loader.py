"""Tests for the async feed loader.

The feed client is mocked; async code runs through asyncio.run().
"""

import asyncio
import threading
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from quakemap.core.load_state import (
    CancellationToken,
    Failed,
    Idle,
    InvalidTransition,
    Loading,
    Ready,
)
from quakemap.shell.feed_client import ParseError, TransportError
from quakemap.shell.loader import FeedLoader


FETCHED_AT = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

SAMPLE_GEOJSON = {
    "features": [
        {
            "id": "ak0001",
            "properties": {"mag": 2.4, "type": "earthquake", "place": "Alaska"},
            "geometry": {"coordinates": [-150.0, 61.0, 40.0]},
        },
        {
            "id": "ak0002",
            "properties": {"mag": 1.1, "type": "quarry blast", "place": "Alaska"},
            "geometry": {"coordinates": [-149.0, 60.5, 0.0]},
        },
    ]
}


def make_loader(client) -> FeedLoader:
    return FeedLoader(client, clock=lambda: FETCHED_AT)


class TestFeedLoaderLoad:
    """Tests for FeedLoader.load()."""

    def test_success_moves_to_ready(self):
        """A successful fetch goes Loading then Ready."""
        client = Mock()
        client.fetch_feed.return_value = SAMPLE_GEOJSON
        changes = []

        result = asyncio.run(
            make_loader(client).load(Idle(), CancellationToken(), changes.append)
        )

        assert isinstance(result, Ready)
        assert [e.id for e in result.snapshot.events] == ["ak0001", "ak0002"]
        assert result.snapshot.fetched_at == FETCHED_AT
        assert changes == [Loading(), result]
        client.fetch_feed.assert_called_once_with()

    def test_empty_document_is_ready_with_no_events(self):
        """A document without features loads as an empty snapshot."""
        client = Mock()
        client.fetch_feed.return_value = {}

        result = asyncio.run(
            make_loader(client).load(Idle(), CancellationToken(), lambda s: None)
        )

        assert isinstance(result, Ready)
        assert result.snapshot.events == ()

    def test_transport_error_moves_to_failed(self):
        """TransportError is recorded with its message."""
        client = Mock()
        client.fetch_feed.side_effect = TransportError("Feed request failed with status 500")
        changes = []

        result = asyncio.run(
            make_loader(client).load(Idle(), CancellationToken(), changes.append)
        )

        assert result == Failed(message="Feed request failed with status 500")
        assert changes == [Loading(), result]

    def test_parse_error_moves_to_failed(self):
        """ParseError is recorded with its message."""
        client = Mock()
        client.fetch_feed.side_effect = ParseError("Feed response is not valid JSON")

        result = asyncio.run(
            make_loader(client).load(Idle(), CancellationToken(), lambda s: None)
        )

        assert isinstance(result, Failed)
        assert "not valid JSON" in result.message

    def test_malformed_feature_still_reaches_ready(self):
        """A feature with object coordinates is skipped; the load completes."""
        client = Mock()
        client.fetch_feed.return_value = {
            "features": [
                SAMPLE_GEOJSON["features"][0],
                {"geometry": {"coordinates": {"lon": 1, "lat": 2}}},
            ]
        }
        changes = []

        result = asyncio.run(
            make_loader(client).load(Idle(), CancellationToken(), changes.append)
        )

        assert isinstance(result, Ready)
        assert [e.id for e in result.snapshot.events] == ["ak0001"]
        assert changes == [Loading(), result]

    def test_unparseable_body_moves_to_failed(self):
        """Any parsing failure ends in Failed, never stuck in Loading."""
        client = Mock()
        client.fetch_feed.return_value = {"features": 5}
        changes = []

        result = asyncio.run(
            make_loader(client).load(Idle(), CancellationToken(), changes.append)
        )

        assert isinstance(result, Failed)
        assert "could not be parsed" in result.message
        assert changes == [Loading(), result]

    def test_requires_idle_state(self):
        """Only one load may ever start."""
        client = Mock()

        with pytest.raises(InvalidTransition):
            asyncio.run(make_loader(client).load(Loading(), CancellationToken(), lambda s: None))

        client.fetch_feed.assert_not_called()


class TestFeedLoaderCancellation:
    """Tests for dropping results after cancellation."""

    def test_late_success_is_discarded(self):
        """A success arriving after cancel changes nothing."""
        release = threading.Event()
        client = Mock()

        def slow_fetch():
            release.wait(timeout=5)
            return SAMPLE_GEOJSON

        client.fetch_feed.side_effect = slow_fetch
        token = CancellationToken()
        changes = []

        async def scenario():
            task = asyncio.create_task(make_loader(client).load(Idle(), token, changes.append))
            await asyncio.sleep(0)
            token.cancel()
            release.set()
            return await task

        result = asyncio.run(scenario())

        assert result == Loading()
        assert changes == [Loading()]

    def test_late_failure_is_discarded(self):
        """A failure arriving after cancel changes nothing."""
        release = threading.Event()
        client = Mock()

        def failing_fetch():
            release.wait(timeout=5)
            raise TransportError("Feed request failed: timed out")

        client.fetch_feed.side_effect = failing_fetch
        token = CancellationToken()
        changes = []

        async def scenario():
            task = asyncio.create_task(make_loader(client).load(Idle(), token, changes.append))
            await asyncio.sleep(0)
            token.cancel()
            release.set()
            return await task

        result = asyncio.run(scenario())

        assert result == Loading()
        assert changes == [Loading()]

    def test_cancelled_before_start_never_fetches(self):
        """A token cancelled up front skips the request."""
        client = Mock()
        token = CancellationToken()
        token.cancel()
        changes = []

        result = asyncio.run(make_loader(client).load(Idle(), token, changes.append))

        assert result == Idle()
        assert changes == []
        client.fetch_feed.assert_not_called()
