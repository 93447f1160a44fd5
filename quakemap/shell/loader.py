"""Feed Loader - Imperative Shell.

Runs the one-shot feed fetch off the event loop and turns its outcome
into LoadState transitions. A cancelled token makes the loader drop the
outcome instead of applying it.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from quakemap.core.event import FeedSnapshot, parse_feed
from quakemap.core.load_state import (
    CancellationToken,
    LoadState,
    complete_loading,
    fail_loading,
    start_loading,
)
from quakemap.shell.feed_client import FeedClient, FeedError, ParseError


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FeedLoader:
    """Loads the feed once and reports state transitions.

    The loader owns no state: it receives the current LoadState and hands
    every new state to ``on_change``.
    """

    def __init__(
        self,
        client: FeedClient,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize loader.

        Args:
            client: Feed client performing the HTTP request
            clock: Source of the snapshot's fetched_at timestamp
        """
        self.client = client
        self.clock = clock

    def _parse(self, payload: dict) -> FeedSnapshot:
        """Parse the feed body, reporting any failure as a ParseError."""
        try:
            return parse_feed(payload, fetched_at=self.clock())
        except Exception as e:
            logger.exception("Unexpected error parsing feed")
            raise ParseError(f"Feed response could not be parsed: {e!r}") from e

    async def load(
        self,
        state: LoadState,
        token: CancellationToken,
        on_change: Callable[[LoadState], None],
    ) -> LoadState:
        """Fetch the feed and apply the outcome unless cancelled.

        Args:
            state: Current state, must be Idle
            token: Cancellation token checked before applying the outcome
            on_change: Receives each state the loader moves to

        Returns:
            The last state applied

        Raises:
            InvalidTransition: If a load was already started
        """
        loading = start_loading(state)
        if token.cancelled:
            logger.info("Feed load cancelled before it started")
            return state
        on_change(loading)

        try:
            payload = await asyncio.to_thread(self.client.fetch_feed)
            snapshot = self._parse(payload)
        except FeedError as e:
            if token.cancelled:
                logger.info("Discarding feed error after cancellation: %s", e)
                return loading
            logger.error("Failed to load earthquake feed: %s", e)
            failed = fail_loading(loading, str(e))
            on_change(failed)
            return failed

        if token.cancelled:
            logger.info(
                "Discarding %d events fetched after cancellation",
                len(snapshot),
            )
            return loading

        logger.info("Loaded %d events", len(snapshot))
        ready = complete_loading(loading, snapshot)
        on_change(ready)
        return ready
