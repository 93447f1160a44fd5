"""Feed load lifecycle - Pure data and transitions.

LoadState moves Idle -> Loading -> Ready | Failed and never goes back,
except by building a fresh view. Transitions are plain functions that
return the next state; the shell layer decides when to apply them.
"""

from dataclasses import dataclass, field

from quakemap.core.event import FeedSnapshot


class InvalidTransition(ValueError):
    """Raised when a transition is applied from the wrong state."""


@dataclass(frozen=True)
class Idle:
    """Nothing requested yet."""


@dataclass(frozen=True)
class Loading:
    """The one feed request is in flight."""


@dataclass(frozen=True)
class Ready:
    """Feed loaded.

    Attributes:
        snapshot: The loaded feed
    """
    snapshot: FeedSnapshot


@dataclass(frozen=True)
class Failed:
    """Feed could not be loaded.

    Attributes:
        message: Human-readable error message
    """
    message: str


LoadState = Idle | Loading | Ready | Failed


def start_loading(state: LoadState) -> Loading:
    """Idle -> Loading."""
    if not isinstance(state, Idle):
        raise InvalidTransition(f"Cannot start loading from {type(state).__name__}")
    return Loading()


def complete_loading(state: LoadState, snapshot: FeedSnapshot) -> Ready:
    """Loading -> Ready."""
    if not isinstance(state, Loading):
        raise InvalidTransition(f"Cannot complete loading from {type(state).__name__}")
    return Ready(snapshot=snapshot)


def fail_loading(state: LoadState, message: str) -> Failed:
    """Loading -> Failed."""
    if not isinstance(state, Loading):
        raise InvalidTransition(f"Cannot fail loading from {type(state).__name__}")
    return Failed(message=message)


@dataclass
class CancellationToken:
    """Tells a pending load to drop its result.

    Cancelling never aborts the HTTP request itself; the loader checks
    the token before applying what it got back.
    """
    _cancelled: bool = field(default=False, repr=False)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
