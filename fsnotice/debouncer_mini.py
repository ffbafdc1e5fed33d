"""A small debouncer that emits at most one event per path and timeout."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from time import monotonic
from typing import Any, Callable, Union

from .config import Config
from .errors import NotifyError
from .event import Event

__all__ = [
    "MiniConfig",
    "DebouncedEventKind",
    "MiniDebouncedEvent",
    "MiniDebounceData",
    "MiniDebouncer",
    "new_mini_debouncer",
    "new_mini_debouncer_opt",
]

_log = logging.getLogger(__name__)

_SHUTDOWN = object()


@dataclass(frozen=True)
class MiniConfig:
    """Debouncer settings; ``timeout`` is in seconds.

    In batch mode events may be held back up to twice the timeout so that
    they are delivered together with others.
    """

    timeout: float = 0.5
    batch_mode: bool = True
    notify_config: Config = field(default_factory=Config)

    def __post_init__(self) -> None:
        if self.timeout < 0:
            raise ValueError(f"timeout must not be negative: {self.timeout}")

    def with_timeout(self, timeout: float) -> MiniConfig:
        """Return a copy with a different timeout."""
        return replace(self, timeout=timeout)

    def with_batch_mode(self, batch_mode: bool) -> MiniConfig:
        """Return a copy with batch mode switched on or off."""
        return replace(self, batch_mode=batch_mode)

    def with_notify_config(self, notify_config: Config) -> MiniConfig:
        """Return a copy with different backend settings."""
        return replace(self, notify_config=notify_config)


class DebouncedEventKind(Enum):
    """Whether a path has settled or is still changing."""

    ANY = "any"
    ANY_CONTINUOUS = "any-continuous"


@dataclass(frozen=True)
class MiniDebouncedEvent:
    """A path that changed, and whether it is still changing."""

    path: Path
    kind: DebouncedEventKind

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))


@dataclass
class _EventData:
    insert: float
    update: float


class MiniDebounceData:
    """Tracks when each path was first and last seen.

    ``clock`` returns the current time in seconds and defaults to
    ``time.monotonic``.
    """

    def __init__(
        self,
        timeout: float,
        batch_mode: bool = True,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if timeout < 0:
            raise ValueError(f"timeout must not be negative: {timeout}")
        self.timeout = timeout
        self.batch_mode = batch_mode
        self.deadline: float | None = None
        self._events: dict[Path, _EventData] = {}
        self._clock = clock or monotonic

    @property
    def pending_paths(self) -> list[Path]:
        """Paths that have not settled yet."""
        return list(self._events)

    def next_tick(self) -> float | None:
        """Seconds until the next deadline, or None if nothing is pending."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - self._clock())

    def _check_deadline(self, data: _EventData) -> None:
        candidate = data.update + self.timeout
        if self.deadline is None:
            self.deadline = candidate
        elif not self.batch_mode and self.deadline > candidate:
            # without batching, never delay an event past its own deadline
            self.deadline = candidate

    def debounced_events(self) -> list[MiniDebouncedEvent]:
        """Return settled and continuing paths; settled ones are forgotten."""
        now = self._clock()
        expired: list[MiniDebouncedEvent] = []
        remaining: dict[Path, _EventData] = {}
        self.deadline = None
        for path, data in self._events.items():
            if now - data.update >= self.timeout:
                _log.debug("debounced event: %s %s", DebouncedEventKind.ANY, path)
                expired.append(MiniDebouncedEvent(path, DebouncedEventKind.ANY))
            elif now - data.insert >= self.timeout:
                _log.debug(
                    "debounced event: %s %s", DebouncedEventKind.ANY_CONTINUOUS, path
                )
                self._check_deadline(data)
                remaining[path] = data
                expired.append(MiniDebouncedEvent(path, DebouncedEventKind.ANY_CONTINUOUS))
            else:
                self._check_deadline(data)
                remaining[path] = data
        self._events = remaining
        return expired

    def add_event(self, event: Event) -> None:
        """Record a raw event for each of its paths."""
        _log.debug("raw event: %r", event)
        time = self._clock()
        if self.deadline is None:
            self.deadline = time + self.timeout
        for path in event.paths:
            data = self._events.get(path)
            if data is None:
                self._events[path] = _EventData(time, time)
            else:
                data.update = time


Batch = Union[list[MiniDebouncedEvent], NotifyError]


def _deliver(handler: Any, batch: Batch) -> None:
    put = getattr(handler, "put", None)
    try:
        if callable(put):
            put(batch)
        else:
            handler(batch)
    except Exception:
        _log.exception("debounce event handler failed")


def _run(inbox: queue.Queue, data: MiniDebounceData, handler: Any) -> None:
    while True:
        try:
            item = inbox.get(timeout=data.next_tick())
        except queue.Empty:
            events = data.debounced_events()
            if events:
                _deliver(handler, events)
            continue
        if item is _SHUTDOWN:
            return
        if isinstance(item, NotifyError):
            _deliver(handler, item)
        else:
            data.add_event(item)


class MiniDebouncer:
    """Runs the mini debouncer on a background thread.

    The handler gets a list of ``MiniDebouncedEvent`` or, at once, a single
    ``NotifyError``. It may also be an object with a ``put`` method such as
    ``queue.Queue``. Used as a context manager, the debouncer stops on exit.
    """

    def __init__(self, config: MiniConfig, event_handler: Any) -> None:
        self.config = config
        self._inbox: queue.Queue = queue.Queue()
        data = MiniDebounceData(config.timeout, config.batch_mode)
        self._thread = threading.Thread(
            target=_run,
            args=(self._inbox, data, event_handler),
            name="fsnotice mini debouncer loop",
            daemon=True,
        )
        self._thread.start()

    @property
    def running(self) -> bool:
        """Whether the background thread is still alive."""
        return self._thread.is_alive()

    def handle(self, result: Event | NotifyError) -> None:
        """Take a raw event or an error from a watcher."""
        if not isinstance(result, (Event, NotifyError)):
            raise TypeError(f"expected an Event or a NotifyError, got {result!r}")
        self._inbox.put(result)

    def stop(self) -> None:
        """Stop the debouncer and wait for its thread."""
        self._inbox.put(_SHUTDOWN)
        if threading.current_thread() is not self._thread:
            self._thread.join()

    def __enter__(self) -> MiniDebouncer:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    def __del__(self) -> None:
        inbox = getattr(self, "_inbox", None)
        if inbox is not None:
            inbox.put(_SHUTDOWN)


def new_mini_debouncer_opt(config: MiniConfig, event_handler: Any) -> MiniDebouncer:
    """Start a mini debouncer with the given settings."""
    return MiniDebouncer(config, event_handler)


def new_mini_debouncer(timeout: float, event_handler: Any) -> MiniDebouncer:
    """Start a mini debouncer with default settings and ``timeout`` seconds."""
    return new_mini_debouncer_opt(MiniConfig().with_timeout(timeout), event_handler)