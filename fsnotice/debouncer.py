"""A running debouncer that batches raw events on a background thread."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Union

from .cache import FileIdCache, FileIdMap
from .debounce_state import DebounceData
from .debounced_event import DebouncedEvent
from .errors import NotifyError
from .event import Event

__all__ = ["Debouncer", "new_debouncer"]

_log = logging.getLogger(__name__)

_TICK_DIVISOR = 4

Batch = Union[list[DebouncedEvent], list[NotifyError]]


def _deliver(handler: Any, batch: Batch) -> None:
    """Pass a batch to a callable or to anything with a ``put`` method."""
    put = getattr(handler, "put", None)
    if callable(put):
        put(batch)
    else:
        handler(batch)


def _run(
    data: DebounceData,
    lock: threading.RLock,
    stop: threading.Event,
    tick: float,
    handler: Any,
) -> None:
    while not stop.is_set():
        stop.wait(tick)
        with lock:
            events = data.debounced_events()
            errors = data.take_errors()
        try:
            if events:
                _deliver(handler, events)
            if errors:
                _deliver(handler, errors)
        except Exception:
            _log.exception("debounce event handler failed")


class Debouncer:
    """Feeds raw events into a debounce state and emits settled batches.

    The handler is called with a list of ``DebouncedEvent`` or, separately,
    with a list of ``NotifyError``. It may also be any object with a ``put``
    method, such as ``queue.Queue``. Used as a context manager, the
    debouncer stops on exit.
    """

    def __init__(self, data: DebounceData, tick_rate: float, event_handler: Any) -> None:
        self._data = data
        self._lock = threading.RLock()
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=_run,
            args=(data, self._lock, self._stop, tick_rate, event_handler),
            name="fsnotice debouncer loop",
            daemon=True,
        )
        self._thread.start()

    @property
    def running(self) -> bool:
        """Whether the background thread is still alive."""
        return self._thread.is_alive()

    def handle(self, result: Event | NotifyError) -> None:
        """Take a raw event or an error from a watcher."""
        with self._lock:
            if isinstance(result, NotifyError):
                self._data.add_error(result)
            elif isinstance(result, Event):
                self._data.add_event(result)
            else:
                raise TypeError(f"expected an Event or a NotifyError, got {result!r}")

    @contextmanager
    def cache(self) -> Iterator[FileIdCache]:
        """Hold the debouncer's lock and yield its file id cache."""
        with self._lock:
            yield self._data.cache

    def stop(self) -> None:
        """Stop the debouncer and wait for its thread; may block one tick."""
        self._stop.set()
        if threading.current_thread() is not self._thread:
            self._thread.join()

    def stop_nonblocking(self) -> None:
        """Stop the debouncer without waiting for its thread."""
        self._stop.set()

    def __enter__(self) -> Debouncer:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    def __del__(self) -> None:
        stop = getattr(self, "_stop", None)
        if stop is not None:
            stop.set()


def new_debouncer(
    timeout: float,
    tick_rate: float | None,
    event_handler: Callable[[Batch], Any] | Any,
    file_id_cache: FileIdCache | None = None,
) -> Debouncer:
    """Start a debouncer.

    ``timeout`` is the time in seconds after which an event is emitted. If
    ``tick_rate`` is None it is a quarter of the timeout. Without a cache a
    fresh ``FileIdMap`` is used.
    """
    if tick_rate is None:
        tick = timeout / _TICK_DIVISOR
    else:
        if tick_rate > timeout:
            raise NotifyError.generic(
                f"Invalid tick_rate, tick rate {tick_rate} > {timeout} timeout!"
            )
        tick = tick_rate
    if tick < 0:
        raise ValueError(f"tick rate must not be negative: {tick}")
    cache = file_id_cache if file_id_cache is not None else FileIdMap()
    data = DebounceData(cache, timeout)
    return Debouncer(data, tick, event_handler)