"""The state of the full debouncer: queued events per path."""

from __future__ import annotations

import copy
import logging
from collections import deque
from dataclasses import dataclass, field
from functools import cmp_to_key
from pathlib import Path
from time import monotonic
from typing import Callable

from .cache import FileIdCache
from .debounced_event import DebouncedEvent
from .errors import NotifyError
from .event import Event
from .event_kind import EventKind, ModifyKind, RemoveKind, RenameMode
from .file_id import FileId

__all__ = ["Queue", "DebounceData"]

_log = logging.getLogger(__name__)

_RENAME_BOTH = EventKind.modify(ModifyKind.name(RenameMode.BOTH))


def _is_rename(kind: EventKind, mode: RenameMode) -> bool:
    return kind.is_modify() and kind.detail.kind == "rename" and kind.detail.mode is mode


@dataclass
class Queue:
    """Events of one path.

    A remove or move-out event comes first, then a rename event, then the
    rest.
    """

    events: deque[DebouncedEvent] = field(default_factory=deque)

    def was_created(self) -> bool:
        if not self.events:
            return False
        kind = self.events[0].kind
        return kind.is_create() or _is_rename(kind, RenameMode.TO)

    def was_removed(self) -> bool:
        if not self.events:
            return False
        kind = self.events[0].kind
        return kind.is_remove() or _is_rename(kind, RenameMode.FROM)


def _chronological(a: DebouncedEvent, b: DebouncedEvent) -> int:
    # rename events are keyed by their target, the last path
    last_a = a.paths[-1] if a.paths else None
    last_b = b.paths[-1] if b.paths else None
    if last_a == last_b:
        return 0
    return (a.time > b.time) - (a.time < b.time)


class DebounceData:
    """Collects raw events and hands them out once they have settled.

    ``timeout`` is in seconds; ``clock`` returns the current time in seconds
    and defaults to ``time.monotonic``.
    """

    def __init__(
        self,
        cache: FileIdCache,
        timeout: float,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if timeout < 0:
            raise ValueError(f"timeout must not be negative: {timeout}")
        self.cache = cache
        self.timeout = timeout
        self.queues: dict[Path, Queue] = {}
        self.rename_event: tuple[DebouncedEvent, FileId | None] | None = None
        self.rescan_event: DebouncedEvent | None = None
        self.errors: list[NotifyError] = []
        self._clock = clock or monotonic

    def _expired(self, event: DebouncedEvent, now: float) -> bool:
        return max(0.0, now - event.time) >= self.timeout

    def debounced_events(self) -> list[DebouncedEvent]:
        """Remove and return every event whose timeout has passed."""
        now = self._clock()
        expired: list[DebouncedEvent] = []

        if self.rescan_event is not None and self._expired(self.rescan_event, now):
            _log.debug("debounced event: %r", self.rescan_event)
            expired.append(self.rescan_event)
            self.rescan_event = None

        remaining: dict[Path, Queue] = {}
        for path, queue in self.queues.items():
            kind_index: dict[EventKind, int] = {}
            while queue.events and self._expired(queue.events[0], now):
                event = queue.events.popleft()
                # keep only the latest event of each kind
                previous = kind_index.get(event.kind)
                if previous is not None:
                    del expired[previous]
                    kind_index = {
                        k: i - 1 if i > previous else i for k, i in kind_index.items()
                    }
                kind_index[event.kind] = len(expired)
                expired.append(event)
            if queue.events:
                remaining[path] = queue
        self.queues = remaining

        expired.sort(key=cmp_to_key(_chronological))
        return expired

    def take_errors(self) -> list[NotifyError]:
        """Remove and return all stored errors."""
        errors, self.errors = self.errors, []
        return errors

    def add_error(self, error: NotifyError) -> None:
        """Store an error to hand out with the next batch."""
        self.errors.append(error)

    def add_event(self, event: Event) -> None:
        """Take in a raw event."""
        _log.debug("raw event: %r", event)

        if event.need_rescan():
            self.cache.rescan()
            self.rescan_event = DebouncedEvent(event, self._clock())
            return

        if not event.paths:
            raise ValueError(f"event has no paths: {event!r}")
        path = event.paths[0]
        kind = event.kind

        if kind.is_create():
            self.cache.add_path(path)
            self._push_event(event, self._clock())
        elif kind.is_modify() and kind.detail.kind == "rename":
            mode = kind.detail.mode
            if mode is RenameMode.ANY:
                if path.exists():
                    self._handle_rename_to(event)
                else:
                    self._handle_rename_from(event)
            elif mode is RenameMode.TO:
                self._handle_rename_to(event)
            elif mode is RenameMode.FROM:
                self._handle_rename_from(event)
            # BOTH is covered by its FROM and TO halves; OTHER is unused
        elif kind.is_remove():
            self._push_remove_event(event, self._clock())
        elif kind.is_other():
            pass
        else:
            if self.cache.cached_file_id(path) is None:
                self.cache.add_path(path)
            self._push_event(event, self._clock())

    def _handle_rename_from(self, event: Event) -> None:
        time = self._clock()
        path = event.paths[0]
        file_id = self.cache.cached_file_id(path)
        self.rename_event = (DebouncedEvent(copy.deepcopy(event), time), file_id)
        self.cache.remove_path(path)
        self._push_event(event, time)

    def _handle_rename_to(self, event: Event) -> None:
        target = event.paths[0]
        self.cache.add_path(target)

        trackers_match = False
        file_ids_match = False
        if self.rename_event is not None:
            from_event, from_id = self.rename_event
            if from_event.tracker is not None and event.tracker is not None:
                trackers_match = from_event.tracker == event.tracker
            if from_id is not None:
                to_id = self.cache.cached_file_id(target)
                file_ids_match = to_id is not None and from_id == to_id

        if trackers_match or file_ids_match:
            from_event, _ = self.rename_event
            self.rename_event = None
            source = from_event.paths.pop(0)
            self._push_rename_event(source, event, from_event.time)
        else:
            self._push_event(event, self._clock())

        self.rename_event = None

    def _push_rename_event(self, path: Path, event: Event, time: float) -> None:
        target = event.paths[0]
        self.cache.remove_path(path)

        source_queue = self.queues.pop(path, None) or Queue()

        # drop the rename `from` event
        if source_queue.events:
            source_queue.events.pop()

        # drop an earlier rename, keeping its origin
        original_path, original_time = path, time
        for index, queued in enumerate(source_queue.events):
            if queued.kind == _RENAME_BOTH:
                original_path, original_time = queued.paths[0], queued.time
                del source_queue.events[index]
                break

        # a remove or move-out stays with the old path
        if source_queue.was_removed():
            removed = source_queue.events.popleft()
            self.queues[removed.paths[0]] = Queue(deque([removed]))

        for queued in source_queue.events:
            queued.paths = [target]

        if not source_queue.was_created():
            source_queue.events.appendleft(
                DebouncedEvent(
                    Event(_RENAME_BOTH, [original_path, target], copy.copy(event.attrs)),
                    original_time,
                )
            )

        target_queue = self.queues.get(target)
        if target_queue is not None and not target_queue.was_created():
            remove_event = Event(EventKind.remove(RemoveKind.ANY), [target])
            if not target_queue.was_removed():
                remove_event = remove_event.set_info("override")
            source_queue.events.appendleft(DebouncedEvent(remove_event, original_time))
        self.queues[target] = source_queue

    def _push_remove_event(self, event: Event, time: float) -> None:
        path = event.paths[0]

        self.queues = {
            p: q for p, q in self.queues.items() if not p.is_relative_to(path) or p == path
        }
        self.cache.remove_path(path)

        queue = self.queues.get(path)
        if queue is None:
            self._push_event(event, time)
        elif queue.was_created():
            del self.queues[path]
        else:
            queue.events = deque([DebouncedEvent(event, time)])

    def _push_event(self, event: Event, time: float) -> None:
        path = event.paths[0]
        queue = self.queues.get(path)
        if queue is None:
            self.queues[path] = Queue(deque([DebouncedEvent(event, time)]))
            return
        kind = event.kind
        follows_creation = kind.is_create() or (
            kind.is_modify() and kind.detail.kind in ("data", "metadata")
        )
        # skip duplicate creates and changes right after a create
        if not (follows_creation and queue.was_created()):
            queue.events.append(DebouncedEvent(event, time))