"""An event paired with the time it was seen."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from time import monotonic

from .event import Event, EventAttributes
from .event_kind import EventKind, Flag

__all__ = ["DebouncedEvent"]


@dataclass
class DebouncedEvent:
    """An event held back by a debouncer.

    ``time`` is a ``time.monotonic()`` reading in seconds. The kind, paths
    and attributes of the wrapped event are reachable directly.
    """

    event: Event = field(default_factory=Event)
    time: float = field(default_factory=monotonic)

    @classmethod
    def from_event(cls, event: Event) -> DebouncedEvent:
        """Wrap ``event``, stamped with the current time."""
        return cls(event, monotonic())

    @property
    def kind(self) -> EventKind:
        return self.event.kind

    @kind.setter
    def kind(self, kind: EventKind) -> None:
        self.event.kind = kind

    @property
    def paths(self) -> list[Path]:
        return self.event.paths

    @paths.setter
    def paths(self, paths: list[Path]) -> None:
        self.event.paths = [Path(p) for p in paths]

    @property
    def attrs(self) -> EventAttributes:
        return self.event.attrs

    @property
    def tracker(self) -> int | None:
        return self.event.tracker

    @property
    def flag(self) -> Flag | None:
        return self.event.flag

    @property
    def info(self) -> str | None:
        return self.event.info

    @property
    def source(self) -> str | None:
        return self.event.source

    def need_rescan(self) -> bool:
        """Whether events may have been missed before this one."""
        return self.event.need_rescan()