"""Filesystem events and their additional attributes."""

from __future__ import annotations

from copy import copy
from dataclasses import dataclass, field, replace
from os import PathLike
from pathlib import Path
from typing import Any, Union

from .event_kind import EventKind, Flag, kind_from_json, kind_to_json

__all__ = ["EventAttributes", "Event", "event_to_json", "event_from_json"]

PathInput = Union[str, "PathLike[str]"]


@dataclass
class EventAttributes:
    """Optional extra data of an event.

    ``process_id`` is experimental and takes no part in comparisons.
    """

    tracker: int | None = None
    flag: Flag | None = None
    info: str | None = None
    source: str | None = None
    process_id: int | None = field(default=None, compare=False, repr=False)

    def set_tracker(self, tracker: int) -> None:
        """Set the id shared by related events."""
        self.tracker = tracker

    def set_flag(self, flag: Flag) -> None:
        """Set a special flag on the event."""
        self.flag = flag

    def set_info(self, info: str) -> None:
        """Set a short description of the event."""
        self.info = info

    def set_process_id(self, process_id: int) -> None:
        """Set the id of the process that caused the event."""
        self.process_id = process_id


@dataclass
class Event:
    """A filesystem event: its kind, the paths it concerns and its attributes.

    The ``set_*`` and ``add_*`` methods return a changed copy and leave the
    event they are called on untouched.
    """

    kind: EventKind = EventKind.ANY
    paths: list[Path] = field(default_factory=list)
    attrs: EventAttributes = field(default_factory=EventAttributes)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, EventKind):
            raise TypeError(f"event kind must be an EventKind, got {self.kind!r}")
        self.paths = [Path(p) for p in self.paths]

    @property
    def tracker(self) -> int | None:
        return self.attrs.tracker

    @property
    def flag(self) -> Flag | None:
        return self.attrs.flag

    @property
    def info(self) -> str | None:
        return self.attrs.info

    @property
    def source(self) -> str | None:
        return self.attrs.source

    @property
    def process_id(self) -> int | None:
        return self.attrs.process_id

    def need_rescan(self) -> bool:
        """Whether events may have been missed before this one."""
        return self.attrs.flag is Flag.RESCAN

    def _evolve(self, **changes: Any) -> Event:
        changes.setdefault("paths", list(self.paths))
        changes.setdefault("attrs", copy(self.attrs))
        return replace(self, **changes)

    def set_kind(self, kind: EventKind) -> Event:
        return self._evolve(kind=kind)

    def add_path(self, path: PathInput) -> Event:
        return self._evolve(paths=[*self.paths, Path(path)])

    def add_some_path(self, path: PathInput | None) -> Event:
        """Add ``path`` unless it is None."""
        if path is None:
            return self._evolve()
        return self.add_path(path)

    def set_tracker(self, tracker: int) -> Event:
        attrs = copy(self.attrs)
        attrs.set_tracker(tracker)
        return self._evolve(attrs=attrs)

    def set_info(self, info: str) -> Event:
        attrs = copy(self.attrs)
        attrs.set_info(info)
        return self._evolve(attrs=attrs)

    def set_flag(self, flag: Flag) -> Event:
        attrs = copy(self.attrs)
        attrs.set_flag(flag)
        return self._evolve(attrs=attrs)

    def set_process_id(self, process_id: int) -> Event:
        attrs = copy(self.attrs)
        attrs.set_process_id(process_id)
        return self._evolve(attrs=attrs)

    def __repr__(self) -> str:
        paths = [str(p) for p in self.paths]
        flag = self.flag.label if self.flag is not None else None
        return (
            f"Event(kind={self.kind!r}, paths={paths!r}, tracker={self.tracker!r}, "
            f"flag={flag}, info={self.info!r}, source={self.source!r})"
        )


def _attrs_to_json(attrs: EventAttributes) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if attrs.tracker is not None:
        data["tracker"] = attrs.tracker
    if attrs.flag is not None:
        data["flag"] = attrs.flag.label
    if attrs.info is not None:
        data["info"] = attrs.info
    if attrs.source is not None:
        data["source"] = attrs.source
    return data


def _flag_from_json(value: Any) -> Flag:
    for flag in Flag:
        if flag.label == value:
            return flag
    raise ValueError(f"unknown event flag {value!r}")


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"event {key} must be a string, got {value!r}")
    return value


def _attrs_from_json(data: Any) -> EventAttributes:
    if not isinstance(data, dict):
        raise ValueError(f"malformed event attributes {data!r}")
    tracker = data.get("tracker")
    if tracker is not None and (
        isinstance(tracker, bool) or not isinstance(tracker, int) or tracker < 0
    ):
        raise ValueError(f"event tracker must be a non-negative integer, got {tracker!r}")
    flag = data.get("flag")
    return EventAttributes(
        tracker=tracker,
        flag=None if flag is None else _flag_from_json(flag),
        info=_optional_str(data, "info"),
        source=_optional_str(data, "source"),
    )


def event_to_json(event: Event) -> dict[str, Any]:
    """Return the JSON-compatible form of an event."""
    return {
        "type": kind_to_json(event.kind),
        "paths": [str(p) for p in event.paths],
        "attrs": _attrs_to_json(event.attrs),
    }


def event_from_json(data: Any) -> Event:
    """Build an event from its JSON-compatible form."""
    if not isinstance(data, dict):
        raise ValueError(f"malformed event {data!r}")
    missing = {"type", "paths"} - data.keys()
    if missing:
        raise ValueError(f"event is missing fields {sorted(missing)}")
    paths = data["paths"]
    if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
        raise ValueError(f"event paths must be a list of strings, got {paths!r}")
    attrs = _attrs_from_json(data.get("attrs", {}))
    return Event(kind_from_json(data["type"]), paths, attrs)