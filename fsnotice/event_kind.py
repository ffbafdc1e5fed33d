"""The hierarchical classification of filesystem events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

__all__ = [
    "AccessMode",
    "AccessKind",
    "CreateKind",
    "DataChange",
    "MetadataKind",
    "RenameMode",
    "ModifyKind",
    "RemoveKind",
    "EventKind",
    "Flag",
    "kind_to_json",
    "kind_from_json",
]


class _Labelled(Enum):
    """Enum whose values are kebab-case names with a CamelCase label."""

    @property
    def label(self) -> str:
        """The variant name in CamelCase, e.g. ``AccessTime``."""
        return "".join(part.capitalize() for part in self.value.split("-"))


class AccessMode(_Labelled):
    """How a file was opened or closed."""

    ANY = "any"
    EXECUTE = "execute"
    READ = "read"
    WRITE = "write"
    OTHER = "other"


class CreateKind(_Labelled):
    """What kind of object was created."""

    ANY = "any"
    FILE = "file"
    FOLDER = "folder"
    OTHER = "other"


class DataChange(_Labelled):
    """How the data content of a file changed."""

    ANY = "any"
    SIZE = "size"
    CONTENT = "content"
    OTHER = "other"


class MetadataKind(_Labelled):
    """Which metadata of a file or folder changed."""

    ANY = "any"
    ACCESS_TIME = "access-time"
    WRITE_TIME = "write-time"
    PERMISSIONS = "permissions"
    OWNERSHIP = "ownership"
    EXTENDED = "extended"
    OTHER = "other"


class RenameMode(_Labelled):
    """Which side of a rename an event describes."""

    ANY = "any"
    TO = "to"
    FROM = "from"
    BOTH = "both"
    OTHER = "other"


class RemoveKind(_Labelled):
    """What kind of object was removed."""

    ANY = "any"
    FILE = "file"
    FOLDER = "folder"
    OTHER = "other"


class Flag(_Labelled):
    """Special marks on an event."""

    RESCAN = "rescan"


def _check(owner: str, tag: str, detail: Any, table: dict[str, Any]) -> None:
    if tag not in table:
        raise ValueError(f"unknown {owner} kind {tag!r}")
    expected = table[tag]
    if expected is None:
        if detail is not None:
            raise ValueError(f"{owner} kind {tag!r} takes no detail")
    elif not isinstance(detail, expected):
        raise TypeError(
            f"{owner} kind {tag!r} needs a {expected.__name__}, got {detail!r}"
        )


def _render(label: str, detail: Any) -> str:
    if detail is None:
        return label
    inner = detail.label if isinstance(detail, _Labelled) else repr(detail)
    return f"{label}({inner})"


_ACCESS_TABLE: dict[str, Any] = {
    "any": None,
    "read": None,
    "open": AccessMode,
    "close": AccessMode,
    "other": None,
}

_MODIFY_TABLE: dict[str, Any] = {
    "any": None,
    "data": DataChange,
    "metadata": MetadataKind,
    "rename": RenameMode,
    "other": None,
}

_MODIFY_LABELS = {
    "any": "Any",
    "data": "Data",
    "metadata": "Metadata",
    "rename": "Name",
    "other": "Other",
}


@dataclass(frozen=True)
class AccessKind:
    """A non-mutating access to a file, optionally with an access mode."""

    kind: str
    mode: AccessMode | None = None

    ANY: ClassVar[AccessKind]
    READ: ClassVar[AccessKind]
    OTHER: ClassVar[AccessKind]

    def __post_init__(self) -> None:
        _check("access", self.kind, self.mode, _ACCESS_TABLE)

    @classmethod
    def open(cls, mode: AccessMode) -> AccessKind:
        """A file or a handle to it was opened."""
        return cls("open", mode)

    @classmethod
    def close(cls, mode: AccessMode) -> AccessKind:
        """A file or a handle to it was closed."""
        return cls("close", mode)

    def __repr__(self) -> str:
        return _render(self.kind.capitalize(), self.mode)


AccessKind.ANY = AccessKind("any")
AccessKind.READ = AccessKind("read")
AccessKind.OTHER = AccessKind("other")


_ModifyDetail = Union[DataChange, MetadataKind, RenameMode, None]


@dataclass(frozen=True)
class ModifyKind:
    """A change of content, metadata or name."""

    kind: str
    mode: _ModifyDetail = None

    ANY: ClassVar[ModifyKind]
    OTHER: ClassVar[ModifyKind]

    def __post_init__(self) -> None:
        _check("modify", self.kind, self.mode, _MODIFY_TABLE)

    @classmethod
    def data(cls, change: DataChange) -> ModifyKind:
        """The data content of a file changed."""
        return cls("data", change)

    @classmethod
    def metadata(cls, kind: MetadataKind) -> ModifyKind:
        """The metadata of a file or folder changed."""
        return cls("metadata", kind)

    @classmethod
    def name(cls, mode: RenameMode) -> ModifyKind:
        """The name of a file or folder changed."""
        return cls("rename", mode)

    def __repr__(self) -> str:
        return _render(_MODIFY_LABELS[self.kind], self.mode)


ModifyKind.ANY = ModifyKind("any")
ModifyKind.OTHER = ModifyKind("other")


_EVENT_TABLE: dict[str, Any] = {
    "any": None,
    "access": AccessKind,
    "create": CreateKind,
    "modify": ModifyKind,
    "remove": RemoveKind,
    "other": None,
}

_EventDetail = Union[AccessKind, CreateKind, ModifyKind, RemoveKind, None]


@dataclass(frozen=True)
class EventKind:
    """Top-level event kind with its optional sub-kind."""

    category: str
    detail: _EventDetail = None

    ANY: ClassVar[EventKind]
    OTHER: ClassVar[EventKind]

    def __post_init__(self) -> None:
        _check("event", self.category, self.detail, _EVENT_TABLE)

    @classmethod
    def access(cls, kind: AccessKind) -> EventKind:
        """An access event."""
        return cls("access", kind)

    @classmethod
    def create(cls, kind: CreateKind) -> EventKind:
        """A creation event."""
        return cls("create", kind)

    @classmethod
    def modify(cls, kind: ModifyKind) -> EventKind:
        """A modification event."""
        return cls("modify", kind)

    @classmethod
    def remove(cls, kind: RemoveKind) -> EventKind:
        """A removal event."""
        return cls("remove", kind)

    def is_access(self) -> bool:
        return self.category == "access"

    def is_create(self) -> bool:
        return self.category == "create"

    def is_modify(self) -> bool:
        return self.category == "modify"

    def is_remove(self) -> bool:
        return self.category == "remove"

    def is_other(self) -> bool:
        return self.category == "other"

    def __repr__(self) -> str:
        return _render(self.category.capitalize(), self.detail)


EventKind.ANY = EventKind("any")
EventKind.OTHER = EventKind("other")


def kind_to_json(kind: EventKind) -> Any:
    """Return the JSON-compatible form of an event kind."""
    detail = kind.detail
    if detail is None:
        return kind.category
    if isinstance(detail, (AccessKind, ModifyKind)):
        inner: dict[str, str] = {"kind": detail.kind}
        if detail.mode is not None:
            inner["mode"] = detail.mode.value
    else:
        inner = {"kind": detail.value}
    return {kind.category: inner}


def _enum_value(enum_type: type[Enum], value: Any, where: str) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        raise ValueError(f"unknown {where} {value!r}") from None


def kind_from_json(data: Any) -> EventKind:
    """Build an event kind from its JSON-compatible form."""
    if isinstance(data, str):
        if data == "any":
            return EventKind.ANY
        if data == "other":
            return EventKind.OTHER
        raise ValueError(f"unknown event kind {data!r}")
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(f"malformed event kind {data!r}")
    ((category, inner),) = data.items()
    if category not in ("access", "create", "modify", "remove"):
        raise ValueError(f"unknown event kind {category!r}")
    if not isinstance(inner, dict) or "kind" not in inner:
        raise ValueError(f"malformed {category} kind {inner!r}")
    tag = inner["kind"]
    extra = set(inner) - {"kind", "mode"}
    if extra:
        raise ValueError(f"unexpected fields {sorted(extra)} in {category} kind")

    if category in ("create", "remove"):
        if "mode" in inner:
            raise ValueError(f"{category} kind takes no mode")
        enum_type = CreateKind if category == "create" else RemoveKind
        return EventKind(category, _enum_value(enum_type, tag, f"{category} kind"))

    table = _ACCESS_TABLE if category == "access" else _MODIFY_TABLE
    if tag not in table:
        raise ValueError(f"unknown {category} kind {tag!r}")
    mode_type = table[tag]
    if mode_type is None:
        if "mode" in inner:
            raise ValueError(f"{category} kind {tag!r} takes no mode")
        mode = None
    else:
        if "mode" not in inner:
            raise ValueError(f"{category} kind {tag!r} needs a mode")
        mode = _enum_value(mode_type, inner["mode"], f"{category} mode")
    detail_type = AccessKind if category == "access" else ModifyKind
    return EventKind(category, detail_type(tag, mode))