"""The error raised by watchers and debouncers."""

from __future__ import annotations

from enum import Enum
from os import PathLike
from pathlib import Path
from typing import Any, Iterable, Union

from .config import Config

__all__ = ["ErrorKind", "NotifyError"]

PathInput = Union[str, "PathLike[str]"]


class ErrorKind(Enum):
    """What went wrong."""

    GENERIC = "generic"
    IO = "io"
    PATH_NOT_FOUND = "path-not-found"
    WATCH_NOT_FOUND = "watch-not-found"
    INVALID_CONFIG = "invalid-config"
    MAX_FILES_WATCH = "max-files-watch"


_DETAIL_TYPES: dict[ErrorKind, type] = {
    ErrorKind.GENERIC: str,
    ErrorKind.IO: OSError,
    ErrorKind.INVALID_CONFIG: Config,
}

_FIXED_MESSAGES = {
    ErrorKind.PATH_NOT_FOUND: "No path was found.",
    ErrorKind.WATCH_NOT_FOUND: "No watch was found.",
    ErrorKind.MAX_FILES_WATCH: "OS file watch limit reached.",
}


class NotifyError(Exception):
    """An error of a watcher, optionally about specific paths.

    ``detail`` holds the message of a generic error, the underlying
    ``OSError`` of an I/O error, or the rejected ``Config``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        detail: Any = None,
        paths: Iterable[PathInput] = (),
    ) -> None:
        if not isinstance(kind, ErrorKind):
            raise TypeError(f"error kind must be an ErrorKind, got {kind!r}")
        expected = _DETAIL_TYPES.get(kind)
        if expected is None:
            if detail is not None:
                raise ValueError(f"{kind.name} errors take no detail")
        elif not isinstance(detail, expected):
            raise TypeError(
                f"{kind.name} errors need a {expected.__name__}, got {detail!r}"
            )
        super().__init__(kind, detail)
        self.kind = kind
        self.detail = detail
        self.paths = [Path(p) for p in paths]
        if kind is ErrorKind.IO:
            self.__cause__ = detail

    @classmethod
    def generic(cls, message: str) -> NotifyError:
        return cls(ErrorKind.GENERIC, message)

    @classmethod
    def io(cls, error: OSError) -> NotifyError:
        return cls(ErrorKind.IO, error)

    @classmethod
    def path_not_found(cls) -> NotifyError:
        return cls(ErrorKind.PATH_NOT_FOUND)

    @classmethod
    def watch_not_found(cls) -> NotifyError:
        return cls(ErrorKind.WATCH_NOT_FOUND)

    @classmethod
    def invalid_config(cls, config: Config) -> NotifyError:
        return cls(ErrorKind.INVALID_CONFIG, config)

    def add_path(self, path: PathInput) -> NotifyError:
        """Append a path the error is about; returns the error itself."""
        self.paths.append(Path(path))
        return self

    def set_paths(self, paths: Iterable[PathInput]) -> NotifyError:
        """Replace the paths the error is about; returns the error itself."""
        self.paths = [Path(p) for p in paths]
        return self

    def _message(self) -> str:
        if self.kind in _FIXED_MESSAGES:
            return _FIXED_MESSAGES[self.kind]
        if self.kind is ErrorKind.INVALID_CONFIG:
            return f"Invalid configuration: {self.detail!r}"
        return str(self.detail)

    def __str__(self) -> str:
        message = self._message()
        if not self.paths:
            return message
        quoted = ", ".join(f'"{p}"' for p in self.paths)
        return f"{message} about [{quoted}]"

    def __repr__(self) -> str:
        paths = [str(p) for p in self.paths]
        return f"NotifyError(kind={self.kind.name}, detail={self.detail!r}, paths={paths!r})"