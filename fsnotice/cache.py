"""Caches of file ids used to pair up the two halves of a rename."""

from __future__ import annotations

import os
import stat
from abc import ABC, abstractmethod
from os import PathLike
from pathlib import Path
from typing import Iterator, Union

from .config import RecursiveMode
from .file_id import FileId, get_file_id

__all__ = ["FileIdCache", "FileIdMap", "NoCache"]

PathInput = Union[str, "PathLike[str]"]


class FileIdCache(ABC):
    """What a debouncer needs from a file id cache."""

    @abstractmethod
    def cached_file_id(self, path: Path) -> FileId | None:
        """Return the cached id of ``path`` without touching the disk."""

    @abstractmethod
    def add_path(self, path: Path) -> None:
        """Add ``path`` to the cache or refresh its id."""

    @abstractmethod
    def remove_path(self, path: Path) -> None:
        """Forget ``path``."""

    @abstractmethod
    def rescan(self) -> None:
        """Read all ids again, after the backend has dropped events."""


def _walk(
    path: Path, depth_left: int | None, ancestors: frozenset = frozenset()
) -> Iterator[Path]:
    """Yield ``path`` and what lies below it, following links, skipping loops."""
    try:
        info = path.stat()
    except OSError:
        return
    is_dir = stat.S_ISDIR(info.st_mode)
    key = (info.st_dev, info.st_ino)
    if is_dir and key in ancestors:
        return
    yield path
    if not is_dir or depth_left == 0:
        return
    try:
        names = sorted(os.listdir(path))
    except OSError:
        return
    next_left = None if depth_left is None else depth_left - 1
    below = ancestors | {key}
    for name in names:
        yield from _walk(path / name, next_left, below)


class FileIdMap(FileIdCache):
    """Holds the ids of all files below the roots it was given."""

    def __init__(self) -> None:
        self.paths: dict[Path, FileId] = {}
        self.roots: list[tuple[Path, RecursiveMode]] = []

    def add_root(self, path: PathInput, recursive_mode: RecursiveMode) -> None:
        """Track ``path``, and everything below it if the mode is recursive."""
        root = Path(path)
        self.roots.append((root, recursive_mode))
        self.add_path(root)

    def remove_root(self, path: PathInput) -> None:
        """Stop tracking ``path`` and forget everything below it."""
        root = Path(path)
        self.roots = [(r, mode) for r, mode in self.roots if not r.is_relative_to(root)]
        self.remove_path(root)

    def cached_file_id(self, path: Path) -> FileId | None:
        return self.paths.get(Path(path))

    def add_path(self, path: Path) -> None:
        path = Path(path)
        is_recursive = next(
            (mode.is_recursive() for root, mode in self.roots if path.is_relative_to(root)),
            False,
        )
        for found in _walk(path, None if is_recursive else 1):
            try:
                self.paths[found] = get_file_id(found)
            except OSError:
                continue

    def remove_path(self, path: Path) -> None:
        path = Path(path)
        self.paths = {p: i for p, i in self.paths.items() if not p.is_relative_to(path)}

    def rescan(self) -> None:
        for root, _ in list(self.roots):
            self.add_path(root)


class NoCache(FileIdCache):
    """A cache that holds nothing, which turns off tracking by file id."""

    def cached_file_id(self, path: Path) -> FileId | None:
        return None

    def add_path(self, path: Path) -> None:
        pass

    def remove_path(self, path: Path) -> None:
        pass

    def rescan(self) -> None:
        pass