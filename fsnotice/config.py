"""Watcher configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

__all__ = ["RecursiveMode", "Config"]


class RecursiveMode(Enum):
    """Whether sub-directories of a watched directory are watched as well."""

    RECURSIVE = "recursive"
    NON_RECURSIVE = "non-recursive"

    def is_recursive(self) -> bool:
        return self is RecursiveMode.RECURSIVE


@dataclass(frozen=True)
class Config:
    """Backend settings; ``poll_interval`` is in seconds."""

    poll_interval: float = 30.0
    compare_contents: bool = False

    def __post_init__(self) -> None:
        if self.poll_interval < 0:
            raise ValueError(f"poll interval must not be negative: {self.poll_interval}")

    def with_poll_interval(self, interval: float) -> Config:
        """Return a copy with a different interval between rescans."""
        return replace(self, poll_interval=interval)

    def with_compare_contents(self, compare_contents: bool) -> Config:
        """Return a copy that does or does not hash file contents on each poll."""
        return replace(self, compare_contents=compare_contents)