"""File identifiers that are unique on a device."""

from __future__ import annotations

import os
from dataclasses import dataclass
from os import PathLike
from typing import Union

__all__ = ["FileId", "get_file_id"]

PathInput = Union[str, "PathLike[str]"]


@dataclass(frozen=True, order=True)
class FileId:
    """A device id paired with an inode number or file index.

    Together they identify a file on a machine at a given time. The
    filesystem may reuse ids later.
    """

    device: int
    file: int


def get_file_id(path: PathInput) -> FileId:
    """Return the id of the file at ``path``, following symbolic links.

    Raises ``OSError`` if the file cannot be inspected.
    """
    info = os.stat(path)
    return FileId(device=info.st_dev, file=info.st_ino)