"""File store types and errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True, slots=True)
class DirEntry:
    """Name plus metadata for one file or directory, as seen by a store."""

    name: str
    size: int
    mtime: float
    is_dir: bool
    mode: int = 0


class HiddenPathError(PermissionError):
    """Raised when a path with a hidden segment is opened through a filtered store."""

    def __init__(self, path: str) -> None:
        super().__init__(f"access to hidden path denied: {path}")
        self.path = path


class PartialListingError(OSError):
    """Raised when a directory listing fails part way through.

    ``entries`` holds what was read before the failure; ``cause`` is the
    underlying error.
    """

    def __init__(self, entries: Iterable[DirEntry], cause: BaseException) -> None:
        super().__init__(f"directory listing interrupted: {cause}")
        self.entries: List[DirEntry] = list(entries)
        self.cause = cause
