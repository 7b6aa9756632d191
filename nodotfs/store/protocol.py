"""File store protocols and interfaces."""

from __future__ import annotations

from typing import Any, List, Protocol, runtime_checkable

from .types import DirEntry


@runtime_checkable
class FileHandle(Protocol):
    """An open file or directory obtained from a FileStore."""

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        ...

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (all remaining when negative)."""
        ...

    def seek(self, offset: int, whence: int = 0) -> int:
        """Move the read position and return the new absolute offset."""
        ...

    def stat(self) -> DirEntry:
        """Describe the opened file or directory."""
        ...

    def list_entries(self, limit: int = -1) -> List[DirEntry]:
        """Return the next directory entries.

        With ``limit > 0`` at most ``limit`` entries are returned and an empty
        list means the directory is exhausted. With ``limit <= 0`` all
        remaining entries are returned at once. A failure part way through
        raises ``PartialListingError`` carrying the entries read so far.
        """
        ...

    def close(self) -> None:
        """Release the underlying descriptor. Safe to call more than once."""
        ...

    def __enter__(self) -> "FileHandle":
        ...

    def __exit__(self, *exc_info: Any) -> None:
        ...


@runtime_checkable
class FileStore(Protocol):
    """Resolves slash-delimited logical paths to open handles."""

    def open(self, path: str) -> FileHandle:
        """Open ``path``.

        Raises:
            FileNotFoundError: nothing exists at ``path``
            PermissionError: access is not allowed
            OSError: any other failure of the backing storage
        """
        ...
