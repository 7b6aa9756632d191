"""FileStore decorator that hides dot files and dot directories.

Opening through a FilteredFileStore always yields a FilteredFileHandle, so the
two wrappers live together here:

- ``FilteredFileStore.open`` refuses any path with a segment starting with
  ``.`` before the wrapped store is consulted.
- ``FilteredFileHandle.list_entries`` drops entries whose name starts with
  ``.``. With a positive limit it keeps asking the wrapped handle for the
  entries still missing, so a call only comes back short once the directory
  is exhausted. When a later batch fails, the entries already gathered
  travel with the error as a ``PartialListingError``.

Everything else passes straight through to the wrapped objects.
"""

from __future__ import annotations

from typing import Any, List

from nodotfs.security.hidden import is_hidden, is_hidden_name

from .protocol import FileHandle, FileStore
from .types import DirEntry, HiddenPathError, PartialListingError


def _visible(entries: List[DirEntry]) -> List[DirEntry]:
    return [entry for entry in entries if not is_hidden_name(entry.name)]


class FilteredFileHandle:
    """Wrap an open handle so that directory listings skip hidden entries."""

    def __init__(self, inner: FileHandle) -> None:
        self._inner = inner

    @property
    def inner(self) -> FileHandle:
        return self._inner

    @property
    def closed(self) -> bool:
        return self._inner.closed

    def read(self, size: int = -1) -> bytes:
        return self._inner.read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._inner.seek(offset, whence)

    def stat(self) -> DirEntry:
        return self._inner.stat()

    def list_entries(self, limit: int = -1) -> List[DirEntry]:
        if limit <= 0:
            try:
                return _visible(self._inner.list_entries(limit))
            except PartialListingError as exc:
                exc.entries = _visible(exc.entries)
                raise

        gathered: List[DirEntry] = []
        wanted = limit
        while wanted > 0:
            try:
                batch = self._inner.list_entries(wanted)
            except PartialListingError as exc:
                exc.entries = gathered + _visible(exc.entries)
                raise
            except OSError as exc:
                # earlier batches are consumed; keep them with the error
                if gathered:
                    raise PartialListingError(gathered, exc) from exc
                raise
            if not batch:
                break
            gathered.extend(_visible(batch))
            wanted = limit - len(gathered)
        return gathered

    def close(self) -> None:
        self._inner.close()

    def __enter__(self) -> "FilteredFileHandle":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"FilteredFileHandle({self._inner!r})"


class FilteredFileStore:
    """Wrap a FileStore so hidden paths can neither be opened nor listed.

    Args:
        inner: Store that performs the actual I/O. Its errors propagate
            unchanged; the only error added here is ``HiddenPathError``.
    """

    def __init__(self, inner: FileStore) -> None:
        self._inner = inner

    @property
    def inner(self) -> FileStore:
        return self._inner

    def open(self, path: str) -> FilteredFileHandle:
        if is_hidden(path):
            raise HiddenPathError(path)
        return FilteredFileHandle(self._inner.open(path))


__all__ = ["FilteredFileHandle", "FilteredFileStore"]
