"""FileStore backed by a directory on the local disk.

Logical paths are cleaned lexically before being joined under the root, so
``..`` segments can never climb out of it. Symbolic links are followed as the
OS follows them.
"""

from __future__ import annotations

import errno
import os
import stat as _stat
from pathlib import Path
from typing import Any, BinaryIO, Iterator, List, Optional, Union

from nodotfs.security.path_sanitizer import to_relative_parts

from .types import DirEntry, PartialListingError


def _entry_from_stat(name: str, st: os.stat_result) -> DirEntry:
    return DirEntry(
        name=name,
        size=st.st_size,
        mtime=st.st_mtime,
        is_dir=_stat.S_ISDIR(st.st_mode),
        mode=st.st_mode,
    )


class LocalFileHandle:
    """Open file or directory under a LocalDirStore.

    Files hold a binary file object; directories hold a ``scandir`` iterator
    that is consumed by successive ``list_entries`` calls.
    """

    def __init__(
        self,
        path: Path,
        name: str,
        *,
        fileobj: Optional[BinaryIO] = None,
        dir_iter: Optional[Iterator[os.DirEntry]] = None,
    ) -> None:
        self._path = path
        self._name = name
        self._fileobj = fileobj
        self._dir_iter = dir_iter
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_dir(self) -> bool:
        return self._dir_iter is not None

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed handle")

    def _file(self) -> BinaryIO:
        self._check_open()
        if self._fileobj is None:
            raise IsADirectoryError(f"is a directory: {self._name}")
        return self._fileobj

    def read(self, size: int = -1) -> bytes:
        return self._file().read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._file().seek(offset, whence)

    def stat(self) -> DirEntry:
        self._check_open()
        if self._fileobj is not None:
            st = os.fstat(self._fileobj.fileno())
        else:
            st = os.stat(self._path)
        return _entry_from_stat(self._name, st)

    def list_entries(self, limit: int = -1) -> List[DirEntry]:
        self._check_open()
        if self._dir_iter is None:
            raise NotADirectoryError(f"not a directory: {self._name}")

        entries: List[DirEntry] = []
        try:
            for item in self._dir_iter:
                try:
                    entries.append(_entry_from_stat(item.name, item.stat()))
                except FileNotFoundError:
                    # Removed since the directory was read, or a dangling symlink
                    continue
                if 0 < limit <= len(entries):
                    break
        except OSError as exc:
            raise PartialListingError(entries, exc) from exc
        return entries

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._fileobj is not None:
            self._fileobj.close()
        if self._dir_iter is not None:
            self._dir_iter.close()  # type: ignore[attr-defined]

    def __enter__(self) -> "LocalFileHandle":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        state = "closed" if self._closed else "open"
        return f"LocalFileHandle({self._name!r}, {state})"


class LocalDirStore:
    """Serve a directory tree rooted at ``root``.

    Args:
        root: Directory that logical path ``/`` maps to. It is not required to
            exist yet; opens simply fail with ``FileNotFoundError`` until it does.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self._root = Path(root).expanduser().resolve(strict=False)

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> Path:
        """Map a logical path to its location on disk without touching it."""
        parts = to_relative_parts(path)
        return self._root.joinpath(*parts)

    def open(self, path: str) -> LocalFileHandle:
        target = self.resolve(path)
        name = target.name if target != self._root else "/"
        try:
            st = os.stat(target)
            if _stat.S_ISDIR(st.st_mode):
                return LocalFileHandle(target, name, dir_iter=os.scandir(target))
            return LocalFileHandle(target, name, fileobj=open(target, "rb"))
        except NotADirectoryError as exc:
            # A file used as a directory component means the path does not exist
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path) from exc


__all__ = ["LocalDirStore", "LocalFileHandle"]
