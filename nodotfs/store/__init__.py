"""File store abstraction and its implementations."""

from .filtered import FilteredFileHandle, FilteredFileStore
from .local import LocalDirStore, LocalFileHandle
from .protocol import FileHandle, FileStore
from .types import DirEntry, HiddenPathError, PartialListingError

__all__ = [
    "DirEntry",
    "FileHandle",
    "FileStore",
    "FilteredFileHandle",
    "FilteredFileStore",
    "HiddenPathError",
    "LocalDirStore",
    "LocalFileHandle",
    "PartialListingError",
]
