"""Tests for FilteredFileStore and FilteredFileHandle."""

from __future__ import annotations

import os

import pytest

from nodotfs.store import (
    FileHandle,
    FileStore,
    FilteredFileHandle,
    FilteredFileStore,
    HiddenPathError,
    PartialListingError,
)
from tests.fakes.fake_store import MemoryStore, entries


def _names(items):
    return [e.name for e in items]


@pytest.fixture
def inner() -> MemoryStore:
    return MemoryStore(
        {
            "/": entries(".git/", "a.txt", ".hidden", "b.txt"),
            "/a.txt": b"0123456789",
            "/docs": entries(".a", ".b", "c", ".d", "e", "f"),
            "/empty": [],
        }
    )


@pytest.mark.parametrize(
    "path",
    [".hidden/file.txt", "dir/.hidden", "/.env", "/.secret/key.txt", "/a/../b", "/docs/./c"],
)
def test_hidden_open_denied_without_touching_inner(inner: MemoryStore, path: str):
    store = FilteredFileStore(inner)
    with pytest.raises(HiddenPathError) as exc_info:
        store.open(path)
    assert isinstance(exc_info.value, PermissionError)
    assert exc_info.value.path == path
    assert inner.open_calls == 0


def test_visible_open_returns_filtered_handle(inner: MemoryStore):
    store = FilteredFileStore(inner)
    handle = store.open("/a.txt")
    assert isinstance(handle, FilteredFileHandle)
    assert inner.opened == ["/a.txt"]
    assert handle.inner is inner.handles[0]


@pytest.mark.parametrize(
    "error",
    [
        FileNotFoundError(2, "No such file or directory"),
        PermissionError(13, "Permission denied"),
        OSError(5, "Input/output error"),
    ],
)
def test_inner_errors_propagate_unchanged(error: OSError):
    store = FilteredFileStore(MemoryStore({}, errors={"/x": error}))
    with pytest.raises(type(error)) as exc_info:
        store.open("/x")
    assert exc_info.value is error


def test_missing_path_is_not_found(inner: MemoryStore):
    with pytest.raises(FileNotFoundError):
        FilteredFileStore(inner).open("/nope")


def test_read_seek_stat_pass_through(inner: MemoryStore):
    direct = inner.open("/a.txt")
    filtered = FilteredFileStore(inner).open("/a.txt")

    assert filtered.stat() == direct.stat()
    assert filtered.read(3) == direct.read(3) == b"012"
    assert filtered.seek(7) == direct.seek(7) == 7
    assert filtered.read() == direct.read() == b"789"
    assert filtered.seek(-2, os.SEEK_END) == direct.seek(-2, os.SEEK_END)
    assert filtered.read() == direct.read()


def test_listing_drops_hidden_entries_in_order(inner: MemoryStore):
    handle = FilteredFileStore(inner).open("/")
    assert _names(handle.list_entries(-1)) == ["a.txt", "b.txt"]


@pytest.mark.parametrize(
    "order",
    [
        ("b.txt", ".hidden", "a.txt", ".git"),
        (".git", ".hidden", "b.txt", "a.txt"),
    ],
)
def test_listing_preserves_underlying_order(order):
    store = FilteredFileStore(MemoryStore({"/": entries(*order)}))
    handle = store.open("/")
    assert _names(handle.list_entries(0)) == [n for n in order if not n.startswith(".")]


def test_limited_listing_fills_up_to_limit(inner: MemoryStore):
    handle = FilteredFileStore(inner).open("/docs")
    assert _names(handle.list_entries(2)) == ["c", "e"]
    assert _names(handle.list_entries(2)) == ["f"]
    assert handle.list_entries(2) == []


def test_limited_listing_never_over_reads(inner: MemoryStore):
    handle = FilteredFileStore(inner).open("/docs")
    handle.list_entries(2)
    # first request uses the caller's limit, later ones only ask for what is missing
    assert inner.handles[0].list_calls == [2, 2, 1]


def test_limited_listing_of_only_hidden_entries_is_exhausted():
    store = FilteredFileStore(MemoryStore({"/d": entries(".a", ".b", ".c")}))
    assert store.open("/d").list_entries(1) == []


def test_empty_directory(inner: MemoryStore):
    handle = FilteredFileStore(inner).open("/empty")
    assert handle.list_entries(-1) == []
    assert handle.list_entries(5) == []


def test_partial_listing_error_carries_filtered_entries():
    inner = MemoryStore(
        {"/d": entries(".a", "b", ".c", "d", "e")},
        fail_after={"/d": 4},
    )
    handle = FilteredFileStore(inner).open("/d")
    with pytest.raises(PartialListingError) as exc_info:
        handle.list_entries(-1)
    assert _names(exc_info.value.entries) == ["b", "d"]


def test_partial_listing_error_keeps_gathered_entries():
    inner = MemoryStore(
        {"/d": entries(".a", "b", ".c", "d", "e", "f")},
        fail_after={"/d": 4},
    )
    handle = FilteredFileStore(inner).open("/d")
    assert _names(handle.list_entries(1)) == ["b"]
    with pytest.raises(PartialListingError) as exc_info:
        handle.list_entries(3)
    assert _names(exc_info.value.entries) == ["d"]
    assert isinstance(exc_info.value.cause, OSError)


class _BrokenAfterFirstBatch:
    """Directory handle whose second ``list_entries`` call fails outright."""

    def __init__(self, first_batch):
        self._batches = [first_batch]

    def list_entries(self, limit: int = -1):
        if self._batches:
            return self._batches.pop()
        raise OSError(5, "Input/output error")


def test_plain_error_after_first_batch_keeps_gathered_entries():
    handle = FilteredFileHandle(_BrokenAfterFirstBatch(entries(".a", "b", ".c")))
    with pytest.raises(PartialListingError) as exc_info:
        handle.list_entries(3)
    assert _names(exc_info.value.entries) == ["b"]
    assert exc_info.value.cause.errno == 5


def test_plain_error_with_nothing_gathered_propagates_unchanged():
    handle = FilteredFileHandle(_BrokenAfterFirstBatch(entries(".a", ".b")))
    with pytest.raises(OSError) as exc_info:
        handle.list_entries(3)
    assert not isinstance(exc_info.value, PartialListingError)
    assert exc_info.value.errno == 5


def test_close_propagates(inner: MemoryStore):
    handle = FilteredFileStore(inner).open("/a.txt")
    assert not handle.closed
    handle.close()
    assert handle.closed
    assert inner.handles[0].closed


def test_context_manager_closes_on_error(inner: MemoryStore):
    with pytest.raises(RuntimeError):
        with FilteredFileStore(inner).open("/a.txt") as handle:
            raise RuntimeError("boom")
    assert handle.closed
    assert inner.handles[0].closed


def test_satisfies_store_protocols(inner: MemoryStore):
    store = FilteredFileStore(inner)
    assert isinstance(store, FileStore)
    assert isinstance(store.open("/a.txt"), FileHandle)
