"""Static file serving over an abstract FileStore.

Maps request URL paths to logical store paths and answers with file bodies,
``index.html`` documents or generated directory listings. All I/O goes
through the store handed in, so a FilteredFileStore's hiding rules apply to
files, index documents and listings alike.

Error mapping:
- ``PermissionError`` (including hidden paths): 403
- ``FileNotFoundError``: 404
- malformed paths (``PathInputError``): 400
- any other ``OSError``: 500
"""

from __future__ import annotations

import html
import logging
import mimetypes
import posixpath
import re
from email.utils import formatdate
from typing import Dict, Iterator, List, Optional, Tuple
from urllib.parse import quote

from fastapi import HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from nodotfs.logging import StructuredLogger
from nodotfs.security.path_sanitizer import PathInputError, clean_path
from nodotfs.store.protocol import FileHandle, FileStore
from nodotfs.store.types import DirEntry, HiddenPathError

logger = logging.getLogger(__name__)

INDEX_PAGE = "index.html"
_RANGE_RE = re.compile(r"^bytes=(\d*)-(\d*)$")


class RangeNotSatisfiable(ValueError):
    """Raised when a Range header cannot be served for the file size."""


def parse_range(header: Optional[str], size: int) -> Optional[Tuple[int, int]]:
    """Parse a single ``bytes=`` range into inclusive ``(start, end)``.

    Returns None when the whole body should be sent: no header, a unit other
    than bytes, or a multi-range request.

    Raises:
        RangeNotSatisfiable: malformed header or a range outside the file
    """
    if not header:
        return None
    header = header.strip()
    if not header.startswith("bytes=") or "," in header:
        return None

    match = _RANGE_RE.match(header.replace(" ", ""))
    if not match:
        raise RangeNotSatisfiable(header)
    first, last = match.groups()
    if size == 0:
        raise RangeNotSatisfiable(header)

    if not first:
        # suffix form: the final N bytes
        if not last or int(last) == 0:
            raise RangeNotSatisfiable(header)
        length = min(int(last), size)
        return size - length, size - 1

    start = int(first)
    if start >= size:
        raise RangeNotSatisfiable(header)
    end = size - 1 if not last else min(int(last), size - 1)
    if end < start:
        raise RangeNotSatisfiable(header)
    return start, end


def _url_base(url_path: str) -> str:
    """Last element of the request path as the client sent it, trailing slashes ignored."""
    trimmed = url_path.rstrip("/")
    if not trimmed:
        return "/"
    return trimmed.rsplit("/", 1)[-1]


def _local_redirect(request: Request, target: str) -> RedirectResponse:
    query = request.url.query
    if query:
        target = f"{target}?{query}"
    return RedirectResponse(target, status_code=301)


def render_listing(entries: List[DirEntry]) -> str:
    """Render entries as a minimal HTML index, sorted by name."""
    lines = [
        "<!doctype html>",
        '<meta name="viewport" content="width=device-width">',
        "<pre>",
    ]
    for entry in sorted(entries, key=lambda e: e.name):
        name = entry.name + "/" if entry.is_dir else entry.name
        lines.append(f'<a href="{html.escape(quote(name))}">{html.escape(name)}</a>')
    lines.append("</pre>")
    return "\n".join(lines) + "\n"


class FileServer:
    """Serve GET and HEAD requests from a FileStore.

    Args:
        store: Store used for every open; wrap it in FilteredFileStore to hide
            dot files.
        list_batch: Entries requested per ``list_entries`` call while building
            a listing. Values <= 0 read the whole directory in one call.
        chunk_size: Bytes read per chunk when streaming a file body.
        events: Optional structured logger for access-denied events.
    """

    def __init__(
        self,
        store: FileStore,
        *,
        list_batch: int = 100,
        chunk_size: int = 64 * 1024,
        events: Optional[StructuredLogger] = None,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._store = store
        self._list_batch = list_batch
        self._chunk_size = chunk_size
        self._events = events

    def _open(self, name: str) -> FileHandle:
        try:
            return self._store.open(name)
        except HiddenPathError as exc:
            if self._events is not None:
                self._events.info("hidden_path_denied", path=name)
            raise HTTPException(status_code=403, detail="Forbidden") from exc
        except PermissionError as exc:
            raise HTTPException(status_code=403, detail="Forbidden") from exc
        except FileNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Not found") from exc
        except OSError as exc:
            logger.exception("open failed for %s", name)
            raise HTTPException(status_code=500, detail="Internal Server Error") from exc

    def _read_dir(self, handle: FileHandle) -> List[DirEntry]:
        if self._list_batch <= 0:
            return handle.list_entries(-1)
        entries: List[DirEntry] = []
        while True:
            batch = handle.list_entries(self._list_batch)
            if not batch:
                return entries
            entries.extend(batch)

    def _open_index(self, name: str) -> Optional[Tuple[FileHandle, DirEntry]]:
        """Open ``index.html`` inside directory ``name`` if it is a regular file."""
        try:
            index = self._store.open(posixpath.join(name, INDEX_PAGE))
        except OSError:
            return None
        try:
            info = index.stat()
        except OSError:
            index.close()
            return None
        if info.is_dir:
            index.close()
            return None
        return index, info

    def serve(self, request: Request) -> Response:
        url_path = request.url.path
        if not url_path.startswith("/"):
            url_path = "/" + url_path

        try:
            name = clean_path(url_path)
        except PathInputError as exc:
            raise HTTPException(status_code=400, detail="Bad request") from exc

        handle = self._open(name)
        streaming = False
        try:
            try:
                info = handle.stat()
            except OSError as exc:
                logger.exception("stat failed for %s", name)
                raise HTTPException(status_code=500, detail="Internal Server Error") from exc

            if info.is_dir:
                if not url_path.endswith("/"):
                    return _local_redirect(request, _url_base(url_path) + "/")
                found = self._open_index(name)
                if found is None:
                    return self._listing(name, handle)
                # serve the index document in place of the directory
                handle.close()
                handle, info = found
                name = posixpath.join(name, INDEX_PAGE)
            elif url_path.endswith("/"):
                return _local_redirect(request, "../" + _url_base(url_path))

            response = self._content(request, name, handle, info)
            streaming = isinstance(response, StreamingResponse)
            return response
        finally:
            if not streaming:
                handle.close()

    def _listing(self, name: str, handle: FileHandle) -> HTMLResponse:
        try:
            entries = self._read_dir(handle)
        except OSError as exc:
            logger.exception("listing failed for %s", name)
            raise HTTPException(status_code=500, detail="Error reading directory") from exc
        return HTMLResponse(render_listing(entries))

    def _content(self, request: Request, name: str, handle: FileHandle, info: DirEntry) -> Response:
        media_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        size = info.size
        headers: Dict[str, str] = {
            "accept-ranges": "bytes",
            "last-modified": formatdate(info.mtime, usegmt=True),
        }

        try:
            byte_range = parse_range(request.headers.get("range"), size)
        except RangeNotSatisfiable:
            headers["content-range"] = f"bytes */{size}"
            return Response(status_code=416, headers=headers)

        status_code = 200
        start, end = 0, size - 1
        if byte_range is not None:
            start, end = byte_range
            status_code = 206
            headers["content-range"] = f"bytes {start}-{end}/{size}"
        length = end - start + 1
        headers["content-length"] = str(length)

        if request.method == "HEAD":
            return Response(status_code=status_code, headers=headers, media_type=media_type)

        if start:
            handle.seek(start)
        return StreamingResponse(
            self._iter_body(handle, length),
            status_code=status_code,
            headers=headers,
            media_type=media_type,
            # the generator may never finish if the client goes away
            background=BackgroundTask(handle.close),
        )

    def _iter_body(self, handle: FileHandle, remaining: int) -> Iterator[bytes]:
        try:
            while remaining > 0:
                chunk = handle.read(min(self._chunk_size, remaining))
                if not chunk:
                    break
                remaining -= len(chunk)
                yield chunk
        finally:
            handle.close()


__all__ = ["FileServer", "RangeNotSatisfiable", "parse_range", "render_listing"]
