"""FastAPI application: dot-file-hiding static server plus the /post redirect."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from fastapi import FastAPI, Request, Response
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from nodotfs import __version__
from nodotfs.api.fileserver import FileServer
from nodotfs.config import SERVER
from nodotfs.logging import StructuredLogger, create_logger
from nodotfs.store import FilteredFileStore, LocalDirStore

logger = logging.getLogger(__name__)

_FORM_METHODS = {"POST", "PUT", "PATCH"}
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def collect_form(request: Request) -> Dict[str, List[str]]:
    """Merge body form fields and query parameters, body values first.

    Uploaded files are recorded by filename only. A body that cannot be
    parsed contributes nothing; the query string is still collected.
    """
    form: Dict[str, List[str]] = {}
    if request.method in _FORM_METHODS:
        fields: List[Tuple[str, str]] = []
        try:
            async with request.form() as data:
                for key, value in data.multi_items():
                    if not isinstance(value, str):
                        value = value.filename or ""
                    fields.append((key, value))
        except (HTTPException, MultiPartException, ValueError) as exc:
            logger.debug("ignoring unparseable form body: %s", exc)
            fields = []
        for key, value in fields:
            form.setdefault(key, []).append(value)
    for key, value in request.query_params.multi_items():
        form.setdefault(key, []).append(value)
    return form


def create_app(
    root: Optional[Union[str, Path]] = None,
    *,
    redirect_url: Optional[str] = None,
    events: Optional[StructuredLogger] = None,
) -> FastAPI:
    """Build the application serving ``root`` with dot files hidden.

    Args:
        root: Directory to serve (defaults to NODOT_DIR)
        redirect_url: Target of the ``/post`` redirect (defaults to NODOT_REDIRECT_URL)
        events: Structured event logger (defaults to ``create_logger("server")``)
    """
    root_path = Path(root if root is not None else SERVER.root_dir).expanduser().resolve()
    target = redirect_url or SERVER.redirect_url
    events = events or create_logger("server")

    store = FilteredFileStore(LocalDirStore(root_path))
    files = FileServer(
        store,
        list_batch=SERVER.list_batch,
        chunk_size=SERVER.chunk_size,
        events=events,
    )

    # No docs/openapi routes: every path below / belongs to the served tree
    app = FastAPI(
        title="nodotfs",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.root = root_path
    app.state.store = store
    app.state.events = events

    @app.api_route("/post", methods=_ALL_METHODS)
    async def post_redirect(request: Request) -> RedirectResponse:
        form = await collect_form(request)
        events.info("form_submitted", method=request.method, form=form)
        return RedirectResponse(target, status_code=303)

    # Sync route: FastAPI runs it in the threadpool, one request per worker
    @app.api_route("/{full_path:path}", methods=["GET", "HEAD"])
    def serve_path(request: Request, full_path: str) -> Response:  # noqa: ARG001
        return files.serve(request)

    logger.debug("app created for %s", root_path)
    return app


__all__ = ["create_app", "collect_form"]
