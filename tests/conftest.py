# tests/conftest.py
# Offline fixtures: served directory trees, captured event logs and app clients.

from __future__ import annotations

import socket
from pathlib import Path
from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

from nodotfs.api.server import create_app
from tests.fakes.fake_events import CapturedEvents


def _write_tree(root: Path, files: Dict[str, str]) -> Path:
    for rel, content in files.items():
        target = root / rel
        if rel.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def forbid_network(monkeypatch):
    real_create_connection = socket.create_connection

    def guarded(address, *args, **kwargs):
        host = address[0] if isinstance(address, tuple) else address
        if host not in {"127.0.0.1", "::1", "localhost"}:
            raise RuntimeError(f"Blocked outbound connection to {host}")
        return real_create_connection(address, *args, **kwargs)

    monkeypatch.setattr(socket, "create_connection", guarded, raising=True)


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[str, Dict[str, str]], Path]:
    """Create ``tmp_path/<name>`` populated from ``{relative path: text}``.

    Keys ending in ``/`` create empty directories.
    """

    def _make(name: str, files: Dict[str, str]) -> Path:
        root = tmp_path / name
        root.mkdir()
        return _write_tree(root, files)

    return _make


@pytest.fixture
def site_root(make_tree) -> Path:
    """The documented scenario: an index page, a dot file and a dot directory."""
    return make_tree(
        "site",
        {
            "index.html": "<h1>hello</h1>\n",
            ".env": "SECRET=1\n",
            ".secret/key.txt": "hunter2\n",
            "docs/a.txt": "alpha\n",
            "docs/.hidden": "nope\n",
            "docs/sub/b.txt": "beta\n",
            "docs/.git/": "",
        },
    )


@pytest.fixture
def events() -> CapturedEvents:
    return CapturedEvents()


@pytest.fixture
def client(site_root: Path, events: CapturedEvents):
    app = create_app(site_root, events=events)
    with TestClient(app) as c:
        yield c
