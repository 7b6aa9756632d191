"""Pure string normalization for logical store paths.

No filesystem I/O is performed by any function in this module.

Key functions:
- clean_path: Lexically clean a slash-delimited path into an absolute form
- to_relative_parts: Split a cleaned path into components for joining under a root
"""

from __future__ import annotations

import posixpath
import re
from typing import List


class PathInputError(ValueError):
    """Raised when path input is malformed or contains invalid characters."""


def clean_path(raw: str) -> str:
    """Return the shortest absolute slash path equivalent to ``raw``.

    Args:
        raw: Logical path, with or without a leading slash

    Returns:
        Cleaned path that always starts with ``/`` and never climbs above it

    Raises:
        PathInputError: If the path is not a string or holds control characters

    Process:
        1. Reject NUL and other C0 control characters
        2. Anchor at ``/`` (leading slashes collapse into one)
        3. Collapse doubled separators, ``.`` and ``..`` lexically
    """
    if not isinstance(raw, str):
        raise PathInputError("path must be a string")

    if "\x00" in raw:
        raise PathInputError("NUL byte in path")

    if re.search(r"[\x01-\x1F\x7F]", raw):
        raise PathInputError("control characters not permitted in path")

    # posixpath keeps a leading "//" as is, so anchor on exactly one slash
    return posixpath.normpath("/" + raw.lstrip("/"))


def to_relative_parts(raw: str) -> List[str]:
    """Clean ``raw`` and return its components, root excluded."""
    cleaned = clean_path(raw)
    return [part for part in cleaned.split("/") if part]


__all__ = ["PathInputError", "clean_path", "to_relative_parts"]
