"""Hidden-name detection for slash-delimited logical paths.

A segment is hidden when it starts with a period. Paths handed to the file
stores always use ``/`` as separator, whatever the host OS uses.
"""

from __future__ import annotations


def is_hidden_name(name: str) -> bool:
    """Return True if a single entry name is hidden."""
    return name.startswith(".")


def is_hidden(path: str) -> bool:
    """Return True if any ``/``-delimited segment of ``path`` is hidden.

    Empty segments (leading, trailing or doubled slashes) are never hidden.
    ``.`` and ``..`` segments are.
    """
    for segment in path.split("/"):
        if is_hidden_name(segment):
            return True
    return False


__all__ = ["is_hidden", "is_hidden_name"]
