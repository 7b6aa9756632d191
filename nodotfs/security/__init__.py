"""Access policy helpers for nodotfs."""

from .hidden import is_hidden, is_hidden_name
from .path_sanitizer import PathInputError, clean_path, to_relative_parts

__all__ = ["is_hidden", "is_hidden_name", "PathInputError", "clean_path", "to_relative_parts"]
