"""nodotfs config defaults.

No side effects on import. Values can be overridden via NODOT_* env vars.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_PREFIX = "NODOT_"


def _env(name: str, default: str) -> str:
    if not name.startswith(_PREFIX):
        raise ValueError(f"Only {_PREFIX}* env vars are allowed, got: {name}")
    return os.getenv(name, default)


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name, str(default))
    return raw.lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = _env(name, str(default))
    try:
        return int(raw)
    except Exception:
        return default


def _env_optional(name: str) -> str | None:
    raw = _env(name, "")
    return raw or None


@dataclass(frozen=True)
class ServerDefaults:
    root_dir: str = _env("NODOT_DIR", ".")
    host: str = _env("NODOT_HOST", "0.0.0.0")
    port: int = _env_int("NODOT_PORT", 8080)
    redirect_url: str = _env("NODOT_REDIRECT_URL", "https://httpbin.org/get")
    # directory entries requested per list_entries call when rendering an index
    list_batch: int = _env_int("NODOT_LIST_BATCH", 100)
    chunk_size: int = _env_int("NODOT_CHUNK_SIZE", 64 * 1024)


@dataclass(frozen=True)
class LoggingDefaults:
    level: str = _env("NODOT_LOG_LEVEL", "info")
    log_dir: str | None = _env_optional("NODOT_LOG_DIR")
    console_events: bool = _env_bool("NODOT_LOG_EVENTS_CONSOLE", True)
    max_log_size_mb: int = _env_int("NODOT_LOG_MAX_SIZE_MB", 0)
    max_log_files: int = _env_int("NODOT_LOG_MAX_FILES", 5)


SERVER = ServerDefaults()
LOG = LoggingDefaults()
