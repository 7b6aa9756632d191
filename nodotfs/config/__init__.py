"""nodotfs centralized configuration for runtime settings.

All settings are backed by environment variables following the NODOT_*
naming convention and are read once, when this package is first imported.

Example:
    >>> from nodotfs.config import SERVER
    >>> SERVER.port
    8080

Environment Variables:
    NODOT_DIR: Directory served when --dir is not given (default: .)
    NODOT_HOST: Interface to bind (default: 0.0.0.0)
    NODOT_PORT: TCP port to listen on (default: 8080)
    NODOT_REDIRECT_URL: Target of the /post redirect (default: https://httpbin.org/get)
    NODOT_LIST_BATCH: Entries per listing request, <= 0 reads all at once (default: 100)
    NODOT_CHUNK_SIZE: Bytes per chunk when streaming files (default: 65536)
    NODOT_LOG_LEVEL: stdlib logging level name (default: info)
    NODOT_LOG_DIR: Directory for JSON-lines event logs (default: unset, console only)
    NODOT_LOG_EVENTS_CONSOLE: Echo JSON events to stdout (default: true)
    NODOT_LOG_MAX_SIZE_MB: Rotate event logs past this size, 0 disables (default: 0)
    NODOT_LOG_MAX_FILES: Rotated event logs to keep (default: 5)
"""

from __future__ import annotations

from nodotfs.config.defaults import LOG, SERVER, LoggingDefaults, ServerDefaults

__all__ = [
    "LOG",
    "SERVER",
    "LoggingDefaults",
    "ServerDefaults",
]
