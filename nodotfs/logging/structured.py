"""JSON-lines event log for server lifecycle, denials and form submissions.

One event per line::

    {"ts": "2024-05-01T12:00:00.123Z", "level": "info", "component": "server",
     "run_id": "1a2b3c4d", "uptime": 0.42, "event": "form_submitted", ...}

Context keys are passed through DataRedactor before anything is written.
"""

from __future__ import annotations

import json
import sys
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, TextIO, Union

from .redaction import DataRedactor


def _iso_utc(ts: float) -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(ts)) + f".{int(ts * 1000) % 1000:03d}Z"


class StructuredLogger:
    """Write redacted events to stdout and/or a ``.jsonl`` file.

    Args:
        component: Name stamped on every event (e.g. 'server')
        run_id: Identifier shared by every event of one server process
        output_file: Path of the ``.jsonl`` file; parent directories are created
        enable_console: Echo each line to stdout
        redactor: Scrubber applied to event context
        max_log_size_mb: Rotate the file once it grows past this size (None = never)
        max_log_files: Rotated generations kept next to the live file
    """

    def __init__(
        self,
        component: str,
        run_id: Optional[str] = None,
        output_file: Optional[Union[str, Path]] = None,
        enable_console: bool = True,
        redactor: Optional[DataRedactor] = None,
        max_log_size_mb: Optional[int] = None,
        max_log_files: int = 5,
    ) -> None:
        self.component = component
        self.run_id = run_id or uuid.uuid4().hex[:8]
        self.redactor = redactor or DataRedactor()
        self.console_enabled = enable_console
        self.max_log_size_bytes = max_log_size_mb * 1024 * 1024 if max_log_size_mb else None
        self.max_log_files = max_log_files
        self._started = time.time()

        self.log_file_path = Path(output_file) if output_file else None
        self._fh: Optional[TextIO] = None
        if self.log_file_path is not None:
            self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = open(self.log_file_path, "a", encoding="utf-8")

    def _generation(self, index: int) -> Path:
        assert self.log_file_path is not None
        return self.log_file_path.with_suffix(f".{index}{self.log_file_path.suffix}")

    def _rotate(self) -> None:
        """Move ``name.jsonl`` to ``name.1.jsonl``, shifting older generations up."""
        if self._fh is None or not self.max_log_size_bytes:
            return
        if self._fh.tell() <= self.max_log_size_bytes:
            return
        self._fh.close()
        for index in range(self.max_log_files - 1, 0, -1):
            if self._generation(index).exists():
                self._generation(index).replace(self._generation(index + 1))
        self.log_file_path.replace(self._generation(1))
        self._fh = open(self.log_file_path, "a", encoding="utf-8")

    def _write_line(self, line: str) -> None:
        if self.console_enabled:
            print(line, file=sys.stdout, flush=True)
        if self._fh is not None:
            self._rotate()
            self._fh.write(line + "\n")
            self._fh.flush()

    def log(self, level: str, event: str, **context: Any) -> None:
        now = time.time()
        entry: Dict[str, Any] = {
            "ts": _iso_utc(now),
            "level": level,
            "component": self.component,
            "run_id": self.run_id,
            "uptime": round(now - self._started, 3),
            "event": event,
        }
        entry.update(self.redactor.redact_dict(context))
        self._write_line(json.dumps(entry, default=str, separators=(",", ":")))

    def info(self, event: str, **context: Any) -> None:
        self.log("info", event, **context)

    def warning(self, event: str, **context: Any) -> None:
        self.log("warning", event, **context)

    @property
    def closed(self) -> bool:
        return self._fh is None

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None


def create_logger(
    component: str,
    run_id: Optional[str] = None,
    log_dir: Optional[Union[str, Path]] = None,
    **kwargs: Any,
) -> StructuredLogger:
    """Build a StructuredLogger from ``nodotfs.config.LOG``.

    The file is ``<log_dir>/<component>_<run_id or 'default'>.jsonl``.
    ``log_dir`` falls back to NODOT_LOG_DIR; with neither set, events only
    go to the console.
    """
    from nodotfs.config import LOG

    if log_dir is None:
        log_dir = LOG.log_dir
    kwargs.setdefault("enable_console", LOG.console_events)
    kwargs.setdefault("max_log_size_mb", LOG.max_log_size_mb or None)
    kwargs.setdefault("max_log_files", LOG.max_log_files)

    output_file = Path(log_dir) / f"{component}_{run_id or 'default'}.jsonl" if log_dir else None
    return StructuredLogger(component=component, run_id=run_id, output_file=output_file, **kwargs)
