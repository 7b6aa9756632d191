"""Sensitive data redaction for structured event logs."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Union

REDACTED = "[REDACTED]"


class DataRedactor:
    """Redact sensitive information from log data.

    Form submissions are logged verbatim apart from what this class scrubs:
    whole fields whose name looks like a credential, and credential-looking
    or home-directory fragments inside free text.
    """

    def __init__(self, custom_patterns: Optional[List[Pattern[str]]] = None) -> None:
        self.patterns: List[Pattern[str]] = [
            # key=value style credentials inside free text
            re.compile(
                r'(token|secret|password|passwd|api_key|apikey|credential)["\']?\s*[=:]\s*["\']?[^\s&"\']{4,}["\']?',
                re.IGNORECASE,
            ),
            # bearer tokens
            re.compile(r"bearer\s+[A-Za-z0-9._~+/=-]{8,}", re.IGNORECASE),
            # user home directories
            re.compile(r"/home/[^/\s]+"),
            re.compile(r"/Users/[^/\s]+"),
            re.compile(r"C:\\Users\\[^\\\s]+"),
        ]
        if custom_patterns:
            self.patterns.extend(custom_patterns)

        # Field names redacted entirely (case-insensitive)
        self.sensitive_fields = {
            "password",
            "passwd",
            "pass",
            "token",
            "secret",
            "auth",
            "authorization",
            "credential",
            "credentials",
            "api_key",
            "apikey",
            "access_token",
            "refresh_token",
            "csrf_token",
            "cookie",
            "session",
        }

    def redact_string(self, text: str) -> str:
        """Replace every pattern match in ``text`` with the redaction marker."""
        result = text
        for pattern in self.patterns:
            result = pattern.sub(REDACTED, result)
        return result

    def redact_path(self, path: Union[str, Path]) -> str:
        """Keep only the final component of a host path."""
        return f"{REDACTED}/{Path(str(path)).name}"

    def _redact_value(self, value: Any) -> Any:
        if isinstance(value, dict):
            return self.redact_dict(value)
        if isinstance(value, (list, tuple)):
            return [self._redact_value(item) for item in value]
        if isinstance(value, str):
            return self.redact_string(value)
        if isinstance(value, Path):
            return self.redact_path(value)
        return value

    def redact_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively redact sensitive data from a dictionary."""
        result: Dict[str, Any] = {}
        for key, value in data.items():
            if str(key).lower() in self.sensitive_fields:
                result[key] = REDACTED
                continue
            result[key] = self._redact_value(value)
        return result

    def add_pattern(self, pattern: Union[str, Pattern[str]]) -> None:
        """Add a custom redaction pattern."""
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        self.patterns.append(pattern)

    def add_sensitive_field(self, field_name: str) -> None:
        """Add a field name to redact entirely (case-insensitive)."""
        self.sensitive_fields.add(field_name.lower())
