"""
core/loggable.py -- Credential-free views of request data for logging.

Route handlers never pass a raw request body to a logger. They build a
LoggableRequest instead; the only way to construct one from a body is
LoggableRequest.from_body(), which drops credential fields before anything is
stored on the instance. A password therefore cannot reach a log record even
if a handler logs the view at DEBUG level or an exception formatter reprs it.

Non-credential values are truncated so one huge description field cannot
flood the log.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

CREDENTIAL_FIELDS = frozenset({"password", "passwordHash", "password_hash", "token", "access_token"})

_MAX_VALUE_CHARS = 64


def _render(value: Any) -> str:
    text = repr(value)
    if len(text) > _MAX_VALUE_CHARS:
        return text[: _MAX_VALUE_CHARS - 3] + "..."
    return text


@dataclass(frozen=True)
class LoggableRequest:
    """Field-filtered, immutable view of a request body.

    fields     -- (name, rendered value) pairs for non-credential fields
    redacted   -- names of credential fields that were present (values dropped)
    """

    fields: tuple[tuple[str, str], ...] = ()
    redacted: tuple[str, ...] = ()

    @classmethod
    def from_body(cls, body: Mapping[str, Any] | None) -> "LoggableRequest":
        if not body:
            return cls()
        fields = []
        redacted = []
        for name in sorted(body):
            if name in CREDENTIAL_FIELDS:
                redacted.append(name)
            else:
                fields.append((name, _render(body[name])))
        return cls(fields=tuple(fields), redacted=tuple(redacted))

    def __str__(self) -> str:
        parts = [f"{name}={value}" for name, value in self.fields]
        parts.extend(f"{name}=[redacted]" for name in self.redacted)
        return "{" + ", ".join(parts) + "}"
