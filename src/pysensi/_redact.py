"""Helpers for safe debug logging.

Authorize requests carry the account password, realtime requests carry the
connection and groups tokens, and every response may set affinity or
``.ASPXAUTH`` cookies.  Values under those keys are masked before they
reach DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

REDACTED = "<redacted>"

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "connectionid",
        "authorization",
        "cookie",
        "set-cookie",
    }
)


def _is_sensitive(key: str) -> bool:
    # connectionToken, groupsToken, ConnectionToken, ...
    lowered = key.lower()
    return lowered in _SENSITIVE_KEYS or lowered.endswith("token")


def _truncate(text: str, max_string: int) -> str:
    if len(text) <= max_string:
        return text
    return f"{text[:max_string]}…<truncated>"


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* with secrets masked and long strings cut."""
    if _depth > 20:
        return "<max-depth>"
    if isinstance(value, str):
        return _truncate(value, max_string)
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            name = str(key)
            if _is_sensitive(name):
                redacted[name] = REDACTED
            else:
                redacted[name] = redact_for_log(item, max_string=max_string, _depth=_depth + 1)
        return redacted
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return repr(value)


def redact_cookies(raw_cookies: Iterable[str]) -> list[str]:
    """Keep cookie names from ``Set-Cookie``/``Cookie`` values, mask the values."""
    redacted: list[str] = []
    for raw in raw_cookies:
        for part in raw.split(";"):
            name, sep, _ = part.strip().partition("=")
            if sep and name.lower() not in {"path", "domain", "expires", "max-age", "samesite"}:
                redacted.append(f"{name}={REDACTED}")
    return redacted
