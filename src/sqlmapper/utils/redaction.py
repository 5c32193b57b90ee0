"""
Masking of credentials in DSNs and in the statement parameters that reach
the logs.

Keys are matched after dropping everything but letters and digits, so
``api-key``, ``API_KEY`` and ``apikey`` are treated alike. Values are only
masked when they look like they embed a credential (``"token=..."``,
``"Bearer ..."``); ordinary column values pass through untouched.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

REDACTED_VALUE = "***"

_SENSITIVE_KEYS = frozenset(
    {
        "password",
        "passwd",
        "pwd",
        "secret",
        "token",
        "apikey",
        "accesskey",
        "privatekey",
        "sslkey",
        "sslcert",
        "sslrootcert",
    }
)

_SENSITIVE_VALUE_RE = re.compile(r"password|passwd|secret|token|api_?key|private_?key|bearer|authorization", re.I)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def is_sensitive_key(key: str) -> bool:
    compact = _NON_ALNUM_RE.sub("", key.lower())
    return any(token in compact for token in _SENSITIVE_KEYS)


def is_sensitive_value(value: str) -> bool:
    return _SENSITIVE_VALUE_RE.search(value) is not None


def redact_query_params(query: Mapping[str, str]) -> dict[str, str]:
    return {key: REDACTED_VALUE if is_sensitive_key(key) else value for key, value in query.items()}


def redact_value(value: Any, *, key: str | None = None) -> Any:
    if key is not None and is_sensitive_key(key):
        return REDACTED_VALUE
    if isinstance(value, Mapping):
        return {k: redact_value(v, key=str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(redact_value(item) for item in value)
    if isinstance(value, (bytes, bytearray)):
        text = bytes(value).decode("utf-8", errors="ignore")
        return REDACTED_VALUE if is_sensitive_value(text) else value
    if isinstance(value, str) and is_sensitive_value(value):
        return REDACTED_VALUE
    return value


def redact_params(params: Iterable[Any]) -> list[Any]:
    """
    Copy of positional statement parameters, safe to attach to log records.
    """
    return [redact_value(value) for value in params]
