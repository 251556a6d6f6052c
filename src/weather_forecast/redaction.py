"""Helpers for redacting API keys and credentials from log output."""

from __future__ import annotations

import re

REDACTED = "[REDACTED]"

# WeatherAPI.com takes its key as a `key=` query parameter, which ends up in
# httpx error messages and request URLs.
_QUERY_KEY_RE = re.compile(r"(?i)([?&](?:key|api[_-]?key|token)=)[^&\s'\"]+")
_REDIS_PASSWORD_RE = re.compile(r"(?i)(rediss?://[^:/@\s]*:)[^@\s]+(@)")
_KEY_VALUE_SECRET_RE = re.compile(
    r"""(?ix)
    \b
    (
      authorization|
      token|
      secret|
      password|
      api[_-]?key
    )
    \s*[:=]\s*
    ([^\s,;&]+)
    """
)


def sanitize_text(text: str) -> str:
    """Redact sensitive content embedded in plain text."""
    sanitized = _QUERY_KEY_RE.sub(r"\1" + REDACTED, text)
    sanitized = _REDIS_PASSWORD_RE.sub(r"\1" + REDACTED + r"\2", sanitized)
    sanitized = _KEY_VALUE_SECRET_RE.sub(lambda m: f"{m.group(1)}={REDACTED}", sanitized)
    return sanitized
