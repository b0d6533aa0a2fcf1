"""Secret redaction utility: strip tokens/PII from logs."""

from __future__ import annotations

import re

_PATTERNS = [
    (re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+", re.IGNORECASE), r"\1[TOKEN]"),
    (re.compile(r"(\"?(?:password|access_token)\"?\s*[:=]\s*\"?)[^\",\s}]+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"[A-Za-z0-9_-]{32,}"), "[REDACTED_KEY]"),
    (re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[EMAIL]"),
]


def redact(text: str) -> str:
    for pattern, replacement in _PATTERNS:
        text = pattern.sub(replacement, text)
    return text
