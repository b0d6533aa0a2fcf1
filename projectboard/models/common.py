"""Shared helpers for domain models."""

from __future__ import annotations

from datetime import datetime, timezone

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def utc_today() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")
