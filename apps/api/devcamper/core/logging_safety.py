"""Helpers that keep raw identifiers and locations out of log lines."""

from __future__ import annotations

import hashlib
from typing import Any


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def safe_log_postal_code(postal_code: str | None) -> str:
    """Keep only the leading region digits of a postal code."""
    text = (postal_code or "").strip()
    if len(text) <= 2:
        return "zip-**"
    return f"zip-{text[:2]}{'*' * (len(text) - 2)}"
