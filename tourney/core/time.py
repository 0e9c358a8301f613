"""Time helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def isoformat(value: datetime | None) -> str | None:
    """Render a stored timestamp as ISO-8601, marking naive values as UTC."""

    if value is None:
        return None
    out = value.isoformat()
    if value.tzinfo is None:
        out += "Z"
    return out


__all__ = ["isoformat", "utcnow"]
