"""Helpers for profile domain objects."""

from __future__ import annotations

import html
import re
from typing import Any, Dict, Optional

import nh3

from ..core.time import isoformat
from ..models import Profile

DISPLAY_NAME_MAX_LENGTH = 50

_WHITESPACE = re.compile(r"\s+")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f\u200b-\u200f\u2028-\u202e\u2066-\u2069\ufeff]")
_MARKUP_CHARS = re.compile(r"[<>\"'&`\\]")


def sanitize_display_name(value: str) -> str:
    """Strip HTML, invisible characters and markup symbols; normalise whitespace.

    Tags are removed whole and the contents of script and style elements are
    dropped, so only the visible text survives. The cleaner escapes what it
    keeps, so entities are decoded back to plain text before the remaining
    markup symbols are removed.
    """

    cleaned = html.unescape(nh3.clean(value or "", tags=set()))
    cleaned = _WHITESPACE.sub(" ", cleaned)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    cleaned = _MARKUP_CHARS.sub("", cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()


def display_name_problem(value: str) -> Optional[str]:
    """Return a user-facing reason the name is unusable, or ``None``."""

    if not value:
        return "表示名を入力してください"
    if len(value) > DISPLAY_NAME_MAX_LENGTH:
        return f"表示名は{DISPLAY_NAME_MAX_LENGTH}文字以内で入力してください"
    return None


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    return {
        "id": str(profile.id),
        "display_name": profile.display_name,
        "avatar_url": profile.avatar_url,
        "created_at": isoformat(profile.created_at),
        "updated_at": isoformat(profile.updated_at),
    }


__all__ = [
    "DISPLAY_NAME_MAX_LENGTH",
    "display_name_problem",
    "profile_to_dict",
    "sanitize_display_name",
]
