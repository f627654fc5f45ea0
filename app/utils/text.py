from __future__ import annotations

import re

_WS_RE = re.compile(r"\s+")
_SLUG_RE = re.compile(r"[^\w]+", re.UNICODE)


def collapse_ws(text: str | None) -> str:
    """Lowercase and squeeze every whitespace run to a single space."""
    return _WS_RE.sub(" ", (text or "").strip()).casefold()


def slugify(name: str) -> str:
    return _SLUG_RE.sub("-", (name or "").strip().lower()).strip("-_")


def name_matches(wanted: str, credited: str | None) -> bool:
    """Case-insensitive, whitespace-tolerant containment check for people names."""
    needle = collapse_ws(wanted)
    if not needle or not credited:
        return False
    return needle in collapse_ws(credited)
