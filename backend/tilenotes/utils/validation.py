from __future__ import annotations

import re

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    """Validate password strength."""
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"

    weak_passwords = {"password", "123456", "qwerty", "admin", "test", "password123"}
    if password.lower() in weak_passwords:
        return False, "Password is too weak. Please choose a stronger password."
    return True, None


def normalize_color(value: str) -> str:
    """Return a tile color as upper-case `#RRGGBB`/`#RGB`, or raise ValueError."""
    candidate = value.strip()
    if not _HEX_COLOR.match(candidate):
        raise ValueError(f"Invalid color {value!r}; expected a hex value like #FFFACD")
    return candidate.upper()


def normalize_tags(tags: list[str] | None, *, limit: int | None = None) -> list[str]:
    """Lowercase, strip and de-duplicate tags while keeping their order."""
    normalized: list[str] = []
    for tag in tags or []:
        if not isinstance(tag, str):
            continue
        cleaned = tag.strip().lstrip("#").strip().lower()[:50]
        if cleaned and cleaned not in normalized:
            normalized.append(cleaned)
    if limit is not None:
        return normalized[:limit]
    return normalized
