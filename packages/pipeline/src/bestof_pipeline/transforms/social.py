"""
transforms/social.py — Clean scraped social media values into profile URLs.

Scraped values arrive in several broken shapes:
  - markdown leftovers:     "goa.shack)[Instagram](https:"
  - trailing parentheses:   "https://instagram.com/thalassagoa)"
  - share-button artifacts: "sharer", "intent", "share"
  - bare handles:           "@thalassagoa"

Usage:
    from bestof_pipeline.transforms.social import clean_social_value

    clean_social_value("@thalassagoa", "instagram")
    # "https://instagram.com/thalassagoa"
"""

from __future__ import annotations

import re

from bestof_shared.constants import SOCIAL_URL_PREFIXES

# Values scraped from share buttons rather than profiles
INVALID_VALUES = frozenset({"sharer", "intent", "share"})

_MARKDOWN_SPLIT = re.compile(r"[\[\]]")
_EMPTY_PROFILE_URL = re.compile(r"^https?://[^/]+/?$")


def clean_social_value(value: str | None, platform: str) -> str | None:
    """
    Return a usable profile URL for `platform`, or None when the value is junk.

    Facebook accepts numeric page ids; other platforms reject them.
    """
    if not value:
        return None

    cleaned = value.strip()

    if "[" in cleaned or "](" in cleaned:
        cleaned = _MARKDOWN_SPLIT.split(cleaned)[0].strip()
    cleaned = cleaned.rstrip(")")

    if not cleaned or _EMPTY_PROFILE_URL.match(cleaned):
        return None
    if cleaned.lower() in INVALID_VALUES:
        return None

    if cleaned.isdigit():
        return f"{SOCIAL_URL_PREFIXES['facebook']}{cleaned}" if platform == "facebook" else None

    if cleaned.startswith(("http://", "https://")):
        return cleaned

    handle = cleaned.removeprefix("@")
    if len(handle) < 2:
        return None

    prefix = SOCIAL_URL_PREFIXES.get(platform)
    return f"{prefix}{handle}" if prefix else None


def social_link_fixes(row: dict, platforms: tuple[str, ...]) -> dict[str, str | None]:
    """Map each platform column whose cleaned value differs to its new value."""
    fixes: dict[str, str | None] = {}
    for platform in platforms:
        original = row.get(platform)
        if not original:
            continue
        cleaned = clean_social_value(original, platform)
        if cleaned != original:
            fixes[platform] = cleaned
    return fixes
