"""
text.py — Slug generation and fuzzy string matching.

Slugs follow the "{name}-{area}" pattern used across the public site,
e.g. "fishermans-wharf-panjim". The area is dropped when it is the
generic "goa" or already appears in the name.

Usage:
    from bestof_shared.text import generate_place_slug, similarity

    generate_place_slug("Fisherman's Wharf", "Panaji")   # "fishermans-wharf-panjim"
    generate_place_slug("Baga Beach Shack", "Baga")      # "baga-beach-shack"
    similarity("Thalassa", "Thalasa")                    # 0.875
"""

from __future__ import annotations

import re
from collections.abc import Callable

from bestof_shared.constants import AREA_ALIASES, DEFAULT_LOCATION, GOA_LOCATIONS

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")
_POSTAL_CODE = re.compile(r"^\d{4,6}$")
_STREET_PATTERN = re.compile(
    r"\b(street|st|road|rd|avenue|ave|lane|ln)\s*\d+|\d+\s+.*\b(street|st|road|rd|avenue|ave|lane|ln)\b",
    re.IGNORECASE,
)
_ADDRESS_SEPARATORS = re.compile(r"[,\-–—]")
_TRAILING_REGION = re.compile(r",\s*(goa|india)\s*$", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Slugs
# ---------------------------------------------------------------------------

def slugify(value: str) -> str:
    """Lowercase, strip punctuation, and hyphenate a string."""
    slug = _NON_SLUG_CHARS.sub("", (value or "").lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def clean_area_for_slug(area: str | None) -> str:
    """
    Normalise an area name for use as a slug suffix.

    Postal codes and street addresses collapse to the generic "goa".
    Known spelling variants map to their canonical form (panaji -> panjim).
    """
    if not area:
        return DEFAULT_LOCATION

    clean = area.strip().lower()
    if _POSTAL_CODE.match(_WHITESPACE.sub("", clean)):
        return DEFAULT_LOCATION
    if _STREET_PATTERN.search(clean):
        return DEFAULT_LOCATION

    clean = AREA_ALIASES.get(clean, clean)
    clean = re.sub(r"^(the|a|an)\s+", "", clean)
    return slugify(clean) or DEFAULT_LOCATION


def extract_location_for_slug(address: str | None) -> str:
    """Pick the most meaningful Goa location out of a free-form address."""
    if not address:
        return DEFAULT_LOCATION

    cleaned = _TRAILING_REGION.sub("", address.strip()).strip()
    parts = [p.strip() for p in _ADDRESS_SEPARATORS.split(cleaned) if p.strip()]
    if not parts:
        return DEFAULT_LOCATION

    for part in parts:
        lowered = part.lower()
        for keyword in GOA_LOCATIONS:
            if keyword in lowered:
                return clean_area_for_slug(keyword)

    last = parts[-1]
    if re.fullmatch(r"\d{6}", last):
        return clean_area_for_slug(parts[-2]) if len(parts) >= 2 else DEFAULT_LOCATION
    return clean_area_for_slug(last)


def _canonical_words(slug: str) -> list[str]:
    return slugify(AREA_ALIASES.get(slug.replace("-", " "), slug)).split("-")


def location_in_name(name_slug: str, location_slug: str) -> bool:
    """True when every word of the location appears consecutively in the name."""
    if not location_slug or location_slug == DEFAULT_LOCATION:
        return False

    name_words = [_canonical_words(w)[0] for w in name_slug.split("-") if w]
    location_words = _canonical_words(location_slug)
    span = len(location_words)
    return any(
        name_words[i : i + span] == location_words
        for i in range(len(name_words) - span + 1)
    )


def generate_place_slug(
    name: str,
    area: str | None = None,
    address: str | None = None,
) -> str:
    """
    Build a "{name}-{area}" slug.

    The area falls back to the address when missing or generic, and is
    skipped entirely when the name already contains it.
    """
    base = slugify(name)
    if area and area.strip().lower() != DEFAULT_LOCATION:
        location = clean_area_for_slug(area)
    else:
        location = extract_location_for_slug(address)

    if location == DEFAULT_LOCATION or location_in_name(base, location):
        return base
    return _HYPHENS.sub("-", f"{base}-{location}").strip("-")


def make_unique_slug(base: str, exists: Callable[[str], bool]) -> str:
    """Append -1, -2, ... to `base` until `exists` reports the slug as free."""
    slug = base
    counter = 1
    while exists(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug


# ---------------------------------------------------------------------------
# Fuzzy matching
# ---------------------------------------------------------------------------

def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings (insert/delete/substitute cost 1)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost)
            )
        previous = current
    return previous[-1]


def similarity(a: str | None, b: str | None) -> float:
    """Normalised similarity in [0, 1]; case-insensitive, whitespace-trimmed."""
    left = (a or "").strip().lower()
    right = (b or "").strip().lower()
    longer, shorter = (left, right) if len(left) >= len(right) else (right, left)
    if not longer:
        return 1.0
    return (len(longer) - levenshtein(longer, shorter)) / len(longer)


def is_probable_duplicate(
    name: str,
    area: str | None,
    candidate_name: str,
    candidate_area: str | None,
) -> bool:
    """
    Fuzzy duplicate rule for places.

    When the areas are clearly the same (> 0.8) a looser name match is
    accepted (> 0.8 name, > 0.6 area). Otherwise the names must be
    near-identical (> 0.9).
    """
    name_score = similarity(name, candidate_name)
    area_score = similarity(area, candidate_area)
    if area_score > 0.8:
        return name_score > 0.8 and area_score > 0.6
    return name_score > 0.9
