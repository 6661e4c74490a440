"""
transforms/slugs.py — Detect and rebuild malformed slugs.

Bad slugs came from scraped Instagram handles ("@keepfit.kw"), URL-encoded
names and hand-entered values with spaces or capitals.
"""

from __future__ import annotations

import re

_APOSTROPHES = re.compile(r"['’]")
_NON_WORD = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")
_UPPER = re.compile(r"[A-Z]")

_BAD_CHARS = ("@", "%", " ", "(")


def is_bad_slug(slug: str | None) -> bool:
    if not slug:
        return True
    if slug.startswith("-"):
        return True
    if any(ch in slug for ch in _BAD_CHARS):
        return True
    return bool(_UPPER.search(slug))


def make_slug(name: str) -> str:
    """Slug from a display name: apostrophes dropped, "&" spelled out."""
    slug = _APOSTROPHES.sub("", name.lower())
    slug = slug.replace("&", "and")
    slug = _NON_WORD.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def plan_slug_fixes(rows: list[dict]) -> list[dict]:
    """
    Build {id, name, old, new} fixes for every row with a bad slug.

    A new slug already used by another row gets the first 8 characters of
    the row id appended.
    """
    taken = {row.get("slug"): str(row["id"]) for row in rows if row.get("slug")}
    fixes = []
    for row in rows:
        if not is_bad_slug(row.get("slug")):
            continue
        row_id = str(row["id"])
        new_slug = make_slug(row.get("name") or "")
        owner = taken.get(new_slug)
        if not new_slug or (owner is not None and owner != row_id):
            new_slug = f"{new_slug}-{row_id[:8]}".strip("-")
        taken[new_slug] = row_id
        fixes.append({"id": row_id, "name": row.get("name"), "old": row.get("slug"), "new": new_slug})
    return fixes
