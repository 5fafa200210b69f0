"""Slug derivation for course URLs."""

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lowercase, collapse non-alphanumerics to single dashes, trim dashes."""
    slug = _NON_ALNUM.sub("-", value.strip().lower()).strip("-")
    return slug or "course"
