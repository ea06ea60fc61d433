from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_NON_SLUG_CHARS = re.compile(r"[^\w-]+", re.ASCII)
_HYPHEN_RUNS = re.compile(r"-{2,}")


def generate_slug(name: str) -> str:
    """
    Map a display name to a URL-safe identifier.

    "Tesla Model S!!" -> "tesla-model-s". Empty input yields "".
    """
    slug = _WHITESPACE.sub("-", name.lower())
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")
