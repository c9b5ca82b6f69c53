"""Slug and code generation with numeric-suffix collision handling."""

import re
from typing import Callable


def generate_slug(name: str) -> str:
    """'The Reading Room!' -> 'the-reading-room'."""
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def store_code(name: str) -> str:
    """'Main Store' -> 'MAIN_STORE'."""
    return generate_slug(name).upper().replace("-", "_")


def unique_slug(base: str, taken: Callable[[str], bool]) -> str:
    """Return `base`, else the first free `base-1`, `base-2`, ...

    Check-then-insert, not atomic: two concurrent creators can still collide
    and the loser gets the unique index's duplicate-key error.
    """
    candidate = base
    counter = 1
    while taken(candidate):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
