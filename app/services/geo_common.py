from __future__ import annotations

import math
import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's ``round`` uses banker's rounding (``round(2.5) == 2``); fares and
    distances are expected to round ``x.5`` up.
    """
    return int(math.floor(value + 0.5))


def city_slug(name: str) -> str:
    """Slug used for cities: lowercase, spaces replaced by hyphens."""
    return name.lower().replace(" ", "-")


def destination_slug(name: str) -> str:
    """Slug used for destinations and de-duplication.

    Lowercases, collapses every run of non-alphanumeric characters into a
    single hyphen and trims hyphens from both ends.

    >>> destination_slug("Lonavala & Khandala (Hills)")
    'lonavala-khandala-hills'
    """
    return _NON_ALNUM.sub("-", name.lower()).strip("-")
