"""File names for notes and archived recordings."""

from __future__ import annotations

import posixpath
import random
from datetime import datetime
from typing import Callable, Optional

SUFFIX_RANGE = 1000


def base_name(timestamp: datetime) -> str:
    """Format a recording time as ``YYYY-MM-DD at HH.MM``."""

    return timestamp.strftime("%Y-%m-%d at %H.%M")


def resolve_unique_path(
    desired: str,
    exists: Callable[[str], bool],
    rng: Optional[random.Random] = None,
) -> str:
    """Return ``desired`` if it is free, else the same path with a random ``_N`` suffix.

    The suffixed path is not checked again; a second collision is rare enough
    that the exclusive write or move will surface it as a storage failure.
    """

    if not exists(desired):
        return desired
    stem, ext = posixpath.splitext(desired)
    number = (rng or random).randrange(SUFFIX_RANGE)
    return f"{stem}_{number}{ext}"
