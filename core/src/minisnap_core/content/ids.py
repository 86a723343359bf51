from __future__ import annotations

import base64
import os
import re

from minisnap_core.errors import RandomnessUnavailable

SLUG_BYTES = 5  # 5 bytes -> 8 base32 chars, no padding

_SLUG_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def new_slug() -> str:
    """Generate a short, URL-safe random slug.

    Slugs are lowercase base32 without padding. Uniqueness is the caller's job.
    """

    try:
        buf = os.urandom(SLUG_BYTES)
    except (NotImplementedError, OSError) as exc:
        raise RandomnessUnavailable("slug") from exc
    return base64.b32encode(buf).decode("ascii").rstrip("=").lower()


def is_valid_slug(value: str) -> bool:
    return bool(_SLUG_RE.match(value or ""))
