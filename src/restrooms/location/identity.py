"""Location identity and reviewer labels.

Locations have no user-supplied key. Their identifier is derived from the
normalised name and city so repeated submissions for the "same" place land on
one record.
"""

import base64
import re

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")

DISPLAY_NAME_PREFIX = "User"


def normalise(value: str) -> str:
    return value.strip().lower()


def derive_location_id(name: str, city: str) -> str:
    """Stable, key-safe identifier for a (name, city) pair.

    Both parts are trimmed and lower-cased, joined with ``_``, base64 encoded
    and stripped of everything outside ``[A-Za-z0-9]``.
    """
    key = f"{normalise(name)}_{normalise(city)}"
    encoded = base64.b64encode(key.encode("utf-8")).decode("ascii")
    return _NON_ALPHANUMERIC.sub("", encoded)


def display_name_for(user_id: str) -> str:
    """Placeholder label shown next to a review: ``User`` + last 4 chars of the id."""
    return f"{DISPLAY_NAME_PREFIX}{user_id[-4:]}"
