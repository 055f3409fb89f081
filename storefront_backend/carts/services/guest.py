# carts/services/guest.py

"""
Guest cart tokens: "guest_" + a version-4 UUID.
"""

import re
import uuid

GUEST_ID_PREFIX = "guest_"

_GUEST_ID_RE = re.compile(
    r"^guest_[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def generate_guest_id() -> str:
    return f"{GUEST_ID_PREFIX}{uuid.uuid4()}"


def is_valid_guest_id(value) -> bool:
    if not value or not isinstance(value, str):
        return False
    return bool(_GUEST_ID_RE.match(value))
