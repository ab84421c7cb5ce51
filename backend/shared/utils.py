"""Small helpers shared by several modules."""

import secrets
import string
from datetime import datetime, timezone

_ALPHANUMERIC = string.ascii_letters + string.digits


def random_string(length: int) -> str:
    """Return a cryptographically random alphanumeric string."""
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()
