"""
Concierge Utilities
"""

import hashlib
from datetime import datetime, timezone


def mask_secret(secret: str, length: int = 5) -> str:
    """Return a short SHA-256 hash of a secret for logging."""
    h = hashlib.sha256(str(secret).encode("utf-8")).hexdigest()
    return f"<masked:{h[:length]}>"


def parse_github_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 GitHub timestamp (``2024-01-15T10:30:00Z``) into an aware UTC datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_utc(value: datetime) -> datetime:
    """Convert to aware UTC. Naive datetimes are taken as local time."""
    return value.astimezone(timezone.utc)
