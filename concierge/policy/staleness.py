# The MIT License (MIT)
# Copyright © 2025 Entrius

from datetime import datetime

from concierge.constants import SECONDS_PER_DAY


def days_since(timestamp: datetime, now: datetime) -> float:
    """Fractional days elapsed from ``timestamp`` to ``now``; negative if ``timestamp`` is in the future."""
    return (now - timestamp).total_seconds() / SECONDS_PER_DAY


def is_stale(last_comment_timestamp: datetime, now: datetime, max_days_since_update: float) -> bool:
    """Inclusive threshold: exactly ``max_days_since_update`` days of silence is stale."""
    return days_since(last_comment_timestamp, now) >= max_days_since_update
