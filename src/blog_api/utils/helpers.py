"""
Utility functions and helpers
"""

from datetime import datetime, timezone
from typing import Union


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime

    Accepts a trailing 'Z' for UTC. Naive values are taken to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        parsed = datetime.fromisoformat(value)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def same_instant(left: Union[str, datetime], right: Union[str, datetime]) -> bool:
    """True when two timestamps denote the same moment, whatever their formatting"""
    return parse_timestamp(left) == parse_timestamp(right)
