"""
Date parsing for harvest bounds.

Accepted forms:
- ``now`` (any case)
- ``YYYY-MM-DD``, taken at UTC midnight
- ``-<k><unit>`` relative to now, unit one of h, d, m, y

Months and years are nominal (30 and 365 days), not calendar arithmetic.
"""

import re
import time
from datetime import datetime, timezone
from typing import Optional

from .exceptions import BadDateFormat

HOUR = 60 * 60
DAY = 24 * HOUR

UNIT_SECONDS = {
    'h': HOUR,
    'd': DAY,
    'm': 30 * DAY,
    'y': 365 * DAY,
}

_ABSOLUTE_RE = re.compile(r'\d{4}-\d{2}-\d{2}', re.ASCII)
_RELATIVE_RE = re.compile(r'-(\d+)([hdmy])', re.ASCII | re.IGNORECASE)


def parse_date(value: str, now: Optional[int] = None) -> int:
    """Parse a date string into Unix epoch seconds."""
    if now is None:
        now = int(time.time())

    if value.lower() == 'now':
        return now

    if _ABSOLUTE_RE.fullmatch(value):
        try:
            parsed = datetime.strptime(value, '%Y-%m-%d')
        except ValueError as e:
            raise BadDateFormat(f"invalid date format: {value}") from e
        return int(parsed.replace(tzinfo=timezone.utc).timestamp())

    match = _RELATIVE_RE.fullmatch(value)
    if not match:
        raise BadDateFormat(f"invalid date format: {value}")

    amount, unit = match.groups()
    return now - int(amount) * UNIT_SECONDS[unit.lower()]
