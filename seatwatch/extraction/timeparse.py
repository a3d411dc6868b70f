import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable

from ..errors import ParseError

_DAY_CHANGE_RE = re.compile(r'\+(\d+)\s*days?', re.IGNORECASE)
_CLOCK_RE = re.compile(r'([0-9]{1,2}):([0-9]{2})')


def parse_day_offset(annotations: Iterable[str]) -> int:
    """Return N from the first "+N day" annotation, 0 when there is none."""
    for text in annotations:
        if m := _DAY_CHANGE_RE.search(text):
            return int(m.group(1))
    return 0


def parse_clock(clock: str) -> time:
    m = _CLOCK_RE.fullmatch(clock.strip())
    if not m:
        raise ParseError(f"Clock time {clock!r} is not HH:MM")
    hours, minutes = int(m.group(1)), int(m.group(2))
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ParseError(f"Clock time {clock!r} out of range")
    return time(hours, minutes)


def parse_segment_time(clock: str, reference: date, day_changes: Iterable[str] = ()) -> datetime:
    """Absolute UTC instant for a displayed "HH:MM" on `reference`, shifted by any "+N day" marker.

    Times are taken as UTC wall-clock; the site renders route-local times and no conversion is done.
    """
    moment = datetime.combine(reference, parse_clock(clock), tzinfo=timezone.utc)
    return moment + timedelta(days=parse_day_offset(day_changes))
