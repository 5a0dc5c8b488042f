"""
Business-hours evaluation for restaurant listings.

Weekly hours are stored as JSON text in the restaurant row, keyed by
three-letter day names with a list of ``[start, end]`` "HH:MM" ranges:

    {"fri": [["11:30", "14:30"], ["17:00", "23:00"]],
     "sat": [["18:00", "02:00"]]}

A range whose end is earlier than its start runs past midnight.
"""
import json
from datetime import datetime
from typing import Any, Optional

from loguru import logger

# Sunday = 0, matching the weekday index used by the stored hours
DAY_KEYS = ["sun", "mon", "tue", "wed", "thu", "fri", "sat"]
DAY_NAMES = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]


def parse_hours(raw: Any) -> Optional[dict]:
    """
    Decode stored weekly hours.

    Args:
        raw: JSON text from the database, or an already decoded mapping

    Returns:
        The hours mapping, or None if absent or malformed
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, dict):
        return raw

    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Ignoring malformed hours JSON: {e}")
        return None

    return value if isinstance(value, dict) else None


def _to_minutes(value: Any) -> Optional[int]:
    """Convert "HH:MM" to minutes since midnight, or None if unparsable."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) < 2:
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hours <= 24 and 0 <= minutes < 60):
        return None
    return hours * 60 + minutes


def _day_index(moment: datetime) -> int:
    # datetime.weekday() counts from Monday
    return (moment.weekday() + 1) % 7


def _ranges_for_day(hours: dict, index: int) -> list:
    ranges = hours.get(DAY_KEYS[index])
    if ranges is None:
        ranges = hours.get(DAY_NAMES[index])
    return ranges if isinstance(ranges, (list, tuple)) else []


def _range_contains(day_range: Any, now: int) -> bool:
    if not isinstance(day_range, (list, tuple)) or len(day_range) < 2:
        return False

    start = _to_minutes(day_range[0])
    end = _to_minutes(day_range[1])
    if start is None or end is None:
        return False

    if end == start:
        return False
    if end > start:
        return start <= now < end
    # Overnight window
    return now >= start or now < end


def is_open_now(hours: Any, at: Optional[datetime] = None) -> bool:
    """
    Check whether a restaurant is open at a given moment.

    Only the ranges listed for the moment's own weekday are considered;
    an overnight range listed for that day matches both its evening and
    its early-morning part.

    Args:
        hours: Weekly hours mapping (or its JSON text)
        at: Moment to evaluate, defaults to now

    Returns:
        True if any of the day's ranges contains the moment. Missing or
        malformed hours yield False.
    """
    schedule = parse_hours(hours)
    if not schedule:
        return False

    moment = at or datetime.now()
    now = moment.hour * 60 + moment.minute

    return any(
        _range_contains(day_range, now)
        for day_range in _ranges_for_day(schedule, _day_index(moment))
    )
