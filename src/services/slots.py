"""
Reservation slot normalization.

Reservations are counted per 30-minute slot. A requested time is snapped
down to the start of its slot: minutes below 30 become :00, minutes from
30 on become :30. The hour never changes, so a slot never crosses into
the next hour or day.
"""
from datetime import time
from typing import Union

from error_handling.exceptions import ValidationError
from error_handling.error_messages import INVALID_TIME

SLOT_MINUTES = 30


def slot_to_time(value: Union[str, time]) -> time:
    """
    Snap a time of day to the start of its reservation slot.

    Args:
        value: "HH:MM", "HH:MM:SS" or a ``datetime.time``

    Returns:
        ``datetime.time`` at :00 or :30

    Raises:
        ValidationError: If the value is not a valid time of day
    """
    if isinstance(value, time):
        hour, minute = value.hour, value.minute
    else:
        hour, minute = _parse_clock(value)

    return time(hour=hour, minute=(minute // SLOT_MINUTES) * SLOT_MINUTES)


def _parse_clock(value) -> tuple:
    parts = str(value).strip().split(":") if value is not None else []
    if len(parts) not in (2, 3):
        raise ValidationError(INVALID_TIME, field="time", value=value)

    try:
        hour, minute = int(parts[0]), int(parts[1])
        second = int(parts[2]) if len(parts) == 3 else 0
    except ValueError:
        raise ValidationError(INVALID_TIME, field="time", value=value)

    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60):
        raise ValidationError(INVALID_TIME, field="time", value=value)
    return hour, minute


def normalize_slot(value: Union[str, time]) -> str:
    """
    Normalize a time of day to its slot as "HH:MM".

    Idempotent: a normalized slot is returned unchanged.
    """
    return slot_to_time(value).strftime("%H:%M")
