"""Fixed daily time slots and the pure normalization of scheduling input"""

import logging
import re
from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from ...errors import (
    InvalidSlotIndex,
    MissingBookingDate,
    NoMatchingSlot,
    NoUsableTimeSpecified,
    UnmatchedStartTime,
)

logger = logging.getLogger(__name__)

WORKING_HOURS_START = time(10, 0)
WORKING_HOURS_END = time(18, 0)

_HOUR_ONLY = re.compile(r"^\d{1,2}$")
_HOUR_MINUTE = re.compile(r"^(\d{1,2}):(\d{2})$")
_HOUR_MINUTE_SECOND = re.compile(r"^(\d{1,2}):(\d{2}):(\d{2})$")


class TimeSlot(Enum):
    """The four bookable 2-hour windows of a venue day"""

    SLOT_10_12 = (0, time(10, 0), time(12, 0), "10:00 - 12:00")
    SLOT_12_14 = (1, time(12, 0), time(14, 0), "12:00 - 14:00")
    SLOT_14_16 = (2, time(14, 0), time(16, 0), "14:00 - 16:00")
    SLOT_16_18 = (3, time(16, 0), time(18, 0), "16:00 - 18:00")

    def __init__(self, index: int, start_time: time, end_time: time, label: str):
        self.index = index
        self.start_time = start_time
        self.end_time = end_time
        self.label = label

    def contains(self, value: time) -> bool:
        return self.start_time <= value < self.end_time


TIME_SLOTS: tuple[TimeSlot, ...] = tuple(TimeSlot)
SLOT_HELP = "0=10-12h, 1=12-14h, 2=14-16h, 3=16-18h"


def slot_for_index(index: int) -> TimeSlot:
    """Return the slot with the given index (0-3)"""
    for slot in TIME_SLOTS:
        if slot.index == index:
            return slot
    raise InvalidSlotIndex(f"Invalid slot index {index}. Must be between 0 and 3 ({SLOT_HELP})")


def slot_for_start_time(start: time) -> TimeSlot:
    """Return the slot starting exactly at ``start``"""
    for slot in TIME_SLOTS:
        if slot.start_time == start:
            return slot
    raise NoMatchingSlot(f"No time slot starts at {start.strftime('%H:%M')}")


def parse_start_time(value: Optional[str]) -> Optional[time]:
    """
    Parse a legacy start time string.

    Accepts "10", "10:00" and "10:00:00". Returns None for blank or
    unparseable input.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None

    try:
        if _HOUR_ONLY.match(value):
            return time(int(value), 0)
        match = _HOUR_MINUTE.match(value)
        if match:
            return time(int(match.group(1)), int(match.group(2)))
        match = _HOUR_MINUTE_SECOND.match(value)
        if match:
            return time(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError as e:
        logger.warning(f"Failed to parse time string '{value}': {e}")
    return None


def resolve_booking_date(
    booking_date: Optional[date], booking_datetime: Optional[datetime] = None
) -> date:
    """Explicit date wins, otherwise the date part of the supplied date-time"""
    if booking_date is not None:
        return booking_date
    if booking_datetime is not None:
        return booking_datetime.date()
    raise MissingBookingDate("Booking date is required")


def resolve_slot(
    slot_index: Optional[int] = None,
    start_time: Optional[str] = None,
    booking_datetime: Optional[datetime] = None,
) -> TimeSlot:
    """
    Normalize the two accepted representations of a slot to a TimeSlot.

    A slot index is used when present. Otherwise the legacy start time is taken
    from the start time string, falling back to the time part of the booking
    date-time, and must equal one of the canonical slot start times.
    """
    if slot_index is not None:
        return slot_for_index(slot_index)

    if start_time is not None and start_time.strip():
        requested = parse_start_time(start_time)
    elif booking_datetime is not None:
        requested = booking_datetime.time()
    else:
        requested = None

    if requested is None:
        raise NoUsableTimeSpecified(
            "Either 'slotIndex' (0-3) or 'startTime' (10:00, 12:00, 14:00, or 16:00) must be provided. "
            f"Available slots: {SLOT_HELP}"
        )

    try:
        slot = slot_for_start_time(requested)
    except NoMatchingSlot as e:
        raise UnmatchedStartTime(
            f"Start time '{requested.strftime('%H:%M')}' doesn't match available slots. "
            "Please use: 10:00 (Slot 0), 12:00 (Slot 1), 14:00 (Slot 2), or 16:00 (Slot 3)"
        ) from e

    logger.debug(f"Converted legacy time {requested} to slot: {slot.label}")
    return slot


def within_working_hours(value: time) -> bool:
    """True when ``value`` lies within 10:00-18:00 inclusive"""
    return WORKING_HOURS_START <= value <= WORKING_HOURS_END
