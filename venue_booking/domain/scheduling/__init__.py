"""
Scheduling domain - the Slot Calendar

Bookings are limited to four fixed 2-hour windows per venue per day, so conflict
detection is equality on (venue, date, slot index) rather than interval overlap.
"""

from .calendar import SlotCalendar
from .slots import (
    TIME_SLOTS,
    TimeSlot,
    parse_start_time,
    resolve_booking_date,
    resolve_slot,
    slot_for_index,
    slot_for_start_time,
)

__all__ = [
    "TIME_SLOTS",
    "SlotCalendar",
    "TimeSlot",
    "parse_start_time",
    "resolve_booking_date",
    "resolve_slot",
    "slot_for_index",
    "slot_for_start_time",
]
