"""
Time Range Resolver
Parses human slot time ranges ("9:00-10:30", "3pm - 5pm") into minute-of-day
bounds and picks the slot that contains the current farm time.

Meridiem rules:
- a side without am/pm borrows the other side's marker, in either direction
- with no marker on either side, hours are taken literally (24-hour style),
  so "11:30-1:00" is 690 -> 60 and never contains "now"
- "12am" is minute 0 and "12pm" is noon
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from farmhub.utils.timezone import minutes_of_day
from .schedule_types import Slot

logger = logging.getLogger(__name__)

TIME_RANGE_PATTERN = re.compile(
    r'(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\s*[-–]\s*(\d{1,2})(?::(\d{2}))?\s*(am|pm)?',
    re.IGNORECASE
)


@dataclass(frozen=True)
class TimeRange:
    """Half-open [start, end) interval in minutes of the day"""
    start_minutes: int
    end_minutes: int

    def contains(self, minute: int) -> bool:
        return self.start_minutes <= minute < self.end_minutes


def _to_minutes(hour: int, minute: int, meridiem: Optional[str]) -> int:
    if meridiem == 'pm' and hour < 12:
        hour += 12
    if meridiem == 'am' and hour == 12:
        hour = 0
    return hour * 60 + minute


def parse_time_range(text: Optional[str]) -> Optional[TimeRange]:
    """
    Parse a slot time range.

    Args:
        text: Free text such as "9:00-10:30", "7:30am – 9am" or "Lunch (12-1pm)"

    Returns:
        TimeRange, or None if the text does not contain a valid range
    """
    if not text:
        return None

    match = TIME_RANGE_PATTERN.search(text)
    if not match:
        return None

    h1_str, m1_str, ampm1, h2_str, m2_str, ampm2 = match.groups()
    h1, h2 = int(h1_str), int(h2_str)
    m1 = int(m1_str) if m1_str else 0
    m2 = int(m2_str) if m2_str else 0

    if h1 > 24 or h2 > 24 or m1 > 59 or m2 > 59:
        logger.debug(f"Time range out of bounds: {text!r}")
        return None

    ampm1 = ampm1.lower() if ampm1 else None
    ampm2 = ampm2.lower() if ampm2 else None

    start_meridiem = ampm1 or ampm2
    end_meridiem = ampm2 or ampm1

    return TimeRange(
        start_minutes=_to_minutes(h1, m1, start_meridiem),
        end_minutes=_to_minutes(h2, m2, end_meridiem),
    )


def current_slot_id(slots: Iterable[Slot], now_minutes: int) -> Optional[str]:
    """
    First slot, in list order, whose range contains now_minutes.

    Slots with empty or unparseable ranges are skipped.
    """
    for slot in slots:
        time_range = parse_time_range(slot.time_range)
        if time_range is None:
            continue
        if time_range.contains(now_minutes):
            return slot.id
    return None


class TimeRangeResolver:
    """
    Resolves the current slot for a fixed slot list.

    Ranges are parsed once per snapshot; each clock tick only compares
    minutes against them.
    """

    def __init__(self, slots: Iterable[Slot]):
        self.slots: Tuple[Slot, ...] = tuple(slots)
        self.ranges: Dict[str, Optional[TimeRange]] = {}
        for slot in self.slots:
            if slot.id in self.ranges:
                continue
            parsed = parse_time_range(slot.time_range)
            if parsed is None and slot.time_range:
                logger.debug(f"Slot {slot.id!r} has unparseable time range {slot.time_range!r}")
            self.ranges[slot.id] = parsed

    def current_slot_id(self, now_minutes: int) -> Optional[str]:
        """Current slot id for a farm-local minute of day"""
        for slot in self.slots:
            time_range = self.ranges.get(slot.id)
            if time_range is not None and time_range.contains(now_minutes):
                return slot.id
        return None

    def current_slot_id_at(self, now, tz_name: Optional[str] = None) -> Optional[str]:
        """Current slot id for a datetime, read on the farm clock"""
        return self.current_slot_id(minutes_of_day(now, tz_name))
