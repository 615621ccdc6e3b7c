"""
Pytest configuration and fixtures for the farm hub schedule engine tests.

This module provides shared fixtures for:
- Testing configuration selected through FARMHUB_ENV
- A small but complete schedule snapshot
- Farm-clock datetimes (Pacific/Honolulu is UTC-10 all year)
"""
import pytest
from datetime import datetime, timedelta, timezone

from farmhub.config import TestingConfig
from farmhub.services.schedule_types import ScheduleData, Slot


@pytest.fixture(autouse=True)
def testing_env(monkeypatch):
    """
    Select TestingConfig for every lazy get_config() call.

    decouple reads os.environ on each call, so setting the variable per test
    is enough.
    """
    monkeypatch.setenv('FARMHUB_ENV', 'testing')


@pytest.fixture
def settings():
    """Configuration class used by the engine under test."""
    return TestingConfig


@pytest.fixture
def slots():
    """
    Slot list covering meals, weekday work, evening and weekend columns.

    Time ranges:
        breakfast  7:00-7:30      420-450
        morning    7:30-9:00      450-540
        block1     9:00-10:30     540-630
        lunch      12:00-1:00pm   720-780
        block2     1:00pm-3:00pm  780-900
        evening    5pm-6pm        1020-1080
        weekend    8am-10am       480-600
    """
    return (
        Slot.from_label('breakfast', 'Breakfast', '7:00-7:30'),
        Slot.from_label('morning', 'Morning Chores', '7:30-9:00'),
        Slot.from_label('block1', 'Work Block 1', '9:00-10:30'),
        Slot.from_label('lunch', 'Lunch', '12:00-1:00pm'),
        Slot.from_label('block2', 'Work Block 2', '1:00pm-3:00pm'),
        Slot.from_label('evening', 'Evening Chores', '5pm-6pm'),
        Slot.from_label('weekend', 'Weekend Chores', '8am-10am'),
    )


@pytest.fixture
def schedule(slots):
    """
    Four-person snapshot.

    Weekday work columns are morning, block1, block2 and evening. Alice and
    Cara match on all four of them, Bob shares block1 and block2 with both,
    and Dan only shares Water with Bob.
    """
    return ScheduleData(
        people=['Alice', 'Bob', 'Cara', 'Dan'],
        slots=slots,
        cells=[
            ['Cook', 'Feed Goats', 'Weeding\nBring gloves', '', 'Harvest', 'Close Coop', '-'],
            ['', 'Water', 'Weeding\nBring gloves', 'Dishes', 'Harvest', '', 'Feed Goats'],
            ['Cook', 'Feed Goats', 'Weeding\nBring gloves', 'Dishes', 'Harvest', 'Close Coop', ''],
            ['', 'Water', 'Compost', '', 'Compost', '', 'Feed Goats, Water'],
        ],
        report_flags=[True, False, False, False],
        schedule_date='10/19/2026',
    )


@pytest.fixture
def work_columns(schedule):
    """Snapshot indices of the weekday work slots (morning, block1, block2, evening)."""
    return [1, 2, 4, 5]


@pytest.fixture
def farm_time():
    """
    Build a UTC datetime from a farm-local date and time.

    Honolulu has no daylight saving, so local = UTC - 10h.
    """
    def _farm_time(year, month, day, hour, minute=0):
        local = datetime(year, month, day, hour, minute)
        return (local + timedelta(hours=10)).replace(tzinfo=timezone.utc)
    return _farm_time
