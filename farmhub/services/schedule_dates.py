"""
Schedule date helpers
Builds the schedule heading and decides when the daily report prompt opens.
"""
from datetime import date, datetime
from typing import Optional

from .schedule_types import ScheduleHeading

SCHEDULE_DATE_FORMAT = '%m/%d/%Y'

YESTERDAY_WARNING = "This is yesterday's schedule. Confirm timing before starting."
OTHER_DAY_WARNING = "This schedule date is not today. Please confirm timing before starting."


def parse_schedule_date(label: Optional[str]) -> Optional[date]:
    """Parse an MM/DD/YYYY schedule date; None when missing or malformed"""
    if not label:
        return None
    try:
        return datetime.strptime(label.strip(), SCHEDULE_DATE_FORMAT).date()
    except ValueError:
        return None


def describe_schedule_date(label: Optional[str], today: date) -> ScheduleHeading:
    """
    Heading for a schedule date relative to today.

    Args:
        label: Schedule date as stored on the snapshot (MM/DD/YYYY)
        today: Today's date on the farm clock

    Returns:
        ScheduleHeading with title and an outdated warning when the
        schedule is not for today
    """
    if not label:
        return ScheduleHeading(title="Today's Schedule")

    scheduled = parse_schedule_date(label)
    is_today = scheduled is not None and scheduled == today
    is_yesterday = scheduled is not None and (today - scheduled).days == 1

    if is_today:
        title = f"Today's Schedule {label}"
    elif is_yesterday:
        title = f"Yesterday's Schedule {label}"
    else:
        title = f"{label} Schedule"

    message = None
    if not is_today:
        message = YESTERDAY_WARNING if is_yesterday else OTHER_DAY_WARNING

    return ScheduleHeading(
        title=title,
        outdated=not is_today,
        message=message,
        is_today=is_today,
        is_yesterday=is_yesterday,
    )


def report_prompt_due(
    schedule_date: Optional[str],
    local_now: datetime,
    already_reported: bool,
    prompt_hour: int = 14
) -> bool:
    """
    Whether the end-of-day report prompt should open.

    Opens once the farm-local hour reaches prompt_hour on the schedule's own
    date, unless the person has already reported.
    """
    if already_reported:
        return False
    scheduled = parse_schedule_date(schedule_date)
    if scheduled is None or scheduled != local_now.date():
        return False
    return local_now.hour >= prompt_hour
