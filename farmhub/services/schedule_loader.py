"""
Schedule Loader
Turns raw schedule table rows, as read from the headless database, into a
ScheduleData snapshot.

Column keys carry the slot metadata:
    "<order> | <Label> (<time range>)"   e.g. "2 | Morning Chores (7:30-9:00)"
Both the order prefix and the parenthesised range are optional.
"""
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .cell_parser import normalize_task_value
from .schedule_types import MEAL_PATTERN, ScheduleData, SlotMeta

logger = logging.getLogger(__name__)

PERSON_COLUMN = 'Person'
REPORT_COLUMN = 'Report'
RESERVED_COLUMNS = {PERSON_COLUMN, REPORT_COLUMN}

ORDER_PATTERN = re.compile(r'^(\d+)\s*\|\s*(.+)$', re.DOTALL)
LABEL_RANGE_PATTERN = re.compile(r'^(.+?)\s*\((.+)\)\s*$', re.DOTALL)


def parse_slot_key(key: str) -> SlotMeta:
    """
    Parse one column key into slot metadata.

    Keys without an order prefix sort after every numbered key.
    """
    order_match = ORDER_PATTERN.match(key)
    order = float(order_match.group(1)) if order_match else float('inf')
    without_order = (order_match.group(2) if order_match else key).strip()

    label_match = LABEL_RANGE_PATTERN.match(without_order)
    label = (label_match.group(1) if label_match else without_order).strip()
    time_range = (label_match.group(2) if label_match else '').strip()

    return SlotMeta(
        key=key,
        label=label,
        time_range=time_range,
        is_meal=bool(MEAL_PATTERN.search(label)),
        order=order,
    )


def _text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, (list, tuple)):
        return ', '.join(str(v).strip() for v in value if str(v).strip())
    return str(value).strip()


def build_schedule_data(
    column_keys: Iterable[str],
    records: Iterable[Mapping[str, Any]],
    schedule_date: Optional[str] = None,
    report_time: Optional[str] = None,
    task_reset_time: Optional[str] = None
) -> ScheduleData:
    """
    Build a snapshot from a column list and row records.

    Args:
        column_keys: Every column of the schedule table
        records: One mapping per row, column key -> plain value. List values
            (multi-select columns) are joined with ", ".
        schedule_date: MM/DD/YYYY date of the schedule
        report_time, task_reset_time: Optional HH:MM settings passed through

    Returns:
        ScheduleData with slots sorted by (order, label); rows without a
        person are skipped
    """
    metas: List[SlotMeta] = [
        parse_slot_key(key) for key in column_keys if key not in RESERVED_COLUMNS
    ]
    metas.sort(key=lambda meta: (meta.order, meta.label))

    people = []
    cells = []
    report_flags = []
    skipped = 0

    for record in records:
        person = _text(record.get(PERSON_COLUMN))
        if not person:
            skipped += 1
            continue
        people.append(person)
        cells.append([normalize_task_value(_text(record.get(meta.key))) for meta in metas])
        report_flags.append(bool(record.get(REPORT_COLUMN)))

    if skipped:
        logger.debug(f"Skipped {skipped} schedule rows without a person")

    return ScheduleData(
        people=people,
        slots=[meta.to_slot() for meta in metas],
        cells=cells,
        report_flags=report_flags,
        schedule_date=schedule_date,
        report_time=report_time,
        task_reset_time=task_reset_time,
    )


def load_schedule_payload(payload: Dict[str, Any]) -> ScheduleData:
    """Snapshot from the JSON payload served to the hub"""
    return ScheduleData.from_dict(payload)
