"""
Task Grouper
Maps a slot to {canonical task -> people} by parsing every row's cell.

Grouping keys on the canonical task name only, so two people with the same
task but different notes land in the same group.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from .cell_parser import task_entries
from .schedule_types import ScheduleData, Slot, SlotTaskGroup, SlotTasks, normalize_name


def _add_unique(bucket: List[str], value: str):
    if value not in bucket:
        bucket.append(value)


def group_slot_tasks(
    data: ScheduleData,
    slot_index: int,
    known_users: Optional[Iterable[str]] = None
) -> SlotTasks:
    """
    Group one slot's assignments by canonical task name.

    Args:
        data: Schedule snapshot
        slot_index: Column index into data.slots
        known_users: Optional roster of real user names. When given, a row
            whose person is not on the roster is read as a task row: the
            row label is the task and the cell lists the people on it.

    Returns:
        SlotTasks with the people in the slot and the per-task groups,
        both in first-seen row order
    """
    slot = data.slots[slot_index]
    known = None if known_users is None else {normalize_name(u) for u in known_users}

    task_map: Dict[str, List[str]] = {}
    names: List[str] = []

    for row, person in enumerate(data.people):
        cell = data.cell(row, slot_index)
        if not cell:
            continue

        if known is None or normalize_name(person) in known:
            for entry in task_entries(cell):
                _add_unique(task_map.setdefault(entry.task_name, []), person)
                _add_unique(names, person)
        else:
            task_name = person.strip()
            assigned = [entry.task_name for entry in task_entries(cell)]
            if not task_name or not assigned:
                continue
            bucket = task_map.setdefault(task_name, [])
            for assignee in assigned:
                _add_unique(bucket, assignee)
                _add_unique(names, assignee)

    return SlotTasks(
        slot=slot,
        names=tuple(names),
        tasks=tuple(SlotTaskGroup(task=task, people=tuple(people)) for task, people in task_map.items()),
    )


def group_slots(
    data: ScheduleData,
    slots: Iterable[Slot],
    known_users: Optional[Iterable[str]] = None
) -> List[SlotTasks]:
    """Group several slots; slots missing from the snapshot yield empty groups"""
    known = None if known_users is None else tuple(known_users)
    result = []
    for slot in slots:
        slot_index = data.slot_index(slot.id)
        if slot_index is None:
            result.append(SlotTasks(slot=slot))
            continue
        result.append(group_slot_tasks(data, slot_index, known))
    return result


def assignees_for_task(data: ScheduleData, slot_index: int, task_name: str) -> Tuple[int, ...]:
    """Rows whose cell in this slot contains the canonical task name"""
    if not task_name:
        return ()
    rows = []
    for row in range(data.row_count):
        cell = data.cell(row, slot_index)
        if not cell:
            continue
        if any(entry.task_name == task_name for entry in task_entries(cell)):
            rows.append(row)
    return tuple(rows)
