"""
Data classes for the schedule consolidation engine

Snapshots are immutable once received. Every derived view is rebuilt from
the snapshot, so all types here are frozen.
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from farmhub.error_handlers.exceptions import ValidationException

logger = logging.getLogger(__name__)


MEAL_PATTERN = re.compile(r'breakfast|lunch|dinner', re.IGNORECASE)
EVENING_PATTERN = re.compile(r'evening', re.IGNORECASE)
WEEKEND_PATTERN = re.compile(r'weekend', re.IGNORECASE)

NO_SCHEDULE_MESSAGE = "No schedule has been assigned yet."

# Explicit "no task" marker used by schedulers
PLACEHOLDER_TASK = '-'


def normalize_name(name: Optional[str]) -> str:
    """Case-insensitive comparison key for person names"""
    return (name or '').strip().lower()


class Role(str, Enum):
    """Viewer roles that gate which composed views are visible"""
    STANDARD = "standard"
    EXTERNAL_VOLUNTEER = "external_volunteer"

    @classmethod
    def from_user_type(cls, user_type: Optional[str], external_label: Optional[str] = None) -> 'Role':
        """
        Map a session user type string to a role.

        Unknown or missing user types map to STANDARD.
        """
        if external_label is None:
            from farmhub.config import get_config
            external_label = get_config().EXTERNAL_VOLUNTEER_ROLE
        if normalize_name(user_type) and normalize_name(user_type) == normalize_name(external_label):
            return cls.EXTERNAL_VOLUNTEER
        return cls.STANDARD


@dataclass(frozen=True)
class Slot:
    """A named time window in the daily schedule"""
    id: str
    label: str
    time_range: str = ''
    is_meal: bool = False

    @classmethod
    def from_label(cls, slot_id: str, label: str, time_range: str = '') -> 'Slot':
        """Build a slot, deriving is_meal from the label keywords"""
        return cls(
            id=slot_id,
            label=label,
            time_range=time_range,
            is_meal=bool(MEAL_PATTERN.search(label or '')),
        )

    @property
    def is_weekend(self) -> bool:
        return bool(WEEKEND_PATTERN.search(self.label or ''))

    @property
    def is_evening(self) -> bool:
        return bool(EVENING_PATTERN.search(self.label or '')) and not self.is_weekend

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'label': self.label,
            'timeRange': self.time_range,
            'isMeal': self.is_meal,
        }


def _as_text(value) -> str:
    return '' if value is None else str(value)


@dataclass(frozen=True)
class ScheduleData:
    """
    One schedule snapshot as supplied by the persistence collaborator.

    cells[row][slot_index] holds the raw assignment text. Rows may be shorter
    than the slot list; missing columns read as empty strings.
    """
    people: Tuple[str, ...] = ()
    slots: Tuple[Slot, ...] = ()
    cells: Tuple[Tuple[str, ...], ...] = ()
    report_flags: Tuple[bool, ...] = ()
    schedule_date: Optional[str] = None
    report_time: Optional[str] = None
    task_reset_time: Optional[str] = None
    message: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'people', tuple(_as_text(p) for p in self.people))
        object.__setattr__(self, 'slots', tuple(self.slots))
        object.__setattr__(
            self, 'cells',
            tuple(tuple(_as_text(c) for c in (row or ())) for row in self.cells)
        )
        object.__setattr__(self, 'report_flags', tuple(bool(f) for f in self.report_flags))

    @classmethod
    def empty(cls, message: Optional[str] = NO_SCHEDULE_MESSAGE) -> 'ScheduleData':
        """Snapshot used when nothing could be loaded"""
        return cls(message=message)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'ScheduleData':
        """
        Build a snapshot from the JSON shape returned by the schedule API.

        Missing keys degrade to empty values.

        Raises:
            ValidationException: If payload is not a mapping
        """
        if not isinstance(payload, dict):
            raise ValidationException(
                'Snapshot payload must be a mapping',
                details={'received_type': type(payload).__name__}
            )

        slots = []
        kept_columns = []
        for column, raw in enumerate(payload.get('slots') or []):
            if not isinstance(raw, dict):
                logger.debug(f"Dropping malformed slot entry at column {column}: {raw!r}")
                continue
            kept_columns.append(column)
            label = _as_text(raw.get('label'))
            is_meal = raw.get('isMeal', raw.get('is_meal'))
            slots.append(Slot(
                id=_as_text(raw.get('id', label)),
                label=label,
                time_range=_as_text(raw.get('timeRange', raw.get('time_range'))),
                is_meal=bool(MEAL_PATTERN.search(label)) if is_meal is None else bool(is_meal),
            ))

        cells = payload.get('cells') or ()
        if len(kept_columns) != len(payload.get('slots') or ()):
            # Keep every row aligned with the slots that survived
            cells = [
                [row[c] if c < len(row) else '' for c in kept_columns]
                for row in (r or () for r in cells)
            ]

        return cls(
            people=payload.get('people') or (),
            slots=slots,
            cells=cells,
            report_flags=payload.get('reportFlags') or payload.get('report_flags') or (),
            schedule_date=payload.get('scheduleDate') or payload.get('schedule_date'),
            report_time=payload.get('reportTime') or payload.get('report_time'),
            task_reset_time=payload.get('taskResetTime') or payload.get('task_reset_time'),
            message=payload.get('message'),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'people': list(self.people),
            'slots': [slot.to_dict() for slot in self.slots],
            'cells': [list(row) for row in self.cells],
        }
        if self.report_flags:
            result['reportFlags'] = list(self.report_flags)
        for key, value in (
            ('scheduleDate', self.schedule_date),
            ('reportTime', self.report_time),
            ('taskResetTime', self.task_reset_time),
            ('message', self.message),
        ):
            if value is not None:
                result[key] = value
        return result

    def cell(self, row: int, slot_index: int) -> str:
        """
        Trimmed cell text.

        Out-of-range positions and cells whose first line is only the "-"
        placeholder read as ''.
        """
        if row < 0 or row >= len(self.cells) or slot_index < 0:
            return ''
        cells_row = self.cells[row]
        if slot_index >= len(cells_row):
            return ''
        text = cells_row[slot_index].strip()
        if text.split('\n', 1)[0].strip() == PLACEHOLDER_TASK:
            return ''
        return text

    def slot_index(self, slot_id: str) -> Optional[int]:
        for idx, slot in enumerate(self.slots):
            if slot.id == slot_id:
                return idx
        return None

    def slot_indices(self, slots: Iterable[Slot]) -> List[int]:
        """Snapshot column indices of the given slots, skipping unknown ones"""
        indices = []
        for slot in slots:
            idx = self.slot_index(slot.id)
            if idx is not None:
                indices.append(idx)
        return indices

    def find_person(self, name: Optional[str]) -> Optional[int]:
        """First row whose person matches name case-insensitively"""
        key = normalize_name(name)
        if not key:
            return None
        for idx, person in enumerate(self.people):
            if normalize_name(person) == key:
                return idx
        return None

    def report_flag(self, row: Optional[int]) -> bool:
        if row is None or row < 0 or row >= len(self.report_flags):
            return False
        return self.report_flags[row]

    @property
    def meal_slots(self) -> Tuple[Slot, ...]:
        return tuple(slot for slot in self.slots if slot.is_meal)

    @property
    def work_slots(self) -> Tuple[Slot, ...]:
        return tuple(slot for slot in self.slots if not slot.is_meal)

    @property
    def row_count(self) -> int:
        return len(self.people)

    def only_person(self, name: Optional[str]) -> 'ScheduleData':
        """
        Restrict the snapshot to one person's row.

        Falls back to the full snapshot if the person is not on the roster.
        """
        row = self.find_person(name)
        if row is None or row >= len(self.cells):
            return self
        return ScheduleData(
            people=(self.people[row],),
            slots=self.slots,
            cells=(self.cells[row],),
            report_flags=(self.report_flag(row),),
            schedule_date=self.schedule_date,
            report_time=self.report_time,
            task_reset_time=self.task_reset_time,
            message=self.message,
        )


@dataclass(frozen=True)
class CellEntry:
    """One task parsed out of a cell, plus the cell's shared note"""
    task_name: str
    note: str = ''

    @property
    def display_text(self) -> str:
        return f"{self.task_name}\n{self.note}" if self.note else self.task_name


@dataclass(frozen=True)
class TaskMeta:
    """Display-only metadata for a task, fetched out of band"""
    status: str = ''
    type_name: str = ''
    type_color: str = ''
    description: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TaskMeta':
        return cls(
            status=_as_text(data.get('status')),
            type_name=_as_text(data.get('typeName', data.get('type_name'))),
            type_color=_as_text(data.get('typeColor', data.get('type_color'))),
            description=_as_text(data.get('description')),
        )


@dataclass(frozen=True)
class SlotTaskGroup:
    """People sharing one canonical task in a slot"""
    task: str
    people: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SlotTasks:
    """Everyone assigned in a slot, and who is on which task"""
    slot: Slot
    names: Tuple[str, ...] = ()
    tasks: Tuple[SlotTaskGroup, ...] = ()

    @property
    def has_tasks(self) -> bool:
        return len(self.tasks) > 0


@dataclass(frozen=True)
class MealAssignment:
    """Flat meal-slot assignment row"""
    slot_id: str
    label: str
    time_range: str
    task: str
    people: Tuple[str, ...] = ()
    meta: Optional[TaskMeta] = None


@dataclass(frozen=True)
class ShiftTask:
    """A task card inside an evening or weekend column"""
    task: str
    people: Tuple[str, ...] = ()
    primary_person: str = 'Team'
    includes_user: bool = False
    meta: Optional[TaskMeta] = None


@dataclass(frozen=True)
class ShiftColumn:
    """One slot column of the evening or weekend table"""
    slot: Slot
    names: Tuple[str, ...] = ()
    tasks: Tuple[ShiftTask, ...] = ()

    @property
    def has_tasks(self) -> bool:
        return len(self.tasks) > 0


@dataclass(frozen=True)
class PersonTaskItem:
    slot: Slot
    task: str
    people: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PersonTasks:
    """Shift-table assignments regrouped under one person"""
    name: str
    items: Tuple[PersonTaskItem, ...] = ()


@dataclass(frozen=True)
class MyTaskEntry:
    """A task from the current user's own row"""
    slot: Slot
    entry: CellEntry
    row: int
    group_rows: Tuple[int, ...] = ()
    group_names: Tuple[str, ...] = ()
    meta: Optional[TaskMeta] = None

    @property
    def task_name(self) -> str:
        return self.entry.task_name

    @property
    def display_text(self) -> str:
        return self.entry.display_text

    @property
    def shared_with_rows(self) -> Tuple[int, ...]:
        """Other rows on the same canonical task in this slot"""
        return tuple(r for r in self.group_rows if r != self.row)


@dataclass(frozen=True)
class ScheduleHeading:
    """Title and staleness warning for the schedule date"""
    title: str
    outdated: bool = False
    message: Optional[str] = None
    is_today: bool = False
    is_yesterday: bool = False


@dataclass(frozen=True)
class SlotMeta:
    """Slot metadata parsed from a schedule column key"""
    key: str
    label: str
    time_range: str = ''
    is_meal: bool = False
    order: float = field(default=float('inf'))

    def to_slot(self) -> Slot:
        return Slot(id=self.key, label=self.label, time_range=self.time_range, is_meal=self.is_meal)
