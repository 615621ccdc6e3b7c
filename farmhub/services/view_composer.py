"""
View Composer
Combines parsing, grouping, ordering and merging into the views the hub
renders: the main schedule grid, meal assignments, the evening and weekend
tables and the current user's task list.

Visibility is a pure filter over the composed views (see ComposedViews.for_role):
external volunteers only see weekend-derived content.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .cell_parser import task_entries
from .grid_merger import AnchorCell, MergedGrid, merge_grid
from .person_orderer import PersonOrderer
from .schedule_types import (
    CellEntry,
    MealAssignment,
    MyTaskEntry,
    PersonTaskItem,
    PersonTasks,
    Role,
    ScheduleData,
    ShiftColumn,
    ShiftTask,
    Slot,
    TaskMeta,
    normalize_name,
)
from .task_grouper import assignees_for_task, group_slot_tasks, group_slots

logger = logging.getLogger(__name__)


def primary_person(group: Iterable[str], current_user: Optional[str] = None) -> str:
    """The current user if they are in the group, else its first member"""
    members = list(group)
    if not members:
        return 'Team'
    me = normalize_name(current_user)
    if me:
        for member in members:
            if normalize_name(member) == me:
                return member
    return members[0]


def tasks_by_person(columns: Iterable[ShiftColumn]) -> List[PersonTasks]:
    """Regroup shift columns under each person, sorted by name"""
    people: Dict[str, Tuple[str, List[PersonTaskItem]]] = {}

    def ensure(person):
        name = person.strip()
        if not name:
            return None
        key = name.lower()
        if key not in people:
            people[key] = (name, [])
        return people[key][1]

    for column in columns:
        for person in column.names:
            ensure(person)
        for task in column.tasks:
            for person in task.people:
                items = ensure(person)
                if items is not None:
                    items.append(PersonTaskItem(slot=column.slot, task=task.task, people=task.people))

    return [
        PersonTasks(name=name, items=tuple(items))
        for name, items in sorted(people.values(), key=lambda pair: pair[0].lower())
    ]


@dataclass(frozen=True)
class BlockTask:
    """One task inside a merged grid block, with everyone on it in that slot"""
    entry: CellEntry
    assignees: Tuple[str, ...] = ()
    meta: Optional[TaskMeta] = None


@dataclass(frozen=True)
class ComposedViews:
    """Everything the rendering layer needs for one snapshot"""
    role: Role = Role.STANDARD
    grid: Optional[MergedGrid] = None
    meals: Tuple[MealAssignment, ...] = ()
    visible_meal_slots: Tuple[Slot, ...] = ()
    evening: Tuple[ShiftColumn, ...] = ()
    weekend: Tuple[ShiftColumn, ...] = ()
    my_tasks: Tuple[MyTaskEntry, ...] = ()
    has_weekday_content: bool = False
    report_flag: bool = False

    @property
    def show_standard(self) -> bool:
        return self.role != Role.EXTERNAL_VOLUNTEER and self.grid is not None and self.has_weekday_content

    @property
    def show_evening(self) -> bool:
        return self.role != Role.EXTERNAL_VOLUNTEER and any(c.has_tasks for c in self.evening)

    @property
    def show_weekend(self) -> bool:
        return any(c.has_tasks for c in self.weekend)

    @property
    def report_rows(self) -> Tuple[MyTaskEntry, ...]:
        return unique_report_rows(self.my_tasks)

    def for_role(self, role: Role) -> 'ComposedViews':
        """Apply the visibility gate for a viewer role"""
        if role != Role.EXTERNAL_VOLUNTEER:
            return replace(self, role=role)
        return replace(
            self,
            role=role,
            grid=None,
            meals=(),
            visible_meal_slots=(),
            evening=(),
            my_tasks=tuple(entry for entry in self.my_tasks if entry.slot.is_weekend),
        )


def unique_report_rows(entries: Iterable[MyTaskEntry]) -> Tuple[MyTaskEntry, ...]:
    """First entry per canonical task name"""
    seen = set()
    rows = []
    for entry in entries:
        if not entry.task_name or entry.task_name in seen:
            continue
        seen.add(entry.task_name)
        rows.append(entry)
    return tuple(rows)


def _coerce_meta(task_meta: Optional[Mapping[str, Any]]) -> Dict[str, TaskMeta]:
    result = {}
    for name, meta in (task_meta or {}).items():
        if isinstance(meta, TaskMeta):
            result[name] = meta
        elif isinstance(meta, Mapping):
            result[name] = TaskMeta.from_dict(meta)
    return result


class ViewComposer:
    """
    Builds the composed views for one snapshot and one viewer.

    Args:
        data: Schedule snapshot
        current_user: Viewer's name, matched case-insensitively against people
        task_meta: Optional {canonical task name -> TaskMeta or dict}, used
            for display annotation only
        known_users: Optional roster used to detect task rows in the
            evening and weekend tables
        boost_weight, streak_weight: Ordering weights (config defaults)
    """

    def __init__(
        self,
        data: ScheduleData,
        current_user: Optional[str] = None,
        task_meta: Optional[Mapping[str, Any]] = None,
        known_users: Optional[Iterable[str]] = None,
        boost_weight: Optional[float] = None,
        streak_weight: Optional[float] = None
    ):
        self.data = data
        self.current_user = current_user
        self.task_meta = _coerce_meta(task_meta)
        self.known_users = None if known_users is None else tuple(known_users)
        self.boost_weight = boost_weight
        self.streak_weight = streak_weight
        self.user_row = data.find_person(current_user)

    # ===== Slot subsets =====

    @property
    def work_slots(self) -> Tuple[Slot, ...]:
        return self.data.work_slots

    @property
    def weekday_work_slots(self) -> Tuple[Slot, ...]:
        return tuple(slot for slot in self.work_slots if not slot.is_weekend)

    @property
    def evening_slots(self) -> Tuple[Slot, ...]:
        return tuple(slot for slot in self.work_slots if slot.is_evening)

    @property
    def weekend_slots(self) -> Tuple[Slot, ...]:
        return tuple(slot for slot in self.work_slots if slot.is_weekend)

    def meta_for(self, task_name: str) -> Optional[TaskMeta]:
        return self.task_meta.get(task_name)

    # ===== Meal view =====

    def meal_assignments(self) -> Tuple[MealAssignment, ...]:
        """Flat per-task list for every meal slot, in slot order"""
        result = []
        for slot_index, slot in enumerate(self.data.slots):
            if not slot.is_meal:
                continue
            grouped = group_slot_tasks(self.data, slot_index)
            for group in grouped.tasks:
                result.append(MealAssignment(
                    slot_id=slot.id,
                    label=slot.label,
                    time_range=slot.time_range,
                    task=group.task,
                    people=group.people,
                    meta=self.meta_for(group.task),
                ))
        return tuple(result)

    def visible_meal_slots(self, meals: Optional[Iterable[MealAssignment]] = None) -> Tuple[Slot, ...]:
        """Meal slots that have at least one assignment"""
        meals = self.meal_assignments() if meals is None else meals
        used = {meal.slot_id for meal in meals}
        return tuple(slot for slot in self.data.meal_slots if slot.id in used)

    # ===== Evening / weekend tables =====

    def shift_columns(self, slots: Iterable[Slot]) -> Tuple[ShiftColumn, ...]:
        """Column-per-slot task table, without any row or column merging"""
        me = normalize_name(self.current_user)
        columns = []
        for grouped in group_slots(self.data, slots, self.known_users):
            tasks = tuple(
                ShiftTask(
                    task=group.task,
                    people=group.people,
                    primary_person=primary_person(group.people, self.current_user),
                    includes_user=bool(me) and any(normalize_name(p) == me for p in group.people),
                    meta=self.meta_for(group.task),
                )
                for group in grouped.tasks
            )
            columns.append(ShiftColumn(slot=grouped.slot, names=grouped.names, tasks=tasks))
        return tuple(columns)

    def evening_columns(self) -> Tuple[ShiftColumn, ...]:
        return self.shift_columns(self.evening_slots)

    def weekend_columns(self) -> Tuple[ShiftColumn, ...]:
        return self.shift_columns(self.weekend_slots)

    # ===== My tasks =====

    def my_tasks(self) -> Tuple[MyTaskEntry, ...]:
        """
        Every task in the current user's work-slot cells, with the rows
        sharing the same canonical task in that slot.

        Empty when the current user is not on the roster.
        """
        if self.user_row is None:
            return ()

        result = []
        for slot in self.work_slots:
            slot_index = self.data.slot_index(slot.id)
            if slot_index is None:
                continue
            for entry in task_entries(self.data.cell(self.user_row, slot_index)):
                group_rows = assignees_for_task(self.data, slot_index, entry.task_name)
                result.append(MyTaskEntry(
                    slot=slot,
                    entry=entry,
                    row=self.user_row,
                    group_rows=group_rows,
                    group_names=tuple(self.data.people[r] for r in group_rows),
                    meta=self.meta_for(entry.task_name),
                ))
        return tuple(result)

    # ===== Main grid =====

    def has_weekday_content(self) -> bool:
        """Whether any weekday work slot holds a real task"""
        for slot_index in self.data.slot_indices(self.weekday_work_slots):
            for row in range(self.data.row_count):
                if task_entries(self.data.cell(row, slot_index)):
                    return True
        return False

    def schedule_grid(self, mine_only: bool = False) -> MergedGrid:
        """
        Ordered and merged grid over the weekday work slots.

        Args:
            mine_only: Restrict the grid to the current user's row
        """
        data = self.data.only_person(self.current_user) if mine_only else self.data
        columns = data.slot_indices(self.weekday_work_slots)
        orderer = PersonOrderer(
            data,
            columns,
            current_user=self.current_user,
            boost_weight=self.boost_weight,
            streak_weight=self.streak_weight,
        )
        return merge_grid(data, orderer.order(), columns)

    def block_tasks(self, grid: MergedGrid, anchor: AnchorCell) -> Tuple[BlockTask, ...]:
        """Tasks shown inside a merged block, with their real assignees"""
        if anchor.is_blank:
            return ()
        slot_index = self.data.slot_index(grid.slots[anchor.column].id)
        entries = task_entries(anchor.task)
        blocks = []
        for entry in entries:
            rows = () if slot_index is None else assignees_for_task(self.data, slot_index, entry.task_name)
            blocks.append(BlockTask(
                entry=entry,
                assignees=tuple(self.data.people[r] for r in rows),
                meta=self.meta_for(entry.task_name),
            ))
        return tuple(blocks)

    # ===== Everything =====

    def compose(self, role: Role = Role.STANDARD, mine_only: bool = False) -> ComposedViews:
        """Build every view and apply the visibility gate for role"""
        meals = self.meal_assignments()
        views = ComposedViews(
            role=Role.STANDARD,
            grid=self.schedule_grid(mine_only=mine_only),
            meals=meals,
            visible_meal_slots=self.visible_meal_slots(meals),
            evening=self.evening_columns(),
            weekend=self.weekend_columns(),
            my_tasks=self.my_tasks(),
            has_weekday_content=self.has_weekday_content(),
            report_flag=self.data.report_flag(self.user_row),
        )
        logger.debug(
            f"Composed views: {len(views.grid.merged_cells())} blocks, {len(meals)} meal rows, "
            f"{len(views.my_tasks)} personal tasks"
        )
        return views.for_role(role)
