"""
Services package for the schedule consolidation engine
"""

from .schedule_types import (
    Role,
    Slot,
    ScheduleData,
    CellEntry,
    TaskMeta,
    SlotTasks,
    MealAssignment,
    ShiftColumn,
    MyTaskEntry,
    ScheduleHeading
)

from .cell_parser import parse_cell, task_entries
from .time_range import TimeRange, TimeRangeResolver, parse_time_range, current_slot_id
from .task_grouper import group_slot_tasks, group_slots
from .person_orderer import PersonOrderer, order_rows
from .grid_merger import AnchorCell, HiddenCell, MergedGrid, merge_grid
from .schedule_loader import build_schedule_data, parse_slot_key
from .view_composer import ComposedViews, ViewComposer
from .schedule_board import ScheduleBoard

__all__ = [
    # Schedule types
    'Role',
    'Slot',
    'ScheduleData',
    'CellEntry',
    'TaskMeta',
    'SlotTasks',
    'MealAssignment',
    'ShiftColumn',
    'MyTaskEntry',
    'ScheduleHeading',
    # Parsing
    'parse_cell',
    'task_entries',
    'TimeRange',
    'TimeRangeResolver',
    'parse_time_range',
    'current_slot_id',
    'build_schedule_data',
    'parse_slot_key',
    # Consolidation
    'group_slot_tasks',
    'group_slots',
    'PersonOrderer',
    'order_rows',
    'AnchorCell',
    'HiddenCell',
    'MergedGrid',
    'merge_grid',
    'ComposedViews',
    'ViewComposer',
    'ScheduleBoard',
]
