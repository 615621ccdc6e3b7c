"""
Tests for building snapshots from schedule table rows and JSON payloads.
"""
import math

import pytest

from farmhub.error_handlers.exceptions import ValidationException
from farmhub.services.schedule_loader import (
    build_schedule_data,
    load_schedule_payload,
    parse_slot_key,
)
from farmhub.services.schedule_types import ScheduleData, Slot


class TestParseSlotKey:
    """Test column key parsing."""

    def test_full_key(self):
        meta = parse_slot_key('2 | Morning Chores (7:30-9:00)')
        assert meta.order == 2
        assert meta.label == 'Morning Chores'
        assert meta.time_range == '7:30-9:00'
        assert meta.is_meal is False

    def test_key_without_order_or_range(self):
        meta = parse_slot_key('Lunch')
        assert math.isinf(meta.order)
        assert meta.label == 'Lunch'
        assert meta.time_range == ''
        assert meta.is_meal is True

    def test_slot_id_is_the_raw_key(self):
        slot = parse_slot_key('1 | Breakfast (7:00-7:30)').to_slot()
        assert slot == Slot(id='1 | Breakfast (7:00-7:30)', label='Breakfast', time_range='7:00-7:30', is_meal=True)


class TestBuildScheduleData:
    """Test build_schedule_data."""

    @pytest.fixture
    def columns(self):
        return [
            'Person',
            '2 | Work Block 1 (9:00-10:30)',
            'Dinner (5:30pm-6:30pm)',
            '1 | Morning Chores (7:30-9:00)',
            'Report',
        ]

    def test_slots_are_sorted_by_order_then_label(self, columns):
        data = build_schedule_data(columns, [])
        assert [s.label for s in data.slots] == ['Morning Chores', 'Work Block 1', 'Dinner']
        assert data.slots[2].is_meal

    def test_rows_are_normalized(self, columns):
        records = [
            {
                'Person': ' Alice ',
                '1 | Morning Chores (7:30-9:00)': ['Feed Goats', 'Water'],
                '2 | Work Block 1 (9:00-10:30)': '-\nnothing today',
                'Report': True,
            },
            {'Person': '', '1 | Morning Chores (7:30-9:00)': 'Water'},
            {'Person': 'Bob', '2 | Work Block 1 (9:00-10:30)': '  Weeding\nBring gloves  '},
        ]
        data = build_schedule_data(columns, records, schedule_date='10/19/2026')

        assert data.people == ('Alice', 'Bob')
        assert data.cells == (
            ('Feed Goats, Water', '', ''),
            ('', 'Weeding\nBring gloves', ''),
        )
        assert data.report_flags == (True, False)
        assert data.schedule_date == '10/19/2026'


class TestPayload:
    """Test the JSON snapshot shape."""

    def test_round_trip(self, schedule):
        assert load_schedule_payload(schedule.to_dict()) == schedule

    def test_snake_case_keys_and_derived_meal_flag(self):
        data = ScheduleData.from_dict({
            'people': ['Ana'],
            'slots': [{'id': 'l', 'label': 'Lunch', 'time_range': '12-1pm'}],
            'cells': [['Dishes']],
            'schedule_date': '10/19/2026',
        })
        assert data.slots[0].is_meal is True
        assert data.slots[0].time_range == '12-1pm'
        assert data.schedule_date == '10/19/2026'

    def test_malformed_slot_drops_its_column(self):
        """Cells stay aligned with the slots that remain after a bad slot entry."""
        data = ScheduleData.from_dict({
            'people': ['Ana', 'Ben'],
            'slots': ['junk', {'id': 'b', 'label': 'Work Block 2'}],
            'cells': [['Weeding', 'Harvest'], ['Compost']],
        })
        assert [s.id for s in data.slots] == ['b']
        assert data.cells == (('Harvest',), ('',))
        assert data.cell(0, 0) == 'Harvest'

    def test_placeholder_cells_read_as_empty(self):
        data = ScheduleData.from_dict({
            'people': ['Ana'],
            'slots': [{'id': 'a', 'label': 'A'}, {'id': 'b', 'label': 'B'}],
            'cells': [['-', '-, Water']],
        })
        assert data.cell(0, 0) == ''
        assert data.cell(0, 1) == '-, Water'

    def test_missing_keys_degrade_to_empty(self):
        data = ScheduleData.from_dict({})
        assert data.people == ()
        assert data.slots == ()

    def test_non_mapping_payload_is_rejected(self):
        with pytest.raises(ValidationException) as exc_info:
            load_schedule_payload(['not', 'a', 'mapping'])
        assert exc_info.value.details == {'received_type': 'list'}

    def test_ragged_rows_read_as_empty(self):
        data = ScheduleData(
            people=['Ana', 'Ben'],
            slots=[Slot.from_label('a', 'A'), Slot.from_label('b', 'B')],
            cells=[['x']],
        )
        assert data.cell(0, 1) == ''
        assert data.cell(1, 0) == ''
        assert data.cell(-1, 0) == ''
