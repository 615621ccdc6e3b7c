"""
Tests for splitting free-text schedule cells into task entries.
"""
from farmhub.services.cell_parser import (
    PLACEHOLDER_TASK,
    normalize_task_value,
    parse_cell,
    task_base_name,
    task_entries,
)
from farmhub.services.schedule_types import CellEntry


class TestParseCell:
    """Test parse_cell."""

    def test_tasks_share_the_note(self):
        """Every task on the first line gets the note from the remaining lines."""
        entries = parse_cell("Feed Goats, Water\nRemember gloves")
        assert entries == [
            CellEntry(task_name='Feed Goats', note='Remember gloves'),
            CellEntry(task_name='Water', note='Remember gloves'),
        ]

    def test_multiline_note_is_kept_whole(self):
        """Lines after the first are joined back into one note."""
        entries = parse_cell("Harvest\nBring crates\nUse the blue cart")
        assert entries == [CellEntry(task_name='Harvest', note='Bring crates\nUse the blue cart')]

    def test_blank_cells_yield_nothing(self):
        assert parse_cell('') == []
        assert parse_cell('   \n  ') == []
        assert parse_cell(None) == []

    def test_empty_tokens_are_dropped(self):
        """Stray commas and whitespace do not produce empty tasks."""
        entries = parse_cell(" , Weeding ,, ")
        assert [e.task_name for e in entries] == ['Weeding']

    def test_order_follows_first_line(self):
        entries = parse_cell("Water, Compost, Feed Goats")
        assert [e.task_name for e in entries] == ['Water', 'Compost', 'Feed Goats']

    def test_display_text_round_trips_through_parse(self):
        """Parsing an entry's display text gives back the same entry."""
        for entry in parse_cell("Feed Goats, Water\nRemember gloves"):
            assert parse_cell(entry.display_text) == [entry]

    def test_display_text_without_note(self):
        assert CellEntry(task_name='Water').display_text == 'Water'


class TestPlaceholders:
    """Test handling of the "-" no-task marker."""

    def test_parse_keeps_placeholder(self):
        assert [e.task_name for e in parse_cell('-')] == [PLACEHOLDER_TASK]

    def test_task_entries_drop_placeholder(self):
        assert task_entries('-') == []
        assert [e.task_name for e in task_entries('-, Water')] == ['Water']

    def test_normalize_blanks_placeholder_cells(self):
        """A cell whose first line is only "-" is stored as empty."""
        assert normalize_task_value('-') == ''
        assert normalize_task_value(' -\nnothing today ') == ''

    def test_normalize_trims_real_tasks(self):
        assert normalize_task_value('  Water\nnote  ') == 'Water\nnote'

    def test_normalize_is_idempotent(self):
        for raw in ['  Water\nnote  ', '-', '', 'Feed Goats, Water']:
            once = normalize_task_value(raw)
            assert normalize_task_value(once) == once


def test_task_base_name():
    """Canonical name is the trimmed first line."""
    assert task_base_name(' Weeding \nBring gloves') == 'Weeding'
    assert task_base_name('') == ''
