"""
Tests for the similarity-based row ordering.
"""
import pytest

from farmhub.services.person_orderer import PersonOrderer, order_rows, similarity
from farmhub.services.schedule_types import ScheduleData, Slot


class TestSimilarity:
    """Test the pairwise similarity score."""

    def test_full_match(self, schedule, work_columns):
        """Alice and Cara match on all four columns: 4 + 0.5 * 4."""
        assert similarity(schedule, 0, 2, work_columns) == 6.0

    def test_partial_match_with_streak(self, schedule, work_columns):
        """Alice and Bob match on block1 and block2, which are adjacent work columns."""
        assert similarity(schedule, 0, 1, work_columns) == 3.0

    def test_empty_cells_never_match(self, schedule, work_columns):
        """Bob and Dan are both empty in the evening; only Water counts."""
        assert similarity(schedule, 1, 3, work_columns) == 1.5

    def test_symmetric(self, schedule, work_columns):
        for a in range(4):
            for b in range(4):
                assert similarity(schedule, a, b, work_columns) == similarity(schedule, b, a, work_columns)

    def test_note_differences_break_matches(self):
        """Comparison uses the full trimmed text, notes included."""
        data = ScheduleData(
            people=['Ana', 'Ben'],
            slots=[Slot.from_label('s', 'Block')],
            cells=[['Weeding\nnorth'], [' Weeding\nsouth ']],
        )
        assert similarity(data, 0, 1, [0]) == 0

    def test_streak_weight(self, schedule, work_columns):
        assert similarity(schedule, 0, 2, work_columns, streak_weight=0) == 4


class TestOrderRows:
    """Test the greedy ordering."""

    def test_without_anchor_starts_with_first_row(self, schedule, work_columns):
        assert order_rows(schedule, work_columns) == (0, 2, 1, 3)

    def test_anchor_goes_first(self, schedule, work_columns):
        """Bob's row leads; Alice beats Cara on a tie because she comes first."""
        assert order_rows(schedule, work_columns, anchor_row=1) == (1, 0, 2, 3)

    def test_result_is_a_permutation(self, schedule, work_columns):
        for anchor in (None, 0, 1, 2, 3):
            order = order_rows(schedule, work_columns, anchor_row=anchor)
            assert sorted(order) == [0, 1, 2, 3]

    def test_ties_keep_input_order(self):
        """Rows with nothing in common stay in their original order."""
        data = ScheduleData(
            people=['A', 'B', 'C'],
            slots=[Slot.from_label('s', 'Block')],
            cells=[['x'], ['y'], ['z']],
        )
        assert order_rows(data, [0]) == (0, 1, 2)

    def test_empty_snapshot(self):
        assert order_rows(ScheduleData(), []) == ()

    def test_anchor_outside_rows_is_ignored(self, schedule, work_columns):
        assert order_rows(schedule, work_columns, anchor_row=3, rows=[0, 1, 2]) == (0, 2, 1)

    def test_input_is_not_mutated(self, schedule, work_columns):
        rows = [3, 2, 1, 0]
        order_rows(schedule, work_columns, rows=rows)
        assert rows == [3, 2, 1, 0]


class TestPersonOrderer:
    """Test the per-snapshot orderer."""

    def test_current_user_is_case_insensitive(self, schedule, work_columns):
        orderer = PersonOrderer(schedule, work_columns, current_user='  bob ')
        assert orderer.anchor_row == 1
        assert orderer.order()[0] == 1

    def test_unknown_user_falls_back_to_first_row(self, schedule, work_columns):
        orderer = PersonOrderer(schedule, work_columns, current_user='Zed')
        assert orderer.anchor_row is None
        assert orderer.order() == (0, 2, 1, 3)

    def test_weights_default_to_config(self, schedule, work_columns, settings):
        orderer = PersonOrderer(schedule, work_columns)
        assert orderer.boost_weight == settings.ANCHOR_BOOST_WEIGHT
        assert orderer.streak_weight == settings.STREAK_WEIGHT

    def test_boost_pulls_anchor_matches_forward(self):
        """
        Without a boost, the row most like the last placed rows comes next;
        with one, the row more like the current user does.
        """
        data = ScheduleData(
            people=['Me', 'Near', 'FarFromMe', 'LikeMe'],
            slots=[Slot.from_label(s, s.upper()) for s in ('a', 'b', 'c')],
            cells=[
                ['x', 'y', 'z'],
                ['x', 'y', 'k'],
                ['m', 'y', 'k'],
                ['x', 'n', 'z'],
            ],
        )
        plain = PersonOrderer(data, [0, 1, 2], current_user='Me', boost_weight=0.0)
        boosted = PersonOrderer(data, [0, 1, 2], current_user='Me', boost_weight=1.0)
        assert plain.order() == (0, 1, 2, 3)
        assert boosted.order() == (0, 1, 3, 2)

    @pytest.mark.parametrize('boost', [0.0, 1.0, 2.25])
    def test_is_deterministic(self, schedule, work_columns, boost):
        first = PersonOrderer(schedule, work_columns, current_user='Dan', boost_weight=boost).order()
        second = PersonOrderer(schedule, work_columns, current_user='Dan', boost_weight=boost).order()
        assert first == second
        assert first[0] == 3
