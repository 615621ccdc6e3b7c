"""
Person Orderer
Computes a display order of schedule rows that puts people with identical
assignments next to each other, so the grid merger can build larger blocks.

Greedy nearest-neighbour insertion:
1. The current user's row goes first; without one, the first row does.
2. Each step appends the unplaced row with the highest score, where
   score = sum of similarity to every placed row
         + ANCHOR_BOOST_WEIGHT * similarity to the current user's row.
   Ties go to the candidate that comes first in the input order.

Similarity of two rows over the work columns:
    matches + STREAK_WEIGHT * longest run of consecutive matching columns
where a column matches when both trimmed cells are equal and non-empty.
"""
import logging
from typing import Dict, Optional, Sequence, Tuple

from .schedule_types import ScheduleData

logger = logging.getLogger(__name__)


def similarity(
    data: ScheduleData,
    row_a: int,
    row_b: int,
    columns: Sequence[int],
    streak_weight: float = 0.5
) -> float:
    """
    Similarity score of two rows over a column subset.

    Args:
        data: Schedule snapshot
        row_a, row_b: Row indices
        columns: Snapshot slot indices to compare (work slots)
        streak_weight: Weight of the longest consecutive matching run

    Returns:
        matches + streak_weight * longest_streak
    """
    matches = 0
    streak = 0
    best_streak = 0
    for column in columns:
        text_a = data.cell(row_a, column)
        if text_a and text_a == data.cell(row_b, column):
            matches += 1
            streak += 1
            best_streak = max(best_streak, streak)
        else:
            streak = 0
    return matches + streak_weight * best_streak


def order_rows(
    data: ScheduleData,
    columns: Sequence[int],
    anchor_row: Optional[int] = None,
    boost_weight: float = 1.0,
    streak_weight: float = 0.5,
    rows: Optional[Sequence[int]] = None
) -> Tuple[int, ...]:
    """
    Order rows so that similar rows are adjacent.

    Args:
        data: Schedule snapshot
        columns: Snapshot slot indices used for similarity
        anchor_row: Row of the current user, placed first when present
        boost_weight: Weight of similarity to the anchor row
        streak_weight: Weight of the longest matching run
        rows: Rows to order (defaults to every row of the snapshot)

    Returns:
        New tuple holding a permutation of rows
    """
    rows = tuple(range(data.row_count)) if rows is None else tuple(rows)
    if not rows:
        return ()

    has_anchor = anchor_row is not None and anchor_row in rows
    first = anchor_row if has_anchor else rows[0]

    remaining = [row for row in rows if row != first]

    def sim(a, b):
        return similarity(data, a, b, columns, streak_weight)

    # Running sum of similarity to every placed row
    placed_score: Dict[int, float] = {row: sim(first, row) for row in remaining}
    boost: Dict[int, float] = {
        row: (boost_weight * sim(anchor_row, row) if has_anchor else 0.0)
        for row in remaining
    }

    order = [first]
    while remaining:
        best_pos = 0
        best_score = -1.0
        for pos, row in enumerate(remaining):
            score = placed_score[row] + boost[row]
            if score > best_score:
                best_score = score
                best_pos = pos

        chosen = remaining.pop(best_pos)
        order.append(chosen)
        for row in remaining:
            placed_score[row] += sim(chosen, row)

    return tuple(order)


class PersonOrderer:
    """
    Orders one snapshot's rows around the current user.

    Ordering is keyed to the snapshot, not the clock; build one per snapshot.
    """

    def __init__(
        self,
        data: ScheduleData,
        columns: Sequence[int],
        current_user: Optional[str] = None,
        boost_weight: Optional[float] = None,
        streak_weight: Optional[float] = None
    ):
        if boost_weight is None or streak_weight is None:
            from farmhub.config import get_config
            settings = get_config()
            if boost_weight is None:
                boost_weight = settings.ANCHOR_BOOST_WEIGHT
            if streak_weight is None:
                streak_weight = settings.STREAK_WEIGHT

        self.data = data
        self.columns = tuple(columns)
        self.boost_weight = boost_weight
        self.streak_weight = streak_weight
        self.anchor_row = data.find_person(current_user)

        if current_user and self.anchor_row is None:
            logger.debug(f"Current user {current_user!r} not on roster; anchoring on first row")

    def similarity(self, row_a: int, row_b: int) -> float:
        return similarity(self.data, row_a, row_b, self.columns, self.streak_weight)

    def order(self) -> Tuple[int, ...]:
        return order_rows(
            self.data,
            self.columns,
            anchor_row=self.anchor_row,
            boost_weight=self.boost_weight,
            streak_weight=self.streak_weight,
        )
