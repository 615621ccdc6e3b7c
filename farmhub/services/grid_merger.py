"""
Grid Merger
Collapses identical adjacent cells of the ordered schedule grid into
rectangular blocks for compact display.

Two discrete passes over an immutable grid of tagged cells:

1. vertical_pass: in each column, a run of consecutive ordered rows with the
   same non-empty text becomes one AnchorCell with row_span = run length.
   Empty cells never merge.
2. horizontal_pass: an anchor absorbs the next column while that column's
   cell on the same row is still an anchor with the same row_span and every
   covered row has identical text in both columns.

Grid positions are visual: row is the position in the ordered row sequence,
column is the position in the work-column list.
"""
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple, Union

from .schedule_types import ScheduleData, Slot


@dataclass(frozen=True)
class AnchorCell:
    """Top-left cell of a merged block (or a lone cell)"""
    row: int
    column: int
    row_span: int = 1
    col_span: int = 1
    task: str = ''
    rows: Tuple[int, ...] = ()
    participants: Tuple[str, ...] = ()
    slot_ids: Tuple[str, ...] = ()

    @property
    def is_blank(self) -> bool:
        return not self.task


@dataclass(frozen=True)
class HiddenCell:
    """A position covered by the anchor at (anchor_row, anchor_column)"""
    anchor_row: int
    anchor_column: int


GridCell = Union[AnchorCell, HiddenCell]
Grid = Tuple[Tuple[GridCell, ...], ...]


@dataclass(frozen=True)
class MergedGrid:
    """Ordered, merged schedule grid ready for rendering"""
    row_order: Tuple[int, ...]
    columns: Tuple[int, ...]
    slots: Tuple[Slot, ...]
    people: Tuple[str, ...]
    cells: Grid

    def cell_at(self, row: int, column: int) -> GridCell:
        return self.cells[row][column]

    def anchors(self) -> List[AnchorCell]:
        """Every visible cell, blanks included, in row-major order"""
        return [cell for line in self.cells for cell in line if isinstance(cell, AnchorCell)]

    def merged_cells(self) -> List[AnchorCell]:
        """Visible cells that carry a task"""
        return [cell for cell in self.anchors() if not cell.is_blank]


def _anchor(data: ScheduleData, row_order, columns, row, column, row_span, text) -> AnchorCell:
    rows = tuple(row_order[row:row + row_span])
    return AnchorCell(
        row=row,
        column=column,
        row_span=row_span,
        col_span=1,
        task=text,
        rows=rows,
        participants=tuple(data.people[r] for r in rows),
        slot_ids=(data.slots[columns[column]].id,),
    )


def vertical_pass(data: ScheduleData, row_order: Sequence[int], columns: Sequence[int]) -> Grid:
    """
    Merge runs of identical non-empty cells within each column.

    Args:
        data: Schedule snapshot
        row_order: Ordered snapshot row indices
        columns: Snapshot slot indices of the displayed columns

    Returns:
        Grid indexed [visual_row][column_position]
    """
    row_order = tuple(row_order)
    columns = tuple(columns)
    num_rows = len(row_order)
    grid: List[List[GridCell]] = [[None] * len(columns) for _ in range(num_rows)]

    for c, slot_index in enumerate(columns):
        r = 0
        while r < num_rows:
            text = data.cell(row_order[r], slot_index)
            if not text:
                grid[r][c] = _anchor(data, row_order, columns, r, c, 1, '')
                r += 1
                continue

            end = r + 1
            while end < num_rows and data.cell(row_order[end], slot_index) == text:
                end += 1

            grid[r][c] = _anchor(data, row_order, columns, r, c, end - r, text)
            for covered in range(r + 1, end):
                grid[covered][c] = HiddenCell(anchor_row=r, anchor_column=c)
            r = end

    return tuple(tuple(line) for line in grid)


def _columns_match(data, row_order, rows, base_slot, next_slot) -> bool:
    for visual_row in rows:
        real_row = row_order[visual_row]
        base = data.cell(real_row, base_slot)
        if not base or base != data.cell(real_row, next_slot):
            return False
    return True


def horizontal_pass(
    data: ScheduleData,
    grid: Grid,
    row_order: Sequence[int],
    columns: Sequence[int]
) -> Grid:
    """
    Extend anchors rightwards across identical columns.

    Args:
        data: Schedule snapshot
        grid: Output of vertical_pass
        row_order: Ordered snapshot row indices
        columns: Snapshot slot indices of the displayed columns

    Returns:
        New grid; the input grid is not modified
    """
    row_order = tuple(row_order)
    columns = tuple(columns)
    out: List[List[GridCell]] = [list(line) for line in grid]
    num_cols = len(columns)

    for r, line in enumerate(out):
        c = 0
        while c < num_cols:
            cell = line[c]
            if isinstance(cell, HiddenCell) or cell.is_blank:
                c += 1
                continue

            covered_rows = range(r, r + cell.row_span)
            col_span = 1
            next_col = c + 1
            while next_col < num_cols:
                candidate = line[next_col]
                if isinstance(candidate, HiddenCell):
                    break
                if candidate.row_span != cell.row_span:
                    break
                if not _columns_match(data, row_order, covered_rows, columns[c], columns[next_col]):
                    break

                for covered in covered_rows:
                    out[covered][next_col] = HiddenCell(anchor_row=r, anchor_column=c)
                col_span += 1
                next_col += 1

            if col_span > 1:
                line[c] = replace(
                    cell,
                    col_span=col_span,
                    slot_ids=tuple(data.slots[columns[k]].id for k in range(c, c + col_span)),
                )
            c += col_span

    return tuple(tuple(line) for line in out)


def merge_grid(data: ScheduleData, row_order: Sequence[int], columns: Sequence[int]) -> MergedGrid:
    """Run both merge passes and package the result"""
    row_order = tuple(row_order)
    columns = tuple(columns)
    merged = horizontal_pass(data, vertical_pass(data, row_order, columns), row_order, columns)
    return MergedGrid(
        row_order=row_order,
        columns=columns,
        slots=tuple(data.slots[index] for index in columns),
        people=tuple(data.people[row] for row in row_order),
        cells=merged,
    )
