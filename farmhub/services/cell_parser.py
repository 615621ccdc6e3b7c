"""
Cell Parser
Splits one free-text schedule cell into task entries.

A cell's first line is a comma-separated list of task names. Every following
line is one shared note that applies to each of those tasks:

    "Feed Goats, Water\\nRemember gloves"
      -> CellEntry("Feed Goats", "Remember gloves")
      -> CellEntry("Water", "Remember gloves")
"""
from typing import List

from .schedule_types import PLACEHOLDER_TASK, CellEntry


def parse_cell(raw: str) -> List[CellEntry]:
    """
    Parse one raw cell into entries, in first-line order.

    A note with no task tokens yields nothing. Placeholder tokens are kept;
    callers that display tasks drop them with task_entries().

    Args:
        raw: Raw cell text, possibly empty or whitespace

    Returns:
        List of CellEntry (empty for blank cells)
    """
    text = (raw or '').strip()
    if not text:
        return []

    first_line, _, rest = text.partition('\n')
    note = rest.strip()

    return [
        CellEntry(task_name=token, note=note)
        for token in (part.strip() for part in first_line.split(','))
        if token
    ]


def task_base_name(text: str) -> str:
    """Canonical task name of display text: its trimmed first line"""
    return (text or '').split('\n', 1)[0].strip()


def is_placeholder(entry: CellEntry) -> bool:
    return entry.task_name == PLACEHOLDER_TASK


def task_entries(raw: str) -> List[CellEntry]:
    """Entries of a cell with "-" placeholders removed"""
    return [entry for entry in parse_cell(raw) if not is_placeholder(entry)]


def normalize_task_value(raw: str) -> str:
    """
    Normalize a stored cell value.

    Trims the text and blanks cells whose first line is only the placeholder.
    """
    trimmed = (raw or '').strip()
    if not trimmed:
        return ''
    if task_base_name(trimmed) == PLACEHOLDER_TASK:
        return ''
    return trimmed
