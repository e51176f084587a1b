# gapsync/reactor.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from .dates import as_day, format_display
from .gaps import RowGaps, compute_gap
from .sheets.schema import (
    CAND_DATE,
    CAND_FOLLOWUP,
    CLIENT_DATE,
    CLIENT_FOLLOWUP,
    FIRST_DATA_ROW,
    GAP_PAIRS,
    NOT_FOUND,
    REMARK_DATE,
    STATUS,
    TRACKER_COLUMNS_V1,
    ColumnMap,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditEvent:
    row: int
    column: int
    old_value: Any = None
    new_value: Any = None


@dataclass
class EditOutcome:
    row: int
    candidate_followup: Optional[int] = None
    client_followup: Optional[int] = None
    remark_stamped: Optional[str] = None
    gaps: Optional[RowGaps] = None

    @property
    def ignored(self) -> bool:
        return (
            self.candidate_followup is None
            and self.client_followup is None
            and self.remark_stamped is None
            and self.gaps is None
        )


def _blank(v: Any) -> str:
    return "" if v is None else str(v).strip()


def _read_count(table, row: int, col: int) -> int:
    raw = _blank(table.get_cell(row, col))
    try:
        n = int(float(raw)) if raw else 0
    except (ValueError, OverflowError):
        return 0
    return n if n > 0 else 0


def next_followup(count: int, old: Any, new: Any, count_first_entry: bool = True) -> int:
    """Follow-up counter transition for one date edit.

    Clearing the date resets to 0; setting a new, different date counts one
    follow-up. With `count_first_entry=False` the first date entry leaves the
    counter alone (client follow-ups only count changes).
    """
    old_s, new_s = _blank(old), _blank(new)
    if not new_s:
        return 0
    if not old_s:
        return count + 1 if count_first_entry else count
    if old_s != new_s:
        return count + 1
    return count


def validate_live_columns(columns: ColumnMap) -> list[str]:
    """Columns the edit handler would silently skip. Caller decides policy."""
    return columns.missing(TRACKER_COLUMNS_V1)


def recompute_row_gaps(table, row: int, columns: ColumnMap, today: date) -> RowGaps:
    """Recomputes and writes the three gaps for one row, cell by cell."""
    values = []
    for date_name, gap_name in GAP_PAIRS:
        date_col = columns.get(date_name)
        gap_col = columns.get(gap_name)
        raw = table.get_cell(row, date_col) if date_col != NOT_FOUND else None
        gap = compute_gap(raw, today)
        if gap_col != NOT_FOUND:
            table.set_cell(row, gap_col, gap)
        values.append(gap)
    return RowGaps(*values)


def _update_followup(table, event: EditEvent, counter_col: int, count_first_entry: bool) -> Optional[int]:
    if counter_col == NOT_FOUND:
        return None
    current = _read_count(table, event.row, counter_col)
    updated = next_followup(current, event.old_value, event.new_value, count_first_entry=count_first_entry)
    table.set_cell(event.row, counter_col, updated)
    return updated


def handle_edit(table, event: EditEvent, today: date, columns: Optional[ColumnMap] = None) -> EditOutcome:
    """Reacts to a single-cell edit: follow-up counters, remark stamp, gaps.

    Every change is written to `table` immediately.
    """
    outcome = EditOutcome(row=event.row)
    if event.row < FIRST_DATA_ROW:
        return outcome

    today = as_day(today)
    if columns is None:
        columns = ColumnMap.from_table(table)

    cand_date = columns.get(CAND_DATE)
    client_date = columns.get(CLIENT_DATE)
    remark_date = columns.get(REMARK_DATE)
    status = columns.get(STATUS)
    col = event.column

    if col == cand_date:
        outcome.candidate_followup = _update_followup(
            table, event, columns.get(CAND_FOLLOWUP), count_first_entry=True
        )
    elif col == client_date:
        outcome.client_followup = _update_followup(
            table, event, columns.get(CLIENT_FOLLOWUP), count_first_entry=False
        )

    recompute = col in (cand_date, client_date, remark_date) and col != NOT_FOUND

    if col == status and col != NOT_FOUND:
        new_s = _blank(event.new_value)
        if new_s and new_s != _blank(event.old_value) and remark_date != NOT_FOUND:
            stamp = format_display(today)
            table.set_cell(event.row, remark_date, stamp)
            outcome.remark_stamped = stamp
        recompute = True

    if recompute:
        outcome.gaps = recompute_row_gaps(table, event.row, columns, today)

    logger.debug(
        "handle_edit row=%s col=%s cand=%s client=%s stamp=%s gaps=%s",
        event.row,
        col,
        outcome.candidate_followup,
        outcome.client_followup,
        outcome.remark_stamped,
        outcome.gaps,
    )
    return outcome
