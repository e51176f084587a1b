# gapsync/recalc.py

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Dict, Optional

from .dates import as_day
from .gaps import NO_EXCLUSIONS, GapPolicy, compute_gap
from .sheets.schema import (
    CAND_DATE,
    CANDIDATE_GAP,
    FIRST_DATA_ROW,
    GAP_PAIRS,
    GAP_RECALC_COLUMNS,
    REMARK_DATE,
    REMARK_GAP,
    ColumnMap,
)

logger = logging.getLogger(__name__)


def recalc_all(table, today: date | datetime, policy: Optional[GapPolicy] = None) -> int:
    """Recomputes all three gaps for every data row, one cell write per gap.

    Raises MissingColumnError before any write if a date or gap column is absent.
    Returns the number of cells written.
    """
    policy = policy or NO_EXCLUSIONS
    today = as_day(today)
    cols = ColumnMap.from_table(table).require_all(GAP_RECALC_COLUMNS)

    last = table.last_row()
    writes = 0
    skipped = 0
    for row in range(FIRST_DATA_ROW, last + 1):
        if policy.skips_row(row):
            skipped += 1
            continue
        for date_name, gap_name in GAP_PAIRS:
            raw = table.get_cell(row, cols[date_name])
            if policy.skips_value(raw):
                logger.debug("recalc_all: keep %s row=%s date=%s", gap_name, row, raw)
                continue
            table.set_cell(row, cols[gap_name], compute_gap(raw, today))
            writes += 1

    logger.info("recalc_all: rows=%s writes=%s skipped_rows=%s", max(last - FIRST_DATA_ROW + 1, 0), writes, skipped)
    return writes


def _recalc_column(table, today: date, date_name: str, gap_name: str, policy: GapPolicy) -> int:
    # one bulk read; one bulk write per run of rows between exclusions
    cols = ColumnMap.from_table(table)
    date_col = cols.require(date_name)

    height = table.last_row() - FIRST_DATA_ROW + 1
    if height <= 0:
        return 0

    dates = table.get_range(FIRST_DATA_ROW, date_col, height, 1)

    runs: list[tuple[int, list[list[object]]]] = []
    current: list[list[object]] = []
    start = FIRST_DATA_ROW
    for i, (raw,) in enumerate(dates):
        row = FIRST_DATA_ROW + i
        if policy.skips_row(row) or policy.skips_value(raw):
            logger.debug("recalc %s: keep row=%s date=%s", gap_name, row, raw)
            if current:
                runs.append((start, current))
            current = []
            start = row + 1
            continue
        current.append([compute_gap(raw, today)])
    if current:
        runs.append((start, current))

    gap_col = cols.require(gap_name)
    written = 0
    for run_start, values in runs:
        table.set_range(run_start, gap_col, values)
        written += len(values)

    logger.info("recalc %s: rows=%s written=%s", gap_name, height, written)
    return written


def recalc_candidate_gaps(table, today: date | datetime, policy: Optional[GapPolicy] = None) -> int:
    """Bulk-recomputes `candidate_gap` only. Returns gap values written."""
    return _recalc_column(table, as_day(today), CAND_DATE, CANDIDATE_GAP, policy or NO_EXCLUSIONS)


def recalc_remark_gaps(table, today: date | datetime, policy: Optional[GapPolicy] = None) -> int:
    """Bulk-recomputes `Remark_gap` only. Returns gap values written."""
    return _recalc_column(table, as_day(today), REMARK_DATE, REMARK_GAP, policy or NO_EXCLUSIONS)


RECALC_MODES: Dict[str, Callable[..., int]] = {
    "all": recalc_all,
    "candidate": recalc_candidate_gaps,
    "remark": recalc_remark_gaps,
}
