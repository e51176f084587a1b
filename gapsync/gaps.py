# gapsync/gaps.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, FrozenSet, NamedTuple, Optional

from .dates import as_day, parse_date


def compute_gap(value: Any, today: date | datetime) -> int:
    """Whole days between `value` and `today`, not counting today, floored at 0.

    `value` may be a date or a raw cell value; unparseable values count as no date.
    """
    d = parse_date(value)
    if d is None:
        return 0
    diff = (as_day(today) - d).days - 1
    return diff if diff > 0 else 0


class RowGaps(NamedTuple):
    candidate: int
    client: int
    remark: int


def row_gaps(candidate_value: Any, client_value: Any, remark_value: Any, today: date | datetime) -> RowGaps:
    return RowGaps(
        candidate=compute_gap(candidate_value, today),
        client=compute_gap(client_value, today),
        remark=compute_gap(remark_value, today),
    )


@dataclass(frozen=True)
class GapPolicy:
    """Exclusions honoured by batch passes.

    - skip_dates: a gap whose source date is listed keeps its stored value.
    - skip_rows: sheet rows left completely untouched.
    """

    skip_dates: FrozenSet[date] = field(default_factory=frozenset)
    skip_rows: FrozenSet[int] = field(default_factory=frozenset)

    def skips_row(self, row: int) -> bool:
        return row in self.skip_rows

    def skips_value(self, value: Any) -> bool:
        if not self.skip_dates:
            return False
        d: Optional[date] = parse_date(value)
        return d is not None and d in self.skip_dates


NO_EXCLUSIONS = GapPolicy()
