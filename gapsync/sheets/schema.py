# gapsync/sheets/schema.py

from __future__ import annotations

from typing import Iterable

TRACKER_SHEET_NAME_DEFAULT = "tracker"

HEADER_ROW = 1
FIRST_DATA_ROW = 2

CAND_DATE = "Cand_Date_update"
CAND_FOLLOWUP = "Cand_followup"
CLIENT_DATE = "Client_Date_update"
CLIENT_FOLLOWUP = "Client_followup"
STATUS = "Status"
REMARK_DATE = "Remark_date_change"
CANDIDATE_GAP = "candidate_gap"
CLIENT_GAP = "client_gap"
REMARK_GAP = "Remark_gap"

# Every column the live-edit handler looks at.
TRACKER_COLUMNS_V1: list[str] = [
    CAND_DATE,
    CAND_FOLLOWUP,
    CLIENT_DATE,
    CLIENT_FOLLOWUP,
    STATUS,
    REMARK_DATE,
    CANDIDATE_GAP,
    CLIENT_GAP,
    REMARK_GAP,
]

# Columns the full recompute refuses to run without. Order is the check order.
GAP_RECALC_COLUMNS: list[str] = [
    CAND_DATE,
    CLIENT_DATE,
    REMARK_DATE,
    CANDIDATE_GAP,
    CLIENT_GAP,
    REMARK_GAP,
]

# (date column, gap column) pairs.
GAP_PAIRS: list[tuple[str, str]] = [
    (CAND_DATE, CANDIDATE_GAP),
    (CLIENT_DATE, CLIENT_GAP),
    (REMARK_DATE, REMARK_GAP),
]

NOT_FOUND = 0


class MissingColumnError(KeyError):
    def __init__(self, column: str) -> None:
        super().__init__(column)
        self.column = column

    def __str__(self) -> str:
        return f"Tracker sheet missing required column: {self.column}"


def _header_index(header: list[str]) -> dict[str, int]:
    # 1-based; first occurrence wins on duplicate names
    idx: dict[str, int] = {}
    for i, h in enumerate(header, start=1):
        name = (str(h) if h is not None else "").strip()
        if name and name not in idx:
            idx[name] = i
    return idx


class ColumnMap:
    """Header name -> 1-based column index, resolved once from the header row."""

    def __init__(self, header: list[str]) -> None:
        self._idx = _header_index(header)

    @classmethod
    def from_table(cls, table) -> "ColumnMap":
        return cls(table.header())

    def get(self, name: str) -> int:
        """Index of `name`, or NOT_FOUND (0) when absent."""
        return self._idx.get(name, NOT_FOUND)

    def require(self, name: str) -> int:
        col = self._idx.get(name)
        if col is None:
            raise MissingColumnError(name)
        return col

    def require_all(self, names: Iterable[str]) -> dict[str, int]:
        return {name: self.require(name) for name in names}

    def missing(self, names: Iterable[str]) -> list[str]:
        return [n for n in names if n not in self._idx]

    def __contains__(self, name: object) -> bool:
        return name in self._idx
