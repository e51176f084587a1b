# gapsync/sheets/table.py

from __future__ import annotations

from typing import Any

from gspread.utils import rowcol_to_a1

from .schema import HEADER_ROW


def _cell_str(x: Any) -> str:
    return str(x) if x is not None else ""


def _pad_block(values: list[list[Any]], height: int, width: int) -> list[list[Any]]:
    # Sheets trims trailing empty rows/cells; callers expect a full rectangle.
    out: list[list[Any]] = []
    for i in range(height):
        row = list(values[i]) if i < len(values) else []
        row = [("" if x is None else x) for x in row[:width]]
        if len(row) < width:
            row.extend([""] * (width - len(row)))
        out.append(row)
    return out


class WorksheetTable:
    """Row/column cell access over a gspread Worksheet. Rows and columns are 1-based."""

    def __init__(self, ws) -> None:
        self.ws = ws

    def header(self) -> list[str]:
        return [_cell_str(h).strip() for h in self.ws.row_values(HEADER_ROW)]

    def last_row(self) -> int:
        return len(self.ws.get_all_values())

    def get_cell(self, row: int, col: int) -> Any:
        value = self.ws.cell(row, col).value
        return "" if value is None else value

    def set_cell(self, row: int, col: int, value: Any) -> None:
        self.ws.update_cell(row, col, value)

    def get_range(self, row: int, col: int, height: int, width: int) -> list[list[Any]]:
        if height <= 0 or width <= 0:
            return []
        a1 = f"{rowcol_to_a1(row, col)}:{rowcol_to_a1(row + height - 1, col + width - 1)}"
        return _pad_block(self.ws.get(a1), height, width)

    def set_range(self, row: int, col: int, values: list[list[Any]]) -> None:
        if not values:
            return
        width = max(len(r) for r in values)
        a1 = f"{rowcol_to_a1(row, col)}:{rowcol_to_a1(row + len(values) - 1, col + width - 1)}"
        self.ws.update(range_name=a1, values=values, value_input_option="USER_ENTERED")


class MemoryTable:
    """In-memory table with the same interface; records every write.

    Used for dry runs (snapshot of a live sheet) and tests.
    """

    def __init__(self, rows: list[list[Any]] | None = None) -> None:
        self.rows: list[list[Any]] = [list(r) for r in (rows or [])]
        self.writes: list[tuple[int, int, Any]] = []

    @classmethod
    def from_worksheet(cls, ws) -> "MemoryTable":
        return cls(ws.get_all_values())

    def header(self) -> list[str]:
        if not self.rows:
            return []
        return [_cell_str(h).strip() for h in self.rows[HEADER_ROW - 1]]

    def last_row(self) -> int:
        n = len(self.rows)
        while n > 0 and not any(_cell_str(x).strip() for x in self.rows[n - 1]):
            n -= 1
        return n

    def get_cell(self, row: int, col: int) -> Any:
        if row < 1 or col < 1:
            raise IndexError(f"Cell out of range: row={row} col={col}")
        if row > len(self.rows):
            return ""
        r = self.rows[row - 1]
        if col > len(r):
            return ""
        return "" if r[col - 1] is None else r[col - 1]

    def set_cell(self, row: int, col: int, value: Any) -> None:
        if row < 1 or col < 1:
            raise IndexError(f"Cell out of range: row={row} col={col}")
        while len(self.rows) < row:
            self.rows.append([])
        r = self.rows[row - 1]
        if len(r) < col:
            r.extend([""] * (col - len(r)))
        r[col - 1] = value
        self.writes.append((row, col, value))

    def get_range(self, row: int, col: int, height: int, width: int) -> list[list[Any]]:
        if height <= 0 or width <= 0:
            return []
        return [[self.get_cell(row + i, col + j) for j in range(width)] for i in range(height)]

    def set_range(self, row: int, col: int, values: list[list[Any]]) -> None:
        for i, r in enumerate(values):
            for j, v in enumerate(r):
                self.set_cell(row + i, col + j, v)

    def column(self, name: str) -> list[Any]:
        """Data-row values under header `name` (test/report helper)."""
        col = self.header().index(name) + 1
        return [self.get_cell(r, col) for r in range(HEADER_ROW + 1, self.last_row() + 1)]
