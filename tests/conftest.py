from datetime import date

import pytest

from gapsync.sheets.table import MemoryTable

TODAY = date(2025, 11, 20)

HEADER = [
    "Name",
    "Cand_Date_update",
    "Cand_followup",
    "Client_Date_update",
    "Client_followup",
    "Status",
    "Remark_date_change",
    "candidate_gap",
    "client_gap",
    "Remark_gap",
]

ROWS = [
    ["Asha", "10/11/2025", "1", "18/11/2025", "0", "Applied", "01/11/2025", "", "", ""],
    ["Ben", "", "", "19-11-2025", "2", "Interview", "09/11/2025", "3", "3", "7"],
    ["Chen", "20.11.2025", "4", "", "", "", "", "", "", ""],
    ["Dina", "31/02/2025", "0", "25/12/2025", "0", "Offer", "not a date", "", "", ""],
]


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_table():
    def _make(header=None, rows=None):
        return MemoryTable([list(header or HEADER)] + [list(r) for r in (ROWS if rows is None else rows)])

    return _make
