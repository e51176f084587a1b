from datetime import date

import pytest

from gapsync.gaps import GapPolicy
from gapsync.recalc import RECALC_MODES, recalc_all, recalc_candidate_gaps, recalc_remark_gaps
from gapsync.sheets.schema import MissingColumnError

from conftest import HEADER

SPECIAL = GapPolicy(skip_dates=frozenset({date(2025, 11, 9)}))


def test_full_recompute_writes_every_gap(make_table, today):
    table = make_table()
    written = recalc_all(table, today)
    assert written == 12
    assert table.column("candidate_gap") == [9, 0, 0, 0]
    assert table.column("client_gap") == [1, 0, 0, 0]
    assert table.column("Remark_gap") == [18, 10, 0, 0]


def test_full_recompute_aborts_before_writing_when_gap_column_missing(make_table, today):
    header = [h for h in HEADER if h != "client_gap"]
    rows = [["Asha", "10/11/2025", "1", "18/11/2025", "0", "Applied", "01/11/2025", "", ""]]
    table = make_table(header=header, rows=rows)
    with pytest.raises(MissingColumnError) as exc:
        recalc_all(table, today)
    assert exc.value.column == "client_gap"
    assert "client_gap" in str(exc.value)
    assert table.writes == []


def test_full_recompute_requires_date_columns_too(make_table, today):
    header = [h if h != "Remark_date_change" else "Remark date" for h in HEADER]
    table = make_table(header=header)
    with pytest.raises(MissingColumnError, match="Remark_date_change"):
        recalc_all(table, today)
    assert table.writes == []


def test_header_only_table(make_table, today):
    table = make_table(rows=[])
    assert recalc_all(table, today) == 0
    assert recalc_candidate_gaps(table, today) == 0
    assert table.writes == []


def test_fast_paths_match_full_recompute(make_table, today):
    full = make_table()
    fast = make_table()
    recalc_all(full, today)
    assert recalc_candidate_gaps(fast, today) == 4
    assert recalc_remark_gaps(fast, today) == 4
    assert fast.column("candidate_gap") == full.column("candidate_gap")
    assert fast.column("Remark_gap") == full.column("Remark_gap")


def test_candidate_fast_path_is_one_bulk_write(make_table, today):
    table = make_table()
    recalc_candidate_gaps(table, today)
    gap_col = HEADER.index("candidate_gap") + 1
    assert {c for _, c, _ in table.writes} == {gap_col}
    assert [r for r, _, _ in table.writes] == [2, 3, 4, 5]


def test_candidate_fast_path_fails_only_at_write(make_table, today):
    header = [h for h in HEADER if h != "candidate_gap"]
    rows = [r[:7] + r[8:] for r in [["Asha", "10/11/2025", "1", "", "", "", "", "", "", ""]]]
    table = make_table(header=header, rows=rows)
    with pytest.raises(MissingColumnError, match="candidate_gap"):
        recalc_candidate_gaps(table, today)
    assert table.writes == []


def test_special_date_keeps_stored_remark_gap(make_table, today):
    table = make_table()
    assert recalc_remark_gaps(table, today, SPECIAL) == 3
    assert 3 not in {r for r, _, _ in table.writes}
    assert table.column("Remark_gap") == [18, "7", 0, 0]


def test_special_date_in_full_recompute(make_table, today):
    table = make_table()
    written = recalc_all(table, today, SPECIAL)
    assert written == 11
    assert table.column("Remark_gap") == [18, "7", 0, 0]
    assert table.column("client_gap") == [1, 0, 0, 0]


def test_skipped_rows_are_untouched(make_table, today):
    table = make_table()
    policy = GapPolicy(skip_rows=frozenset({3}))
    recalc_all(table, today, policy)
    assert 3 not in {r for r, _, _ in table.writes}
    before = len(table.writes)
    assert recalc_candidate_gaps(table, today, policy) == 3
    fast_writes = table.writes[before:]
    assert [r for r, _, _ in fast_writes] == [2, 4, 5]
    assert table.column("candidate_gap") == [9, "3", 0, 0]


def test_trailing_blank_rows_are_not_data(make_table, today):
    table = make_table(rows=[["Asha", "10/11/2025", "", "", "", "", "", "", "", ""], [""] * 10])
    assert recalc_all(table, today) == 3


def test_modes_registry():
    assert set(RECALC_MODES) == {"all", "candidate", "remark"}


def test_fast_path_splits_writes_around_excluded_rows(make_table, today):
    table = make_table()
    policy = GapPolicy(skip_rows=frozenset({2, 4}))
    assert recalc_candidate_gaps(table, today, policy) == 2
    assert [r for r, _, _ in table.writes] == [3, 5]


def test_fast_path_with_every_row_excluded_writes_nothing(make_table, today):
    table = make_table()
    policy = GapPolicy(skip_rows=frozenset({2, 3, 4, 5}))
    assert recalc_candidate_gaps(table, today, policy) == 0
    assert table.writes == []
