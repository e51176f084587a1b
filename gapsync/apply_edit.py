from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from gapsync.reactor import EditEvent, handle_edit, validate_live_columns
from gapsync.run_daily import configure_logging, resolve_today
from gapsync.sheets.client import load_sheets_config, open_table
from gapsync.sheets.schema import FIRST_DATA_ROW, ColumnMap

logger = logging.getLogger(__name__)


def _resolve_column(raw: str, columns: ColumnMap) -> int:
    raw = (raw or "").strip()
    if raw.isdigit():
        return int(raw)
    return columns.require(raw)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Apply one cell edit event to the tracker sheet.")
    parser.add_argument("--row", type=int, required=True, help="Edited row (1-based; header is row 1).")
    parser.add_argument("--column", required=True, help="Edited column: header name or 1-based index.")
    parser.add_argument("--old", default="", help="Cell value before the edit.")
    parser.add_argument("--new", default="", help="Cell value after the edit.")
    parser.add_argument("--dry-run", action="store_true", help="Apply to a snapshot; write nothing.")
    parser.add_argument("--today", default="", help="Override today's date (DD/MM/YYYY).")
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        cfg = load_sheets_config()
        today = resolve_today(args.today, cfg.timezone)
        table = open_table(cfg, dry_run=args.dry_run)

        columns = ColumnMap.from_table(table)
        missing = validate_live_columns(columns)
        if missing:
            logger.warning("tracker sheet missing columns, related edit logic disabled: %s", ", ".join(missing))

        event = EditEvent(
            row=args.row,
            column=_resolve_column(args.column, columns),
            old_value=args.old,
            new_value=args.new,
        )
        # Replays the user's edit, so the cell takes the new value first.
        if event.row >= FIRST_DATA_ROW:
            table.set_cell(event.row, event.column, args.new)
        outcome = handle_edit(table, event, today, columns=columns)

        if outcome.ignored:
            print(f"row={args.row} column={args.column} ignored=True")
            return 0

        gaps = outcome.gaps
        print(
            f"row={outcome.row} cand_followup={outcome.candidate_followup} "
            f"client_followup={outcome.client_followup} remark_stamped={outcome.remark_stamped or ''} "
            f"gaps={','.join(str(g) for g in gaps) if gaps else ''} dry_run={args.dry_run}"
        )
        return 0

    except Exception as e:
        print(f"ERROR row={args.row} err={e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
