from __future__ import annotations

import argparse
import logging
import os
from typing import Optional, Sequence

from gapsync.config import load_gap_policy
from gapsync.dates import make_today_provider, parse_date
from gapsync.recalc import RECALC_MODES
from gapsync.sheets.client import load_sheets_config, open_table


def configure_logging(verbose: bool = False) -> None:
    level = "DEBUG" if verbose else os.getenv("GAPSYNC_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def resolve_today(raw: str, tz_name: str = ""):
    if raw:
        d = parse_date(raw)
        if d is None:
            raise ValueError(f"Unparseable --today value: {raw!r} (expected DD/MM/YYYY)")
        return d
    return make_today_provider(tz_name)()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Recompute gap columns on the tracker sheet.")
    parser.add_argument("--mode", choices=sorted(RECALC_MODES), default="all", help="Which gaps to recompute.")
    parser.add_argument("--dry-run", action="store_true", help="Compute against a snapshot; write nothing.")
    parser.add_argument("--today", default="", help="Override today's date (DD/MM/YYYY).")
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        cfg = load_sheets_config()
        today = resolve_today(args.today, cfg.timezone)
        policy = load_gap_policy()

        table = open_table(cfg, dry_run=args.dry_run)
        written = RECALC_MODES[args.mode](table, today, policy)

        if args.dry_run:
            print(f"[DRY-RUN] would write {written} gap value(s)")

        print(
            f"mode={args.mode} today={today.isoformat()} rows={max(table.last_row() - 1, 0)} "
            f"written={written} dry_run={args.dry_run}"
        )
        return 0

    except Exception as e:
        print(f"ERROR mode={args.mode} err={e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
