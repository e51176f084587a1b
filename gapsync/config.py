# gapsync/config.py

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

from .dates import parse_date
from .gaps import GapPolicy


def _repo_root() -> Path:
    # .../gapsync/config.py -> repo root
    return Path(__file__).resolve().parents[1]


def default_exclusions_path() -> Path:
    override = os.getenv("GAPSYNC_EXCLUSIONS_PATH", "").strip()
    if override:
        return Path(override)
    return _repo_root() / "config" / "exclusions.yml"


def _load_exclusions_yml(path: Path) -> Dict:
    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("Missing dependency: PyYAML. Install with: pip install pyyaml") from e

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must be a mapping with skip_dates / skip_rows")
    return data


def load_gap_policy(path: Optional[Path] = None) -> GapPolicy:
    """Reads batch exclusions from YAML. A missing file means no exclusions.

    Expected shape:
      skip_dates: ["09/11/2025", ...]   # sheet date format, day/month/year
      skip_rows: [12, 40]
    """
    path = path or default_exclusions_path()
    if not path.exists():
        return GapPolicy()

    data = _load_exclusions_yml(path)

    raw_dates = data.get("skip_dates") or []
    raw_rows = data.get("skip_rows") or []
    if not isinstance(raw_dates, list) or not isinstance(raw_rows, list):
        raise ValueError(f"{path.name}: skip_dates and skip_rows must be lists")

    dates = set()
    for item in raw_dates:
        d = parse_date(item)
        if d is None:
            raise ValueError(f"{path.name}: unparseable skip_dates entry: {item!r}")
        dates.add(d)

    rows = set()
    for item in raw_rows:
        try:
            rows.add(int(item))
        except (TypeError, ValueError) as e:
            raise ValueError(f"{path.name}: skip_rows entries must be integers, got {item!r}") from e

    return GapPolicy(skip_dates=frozenset(dates), skip_rows=frozenset(rows))
