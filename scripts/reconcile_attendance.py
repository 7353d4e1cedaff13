"""Repair divergence between the by-date and by-student attendance views.

Usage:
    python scripts/reconcile_attendance.py --start 2024-03-01 --end 2024-03-31 [--center ID] [--dry-run]
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.edutrack.edutrack.common.datetime_utils import format_iso_date, parse_iso_date, today_utc
from src.edutrack.edutrack.container import build_container


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--start", default=None, help="first date (YYYY-MM-DD), default today")
    parser.add_argument("--end", default=None, help="last date (YYYY-MM-DD), default --start")
    parser.add_argument("--center", default=None, help="only reconcile one center")
    parser.add_argument("--dry-run", action="store_true", help="report without writing")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(db_config=dict(settings.DB_CONFIG), secret_key=settings.SECRET_KEY)

    start = parse_iso_date(args.start or today_utc())
    end = parse_iso_date(args.end) if args.end else start

    total_repaired = 0
    day = start
    while day <= end:
        report = container.reconciler.reconcile(
            date=format_iso_date(day), dry_run=args.dry_run, center_id=args.center
        )
        total_repaired += len(report.repaired)
        print(f"{report.date}: checked={report.checked} repaired={','.join(report.repaired) or '-'}")
        day += timedelta(days=1)

    print(f"OK: {total_repaired} mark(s) {'need repair' if args.dry_run else 'repaired'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
