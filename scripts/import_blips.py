"""Import blips from a CSV file into an existing radar.

Usage:
  python scripts/import_blips.py \\
      --db radar.db \\
      --radar 3f2a...e1 \\
      --user-email alice@example.com \\
      --csv blips.csv

Rows with errors are skipped and listed; the others are still imported.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

from tech_radar.radar.csv_import import CsvImportError
from tech_radar.radar.storage import RadarStorage
from tech_radar.web.service import RadarNotFoundError, RadarService


def main() -> None:
    ap = argparse.ArgumentParser(description="Import radar blips from CSV")
    ap.add_argument("--db", required=True, help="SQLite database path")
    ap.add_argument("--radar", required=True, help="Radar ID")
    ap.add_argument("--user-email", required=True, help="E-mail of the radar owner")
    ap.add_argument("--csv", required=True, help="CSV file (name, quadrant, ring[, description, isNew])")
    ap.add_argument("--seed", type=int, default=None, help="Seed for blip offsets")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"Database : {args.db}")
    print(f"Radar    : {args.radar}")
    print(f"CSV      : {args.csv}")
    print()

    storage = RadarStorage(args.db)
    try:
        user = storage.get_user_by_email(args.user_email.strip().lower())
    finally:
        storage.close()
    if user is None:
        print(f"  [!] No user with e-mail {args.user_email!r}", file=sys.stderr)
        sys.exit(1)

    service = RadarService(args.db, rng=random.Random(args.seed))
    csv_text = Path(args.csv).read_text(encoding="utf-8")
    try:
        result = service.import_csv(user, args.radar, csv_text)
    except RadarNotFoundError:
        print(f"  [!] Radar not found: {args.radar!r}", file=sys.stderr)
        sys.exit(1)
    except CsvImportError as exc:
        print(f"  [!] {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Imported {result.imported} blip(s)")
    for err in result.errors:
        print(f"  - {err}")
    print("\n[OK] done")


if __name__ == "__main__":
    main()
