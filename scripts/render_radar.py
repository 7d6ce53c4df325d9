"""Render a radar to a standalone SVG file.

Usage:
  python scripts/render_radar.py \\
      --db radar.db \\
      --radar 3f2a...e1 \\
      --user-email alice@example.com \\
      --size 1000 \\
      --seed 42 \\
      --output radar.svg
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

from tech_radar.geometry.layout import LayoutConfig
from tech_radar.radar.storage import RadarStorage
from tech_radar.web.service import RadarNotFoundError, RadarService
from tech_radar.web.svg import render_svg


def main() -> None:
    ap = argparse.ArgumentParser(description="Render a technology radar as SVG")
    ap.add_argument("--db", required=True, help="SQLite database path")
    ap.add_argument("--radar", required=True, help="Radar ID")
    ap.add_argument("--user-email", required=True, help="E-mail of the radar owner")
    ap.add_argument("--size", type=float, default=800.0, help="Canvas size in pixels")
    ap.add_argument("--seed", type=int, default=None, help="Seed for collision resolution")
    ap.add_argument("--output", default="radar.svg", help="Output SVG file path")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    storage = RadarStorage(args.db)
    try:
        user = storage.get_user_by_email(args.user_email.strip().lower())
    finally:
        storage.close()
    if user is None:
        print(f"  [!] No user with e-mail {args.user_email!r}", file=sys.stderr)
        sys.exit(1)

    service = RadarService(
        args.db,
        rng=random.Random(args.seed),
        layout_config=LayoutConfig(canvas_size=args.size),
    )
    try:
        radar = service.get_radar(user, args.radar)
    except RadarNotFoundError:
        print(f"  [!] Radar not found: {args.radar!r}", file=sys.stderr)
        sys.exit(1)

    layout = service.build_layout(radar)
    Path(args.output).write_text(render_svg(layout), encoding="utf-8")
    print(f"{radar.name}: {len(layout.positioned_blips)} blip(s) → {args.output}")
    print("[OK] done")


if __name__ == "__main__":
    main()
