#!/usr/bin/env python3
"""CLI for downloading the Mauna Loa CO2 record.

Usage:
    python scripts/fetch_co2.py --resolution annual
    python scripts/fetch_co2.py --resolution monthly --force
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import requests  # noqa: E402

from forcingdata.fetch.co2 import CO2_URLS, fetch_co2_record, load_co2_record  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Download the NOAA GML Mauna Loa CO2 record.")
    parser.add_argument(
        "--resolution",
        choices=sorted(CO2_URLS),
        default="annual",
        help="Annual or monthly means (default: annual)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Output CSV path (default: data/raw/co2/co2_<resolution>_mlo.csv)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Force re-download even if the file exists",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    try:
        path = fetch_co2_record(args.output, resolution=args.resolution, force=args.force)
    except requests.RequestException as e:
        print(f"Error fetching CO2 record: {e}", file=sys.stderr)
        return 1

    record = load_co2_record(path, resolution=args.resolution)
    valid = record.dropna(subset=["co2_ppm"])
    print(
        f"[co2] {len(valid)} records, {int(valid['year'].min())}-{int(valid['year'].max())}, "
        f"latest {valid['co2_ppm'].iloc[-1]:.2f} ppm"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
