#!/usr/bin/env python3
"""CLI for fetching ERA5 hourly fields around a site.

Usage:
    python scripts/fetch_era5.py --site FR-Pue --start-year 2000 --end-year 2014

Files land in data/grids/era5/ where the "era5" grid preset reads them.

Requirements:
    - cdsapi package installed
    - ~/.cdsapirc configured with CDS API credentials
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from forcingdata.fetch.era5 import fetch_era5_point  # noqa: E402
from forcingdata.sites import resolve_site  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch ERA5 hourly fields for a site.")
    parser.add_argument("--site", required=True, help="Site ID from sites/sites.csv (e.g., FR-Pue)")
    parser.add_argument("--start-year", type=int, required=True, help="First year (inclusive)")
    parser.add_argument("--end-year", type=int, required=True, help="Last year (inclusive)")
    parser.add_argument(
        "--sites-csv",
        type=Path,
        help="Site mapping CSV (default: sites/sites.csv)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Output directory (default: data/grids/era5/)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Force re-download even if files exist",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    try:
        site = resolve_site(args.site, args.sites_csv)
    except (KeyError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"[era5] Fetching ERA5 for {site.site_id} ({site.lon}, {site.lat})")
    try:
        written_files = fetch_era5_point(
            site,
            start_year=args.start_year,
            end_year=args.end_year,
            out_dir=args.output_dir,
            force=args.force,
        )
    except ImportError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("\nThen configure your CDS API credentials in ~/.cdsapirc", file=sys.stderr)
        return 1

    print(f"\n[era5] Fetch complete. {len(written_files)} file(s):")
    for f in written_files:
        print(f"  - {f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
