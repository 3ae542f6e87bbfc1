#!/usr/bin/env python3
"""CLI wrapper for assembling one site's daily forcing table.

Usage:
    python scripts/build_forcing.py --config configs/fr_pue.json

The config names the site, the output years, the gridded sources (highest
precedence first), the site observation files and the CO2 record. The
merged table is written to data/clean/forcing/<site>_forcing.csv unless
the config or --output says otherwise.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from forcingdata.config import forcing_output_path  # noqa: E402
from forcingdata.pipeline import ForcingConfig, build_site_forcing  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Assemble daily forcing for one site from grids, site records and CO2."
    )
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the run config JSON",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Override the output path (.csv or .parquet)",
    )
    parser.add_argument(
        "--plots",
        action="store_true",
        help="Write QA plots (default dir data/qa/<site>)",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Write the resolved config next to the output",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    if not args.config.exists():
        print(f"[pipeline] ERROR: config not found: {args.config}", file=sys.stderr)
        return 1

    config = ForcingConfig.load(args.config)
    if args.output is not None:
        config.output_path = str(args.output)
    if args.plots:
        config.make_plots = True

    forcing = build_site_forcing(config)

    if args.save_config:
        output_path = Path(config.output_path) if config.output_path else forcing_output_path(config.site.site_id)
        saved = config.save(output_path.with_suffix(".config.json"))
        print(f"[pipeline] saved config to {saved}")

    print(f"[pipeline] done: {len(forcing)} days for {config.site.site_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
