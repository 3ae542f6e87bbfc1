"""Site metadata lookup."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path

from forcingdata.config import sites_csv_path


@dataclass(frozen=True)
class Site:
    site_id: str
    lon: float
    lat: float
    elevation_m: float
    name: str = ""


def load_site_mapping(path: Path | None = None) -> dict[str, Site]:
    mapping_path = path or sites_csv_path()
    if not mapping_path.exists():
        raise FileNotFoundError(f"Site mapping file not found: {mapping_path}")
    mapping: dict[str, Site] = {}
    with mapping_path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            site_id = row["site_id"].strip()
            mapping[site_id.upper()] = Site(
                site_id=site_id,
                lon=float(row["lon"]),
                lat=float(row["lat"]),
                elevation_m=float(row["elevation_m"]),
                name=(row.get("name") or "").strip(),
            )
    return mapping


def resolve_site(site_id: str, path: Path | None = None) -> Site:
    mapping = load_site_mapping(path)
    key = site_id.strip().upper()
    if key not in mapping:
        raise KeyError(f"Site {site_id} not found in {path or sites_csv_path()}")
    return mapping[key]
