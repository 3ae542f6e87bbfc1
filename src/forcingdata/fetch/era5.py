"""Fetch ERA5 hourly single-level fields around a site via the CDS API.

Downloads one NetCDF per year for a small box around the site into the
era5 grid folder, where extract_grid_series picks them up with the
"era5" preset (hourly -> daily mean).

Requires:
    - cdsapi package installed
    - ~/.cdsapirc configured with CDS API credentials
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path

try:
    import cdsapi
    HAS_CDS = True
except ImportError:
    HAS_CDS = False

from forcingdata.config import grid_dir
from forcingdata.sites import Site

ERA5_START_YEAR = 1940
ERA5T_LATENCY_DAYS = 5  # ERA5T (preliminary) has ~5 day latency

ERA5_DATASET = "reanalysis-era5-single-levels"

# Fields matching the "era5" preset in forcingdata.extract.grid_point
ERA5_VARIABLES = [
    "2m_temperature",
    "2m_dewpoint_temperature",
    "total_precipitation",
    "surface_solar_radiation_downwards",
    "total_cloud_cover",
]


def _site_bounding_box(lat: float, lon: float, buffer_deg: float = 0.25) -> list[float]:
    """Box around the site, one ERA5 cell (0.25 deg) in every direction.

    Returns [north, west, south, east] as required by CDS API.
    """
    return [
        min(90, lat + buffer_deg),
        max(-180, lon - buffer_deg),
        max(-90, lat - buffer_deg),
        min(180, lon + buffer_deg),
    ]


def get_era5_availability_end() -> date:
    """Latest date with ERA5T data available."""
    today = datetime.now(timezone.utc).date()
    return today - timedelta(days=ERA5T_LATENCY_DAYS)


def build_era5_request(
    year: int,
    area: list[float],
    variables: list[str],
    last_available: date,
) -> dict:
    """CDS request body for one year, trimmed to available months."""
    months = range(1, 13)
    if year == last_available.year:
        months = range(1, last_available.month + 1)

    return {
        "product_type": ["reanalysis"],
        "variable": list(variables),
        "year": [str(year)],
        "month": [f"{m:02d}" for m in months],
        "day": [f"{d:02d}" for d in range(1, 32)],
        "time": [f"{h:02d}:00" for h in range(24)],
        "area": area,
        "data_format": "netcdf",
        "download_format": "unarchived",
    }


def fetch_era5_point(
    site: Site,
    start_year: int,
    end_year: int,
    out_dir: str | Path | None = None,
    variables: list[str] | None = None,
    force: bool = False,
) -> list[Path]:
    """Fetch ERA5 hourly fields for a site, one NetCDF per year.

    Args:
        site: Site to fetch around
        start_year: First year (inclusive)
        end_year: Last year (inclusive)
        out_dir: Output directory (default data/grids/era5)
        variables: CDS variable names (default ERA5_VARIABLES)
        force: Re-download years that are already on disk

    Returns:
        List of NetCDF paths on disk, cached or new

    Raises:
        ImportError: If cdsapi is not installed
        ValueError: If the year range is invalid
    """
    if not HAS_CDS:
        raise ImportError(
            "cdsapi package is required for ERA5 data. "
            "Install with: pip install cdsapi"
        )

    if end_year < start_year:
        raise ValueError("end_year must not be before start_year")
    if start_year < ERA5_START_YEAR:
        raise ValueError(f"ERA5 data not available before {ERA5_START_YEAR}")

    output_root = Path(out_dir) if out_dir else grid_dir("era5")
    output_root.mkdir(parents=True, exist_ok=True)

    area = _site_bounding_box(site.lat, site.lon)
    last_available = get_era5_availability_end()
    variables = variables or ERA5_VARIABLES
    client = cdsapi.Client()

    written: list[Path] = []
    for year in range(start_year, end_year + 1):
        nc_path = output_root / f"era5_{site.site_id}_{year:04d}.nc"
        if nc_path.exists() and not force:
            print(f"[era5] {year}: using cached {nc_path}")
            written.append(nc_path)
            continue

        if year > last_available.year:
            print(f"[era5] {year}: year is in the future (latest data: {last_available})")
            continue

        print(f"[era5] {year}: fetching {len(variables)} variables for {site.site_id}...")
        request = build_era5_request(year, area, variables, last_available)

        tmp_path = nc_path.with_suffix(".nc.tmp")
        client.retrieve(ERA5_DATASET, request, str(tmp_path))
        tmp_path.rename(nc_path)
        written.append(nc_path)

        print(f"[era5] {year}: wrote {nc_path}")

    return written
