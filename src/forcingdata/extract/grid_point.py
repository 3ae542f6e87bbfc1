"""Extract single-point daily series from gridded NetCDF products.

Gridded files live under <data_dir>/<source>/ and may be split any way
the provider ships them (one file per year, per month, per variable).
Every file is opened, the nearest grid cell to the site is selected, and
each mapped variable found in the file is collected. Values are
converted to canonical units as value * scale + offset.

Resolutions:
- daily:   one value per day, used as-is
- hourly:  reduced to a full-day mean per calendar date
- monthly: each day of a month receives the month's value
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import pandas as pd
import xarray as xr

from forcingdata.aggregate.daily_mean import daily_mean
from forcingdata.schemas.daily_series import DATE_COL, validate_daily_series
from forcingdata.schemas.subdaily_series import TS_COL

RESOLUTIONS = ("daily", "hourly", "monthly")

# Share of shortwave irradiance in the PAR band
PAR_FRACTION = 0.5

KELVIN_OFFSET = -273.15

_LAT_NAMES = ("lat", "latitude")
_LON_NAMES = ("lon", "longitude")
_TIME_NAMES = ("time", "valid_time")


@dataclass(frozen=True)
class GridVariable:
    """How one canonical variable is read from a gridded product."""

    source_var: str
    scale: float = 1.0
    offset: float = 0.0

    @classmethod
    def coerce(cls, spec: GridVariable | str | Mapping[str, Any]) -> GridVariable:
        if isinstance(spec, GridVariable):
            return spec
        if isinstance(spec, str):
            return cls(spec)
        return cls(**spec)


SOURCE_PRESETS: dict[str, dict[str, Any]] = {
    # WATCH Forcing Data methodology applied to ERA-Interim
    "watch_wfdei": {
        "resolution": "daily",
        "variables": {
            "temp_c": GridVariable("Tair", offset=KELVIN_OFFSET),
            "precip_mm": GridVariable("Rainf", scale=86400.0),  # kg m-2 s-1 -> mm d-1
            "par_wm2": GridVariable("SWdown", scale=PAR_FRACTION),
            "qair_kgkg": GridVariable("Qair"),
        },
    },
    "era5": {
        "resolution": "hourly",
        "variables": {
            "temp_c": GridVariable("t2m", offset=KELVIN_OFFSET),
            "dewpoint_c": GridVariable("d2m", offset=KELVIN_OFFSET),
            # Hourly accumulations in m; mean of (tp * 24000) is the daily total in mm
            "precip_mm": GridVariable("tp", scale=24000.0),
            # Hourly accumulations in J m-2
            "par_wm2": GridVariable("ssrd", scale=PAR_FRACTION / 3600.0),
            "cloud_frac": GridVariable("tcc"),
        },
    },
    # CRU TS monthly cloud cover, in percent
    "cru": {
        "resolution": "monthly",
        "variables": {
            "cloud_frac": GridVariable("cld", scale=0.01),
        },
    },
}


def _coord_name(ds: xr.Dataset, candidates: tuple[str, ...], path: Path) -> str:
    for name in candidates:
        if name in ds.coords or name in ds.dims:
            return name
    raise ValueError(f"[extract] {path}: none of the coordinates {list(candidates)} found")


def _point_series(
    path: Path,
    variables: Mapping[str, GridVariable],
    lon: float,
    lat: float,
    start_year: int,
    end_year: int,
) -> dict[str, pd.Series]:
    """Nearest-cell series for each mapped variable present in one file."""
    found: dict[str, pd.Series] = {}
    with xr.open_dataset(path) as ds:
        present = {name: spec for name, spec in variables.items() if spec.source_var in ds.data_vars}
        if not present:
            return found

        lat_name = _coord_name(ds, _LAT_NAMES, path)
        lon_name = _coord_name(ds, _LON_NAMES, path)
        time_name = _coord_name(ds, _TIME_NAMES, path)

        # Grids stored on 0..360 need the site longitude wrapped
        target_lon = lon
        if float(ds[lon_name].max()) > 180 and lon < 0:
            target_lon = lon + 360.0

        for name, spec in present.items():
            point = ds[spec.source_var].sel(
                {lat_name: lat, lon_name: target_lon},
                method="nearest",
            )
            # Drop singleton dims such as height or expver, never time
            singletons = [d for d in point.dims if d != time_name and point.sizes[d] == 1]
            point = point.squeeze(singletons, drop=True)
            if point.dims != (time_name,):
                raise ValueError(
                    f"[extract] {path}: '{spec.source_var}' has dims {point.dims} after point selection"
                )
            series = point.to_series()
            series.index = pd.to_datetime(series.index)
            years = series.index.year
            series = series[(years >= start_year) & (years <= end_year)]
            found[name] = series.astype(float) * spec.scale + spec.offset
    return found


def _broadcast_monthly(monthly: pd.DataFrame, start_year: int, end_year: int) -> pd.DataFrame:
    days = pd.date_range(f"{start_year}-01-01", f"{end_year}-12-31", freq="D", name=DATE_COL)
    by_month = monthly.copy()
    by_month.index = by_month.index.to_period("M")
    by_month = by_month[~by_month.index.duplicated(keep="first")]
    values = by_month.reindex(days.to_period("M"))
    values.index = days
    return values.reset_index()


def extract_grid_series(
    site_id: str,
    source: str,
    variables: Mapping[str, GridVariable | str | Mapping[str, Any]],
    data_dir: Path | str,
    resolution: str,
    lon: float,
    lat: float,
    start_year: int,
    end_year: int,
    file_glob: str = "*.nc",
) -> pd.DataFrame:
    """Extract a daily series for one site from a named gridded source.

    Args:
        site_id: Site identifier (used for messages only)
        source: Source name; files are read from <data_dir>/<source>/
        variables: Mapping canonical name -> GridVariable (or source
            variable name, or dict of GridVariable fields)
        data_dir: Root directory holding one folder per source
        resolution: "daily", "hourly" or "monthly"
        lon: Site longitude (degrees east, -180..180)
        lat: Site latitude (degrees north)
        start_year: First year to keep (inclusive)
        end_year: Last year to keep (inclusive)
        file_glob: Pattern of files to read inside the source folder

    Returns:
        Daily series with date and one column per mapped variable

    Raises:
        ValueError: If resolution is unknown or the year range is inverted
        FileNotFoundError: If no files match
        KeyError: If a mapped source variable is in none of the files
    """
    if resolution not in RESOLUTIONS:
        raise ValueError(f"Unknown resolution '{resolution}' (expected one of {RESOLUTIONS})")
    if end_year < start_year:
        raise ValueError(f"end_year ({end_year}) must not be before start_year ({start_year})")

    specs = {name: GridVariable.coerce(spec) for name, spec in variables.items()}
    source_dir = Path(data_dir) / source
    files = sorted(source_dir.glob(file_glob))
    if not files:
        raise FileNotFoundError(f"No files matching {file_glob} in {source_dir}")

    collected: dict[str, list[pd.Series]] = {name: [] for name in specs}
    for path in files:
        for name, series in _point_series(path, specs, lon, lat, start_year, end_year).items():
            collected[name].append(series)

    absent = [specs[name].source_var for name, parts in collected.items() if not parts]
    if absent:
        raise KeyError(f"Variables {absent} not found in any file under {source_dir}")

    columns = {}
    for name, parts in collected.items():
        series = pd.concat(parts).sort_index()
        columns[name] = series[~series.index.duplicated(keep="first")]
    table = pd.DataFrame(columns)
    names = list(specs)

    if resolution == "hourly":
        subdaily = table.rename_axis(TS_COL).reset_index()
        daily = daily_mean(subdaily, names)
    elif resolution == "monthly":
        daily = _broadcast_monthly(table, start_year, end_year)
    else:
        table.index = table.index.normalize()
        daily = table.rename_axis(DATE_COL).reset_index()

    daily = daily.sort_values(DATE_COL).reset_index(drop=True)
    validate_daily_series(daily, names, dataset=f"grid:{source}")
    print(f"[extract] {site_id} {source}: {len(daily)} days, variables {names}")
    return daily
