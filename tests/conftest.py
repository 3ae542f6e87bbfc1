"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import xarray as xr


@pytest.fixture
def make_daily_series():
    """Factory fixture for creating daily series DataFrames."""

    def _make(
        n_rows: int = 5,
        start_date: str | datetime = "2020-07-01",
        base: float = 20.0,
        variable: str = "temp_c",
    ) -> pd.DataFrame:
        dates = pd.date_range(start=start_date, periods=n_rows, freq="D")
        return pd.DataFrame(
            {
                "date": dates,
                variable: [base + (i % 5) for i in range(n_rows)],
            }
        )

    return _make


@pytest.fixture
def make_subdaily_series():
    """Factory fixture for creating hourly sub-daily DataFrames."""

    def _make(
        n_days: int = 2,
        start_date: str | datetime = "2020-07-01",
        temp_base: float = 10.0,
    ) -> pd.DataFrame:
        ts = pd.date_range(start=start_date, periods=24 * n_days, freq="h")
        return pd.DataFrame(
            {
                "ts": ts,
                "temp_c": [temp_base + t.hour for t in ts],
                "par_wm2": [max(0.0, 100.0 * (6 - abs(t.hour - 12))) for t in ts],
            }
        )

    return _make


@pytest.fixture
def make_forcing():
    """Factory fixture for creating forcing tables that pass validation."""

    def _make(year: int = 2020) -> pd.DataFrame:
        dates = pd.date_range(f"{year}-01-01", f"{year}-12-31", freq="D")
        n = len(dates)
        doy = dates.dayofyear
        return pd.DataFrame(
            {
                "date": dates,
                "doy": doy.astype(int),
                "temp_c": 10 + 10 * np.sin(2 * np.pi * (doy - 100) / 365.25),
                "vpd_kpa": np.full(n, 1.2),
                "precip_mm": np.full(n, 2.0),
                "par_wm2": np.full(n, 80.0),
                "cloud_frac": np.full(n, 0.4),
                "co2_ppm": np.full(n, 412.0),
                "fill_flags": np.zeros(n, dtype=int),
            }
        )

    return _make


@pytest.fixture
def write_grid():
    """Factory fixture writing a small lat/lon/time NetCDF grid.

    The cell nearest (lat=43.75, lon=3.5) holds `value`; every other cell
    holds `value + 100` so a wrong cell is easy to spot.
    """

    def _write(
        path: Path,
        variable: str,
        times: pd.DatetimeIndex,
        value: float | np.ndarray,
        lats: list[float] | None = None,
        lons: list[float] | None = None,
        lat_name: str = "lat",
        lon_name: str = "lon",
        time_name: str = "time",
    ) -> Path:
        lats = lats if lats is not None else [43.25, 43.75, 44.25]
        lons = lons if lons is not None else [3.0, 3.5, 4.0]
        data = np.full((len(times), len(lats), len(lons)), np.nan)
        values = np.broadcast_to(np.asarray(value, dtype=float), (len(times),))
        data[:] = (values + 100.0)[:, None, None]
        data[:, 1, 1] = values

        ds = xr.Dataset(
            {variable: ((time_name, lat_name, lon_name), data)},
            coords={time_name: times, lat_name: lats, lon_name: lons},
        )
        path.parent.mkdir(parents=True, exist_ok=True)
        ds.to_netcdf(path)
        return path

    return _write
