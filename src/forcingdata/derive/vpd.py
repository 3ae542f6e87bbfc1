"""Vapor-pressure deficit from humidity and temperature.

Formulas follow FAO-56 (Allen et al. 1998):
- saturation vapor pressure: es = 0.6108 * exp(17.27 T / (T + 237.3))  [kPa]
- standard-atmosphere pressure: P = 101.3 * ((293 - 0.0065 z) / 293) ** 5.26  [kPa]

All functions accept floats, numpy arrays or pandas Series. NaN in any input
gives NaN in the output; nothing is ever filled in here. VPD is clipped at 0
so supersaturated readings do not produce negative deficits.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from forcingdata.schemas.daily_series import DATE_COL
from forcingdata.schemas.subdaily_series import TS_COL

# Ratio of molecular weights of water vapor and dry air
EPSILON = 0.622


def saturation_vapor_pressure(temp_c):
    """Saturation vapor pressure (kPa) at air temperature temp_c (C)."""
    return 0.6108 * np.exp((17.27 * temp_c) / (temp_c + 237.3))


def pressure_from_elevation(elevation_m):
    """Mean atmospheric pressure (kPa) at elevation_m above sea level."""
    return 101.3 * ((293.0 - 0.0065 * elevation_m) / 293.0) ** 5.26


def _deficit(es, ea):
    # np.maximum propagates NaN, unlike np.fmax
    return np.maximum(es - ea, 0.0)


def vpd_from_relative_humidity(rh_pct, temp_c):
    """VPD (kPa) from relative humidity (%) and air temperature (C)."""
    es = saturation_vapor_pressure(temp_c)
    return _deficit(es, es * rh_pct / 100.0)


def vapor_pressure_from_specific_humidity(qair_kgkg, elevation_m):
    """Actual vapor pressure (kPa) from specific humidity (kg kg-1).

    Pressure is taken from the standard atmosphere at the site elevation.
    """
    patm = pressure_from_elevation(elevation_m)
    return qair_kgkg * patm / (EPSILON + (1.0 - EPSILON) * qair_kgkg)


def vpd_from_specific_humidity(qair_kgkg, temp_c, elevation_m):
    """VPD (kPa) from specific humidity, air temperature and site elevation."""
    ea = vapor_pressure_from_specific_humidity(qair_kgkg, elevation_m)
    return _deficit(saturation_vapor_pressure(temp_c), ea)


def vpd_from_dewpoint(dewpoint_c, temp_c):
    """VPD (kPa) from dew point and air temperature (both C)."""
    return _deficit(saturation_vapor_pressure(temp_c), saturation_vapor_pressure(dewpoint_c))


def compute_vpd(
    df: pd.DataFrame,
    humidity_col: str,
    temp_col: str = "temp_c",
    elevation_m: float | None = None,
) -> pd.Series:
    """Compute VPD for each row of a table from whichever humidity it carries.

    Args:
        df: Table with temp_col and humidity_col
        humidity_col: One of rh_pct, qair_kgkg, dewpoint_c
        temp_col: Air temperature column (C)
        elevation_m: Site elevation, required for qair_kgkg

    Returns:
        Series of VPD values in kPa aligned to df.index

    Raises:
        ValueError: If the humidity kind is unknown or elevation is missing
    """
    temp = df[temp_col].astype(float)
    humidity = df[humidity_col].astype(float)

    if humidity_col == "rh_pct":
        vpd = vpd_from_relative_humidity(humidity, temp)
    elif humidity_col == "qair_kgkg":
        if elevation_m is None:
            raise ValueError("elevation_m is required to derive VPD from specific humidity")
        vpd = vpd_from_specific_humidity(humidity, temp, elevation_m)
    elif humidity_col == "dewpoint_c":
        vpd = vpd_from_dewpoint(humidity, temp)
    else:
        raise ValueError(
            f"Unknown humidity column '{humidity_col}' "
            "(expected rh_pct, qair_kgkg or dewpoint_c)"
        )
    return pd.Series(vpd, index=df.index, name="vpd_kpa")


def subdaily_vpd(
    subdaily: pd.DataFrame,
    daily_humidity: pd.DataFrame,
    elevation_m: float | None = None,
    humidity_col: str = "rh_pct",
    temp_col: str = "temp_c",
) -> pd.DataFrame:
    """Build a sub-daily VPD series from sub-daily temperature and daily humidity.

    Humidity is assumed constant across the day: each sub-daily temperature
    reading is paired with the humidity of its calendar date. Readings on
    dates without a humidity value get NaN VPD.

    Args:
        subdaily: Sub-daily series with ts and temp_col
        daily_humidity: Daily series with date and humidity_col (unique dates)
        elevation_m: Site elevation, required for specific humidity
        humidity_col: Humidity column in daily_humidity
        temp_col: Temperature column in subdaily

    Returns:
        Copy of subdaily with a vpd_kpa column added
    """
    out = subdaily.copy()
    dates = out[TS_COL].dt.normalize()
    humidity = daily_humidity.set_index(DATE_COL)[humidity_col]
    if not humidity.index.is_unique:
        raise ValueError(f"daily humidity has duplicate dates in column '{DATE_COL}'")

    paired = pd.DataFrame(
        {
            temp_col: out[temp_col].to_numpy(dtype=float),
            humidity_col: humidity.reindex(dates).to_numpy(dtype=float),
        },
        index=out.index,
    )
    out["vpd_kpa"] = compute_vpd(paired, humidity_col, temp_col=temp_col, elevation_m=elevation_m)
    return out
