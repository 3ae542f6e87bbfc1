"""Daily forcing output schema.

This is the terminal artifact of a run: one row per date in the requested
year range, handed to the downstream vegetation model.

Key rules:
- date covers every calendar day of the requested years, no holes
- doy is the day-of-year of date (1..366), the climatology key
- variables may be NaN only where no tier could fill them
- fill_flags records which tiers were used on each date
"""

from __future__ import annotations

from typing import TypedDict

import pandas as pd

from forcingdata.schemas.daily_series import (
    DATE_COL,
    FORCING_VARIABLES,
    VARIABLE_RANGES,
    validate_daily_series,
)
from forcingdata.schemas.validate import (
    require_columns,
    require_contiguous_days,
    require_nonnegative_int,
    require_range,
    require_sorted,
)


class DailyForcing(TypedDict):
    """Daily forcing record for a single site."""

    date: pd.Timestamp  # Calendar date (midnight, site-local)
    doy: int  # Day of year, 1..366
    temp_c: float  # Air temperature, midday mean (C)
    vpd_kpa: float  # Vapor-pressure deficit, midday mean (kPa)
    precip_mm: float  # Precipitation (mm per day)
    par_wm2: float  # Photosynthetically active radiation, daily mean (W m-2)
    cloud_frac: float  # Cloud cover fraction (0-1)
    co2_ppm: float  # Atmospheric CO2 (ppm)
    fill_flags: int  # Gap-fill provenance (bitmask, 0 = all observed)


# Column order for DataFrame operations
FORCING_FIELDS = [DATE_COL, "doy", *FORCING_VARIABLES, "fill_flags"]

REQUIRED_COLUMNS = FORCING_FIELDS.copy()

_DATASET_NAME = "daily_forcing"


def validate_daily_forcing(df: pd.DataFrame) -> None:
    """Validate that a DataFrame conforms to the daily forcing schema.

    Checks performed:
    - All required columns present
    - date unique, midnight, ascending, one row per calendar day
    - doy matches date and lies in [1, 366]
    - each variable within its physical bounds (NaN allowed)
    - fill_flags non-negative

    Raises:
        ValueError: If any validation check fails
    """
    require_columns(df.columns, REQUIRED_COLUMNS, dataset=_DATASET_NAME)

    if df.empty:
        return

    validate_daily_series(df, FORCING_VARIABLES, dataset=_DATASET_NAME)
    require_sorted(df, DATE_COL, dataset=_DATASET_NAME)
    require_contiguous_days(df, DATE_COL, dataset=_DATASET_NAME)

    require_range(df, "doy", lo=1, hi=366, dataset=_DATASET_NAME)
    mismatch = df["doy"] != df[DATE_COL].dt.dayofyear
    if mismatch.any():
        raise ValueError(
            f"[{_DATASET_NAME}]doy mismatch: doy disagrees with date "
            f"({int(mismatch.sum())} rows) | sample indices: {df.index[mismatch].tolist()[:5]}"
        )

    for var, (lo, hi) in VARIABLE_RANGES.items():
        require_range(df, var, lo=lo, hi=hi, dataset=_DATASET_NAME)

    require_nonnegative_int(df, "fill_flags", dataset=_DATASET_NAME)
