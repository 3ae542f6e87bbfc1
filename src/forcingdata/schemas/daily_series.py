"""Daily series schema.

A daily series is any table keyed by calendar date: site observations,
a gridded extraction, the CO2 record broadcast to days, or the merged
forcing table itself.

Non-negotiables:
- date is naive datetime64 at midnight (site-local calendar day)
- at most one row per date; joins depend on it
- NaN is the only missing marker
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from forcingdata.schemas.validate import (
    require_columns,
    require_date_no_time,
    require_no_nulls,
    require_numeric,
    require_unique,
)

DATE_COL = "date"

# Canonical forcing variables, in output order
FORCING_VARIABLES = [
    "temp_c",
    "vpd_kpa",
    "precip_mm",
    "par_wm2",
    "cloud_frac",
    "co2_ppm",
]

# Helper inputs that are consumed while deriving VPD and never written out
HUMIDITY_VARIABLES = [
    "rh_pct",
    "qair_kgkg",
    "dewpoint_c",
]

# Physical bounds (not climate bounds) for each canonical variable
VARIABLE_RANGES: dict[str, tuple[float, float]] = {
    "temp_c": (-90.0, 60.0),
    "vpd_kpa": (0.0, 15.0),
    "precip_mm": (0.0, 2000.0),
    "par_wm2": (0.0, 2500.0),
    "cloud_frac": (0.0, 1.0),
    "co2_ppm": (0.0, 2000.0),
}


def value_columns(columns: Iterable[str]) -> list[str]:
    """Return every column except the date key, in order."""
    return [col for col in columns if col != DATE_COL]


def validate_daily_series(
    df: pd.DataFrame,
    variables: Iterable[str] | None = None,
    dataset: str = "daily_series",
) -> None:
    """Validate that a DataFrame is a well-formed daily series.

    Checks performed:
    - date column present (plus any requested variables)
    - date is datetime at midnight with no nulls
    - at most one row per date
    - variable columns are numeric

    Args:
        df: DataFrame to validate
        variables: Variable columns that must be present. Defaults to
            whatever value columns the frame carries.
        dataset: Dataset name for error messages

    Raises:
        ValueError: If any validation check fails
    """
    variables = list(variables) if variables is not None else value_columns(df.columns)
    require_columns(df.columns, [DATE_COL, *variables], dataset=dataset)

    if df.empty:
        return

    require_no_nulls(df, [DATE_COL], dataset=dataset)
    require_date_no_time(df, DATE_COL, dataset=dataset)
    require_unique(df, [DATE_COL], dataset=dataset)
    require_numeric(df, variables, dataset=dataset)
