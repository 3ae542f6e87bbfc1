"""Sub-daily series schema.

Sub-daily tables come from site instruments (half-hourly or hourly
loggers) or from hourly gridded products. Timestamps are naive site-local
time; the calendar date of a reading is ts normalized to midnight.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from forcingdata.schemas.validate import (
    require_columns,
    require_no_nulls,
    require_numeric,
    require_unique,
)

TS_COL = "ts"


def validate_subdaily_series(
    df: pd.DataFrame,
    variables: Iterable[str] | None = None,
    require_unique_ts: bool = True,
    dataset: str = "subdaily_series",
) -> None:
    """Validate that a DataFrame is a well-formed sub-daily series.

    Checks performed:
    - ts column present (plus any requested variables)
    - ts is naive datetime (site-local) with no nulls
    - ts unique (optional)
    - variable columns are numeric

    Raises:
        ValueError: If any validation check fails
    """
    if variables is None:
        variables = [col for col in df.columns if col != TS_COL]
    variables = list(variables)
    require_columns(df.columns, [TS_COL, *variables], dataset=dataset)

    if df.empty:
        return

    require_no_nulls(df, [TS_COL], dataset=dataset)
    if not pd.api.types.is_datetime64_any_dtype(df[TS_COL]):
        raise ValueError(f"[{dataset}]Wrong dtype: column '{TS_COL}' must be datetime64, got {df[TS_COL].dtype}")
    if df[TS_COL].dt.tz is not None:
        raise ValueError(
            f"[{dataset}]Wrong dtype: column '{TS_COL}' must be naive site-local time, got {df[TS_COL].dtype}"
        )
    if require_unique_ts:
        require_unique(df, [TS_COL], dataset=dataset)
    require_numeric(df, variables, dataset=dataset)
