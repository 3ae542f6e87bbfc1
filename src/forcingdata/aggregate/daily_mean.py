"""Aggregate sub-daily series to daily means.

This stage:
- Groups sub-daily readings by calendar date (ts normalized to midnight)
- Computes full-day means, or means restricted to an inclusive hour window
- Excludes missing readings from both the sum and the count
- Leaves a date NaN when it has no usable readings (never 0)

Temperature and VPD use the midday window by default (daytime
physiological drivers); precipitation and radiation use the full day.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from forcingdata.schemas.daily_series import DATE_COL
from forcingdata.schemas.subdaily_series import TS_COL

MIDDAY_HOUR_START = 11
MIDDAY_HOUR_END = 16

DEFAULT_WINDOW_COLUMNS = ["temp_c", "vpd_kpa"]
DEFAULT_FULL_DAY_COLUMNS = ["precip_mm", "par_wm2"]


def _mean_by_date(
    subdaily: pd.DataFrame,
    columns: list[str],
    include: pd.Series | None = None,
    with_coverage: bool = False,
) -> pd.DataFrame:
    """Reduce readings to one mean per date with explicit sum/count accumulators.

    Readings outside `include` are blanked rather than dropped, so every
    date present in the input still appears in the output.
    """
    values = subdaily[columns].astype(float)
    if include is not None:
        values.loc[~include.to_numpy()] = np.nan

    dates = subdaily[TS_COL].dt.normalize().rename(DATE_COL)
    grouped = values.groupby(dates)
    sums = grouped.sum()
    counts = grouped.count()

    daily = sums.div(counts.where(counts > 0))

    if with_coverage:
        for col in columns:
            daily[f"n_obs_{col}"] = counts[col].astype(int)

    return daily.reset_index()


def daily_mean(
    subdaily: pd.DataFrame,
    columns: Iterable[str],
    with_coverage: bool = False,
) -> pd.DataFrame:
    """Full-day mean of each column per calendar date.

    Args:
        subdaily: Sub-daily series with a ts column
        columns: Value columns to aggregate
        with_coverage: If True, add n_obs_<col> counts of readings used

    Returns:
        Daily series (date + one column per input column)
    """
    columns = list(columns)
    if subdaily.empty:
        return pd.DataFrame(columns=[DATE_COL, *columns])
    return _mean_by_date(subdaily, columns, with_coverage=with_coverage)


def window_mean(
    subdaily: pd.DataFrame,
    columns: Iterable[str],
    hour_start: int = MIDDAY_HOUR_START,
    hour_end: int = MIDDAY_HOUR_END,
    with_coverage: bool = False,
) -> pd.DataFrame:
    """Mean of readings whose hour-of-day is in [hour_start, hour_end].

    Both bounds are inclusive: with the default 11-16 window, a 16:30
    reading counts and a 17:00 reading does not.

    Raises:
        ValueError: If the window is not within 0-23 or is inverted
    """
    if not 0 <= hour_start <= hour_end <= 23:
        raise ValueError(
            f"hour window must satisfy 0 <= start <= end <= 23, got [{hour_start}, {hour_end}]"
        )

    columns = list(columns)
    if subdaily.empty:
        return pd.DataFrame(columns=[DATE_COL, *columns])

    hours = subdaily[TS_COL].dt.hour
    in_window = (hours >= hour_start) & (hours <= hour_end)
    return _mean_by_date(subdaily, columns, include=in_window, with_coverage=with_coverage)


def aggregate_subdaily(
    subdaily: pd.DataFrame,
    window_columns: Iterable[str] | None = None,
    full_day_columns: Iterable[str] | None = None,
    hour_start: int = MIDDAY_HOUR_START,
    hour_end: int = MIDDAY_HOUR_END,
    with_coverage: bool = False,
) -> pd.DataFrame:
    """Collapse a sub-daily series to one daily table.

    Columns not present in the input are skipped, so the same defaults
    work for loggers that only record a subset of variables.

    Args:
        subdaily: Sub-daily series with ts
        window_columns: Columns averaged over the hour window
            (default temp_c, vpd_kpa)
        full_day_columns: Columns averaged over the whole day
            (default precip_mm, par_wm2)
        hour_start: First hour of the window (inclusive)
        hour_end: Last hour of the window (inclusive)
        with_coverage: If True, add n_obs_<col> counts

    Returns:
        Daily series sorted by date
    """
    if window_columns is None:
        window_columns = DEFAULT_WINDOW_COLUMNS
    if full_day_columns is None:
        full_day_columns = DEFAULT_FULL_DAY_COLUMNS

    window_cols = [c for c in window_columns if c in subdaily.columns]
    full_cols = [c for c in full_day_columns if c in subdaily.columns and c not in window_cols]

    if subdaily.empty:
        return pd.DataFrame(columns=[DATE_COL, *window_cols, *full_cols])

    daily = pd.DataFrame({DATE_COL: pd.to_datetime(subdaily[TS_COL]).dt.normalize().unique()})
    if window_cols:
        windowed = window_mean(subdaily, window_cols, hour_start, hour_end, with_coverage)
        daily = daily.merge(windowed, on=DATE_COL, how="left")
    if full_cols:
        full = daily_mean(subdaily, full_cols, with_coverage)
        daily = daily.merge(full, on=DATE_COL, how="left")

    return daily.sort_values(DATE_COL).reset_index(drop=True)
