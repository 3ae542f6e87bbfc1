"""Day-of-year climatology profiles.

The profile is a reduce-by-key over day-of-year: a running sum and a
count of non-missing values per DOY, finalized by division. A DOY that
never saw a value stays NaN rather than 0.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from forcingdata.schemas.daily_series import DATE_COL

DOY_COL = "doy"

# Leap years carry DOY 366
ALL_DOYS = pd.RangeIndex(1, 367, name=DOY_COL)


def day_of_year(dates: pd.Series) -> pd.Series:
    return dates.dt.dayofyear.rename(DOY_COL)


def compute_climatology(daily: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Mean of each column per day-of-year over every year in the table.

    Args:
        daily: Daily series with a date column
        columns: Value columns to profile

    Returns:
        DataFrame indexed by doy (1..366), one column per input column
    """
    columns = list(columns)
    if daily.empty:
        return pd.DataFrame(index=ALL_DOYS, columns=columns, dtype=float)

    values = daily[columns].astype(float)
    grouped = values.groupby(day_of_year(daily[DATE_COL]))
    sums = grouped.sum()
    counts = grouped.count()

    profile = sums.div(counts.where(counts > 0))
    return profile.reindex(ALL_DOYS)


def climatology_for_dates(profile: pd.DataFrame, dates: pd.Series, column: str) -> pd.Series:
    """Look up the profile value of each date's day-of-year."""
    doys = day_of_year(dates)
    return pd.Series(
        profile[column].reindex(doys).to_numpy(),
        index=dates.index,
        name=column,
    )
