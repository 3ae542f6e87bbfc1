"""Load site-measured daily and sub-daily observation tables.

Site files come straight off the instrument export: dates split into
year/month/day columns (daily tables) or a date-time string, sometimes
split into separate date and time strings (sub-daily tables). Column
names are whatever the logger wrote; `columns` maps them to canonical
variable names and every other column is dropped.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

import pandas as pd

from forcingdata.schemas.daily_series import DATE_COL, validate_daily_series
from forcingdata.schemas.subdaily_series import TS_COL, validate_subdaily_series

# Sentinels seen in logger exports
DEFAULT_NA_VALUES = ["", "NA", "NaN", "nan", "-9999", "-9999.0", "-6999"]


def _numeric_columns(raw: pd.DataFrame, columns: Mapping[str, str], path: Path) -> pd.DataFrame:
    """Select, rename and coerce the mapped measurement columns."""
    missing = [src for src in columns if src not in raw.columns]
    if missing:
        raise ValueError(f"[load] {path}: missing columns {missing}")

    values = raw[list(columns)].rename(columns=dict(columns))
    return values.apply(pd.to_numeric, errors="coerce")


def load_daily_obs(
    path: Path | str,
    columns: Mapping[str, str],
    year_col: str = "year",
    month_col: str = "month",
    day_col: str = "day",
    na_values: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Read a daily observation CSV into a daily series.

    Args:
        path: CSV file path
        columns: Mapping of raw column name -> canonical variable name
        year_col: Column holding the year
        month_col: Column holding the month
        day_col: Column holding the day of month
        na_values: Strings treated as missing (default DEFAULT_NA_VALUES)

    Returns:
        Daily series sorted by date

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a date cannot be built or dates repeat
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Daily observation file not found: {path}")

    raw = pd.read_csv(path, na_values=na_values or DEFAULT_NA_VALUES, keep_default_na=True)
    missing = [c for c in (year_col, month_col, day_col) if c not in raw.columns]
    if missing:
        raise ValueError(f"[load] {path}: missing date columns {missing}")

    parts = pd.DataFrame(
        {
            "year": raw[year_col],
            "month": raw[month_col],
            "day": raw[day_col],
        }
    )
    try:
        dates = pd.to_datetime(parts, errors="raise")
    except (ValueError, TypeError) as exc:
        raise ValueError(f"[load] {path}: invalid year/month/day values: {exc}") from exc

    df = _numeric_columns(raw, columns, path)
    df.insert(0, DATE_COL, dates)
    df = df.sort_values(DATE_COL).reset_index(drop=True)

    validate_daily_series(df, list(columns.values()), dataset=f"daily_obs:{path.name}")
    if df.empty:
        print(f"[load] {path.name}: no rows")
    else:
        date_range = f"{df[DATE_COL].min().date()} to {df[DATE_COL].max().date()}"
        print(f"[load] {path.name}: {len(df)} daily rows, {date_range}")
    return df


def load_subdaily_obs(
    path: Path | str,
    columns: Mapping[str, str],
    datetime_cols: Sequence[str] = ("datetime",),
    datetime_format: str | None = None,
    na_values: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Read a sub-daily observation CSV into a sub-daily series.

    Args:
        path: CSV file path
        columns: Mapping of raw column name -> canonical variable name
        datetime_cols: One combined date-time column, or several (e.g. a
            date string and a time string) joined with a space
        datetime_format: strptime format of the joined string; inferred
            when None
        na_values: Strings treated as missing (default DEFAULT_NA_VALUES)

    Returns:
        Sub-daily series sorted by ts

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If any timestamp cannot be parsed or timestamps repeat
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sub-daily observation file not found: {path}")

    datetime_cols = list(datetime_cols)
    raw = pd.read_csv(
        path,
        na_values=na_values or DEFAULT_NA_VALUES,
        keep_default_na=True,
        dtype={c: "string" for c in datetime_cols},
    )
    missing = [c for c in datetime_cols if c not in raw.columns]
    if missing:
        raise ValueError(f"[load] {path}: missing timestamp columns {missing}")

    stamp = raw[datetime_cols[0]].str.strip()
    for col in datetime_cols[1:]:
        stamp = stamp + " " + raw[col].str.strip()

    try:
        ts = pd.to_datetime(stamp, format=datetime_format, errors="raise")
    except (ValueError, TypeError) as exc:
        raise ValueError(f"[load] {path}: unparseable timestamps: {exc}") from exc

    df = _numeric_columns(raw, columns, path)
    df.insert(0, TS_COL, ts)
    df = df.sort_values(TS_COL).reset_index(drop=True)

    validate_subdaily_series(df, list(columns.values()), dataset=f"subdaily_obs:{path.name}")
    print(f"[load] {path.name}: {len(df)} sub-daily rows")
    return df
