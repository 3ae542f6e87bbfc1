"""Validation helpers for schema enforcement.

Every helper raises ValueError with a message built from:
- Dataset name (if provided)
- The rule that failed and the offending column(s)
- Count of failing rows
- Sample of failing row indices (first 5)

Helpers silently skip columns that are absent; require_columns reports those.
"""

from __future__ import annotations

from typing import Any, Iterable

import pandas as pd


def _format_error(
    dataset: str | None,
    rule: str,
    detail: str,
    failing_indices: list[Any] | None = None,
    count: int | None = None,
) -> str:
    """Format a validation error message consistently."""
    parts = []
    if dataset:
        parts.append(f"[{dataset}]")
    parts.append(rule)
    parts.append(f": {detail}")
    if count is not None:
        parts.append(f" ({count} rows)")
    if failing_indices:
        parts.append(f" | sample indices: {failing_indices[:5]}")
    return "".join(parts)


def _raise_on_mask(
    mask: pd.Series,
    dataset: str | None,
    rule: str,
    detail: str,
) -> None:
    bad_count = int(mask.sum())
    if bad_count > 0:
        raise ValueError(
            _format_error(dataset, rule, detail, mask.index[mask].tolist(), bad_count)
        )


def require_columns(
    df_columns: Iterable[str],
    required: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if required columns are missing.

    Args:
        df_columns: Column names from a DataFrame (e.g., df.columns)
        required: Required column names
        dataset: Optional dataset name for error messages
    """
    missing = set(required) - set(df_columns)
    if missing:
        raise ValueError(
            _format_error(dataset, "Missing columns", f"{sorted(missing)}")
        )


def require_numeric(
    df: pd.DataFrame,
    cols: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if any of the given columns is not a numeric dtype.

    All-null columns read from CSV come back as object dtype; those pass.
    """
    bad = []
    for col in cols:
        if col not in df.columns:
            continue
        series = df[col]
        if pd.api.types.is_numeric_dtype(series) or series.isna().all():
            continue
        bad.append(f"{col} ({series.dtype})")
    if bad:
        raise ValueError(
            _format_error(dataset, "Non-numeric columns", ", ".join(bad))
        )


def require_no_nulls(
    df: pd.DataFrame,
    cols: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if specified columns contain null values."""
    for col in cols:
        if col not in df.columns:
            continue
        _raise_on_mask(df[col].isna(), dataset, "Null values", f"column '{col}' has nulls")


def require_unique(
    df: pd.DataFrame,
    key_cols: list[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if key columns have duplicate combinations.

    Duplicate join keys are a precondition violation for every merge in
    the pipeline, so this runs before any series is joined.
    """
    if df.empty or any(col not in df.columns for col in key_cols):
        return

    _raise_on_mask(
        df.duplicated(subset=key_cols, keep=False),
        dataset,
        "Duplicate keys",
        f"columns {key_cols} have duplicates",
    )


def require_sorted(
    df: pd.DataFrame,
    col: str,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if a column is not monotonically increasing."""
    if col not in df.columns or df.empty:
        return
    if not df[col].is_monotonic_increasing:
        raise ValueError(
            _format_error(dataset, "Not sorted", f"column '{col}' must be ascending")
        )


def require_range(
    df: pd.DataFrame,
    col: str,
    lo: float | None = None,
    hi: float | None = None,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if non-null values fall outside [lo, hi].

    Nulls are the pipeline's missing marker and always pass. Either bound
    may be None for a one-sided check.
    """
    if col not in df.columns or df.empty:
        return

    series = df[col].dropna()
    out_of_range = pd.Series(False, index=series.index)
    if lo is not None:
        out_of_range |= series < lo
    if hi is not None:
        out_of_range |= series > hi
    _raise_on_mask(out_of_range, dataset, "Out of range", f"column '{col}' must be in [{lo}, {hi}]")


def require_nonnegative_int(
    df: pd.DataFrame,
    col: str,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if a flag/count column holds negative values."""
    if col not in df.columns or df.empty:
        return

    series = df[col].dropna()
    _raise_on_mask(series < 0, dataset, "Negative values", f"column '{col}' must be >= 0")


def require_date_no_time(
    df: pd.DataFrame,
    col: str,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if a date column is not naive datetime at midnight."""
    if col not in df.columns or df.empty:
        return

    series = df[col]
    if not pd.api.types.is_datetime64_any_dtype(series):
        raise ValueError(
            _format_error(dataset, "Wrong dtype", f"column '{col}' must be datetime64, got {series.dtype}")
        )
    if series.dt.tz is not None:
        raise ValueError(
            _format_error(dataset, "Wrong dtype", f"column '{col}' must be naive site-local dates, got {series.dtype}")
        )

    series = series.dropna()
    _raise_on_mask(
        series != series.dt.normalize(),
        dataset,
        "Date has time component",
        f"column '{col}' should be midnight (00:00:00)",
    )


def require_contiguous_days(
    df: pd.DataFrame,
    col: str,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if consecutive dates in an ascending column skip a day."""
    if col not in df.columns or len(df) < 2:
        return

    step = df[col].diff()
    gaps = step.notna() & (step != pd.Timedelta(days=1))
    _raise_on_mask(gaps, dataset, "Gap in dates", f"column '{col}' must step by exactly one day")
