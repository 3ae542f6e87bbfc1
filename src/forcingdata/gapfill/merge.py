"""Merge site observations with gridded sources and fill gaps.

This stage:
- Outer-joins every input on date over the full span of the inputs
- Resolves each variable with strict precedence:
  observed -> secondary sources (in the order given) -> DOY climatology
- Computes the climatology from the gap-filled-so-far table, so it can
  draw on years outside the requested window
- Restricts the result to the requested years after filling
- Records which tiers were used on each date in fill_flags

Pure transformation: no I/O. Inputs must already have unique dates
(validate_daily_series); that is checked by the caller, not here.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

import numpy as np
import pandas as pd

from forcingdata.gapfill.climatology import DOY_COL, climatology_for_dates, compute_climatology, day_of_year
from forcingdata.gapfill.precedence import resolve_precedence
from forcingdata.schemas.daily_series import DATE_COL, FORCING_VARIABLES, value_columns
from forcingdata.schemas.fill_flags import (
    FILL_CLIMATOLOGY,
    FILL_OK,
    FILL_SECONDARY,
    FILL_UNFILLED,
    SOURCE_CLIMATOLOGY,
    SOURCE_MISSING,
    SOURCE_OBSERVED,
    SOURCE_SECONDARY,
    TIER_NONE,
)


def _date_span(
    frames: Sequence[pd.DataFrame],
    start_year: int | None,
    end_year: int | None,
) -> pd.DatetimeIndex:
    """Every calendar day covered by the inputs or the requested years."""
    lows = [f[DATE_COL].min() for f in frames if not f.empty]
    highs = [f[DATE_COL].max() for f in frames if not f.empty]
    if start_year is not None:
        lows.append(pd.Timestamp(date(start_year, 1, 1)))
    if end_year is not None:
        highs.append(pd.Timestamp(date(end_year, 12, 31)))
    if not lows or not highs:
        return pd.DatetimeIndex([], name=DATE_COL)
    return pd.date_range(min(lows), max(highs), freq="D", name=DATE_COL)


def _default_variables(frames: Sequence[pd.DataFrame]) -> list[str]:
    seen: list[str] = []
    for frame in frames:
        for col in value_columns(frame.columns):
            if col not in seen:
                seen.append(col)
    ordered = [v for v in FORCING_VARIABLES if v in seen]
    return ordered + [v for v in seen if v not in ordered]


def merge_forcing(
    primary: pd.DataFrame | None,
    secondaries: Sequence[pd.DataFrame],
    variables: Sequence[str] | None = None,
    start_year: int | None = None,
    end_year: int | None = None,
    fill_climatology: bool = True,
    return_provenance: bool = False,
) -> pd.DataFrame | tuple[pd.DataFrame, pd.DataFrame]:
    """Assemble one daily table from observed and secondary daily series.

    An observed value wins unconditionally wherever it exists; there is no
    weighting or averaging between sources. Where the observation is
    missing the first secondary with a value is used, then the
    climatology for that day-of-year. If the climatology is also missing
    the value stays NaN (a terminal gap, flagged FILL_UNFILLED).

    Args:
        primary: Site-observed daily series, or None when the site has none
        secondaries: Gridded/global daily series, highest precedence first
        variables: Variables to resolve (default: every value column seen,
            canonical forcing variables first)
        start_year: First year of the output (inclusive)
        end_year: Last year of the output (inclusive)
        fill_climatology: If False, stop after the secondary tier
        return_provenance: If True, also return a table naming the tier
            each value came from (observed/secondary/climatology/missing)

    Returns:
        Daily series with date, doy, each variable and fill_flags; with
        return_provenance, a (forcing, provenance) tuple
    """
    sources = ([primary] if primary is not None else []) + list(secondaries)
    first_secondary = 1 if primary is not None else 0
    if variables is None:
        variables = _default_variables(sources)
    variables = list(variables)

    span = _date_span(sources, start_year, end_year)
    indexed = [src.set_index(DATE_COL).reindex(span) for src in sources]
    missing_col = pd.Series(np.nan, index=span)

    resolved = pd.DataFrame({DATE_COL: span})
    provenance = pd.DataFrame({DATE_COL: span})
    flags = np.full(len(span), FILL_OK, dtype=int)

    for var in variables:
        candidates = [frame[var] if var in frame.columns else missing_col for frame in indexed]
        values, tier = resolve_precedence(candidates or [missing_col])
        tier = tier.to_numpy()

        from_secondary = tier >= first_secondary
        flags[from_secondary] |= FILL_SECONDARY
        resolved[var] = values.to_numpy()
        provenance[var] = np.select(
            [tier == TIER_NONE, from_secondary],
            [SOURCE_MISSING, SOURCE_SECONDARY],
            default=SOURCE_OBSERVED,
        )

    if fill_climatology and not resolved.empty:
        profile = compute_climatology(resolved, variables)
        for var in variables:
            clim = climatology_for_dates(profile, resolved[DATE_COL], var)
            filled, tier = resolve_precedence([resolved[var], clim])
            from_clim = (tier == 1).to_numpy()
            flags[from_clim] |= FILL_CLIMATOLOGY
            resolved[var] = filled
            provenance.loc[from_clim, var] = SOURCE_CLIMATOLOGY

    unfilled = resolved[variables].isna().any(axis=1).to_numpy()
    flags[unfilled] |= FILL_UNFILLED
    resolved["fill_flags"] = flags

    keep = np.ones(len(resolved), dtype=bool)
    years = resolved[DATE_COL].dt.year.to_numpy()
    if start_year is not None:
        keep &= years >= start_year
    if end_year is not None:
        keep &= years <= end_year

    resolved = resolved[keep].reset_index(drop=True)
    resolved[DOY_COL] = day_of_year(resolved[DATE_COL]).astype(int)
    forcing = resolved[[DATE_COL, DOY_COL, *variables, "fill_flags"]]

    if return_provenance:
        return forcing, provenance[keep].reset_index(drop=True)
    return forcing
