"""Ordered precedence between candidate sources for one variable."""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from forcingdata.schemas.fill_flags import TIER_NONE


def resolve_precedence(candidates: Sequence[pd.Series]) -> tuple[pd.Series, pd.Series]:
    """Pick the first non-missing value across candidates, date by date.

    Candidates are ordered from highest to lowest precedence and are
    aligned to the index of the first one. A value is only ever replaced
    when it is missing, so a lower tier can never overwrite a higher one
    and nothing is overwritten with NaN.

    Args:
        candidates: Series sharing a date index, highest precedence first

    Returns:
        (values, tier) where tier holds the position of the winning
        candidate, or TIER_NONE where every candidate was missing

    Raises:
        ValueError: If no candidates are given
    """
    if not candidates:
        raise ValueError("resolve_precedence needs at least one candidate")

    index = candidates[0].index
    values = pd.Series(np.nan, index=index, dtype=float)
    tier = pd.Series(TIER_NONE, index=index, dtype=int)

    for position, candidate in enumerate(candidates):
        candidate = candidate.reindex(index).astype(float)
        take = values.isna() & candidate.notna()
        values = values.mask(take, candidate)
        tier = tier.mask(take, position)

    return values, tier
