"""Merging and gap filling of daily forcing series."""

from forcingdata.gapfill.climatology import compute_climatology, climatology_for_dates
from forcingdata.gapfill.merge import merge_forcing
from forcingdata.gapfill.precedence import resolve_precedence

__all__ = [
    "compute_climatology",
    "climatology_for_dates",
    "merge_forcing",
    "resolve_precedence",
]
