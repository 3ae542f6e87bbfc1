"""Schema definitions for the site forcing pipeline.

This package defines the contract layer - what "valid data" looks like.
Nothing here should do work, only define structure.

Schemas:
- fill_flags: Gap-fill provenance bitmasks
- daily_series: Any date-keyed table (observations, grids, CO2)
- subdaily_series: Timestamp-keyed instrument or hourly grid tables
- forcing: The final daily forcing table
- validate: Validation helpers
"""

from forcingdata.schemas.daily_series import (
    DATE_COL,
    FORCING_VARIABLES,
    HUMIDITY_VARIABLES,
    VARIABLE_RANGES,
    validate_daily_series,
    value_columns,
)
from forcingdata.schemas.fill_flags import (
    FILL_CLIMATOLOGY,
    FILL_OK,
    FILL_SECONDARY,
    FILL_UNFILLED,
    TIER_NONE,
)
from forcingdata.schemas.forcing import (
    FORCING_FIELDS,
    REQUIRED_COLUMNS as FORCING_REQUIRED_COLUMNS,
    DailyForcing,
    validate_daily_forcing,
)
from forcingdata.schemas.subdaily_series import TS_COL, validate_subdaily_series
from forcingdata.schemas.validate import (
    require_columns,
    require_date_no_time,
    require_no_nulls,
    require_nonnegative_int,
    require_numeric,
    require_range,
    require_sorted,
    require_unique,
)

__all__ = [
    # Fill flags
    "FILL_OK",
    "FILL_SECONDARY",
    "FILL_CLIMATOLOGY",
    "FILL_UNFILLED",
    "TIER_NONE",
    # Daily series
    "DATE_COL",
    "FORCING_VARIABLES",
    "HUMIDITY_VARIABLES",
    "VARIABLE_RANGES",
    "validate_daily_series",
    "value_columns",
    # Sub-daily series
    "TS_COL",
    "validate_subdaily_series",
    # Forcing output
    "DailyForcing",
    "FORCING_FIELDS",
    "FORCING_REQUIRED_COLUMNS",
    "validate_daily_forcing",
    # Validation helpers
    "require_columns",
    "require_numeric",
    "require_no_nulls",
    "require_unique",
    "require_sorted",
    "require_range",
    "require_nonnegative_int",
    "require_date_no_time",
]
