"""Site forcing assembly runs."""

from forcingdata.pipeline.config import (
    AggregationConfig,
    CO2Config,
    DailyObsConfig,
    ForcingConfig,
    GridSourceConfig,
    ObservationConfig,
    SiteConfig,
    SubdailyObsConfig,
)
from forcingdata.pipeline.runner import build_site_forcing

__all__ = [
    "AggregationConfig",
    "CO2Config",
    "DailyObsConfig",
    "ForcingConfig",
    "GridSourceConfig",
    "ObservationConfig",
    "SiteConfig",
    "SubdailyObsConfig",
    "build_site_forcing",
]
