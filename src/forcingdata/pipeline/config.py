"""Forcing run configuration.

This module defines the ForcingConfig dataclass for one site's forcing
assembly. A run is fully described by its config; the config is loaded
from JSON and can be dumped next to the output for reproducibility.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from forcingdata.aggregate.daily_mean import (
    DEFAULT_FULL_DAY_COLUMNS,
    DEFAULT_WINDOW_COLUMNS,
    MIDDAY_HOUR_END,
    MIDDAY_HOUR_START,
)
from forcingdata.config import data_root
from forcingdata.extract.grid_point import RESOLUTIONS, SOURCE_PRESETS, GridVariable
from forcingdata.fetch.co2 import CO2_URLS
from forcingdata.sites import Site, resolve_site


@dataclass
class SiteConfig:
    """Where the site is.

    Either give lon/lat/elevation_m directly, or leave them out and the
    site is looked up by id in the sites CSV.
    """
    site_id: str
    lon: float | None = None
    lat: float | None = None
    elevation_m: float | None = None
    sites_csv: str | None = None

    def resolve(self) -> Site:
        if self.lon is not None and self.lat is not None and self.elevation_m is not None:
            return Site(self.site_id, self.lon, self.lat, self.elevation_m)
        return resolve_site(self.site_id, Path(self.sites_csv) if self.sites_csv else None)


@dataclass
class GridSourceConfig:
    """One gridded product to extract at the site.

    Attributes:
        source: Source name; also the folder name under data_dir
        data_dir: Root holding one folder per source (default data/grids)
        resolution: "daily", "hourly" or "monthly" (default from preset)
        variables: canonical name -> source variable spec (default from preset)
        file_glob: Files to read inside the source folder
    """
    source: str
    data_dir: str | None = None
    resolution: str | None = None
    variables: dict[str, Any] | None = None
    file_glob: str = "*.nc"

    def resolved_dir(self) -> Path:
        return Path(self.data_dir) if self.data_dir else data_root() / "grids"

    def resolved_resolution(self) -> str | None:
        if self.resolution:
            return self.resolution
        return SOURCE_PRESETS.get(self.source, {}).get("resolution")

    def resolved_variables(self) -> dict[str, GridVariable]:
        specs = self.variables
        if specs is None:
            specs = SOURCE_PRESETS.get(self.source, {}).get("variables", {})
        return {name: GridVariable.coerce(spec) for name, spec in specs.items()}


@dataclass
class DailyObsConfig:
    """Daily site file with year/month/day columns."""
    path: str
    columns: dict[str, str]
    year_col: str = "year"
    month_col: str = "month"
    day_col: str = "day"


@dataclass
class SubdailyObsConfig:
    """Sub-daily site file with a date-time string (or date + time strings)."""
    path: str
    columns: dict[str, str]
    datetime_cols: list[str] = field(default_factory=lambda: ["datetime"])
    datetime_format: str | None = None


@dataclass
class ObservationConfig:
    """Site-measured inputs.

    Attributes:
        daily: Daily file (humidity, precipitation, ...)
        subdaily: Sub-daily file (temperature, radiation, ...)
        humidity_col: Canonical humidity column in the daily file that is
            reused for every sub-daily temperature reading
    """
    daily: DailyObsConfig | None = None
    subdaily: SubdailyObsConfig | None = None
    humidity_col: str = "rh_pct"

    def __post_init__(self) -> None:
        if isinstance(self.daily, dict):
            self.daily = DailyObsConfig(**self.daily)
        if isinstance(self.subdaily, dict):
            self.subdaily = SubdailyObsConfig(**self.subdaily)


@dataclass
class AggregationConfig:
    """Sub-daily to daily reduction."""
    hour_start: int = MIDDAY_HOUR_START
    hour_end: int = MIDDAY_HOUR_END
    window_columns: list[str] = field(default_factory=lambda: list(DEFAULT_WINDOW_COLUMNS))
    full_day_columns: list[str] = field(default_factory=lambda: list(DEFAULT_FULL_DAY_COLUMNS))


@dataclass
class CO2Config:
    """Global CO2 record.

    Attributes:
        path: CSV on disk (default data/raw/co2/co2_<resolution>_mlo.csv)
        resolution: "annual" or "monthly"
        fetch: Download the record if it is not on disk yet
    """
    path: str | None = None
    resolution: str = "annual"
    fetch: bool = False


@dataclass
class ForcingConfig:
    """Configuration for one site's forcing assembly.

    Attributes:
        site: Site location
        start_year: First year written to the output (inclusive)
        end_year: Last year written to the output (inclusive)
        grids: Gridded sources, highest precedence first
        observations: Site-measured inputs
        aggregation: Sub-daily reduction settings
        co2: Global CO2 record (None to leave co2_ppm to climatology)
        climatology_start_year: First year extracted from grids and CO2,
            widening the span the DOY climatology is computed over
        climatology_end_year: Last year extracted from grids and CO2
        output_path: Forcing file (default data/clean/forcing/<site>_forcing.csv)
        plot_dir: Directory for QA plots (default data/qa/<site>)
        make_plots: Write QA plots after the table
    """

    site: SiteConfig
    start_year: int
    end_year: int

    grids: list[GridSourceConfig] = field(default_factory=list)
    observations: ObservationConfig = field(default_factory=ObservationConfig)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    co2: CO2Config | None = field(default_factory=CO2Config)

    climatology_start_year: int | None = None
    climatology_end_year: int | None = None

    output_path: str | None = None
    plot_dir: str | None = None
    make_plots: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        # Convert nested dicts to dataclasses if needed
        if isinstance(self.site, dict):
            self.site = SiteConfig(**self.site)
        self.grids = [GridSourceConfig(**g) if isinstance(g, dict) else g for g in self.grids]
        if isinstance(self.observations, dict):
            self.observations = ObservationConfig(**self.observations)
        if isinstance(self.aggregation, dict):
            self.aggregation = AggregationConfig(**self.aggregation)
        if isinstance(self.co2, dict):
            self.co2 = CO2Config(**self.co2)
        self._validate()

    @property
    def extract_start_year(self) -> int:
        if self.climatology_start_year is None:
            return self.start_year
        return min(self.start_year, self.climatology_start_year)

    @property
    def extract_end_year(self) -> int:
        if self.climatology_end_year is None:
            return self.end_year
        return max(self.end_year, self.climatology_end_year)

    def _validate(self) -> None:
        """Validate all configuration parameters."""
        errors = []

        if not self.site.site_id:
            errors.append("site.site_id must not be empty")

        if self.start_year > self.end_year:
            errors.append(
                f"start_year ({self.start_year}) must not be after end_year ({self.end_year})"
            )

        for grid in self.grids:
            resolution = grid.resolved_resolution()
            if resolution not in RESOLUTIONS:
                errors.append(
                    f"grid '{grid.source}' needs a resolution in {RESOLUTIONS}, got {resolution}"
                )
            if not grid.resolved_variables():
                errors.append(f"grid '{grid.source}' has no variables and no preset")

        agg = self.aggregation
        if not 0 <= agg.hour_start <= agg.hour_end <= 23:
            errors.append(
                f"aggregation hours must satisfy 0 <= hour_start <= hour_end <= 23, "
                f"got [{agg.hour_start}, {agg.hour_end}]"
            )

        if self.observations.humidity_col not in ("rh_pct", "qair_kgkg"):
            errors.append(
                f"observations.humidity_col must be rh_pct or qair_kgkg, got {self.observations.humidity_col}"
            )

        if self.co2 is not None and self.co2.resolution not in CO2_URLS:
            errors.append(f"co2.resolution must be one of {sorted(CO2_URLS)}, got {self.co2.resolution}")

        if errors:
            raise ValueError("ForcingConfig validation failed:\n  - " + "\n  - ".join(errors))

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        d = asdict(self)
        for grid in d["grids"]:
            if grid["variables"] is not None:
                grid["variables"] = {
                    name: asdict(GridVariable.coerce(spec)) for name, spec in grid["variables"].items()
                }
        return d

    def to_json(self, indent: int = 2) -> str:
        """Serialize config to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def save(self, path: Path | str) -> Path:
        """Save config to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json())
        return path

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ForcingConfig:
        """Create config from dictionary."""
        return cls(**d)

    @classmethod
    def from_json(cls, json_str: str) -> ForcingConfig:
        """Create config from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Path | str) -> ForcingConfig:
        """Load config from JSON file."""
        path = Path(path)
        return cls.from_json(path.read_text())
