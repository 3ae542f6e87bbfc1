"""Run the forcing assembly for one site.

Pipeline flow:
    extract grids -> CO2 record -> load site obs -> sub-daily VPD
    -> aggregate to daily -> merge / gap-fill -> write -> QA plots

Every stage either completes or raises; nothing is written until the
merged table has passed validation.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from forcingdata.aggregate.daily_mean import aggregate_subdaily
from forcingdata.config import co2_path, forcing_output_path, qa_plot_dir
from forcingdata.derive.vpd import compute_vpd, subdaily_vpd
from forcingdata.extract.grid_point import extract_grid_series
from forcingdata.fetch.co2 import co2_daily_series, fetch_co2_record, load_co2_record
from forcingdata.gapfill.merge import merge_forcing
from forcingdata.load.observations import load_daily_obs, load_subdaily_obs
from forcingdata.pipeline.config import ForcingConfig
from forcingdata.plot.qa import plot_doy_climatology, plot_forcing_timeseries
from forcingdata.schemas.daily_series import (
    DATE_COL,
    FORCING_VARIABLES,
    HUMIDITY_VARIABLES,
    validate_daily_series,
)
from forcingdata.schemas.fill_flags import FILL_CLIMATOLOGY, FILL_SECONDARY, FILL_UNFILLED
from forcingdata.sites import Site
from forcingdata.write import write_forcing


def derive_daily_vpd(daily: pd.DataFrame, elevation_m: float) -> pd.DataFrame:
    """Add vpd_kpa from whichever humidity a daily table carries.

    Tables that already have vpd_kpa, or carry no temperature or humidity,
    are returned unchanged apart from dropping humidity helper columns.
    """
    daily = daily.copy()
    if "vpd_kpa" not in daily.columns and "temp_c" in daily.columns:
        for humidity_col in ("rh_pct", "qair_kgkg", "dewpoint_c"):
            if humidity_col in daily.columns:
                daily["vpd_kpa"] = compute_vpd(daily, humidity_col, elevation_m=elevation_m)
                break
    return daily.drop(columns=[c for c in HUMIDITY_VARIABLES if c in daily.columns])


def _forcing_columns(daily: pd.DataFrame) -> pd.DataFrame:
    return daily[[DATE_COL, *[v for v in FORCING_VARIABLES if v in daily.columns]]]


def extract_gridded(config: ForcingConfig, site: Site) -> list[pd.DataFrame]:
    """Extract every configured grid at the site, in precedence order."""
    gridded = []
    for grid in config.grids:
        daily = extract_grid_series(
            site_id=site.site_id,
            source=grid.source,
            variables=grid.resolved_variables(),
            data_dir=grid.resolved_dir(),
            resolution=grid.resolved_resolution(),
            lon=site.lon,
            lat=site.lat,
            start_year=config.extract_start_year,
            end_year=config.extract_end_year,
            file_glob=grid.file_glob,
        )
        gridded.append(_forcing_columns(derive_daily_vpd(daily, site.elevation_m)))
    return gridded


def load_co2(config: ForcingConfig) -> pd.DataFrame | None:
    """Daily CO2 series over the extraction years, or None when disabled."""
    if config.co2 is None:
        return None
    path = Path(config.co2.path) if config.co2.path else co2_path(config.co2.resolution)
    if config.co2.fetch:
        path = fetch_co2_record(path, resolution=config.co2.resolution)
    record = load_co2_record(path, resolution=config.co2.resolution)
    return co2_daily_series(record, config.extract_start_year, config.extract_end_year)


def load_observed(config: ForcingConfig, site: Site) -> pd.DataFrame | None:
    """Combine the site's daily and sub-daily records into one daily series.

    Sub-daily temperature is paired with the daily humidity to give
    sub-daily VPD before aggregation. Where both files carry a variable,
    the value aggregated from the sub-daily file wins.
    """
    obs = config.observations
    daily = None
    if obs.daily is not None:
        daily = load_daily_obs(
            obs.daily.path,
            obs.daily.columns,
            year_col=obs.daily.year_col,
            month_col=obs.daily.month_col,
            day_col=obs.daily.day_col,
        )

    aggregated = None
    if obs.subdaily is not None:
        subdaily = load_subdaily_obs(
            obs.subdaily.path,
            obs.subdaily.columns,
            datetime_cols=obs.subdaily.datetime_cols,
            datetime_format=obs.subdaily.datetime_format,
        )
        has_humidity = daily is not None and obs.humidity_col in daily.columns
        if "temp_c" in subdaily.columns and "vpd_kpa" not in subdaily.columns and has_humidity:
            subdaily = subdaily_vpd(
                subdaily,
                daily[[DATE_COL, obs.humidity_col]],
                elevation_m=site.elevation_m,
                humidity_col=obs.humidity_col,
            )
        agg = config.aggregation
        aggregated = aggregate_subdaily(
            subdaily,
            window_columns=agg.window_columns,
            full_day_columns=agg.full_day_columns,
            hour_start=agg.hour_start,
            hour_end=agg.hour_end,
            with_coverage=True,
        )
        count_cols = [c for c in aggregated.columns if c.startswith("n_obs_")]
        coverage = ", ".join(
            f"{c[len('n_obs_'):]} {int((aggregated[c] > 0).sum())}/{len(aggregated)}" for c in count_cols
        )
        print(
            f"[aggregate] {site.site_id}: {len(subdaily)} sub-daily rows -> {len(aggregated)} days"
            f" (days with readings: {coverage or 'none'})"
        )
        aggregated = aggregated.drop(columns=count_cols)

    if daily is None and aggregated is None:
        return None
    if aggregated is None:
        return _forcing_columns(derive_daily_vpd(daily, site.elevation_m))

    observed = aggregated
    if daily is not None:
        daily = derive_daily_vpd(daily, site.elevation_m)
        observed = (
            aggregated.set_index(DATE_COL)
            .combine_first(daily.set_index(DATE_COL))
            .reset_index()
        )
    return _forcing_columns(observed)


def print_fill_summary(forcing: pd.DataFrame) -> None:
    """Print how much of the table came from each tier."""
    n = len(forcing)
    print(f"[gapfill] Fill summary ({n} days):")
    for flag, name in (
        (FILL_SECONDARY, "FILL_SECONDARY"),
        (FILL_CLIMATOLOGY, "FILL_CLIMATOLOGY"),
        (FILL_UNFILLED, "FILL_UNFILLED"),
    ):
        count = int(((forcing["fill_flags"] & flag) != 0).sum())
        if count > 0:
            print(f"    {name}: {count}")
    for var in FORCING_VARIABLES:
        missing = int(forcing[var].isna().sum())
        if missing:
            print(f"    {var}: {missing} days unfilled")


def build_site_forcing(config: ForcingConfig, verbose: bool = True) -> pd.DataFrame:
    """Assemble, write and optionally plot one site's forcing table.

    Args:
        config: Run configuration
        verbose: If True, print the fill summary

    Returns:
        The forcing table as written

    Raises:
        ValueError: If any input or the output fails validation
        FileNotFoundError: If a configured input is missing
    """
    site = config.site.resolve()
    print(
        f"[pipeline] {site.site_id} ({site.lon}, {site.lat}, {site.elevation_m} m): "
        f"{config.start_year}-{config.end_year}"
    )

    secondaries = extract_gridded(config, site)
    co2 = load_co2(config)
    if co2 is not None:
        secondaries.append(co2)
    observed = load_observed(config, site)

    if observed is not None:
        validate_daily_series(observed, dataset="observed")
    for i, frame in enumerate(secondaries):
        validate_daily_series(frame, dataset=f"secondary[{i}]")

    forcing, provenance = merge_forcing(
        observed,
        secondaries,
        variables=FORCING_VARIABLES,
        start_year=config.start_year,
        end_year=config.end_year,
        return_provenance=True,
    )
    if verbose:
        print_fill_summary(forcing)

    output_path = Path(config.output_path) if config.output_path else forcing_output_path(site.site_id)
    write_forcing(forcing, output_path)

    if config.make_plots:
        plot_dir = Path(config.plot_dir) if config.plot_dir else qa_plot_dir(site.site_id)
        plot_forcing_timeseries(forcing, provenance, plot_dir, site.site_id)
        plot_doy_climatology(forcing, plot_dir, site.site_id)

    return forcing
