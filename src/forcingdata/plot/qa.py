"""Visual QA plots for assembled forcing tables.

Two views per variable:
- the daily series, each point coloured by the tier it came from
- every year overlaid on day-of-year, with the climatology line on top

Plots are written as PNG files; figures are closed after saving.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from forcingdata.gapfill.climatology import DOY_COL, compute_climatology  # noqa: E402
from forcingdata.schemas.daily_series import DATE_COL, FORCING_VARIABLES  # noqa: E402
from forcingdata.schemas.fill_flags import (  # noqa: E402
    SOURCE_CLIMATOLOGY,
    SOURCE_MISSING,
    SOURCE_OBSERVED,
    SOURCE_SECONDARY,
)

# Axis label and units per variable
_LABELS = {
    "temp_c": ("Air temperature (midday)", "C"),
    "vpd_kpa": ("Vapor-pressure deficit (midday)", "kPa"),
    "precip_mm": ("Precipitation", "mm/day"),
    "par_wm2": ("PAR", "W/m2"),
    "cloud_frac": ("Cloud cover", "fraction"),
    "co2_ppm": ("CO2", "ppm"),
}

_TIER_STYLE = {
    SOURCE_OBSERVED: ("k", "Observed"),
    SOURCE_SECONDARY: ("C0", "Gridded / global record"),
    SOURCE_CLIMATOLOGY: ("C3", "DOY climatology"),
}


def _label(var: str) -> str:
    name, units = _LABELS.get(var, (var, ""))
    return f"{name} [{units}]" if units else name


def _plot_vars(forcing: pd.DataFrame, variables: list[str] | None) -> list[str]:
    if variables is None:
        variables = FORCING_VARIABLES
    return [v for v in variables if v in forcing.columns and forcing[v].notna().any()]


def plot_forcing_timeseries(
    forcing: pd.DataFrame,
    provenance: pd.DataFrame,
    out_dir: Path | str,
    site_id: str,
    variables: list[str] | None = None,
    dpi: int = 150,
) -> list[Path]:
    """Daily series per variable, points coloured by fill tier.

    Args:
        forcing: Daily forcing table
        provenance: Tier label per date and variable (from merge_forcing)
        out_dir: Directory for PNG files
        site_id: Site identifier for titles and file names
        variables: Variables to plot (default: all non-empty forcing variables)
        dpi: Resolution of the PNG files

    Returns:
        Paths of written PNG files
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for var in _plot_vars(forcing, variables):
        fig, ax = plt.subplots(figsize=(10, 3))
        ax.plot(forcing[DATE_COL], forcing[var], lw=0.5, color="0.7", zorder=1)

        tiers = provenance[var] if var in provenance.columns else pd.Series(SOURCE_OBSERVED, index=forcing.index)
        for tier, (color, label) in _TIER_STYLE.items():
            mask = (tiers == tier).to_numpy()
            if not mask.any():
                continue
            share = 100 * mask.sum() / len(forcing)
            ax.plot(
                forcing.loc[mask, DATE_COL],
                forcing.loc[mask, var],
                marker=".",
                ms=3,
                lw=0,
                color=color,
                label=f"{label} ({share:.1f}%)",
                zorder=2,
            )

        n_missing = int((tiers == SOURCE_MISSING).sum())
        title = f"{site_id}: {var}"
        if n_missing:
            title += f" ({n_missing} days unfilled)"
        ax.set_title(title, fontsize=10)
        ax.set_ylabel(_label(var))
        ax.legend(loc="best", prop={"size": 8})

        path = out_dir / f"timeseries_{site_id}_{var}.png"
        fig.savefig(path, dpi=dpi, bbox_inches="tight")
        plt.close(fig)
        written.append(path)

    print(f"[plot] wrote {len(written)} timeseries plots to {out_dir}")
    return written


def plot_doy_climatology(
    forcing: pd.DataFrame,
    out_dir: Path | str,
    site_id: str,
    variables: list[str] | None = None,
    dpi: int = 150,
) -> list[Path]:
    """All years overlaid on day-of-year with the climatology line.

    Returns:
        Paths of written PNG files
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    plot_vars = _plot_vars(forcing, variables)
    profile = compute_climatology(forcing, plot_vars)
    doys = forcing[DATE_COL].dt.dayofyear

    written = []
    for var in plot_vars:
        fig, ax = plt.subplots(figsize=(8, 4))
        ax.scatter(doys, forcing[var], s=2, color="0.5", alpha=0.5, label="Daily values")
        ax.plot(profile.index, profile[var], color="C3", lw=1.5, label="DOY mean")

        ax.set_xlim(1, 366)
        ax.set_xlabel("Day of year")
        ax.set_ylabel(_label(var))
        years = forcing[DATE_COL].dt.year
        ax.set_title(f"{site_id}: {var}, {years.min()}-{years.max()}", fontsize=10)
        ax.legend(loc="best", prop={"size": 8})

        path = out_dir / f"{DOY_COL}_climatology_{site_id}_{var}.png"
        fig.savefig(path, dpi=dpi, bbox_inches="tight")
        plt.close(fig)
        written.append(path)

    print(f"[plot] wrote {len(written)} climatology plots to {out_dir}")
    return written
