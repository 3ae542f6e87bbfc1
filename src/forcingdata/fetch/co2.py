"""Fetch and broadcast the Mauna Loa atmospheric CO2 record.

NOAA GML publishes annual and monthly mean CO2 (ppm) at Mauna Loa as
small CSV files with '#' comment headers. The record is treated as
spatially uniform: every site gets the same value for a given year
(or month).
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import requests

from forcingdata.config import co2_path
from forcingdata.schemas.daily_series import DATE_COL

CO2_URLS = {
    "annual": "https://gml.noaa.gov/webdata/ccgg/trends/co2/co2_annmean_mlo.csv",
    "monthly": "https://gml.noaa.gov/webdata/ccgg/trends/co2/co2_mm_mlo.csv",
}

# Column holding the mean in each published file
_VALUE_COLUMNS = {
    "annual": "mean",
    "monthly": "average",
}


def _check_resolution(resolution: str) -> None:
    if resolution not in CO2_URLS:
        raise ValueError(f"Unknown CO2 resolution '{resolution}' (expected one of {sorted(CO2_URLS)})")


def fetch_co2_record(
    out_path: Path | str | None = None,
    resolution: str = "annual",
    force: bool = False,
    timeout: int = 60,
) -> Path:
    """Download the Mauna Loa CO2 CSV unless a cached copy exists.

    Args:
        out_path: Where to write the CSV (default data/raw/co2/...)
        resolution: "annual" or "monthly"
        force: Re-download even if the file exists
        timeout: HTTP timeout in seconds

    Returns:
        Path to the CSV on disk

    Raises:
        requests.HTTPError: If the download fails
    """
    _check_resolution(resolution)
    out_path = Path(out_path) if out_path else co2_path(resolution)

    if out_path.exists() and not force:
        print(f"[co2] using cached {out_path}")
        return out_path

    url = CO2_URLS[resolution]
    print(f"[co2] fetching {url}")
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()

    out_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = out_path.with_suffix(".csv.tmp")
    tmp_path.write_text(response.text, encoding="utf-8")
    tmp_path.rename(out_path)

    print(f"[co2] wrote {out_path}")
    return out_path


def load_co2_record(path: Path | str, resolution: str = "annual") -> pd.DataFrame:
    """Parse a Mauna Loa CSV into year[, month], co2_ppm.

    Negative fill values (-99.99 in older monthly files) become NaN.
    """
    _check_resolution(resolution)
    raw = pd.read_csv(path, comment="#", skipinitialspace=True)
    raw.columns = [str(c).strip() for c in raw.columns]

    keys = ["year"] if resolution == "annual" else ["year", "month"]
    value_col = _VALUE_COLUMNS[resolution]
    missing = [c for c in [*keys, value_col] if c not in raw.columns]
    if missing:
        raise ValueError(f"[co2] {path}: missing columns {missing}")

    record = raw[keys].astype(int)
    record["co2_ppm"] = pd.to_numeric(raw[value_col], errors="coerce")
    record.loc[record["co2_ppm"] < 0, "co2_ppm"] = np.nan
    return record.drop_duplicates(subset=keys, keep="first").reset_index(drop=True)


def co2_daily_series(record: pd.DataFrame, start_year: int, end_year: int) -> pd.DataFrame:
    """Broadcast an annual or monthly CO2 record to every day of the years.

    Days whose year (or month) is absent from the record stay NaN.
    """
    days = pd.date_range(f"{start_year}-01-01", f"{end_year}-12-31", freq="D")
    daily = pd.DataFrame({DATE_COL: days, "year": days.year})

    keys = ["year"]
    if "month" in record.columns:
        daily["month"] = days.month
        keys.append("month")

    daily = daily.merge(record[[*keys, "co2_ppm"]], on=keys, how="left", validate="many_to_one")
    return daily[[DATE_COL, "co2_ppm"]]
