"""Write the assembled daily forcing table."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from forcingdata.schemas.forcing import FORCING_FIELDS, validate_daily_forcing


def write_forcing(
    forcing_df: pd.DataFrame,
    output_path: Path | str,
) -> Path:
    """Validate and write the daily forcing table.

    CSV by default (dates as YYYY-MM-DD); Parquet when the path ends in
    .parquet. The file is written to a temporary sibling and renamed so a
    failed run never leaves a partial table behind.

    Args:
        forcing_df: DataFrame with the daily forcing schema
        output_path: Destination path

    Returns:
        Path to written output file

    Raises:
        ValueError: If the table fails schema validation
    """
    output_path = Path(output_path)

    validate_daily_forcing(forcing_df)
    df = forcing_df[FORCING_FIELDS]

    output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = output_path.with_suffix(output_path.suffix + ".tmp")
    if output_path.suffix == ".parquet":
        df.to_parquet(tmp_path, index=False)
    else:
        df.to_csv(tmp_path, index=False, date_format="%Y-%m-%d")
    tmp_path.rename(output_path)

    print(f"[write] wrote {len(df)} rows to {output_path}")
    return output_path


def read_forcing(path: Path | str) -> pd.DataFrame:
    """Read a forcing table written by write_forcing."""
    path = Path(path)
    if path.suffix == ".parquet":
        df = pd.read_parquet(path)
    else:
        df = pd.read_csv(path, parse_dates=["date"])
    return df[FORCING_FIELDS]
