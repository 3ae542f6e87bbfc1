"""Tests for single-point extraction from gridded NetCDF files."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from forcingdata.extract.grid_point import (
    KELVIN_OFFSET,
    SOURCE_PRESETS,
    GridVariable,
    extract_grid_series,
)

SITE = {"lon": 3.5957, "lat": 43.7413}


class TestGridVariable:
    """Tests for variable spec coercion."""

    def test_from_string(self) -> None:
        assert GridVariable.coerce("Tair") == GridVariable("Tair", 1.0, 0.0)

    def test_from_mapping(self) -> None:
        spec = GridVariable.coerce({"source_var": "Rainf", "scale": 86400.0})
        assert spec.scale == 86400.0
        assert spec.offset == 0.0

    def test_passthrough(self) -> None:
        spec = GridVariable("tcc")
        assert GridVariable.coerce(spec) is spec

    def test_presets_cover_known_sources(self) -> None:
        assert SOURCE_PRESETS["watch_wfdei"]["resolution"] == "daily"
        assert SOURCE_PRESETS["era5"]["resolution"] == "hourly"
        assert SOURCE_PRESETS["cru"]["resolution"] == "monthly"


class TestExtractDaily:
    """Tests for daily gridded products."""

    def test_nearest_cell_and_unit_conversion(self, tmp_path: Path, write_grid) -> None:
        times = pd.date_range("2020-01-01", periods=10, freq="D")
        write_grid(tmp_path / "wfd" / "tair_2020.nc", "Tair", times, 293.15)

        daily = extract_grid_series(
            "FR-Pue",
            "wfd",
            {"temp_c": GridVariable("Tair", offset=KELVIN_OFFSET)},
            tmp_path,
            "daily",
            start_year=2020,
            end_year=2020,
            **SITE,
        )

        assert list(daily.columns) == ["date", "temp_c"]
        assert len(daily) == 10
        np.testing.assert_allclose(daily["temp_c"], 20.0)

    def test_variables_split_across_files(self, tmp_path: Path, write_grid) -> None:
        times = pd.date_range("2020-01-01", periods=3, freq="D")
        write_grid(tmp_path / "wfd" / "Tair_2020.nc", "Tair", times, 283.15)
        write_grid(tmp_path / "wfd" / "Rainf_2020.nc", "Rainf", times, 1e-5)

        daily = extract_grid_series(
            "FR-Pue",
            "wfd",
            {
                "temp_c": {"source_var": "Tair", "offset": KELVIN_OFFSET},
                "precip_mm": {"source_var": "Rainf", "scale": 86400.0},
            },
            tmp_path,
            "daily",
            start_year=2020,
            end_year=2020,
            **SITE,
        )

        np.testing.assert_allclose(daily["temp_c"], 10.0)
        np.testing.assert_allclose(daily["precip_mm"], 0.864)

    def test_files_split_by_year_are_concatenated(self, tmp_path: Path, write_grid) -> None:
        write_grid(tmp_path / "wfd" / "a.nc", "Tair", pd.date_range("2019-12-30", periods=2), 1.0)
        write_grid(tmp_path / "wfd" / "b.nc", "Tair", pd.date_range("2020-01-01", periods=2), 2.0)

        daily = extract_grid_series(
            "FR-Pue", "wfd", {"temp_c": "Tair"}, tmp_path, "daily",
            start_year=2019, end_year=2020, **SITE,
        )

        assert daily["temp_c"].tolist() == [1.0, 1.0, 2.0, 2.0]
        assert daily["date"].is_monotonic_increasing

    def test_years_outside_range_dropped(self, tmp_path: Path, write_grid) -> None:
        times = pd.date_range("2019-12-30", periods=5, freq="D")
        write_grid(tmp_path / "wfd" / "t.nc", "Tair", times, 1.0)

        daily = extract_grid_series(
            "FR-Pue", "wfd", {"temp_c": "Tair"}, tmp_path, "daily",
            start_year=2020, end_year=2020, **SITE,
        )

        assert daily["date"].min() == pd.Timestamp("2020-01-01")
        assert len(daily) == 3

    def test_longitude_wrapped_for_0_360_grids(self, tmp_path: Path, write_grid) -> None:
        times = pd.date_range("2020-01-01", periods=2, freq="D")
        write_grid(
            tmp_path / "wfd" / "t.nc", "Tair", times, 5.0,
            lons=[357.0, 357.5, 358.0],
        )

        daily = extract_grid_series(
            "X", "wfd", {"temp_c": "Tair"}, tmp_path, "daily",
            lon=-2.45, lat=43.7, start_year=2020, end_year=2020,
        )

        np.testing.assert_allclose(daily["temp_c"], 5.0)


class TestExtractHourly:
    """Tests for hourly products reduced to daily means."""

    def test_hourly_reduced_to_full_day_mean(self, tmp_path: Path, write_grid) -> None:
        times = pd.date_range("2020-01-01", periods=48, freq="h")
        values = np.concatenate([np.arange(24.0), np.full(24, 5.0)])
        write_grid(
            tmp_path / "era5" / "era5_2020.nc", "t2m", times, values,
            lat_name="latitude", lon_name="longitude", time_name="valid_time",
        )

        daily = extract_grid_series(
            "FR-Pue", "era5", {"temp_c": "t2m"}, tmp_path, "hourly",
            start_year=2020, end_year=2020, **SITE,
        )

        assert daily["date"].tolist() == [pd.Timestamp("2020-01-01"), pd.Timestamp("2020-01-02")]
        assert daily["temp_c"].tolist() == pytest.approx([11.5, 5.0])

    def test_era5_precip_preset_gives_daily_total(self, tmp_path: Path, write_grid) -> None:
        times = pd.date_range("2020-01-01", periods=24, freq="h")
        # 0.1 mm every hour
        write_grid(tmp_path / "era5" / "tp.nc", "tp", times, 1e-4)

        daily = extract_grid_series(
            "FR-Pue", "era5", {"precip_mm": SOURCE_PRESETS["era5"]["variables"]["precip_mm"]},
            tmp_path, "hourly", start_year=2020, end_year=2020, **SITE,
        )

        assert daily["precip_mm"].iloc[0] == pytest.approx(2.4)


class TestExtractMonthly:
    """Tests for monthly products broadcast to days."""

    def test_each_day_gets_month_value(self, tmp_path: Path, write_grid) -> None:
        times = pd.to_datetime(["2020-01-16", "2020-02-15"])
        write_grid(tmp_path / "cru" / "cld.nc", "cld", times, np.array([50.0, 80.0]))

        daily = extract_grid_series(
            "FR-Pue", "cru", {"cloud_frac": SOURCE_PRESETS["cru"]["variables"]["cloud_frac"]},
            tmp_path, "monthly", start_year=2020, end_year=2020, **SITE,
        )

        assert len(daily) == 366
        jan = daily["date"].dt.month == 1
        feb = daily["date"].dt.month == 2
        np.testing.assert_allclose(daily.loc[jan, "cloud_frac"], 0.5)
        np.testing.assert_allclose(daily.loc[feb, "cloud_frac"], 0.8)
        assert daily.loc[~(jan | feb), "cloud_frac"].isna().all()


class TestExtractErrors:
    """Tests for extraction failures."""

    def test_unknown_resolution(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown resolution"):
            extract_grid_series(
                "X", "wfd", {"temp_c": "Tair"}, tmp_path, "weekly",
                start_year=2020, end_year=2020, **SITE,
            )

    def test_inverted_years(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="end_year"):
            extract_grid_series(
                "X", "wfd", {"temp_c": "Tair"}, tmp_path, "daily",
                start_year=2021, end_year=2020, **SITE,
            )

    def test_no_files(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="No files"):
            extract_grid_series(
                "X", "wfd", {"temp_c": "Tair"}, tmp_path, "daily",
                start_year=2020, end_year=2020, **SITE,
            )

    def test_variable_absent_from_every_file(self, tmp_path: Path, write_grid) -> None:
        write_grid(tmp_path / "wfd" / "t.nc", "Tair", pd.date_range("2020-01-01", periods=2), 1.0)
        with pytest.raises(KeyError, match="Qair"):
            extract_grid_series(
                "X", "wfd", {"temp_c": "Tair", "qair_kgkg": "Qair"}, tmp_path, "daily",
                start_year=2020, end_year=2020, **SITE,
            )
