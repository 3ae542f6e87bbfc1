"""Tests for the Mauna Loa CO2 record."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import requests

from forcingdata.fetch import co2 as co2_module
from forcingdata.fetch.co2 import CO2_URLS, co2_daily_series, fetch_co2_record, load_co2_record

ANNUAL_CSV = """\
# --------------------------------------------------------------------
# USE OF NOAA GML DATA
# --------------------------------------------------------------------
year,mean,unc
2019,411.65,0.12
2020,414.21,0.12
2021,416.41,0.12
"""

MONTHLY_CSV = """\
# Monthly mean CO2 at Mauna Loa
year,month,decimal date,average,deseasonalized,ndays,sdev,unc
1958,3,1958.2027,315.70,314.43,-1,-9.99,-0.99
2020,1,2020.0417,413.61,413.30,29,0.73,0.26
2020,2,2020.1250,-99.99,413.75,28,0.69,0.25
2020,3,2020.2083,414.74,413.96,26,0.32,0.12
"""


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class TestLoadCO2Record:
    """Tests for parsing the published CSV files."""

    def test_annual(self, tmp_path: Path) -> None:
        path = tmp_path / "annual.csv"
        path.write_text(ANNUAL_CSV)

        record = load_co2_record(path, "annual")

        assert list(record.columns) == ["year", "co2_ppm"]
        assert record["year"].tolist() == [2019, 2020, 2021]
        assert record["co2_ppm"].iloc[1] == pytest.approx(414.21)

    def test_monthly_fill_value_is_nan(self, tmp_path: Path) -> None:
        path = tmp_path / "monthly.csv"
        path.write_text(MONTHLY_CSV)

        record = load_co2_record(path, "monthly")

        assert list(record.columns) == ["year", "month", "co2_ppm"]
        feb = record[(record["year"] == 2020) & (record["month"] == 2)]
        assert np.isnan(feb["co2_ppm"].item())

    def test_wrong_layout_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "annual.csv"
        path.write_text(ANNUAL_CSV)
        with pytest.raises(ValueError, match="missing columns"):
            load_co2_record(path, "monthly")

    def test_unknown_resolution(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown CO2 resolution"):
            load_co2_record(tmp_path / "x.csv", "weekly")


class TestCO2DailySeries:
    """Tests for broadcasting the record to days."""

    def test_annual_broadcast(self) -> None:
        record = pd.DataFrame({"year": [2019, 2020], "co2_ppm": [411.65, 414.21]})
        daily = co2_daily_series(record, 2019, 2020)

        assert list(daily.columns) == ["date", "co2_ppm"]
        assert len(daily) == 365 + 366
        assert daily.loc[daily["date"].dt.year == 2019, "co2_ppm"].eq(411.65).all()
        assert daily.loc[daily["date"].dt.year == 2020, "co2_ppm"].eq(414.21).all()

    def test_years_missing_from_record_are_nan(self) -> None:
        record = pd.DataFrame({"year": [2019], "co2_ppm": [411.65]})
        daily = co2_daily_series(record, 2019, 2020)
        assert daily.loc[daily["date"].dt.year == 2020, "co2_ppm"].isna().all()

    def test_monthly_broadcast(self) -> None:
        record = pd.DataFrame(
            {"year": [2020, 2020], "month": [1, 2], "co2_ppm": [413.61, 414.0]}
        )
        daily = co2_daily_series(record, 2020, 2020)

        assert daily.loc[daily["date"].dt.month == 1, "co2_ppm"].eq(413.61).all()
        assert daily.loc[daily["date"].dt.month == 2, "co2_ppm"].eq(414.0).all()
        assert daily.loc[daily["date"].dt.month == 3, "co2_ppm"].isna().all()


class TestFetchCO2Record:
    """Tests for downloading the record."""

    def test_downloads_and_writes(self, tmp_path: Path, monkeypatch) -> None:
        calls = []

        def fake_get(url, timeout):
            calls.append(url)
            return FakeResponse(ANNUAL_CSV)

        monkeypatch.setattr(co2_module.requests, "get", fake_get)
        out = tmp_path / "co2" / "annual.csv"

        path = fetch_co2_record(out, "annual")

        assert path == out
        assert calls == [CO2_URLS["annual"]]
        assert out.read_text() == ANNUAL_CSV
        assert not list(out.parent.glob("*.tmp"))

    def test_cached_file_not_refetched(self, tmp_path: Path, monkeypatch) -> None:
        def fail_get(url, timeout):
            raise AssertionError("should not download")

        monkeypatch.setattr(co2_module.requests, "get", fail_get)
        out = tmp_path / "annual.csv"
        out.write_text(ANNUAL_CSV)

        assert fetch_co2_record(out, "annual") == out

    def test_force_refetches(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setattr(co2_module.requests, "get", lambda url, timeout: FakeResponse("year,mean\n2022,418.5\n"))
        out = tmp_path / "annual.csv"
        out.write_text(ANNUAL_CSV)

        fetch_co2_record(out, "annual", force=True)

        assert load_co2_record(out)["year"].tolist() == [2022]

    def test_http_error_propagates(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setattr(co2_module.requests, "get", lambda url, timeout: FakeResponse("", 503))
        out = tmp_path / "annual.csv"

        with pytest.raises(requests.HTTPError):
            fetch_co2_record(out, "annual")
        assert not out.exists()
