"""Tests for validation helper functions."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

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


class TestRequireColumns:
    """Tests for require_columns helper."""

    def test_all_columns_present_passes(self) -> None:
        require_columns(["a", "b", "c"], ["a", "b"])

    def test_missing_column_raises(self) -> None:
        with pytest.raises(ValueError, match="Missing columns"):
            require_columns(["a", "b"], ["a", "b", "c"])

    def test_dataset_name_in_error(self) -> None:
        with pytest.raises(ValueError, match="test_dataset"):
            require_columns(["a"], ["a", "b"], dataset="test_dataset")


class TestRequireNumeric:
    """Tests for require_numeric helper."""

    def test_numeric_passes(self) -> None:
        df = pd.DataFrame({"a": [1.0, np.nan], "b": [1, 2]})
        require_numeric(df, ["a", "b"])

    def test_all_null_object_column_passes(self) -> None:
        """Columns read from CSV with no values come back as object."""
        df = pd.DataFrame({"a": pd.Series([None, None], dtype=object)})
        require_numeric(df, ["a"])

    def test_string_column_raises(self) -> None:
        df = pd.DataFrame({"a": ["x", "y"]})
        with pytest.raises(ValueError, match="Non-numeric columns"):
            require_numeric(df, ["a"])


class TestRequireNoNulls:
    """Tests for require_no_nulls helper."""

    def test_no_nulls_passes(self) -> None:
        df = pd.DataFrame({"a": [1, 2, 3]})
        require_no_nulls(df, ["a"])

    def test_null_raises_with_count(self) -> None:
        df = pd.DataFrame({"a": [None, None, 3]})
        with pytest.raises(ValueError, match="2 rows"):
            require_no_nulls(df, ["a"])


class TestRequireUnique:
    """Tests for require_unique helper."""

    def test_unique_passes(self) -> None:
        df = pd.DataFrame({"date": pd.date_range("2020-01-01", periods=3)})
        require_unique(df, ["date"])

    def test_duplicate_dates_raise(self) -> None:
        df = pd.DataFrame({"date": pd.to_datetime(["2020-01-01", "2020-01-01", "2020-01-02"])})
        with pytest.raises(ValueError, match="Duplicate keys"):
            require_unique(df, ["date"])

    def test_sample_indices_in_error(self) -> None:
        df = pd.DataFrame({"k": [1, 2, 2]})
        with pytest.raises(ValueError, match=r"sample indices: \[1, 2\]"):
            require_unique(df, ["k"])


class TestRequireSorted:
    """Tests for require_sorted helper."""

    def test_sorted_passes(self) -> None:
        require_sorted(pd.DataFrame({"a": [1, 2, 3]}), "a")

    def test_unsorted_raises(self) -> None:
        with pytest.raises(ValueError, match="Not sorted"):
            require_sorted(pd.DataFrame({"a": [2, 1, 3]}), "a")


class TestRequireRange:
    """Tests for require_range helper."""

    def test_in_range_passes(self) -> None:
        require_range(pd.DataFrame({"a": [0.0, 0.5, 1.0]}), "a", lo=0, hi=1)

    def test_nulls_always_pass(self) -> None:
        require_range(pd.DataFrame({"a": [np.nan, 0.5]}), "a", lo=0, hi=1)

    def test_out_of_range_raises(self) -> None:
        with pytest.raises(ValueError, match="Out of range"):
            require_range(pd.DataFrame({"a": [0.0, 1.5]}), "a", lo=0, hi=1)

    def test_one_sided_bound(self) -> None:
        require_range(pd.DataFrame({"a": [1e6]}), "a", lo=0)
        with pytest.raises(ValueError, match="Out of range"):
            require_range(pd.DataFrame({"a": [-1.0]}), "a", lo=0)


class TestRequireNonnegativeInt:
    """Tests for require_nonnegative_int helper."""

    def test_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="Negative values"):
            require_nonnegative_int(pd.DataFrame({"f": [0, -1]}), "f")


class TestRequireDateNoTime:
    """Tests for require_date_no_time helper."""

    def test_midnight_passes(self) -> None:
        df = pd.DataFrame({"date": pd.date_range("2020-01-01", periods=3, freq="D")})
        require_date_no_time(df, "date")

    def test_time_component_raises(self) -> None:
        df = pd.DataFrame({"date": pd.to_datetime(["2020-01-01 00:00", "2020-01-02 12:00"])})
        with pytest.raises(ValueError, match="Date has time component"):
            require_date_no_time(df, "date")

    def test_non_datetime_raises(self) -> None:
        df = pd.DataFrame({"date": ["2020-01-01"]})
        with pytest.raises(ValueError, match="Wrong dtype"):
            require_date_no_time(df, "date")
