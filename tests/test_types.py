"""Tests for ForcingData validation and input enums."""

from datetime import date

import numpy as np
import pandas as pd
import pytest
from pydantic import ValidationError
from pymussels import Dilution, EndDate, ForcingData
from pymussels.types import datenum_to_datetime64


class TestForcingData:
    """Tests for the ForcingData pydantic model."""

    def test_creates_with_valid_arrays(self) -> None:
        forcing = ForcingData(
            time=pd.date_range("2000-01-01", periods=5, freq="D").values,
            discharge=np.array([100.0, 120.0, 0.0, -5.0, 90.0]),
        )

        assert len(forcing) == 5
        assert forcing.time.dtype == np.dtype("datetime64[ns]")
        assert forcing.discharge.dtype == np.float64

    def test_coerces_lists(self) -> None:
        forcing = ForcingData(time=["2000-01-01", "2000-01-02"], discharge=[1, 2])

        assert forcing.discharge.dtype == np.float64
        assert forcing.time[1] == np.datetime64("2000-01-02")

    def test_integer_time_read_as_datenums(self) -> None:
        forcing = ForcingData(time=np.array([721964, 721965]), discharge=[10.0, 11.0])

        assert forcing.time[0] == np.datetime64("1976-09-01")
        assert forcing.time[1] == np.datetime64("1976-09-02")

    def test_is_frozen(self) -> None:
        forcing = ForcingData(time=["2000-01-01"], discharge=[1.0])

        with pytest.raises(ValidationError):
            forcing.discharge = np.array([2.0])  # type: ignore[misc]

    def test_rejects_nan_discharge(self) -> None:
        with pytest.raises(ValidationError, match="NaN"):
            ForcingData(time=["2000-01-01", "2000-01-02"], discharge=[1.0, np.nan])

    def test_rejects_2d_discharge(self) -> None:
        with pytest.raises(ValidationError, match="1D"):
            ForcingData(time=["2000-01-01", "2000-01-02"], discharge=[[1.0, 2.0]])

    def test_rejects_length_mismatch(self) -> None:
        with pytest.raises(ValidationError, match="does not match"):
            ForcingData(time=["2000-01-01", "2000-01-02"], discharge=[1.0, 2.0, 3.0])

    def test_rejects_non_increasing_time(self) -> None:
        with pytest.raises(ValidationError, match="strictly increasing"):
            ForcingData(time=["2000-01-02", "2000-01-01"], discharge=[1.0, 2.0])

    def test_rejects_duplicate_time(self) -> None:
        with pytest.raises(ValidationError, match="strictly increasing"):
            ForcingData(time=["2000-01-01", "2000-01-01"], discharge=[1.0, 2.0])


class TestDatenums:
    def test_model_start_datenum(self) -> None:
        assert datenum_to_datetime64(np.array([721964]))[0] == np.datetime64("1976-09-01")

    def test_offset_from_date_toordinal(self) -> None:
        result = datenum_to_datetime64(np.array([date(2012, 2, 29).toordinal() + 366]))

        assert result[0] == np.datetime64("2012-02-29")


class TestEnums:
    def test_values(self) -> None:
        assert Dilution("forward") is Dilution.forward
        assert Dilution("centered") is Dilution.centered
        assert EndDate("calibration") is EndDate.calibration
