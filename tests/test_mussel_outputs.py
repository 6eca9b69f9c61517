"""Tests for ModelOutput and MusselFluxes."""

import numpy as np
import pandas as pd
import pytest
from pymussels import ModelOutput, MusselFluxes
from pymussels.model.constants import FLUX_NAMES


def make_fluxes(n: int = 3) -> MusselFluxes:
    values = {name: np.zeros(n) for name in FLUX_NAMES}
    values["sign_corrected"] = np.array([0.0, 1.0, 1.0])[:n]
    values["qs"] = np.arange(n, dtype=np.float64)
    return MusselFluxes(**values)


@pytest.fixture
def output() -> ModelOutput:
    """Five retained samples, four states and three steps."""
    return ModelOutput(
        site_id=9,
        name="Blue Earth",
        time=pd.date_range("1980-06-01", periods=5, freq="D").values,
        discharge=np.array([100.0, 200.0, 300.0, 400.0, 500.0]),
        sediment=np.array([10.0, 11.0, 12.0, 13.0]),
        mussels=np.array([0.7, 0.8, 0.9, 1.0]),
        chlorophyll=np.array([0.4, 0.3, 0.2, 0.1]),
        fluxes=make_fluxes(),
    )


class TestMusselFluxes:
    def test_length(self) -> None:
        assert len(make_fluxes()) == 3

    def test_counts_sign_corrections(self) -> None:
        assert make_fluxes().n_sign_corrections == 2

    def test_to_dict_has_all_fields(self) -> None:
        result = make_fluxes().to_dict()

        assert list(result) == list(FLUX_NAMES)
        np.testing.assert_array_equal(result["qs"], [0.0, 1.0, 2.0])

    def test_arrays_are_read_only(self) -> None:
        fluxes = make_fluxes()

        with pytest.raises(ValueError):
            fluxes.qs[0] = 5.0

    def test_does_not_alias_input(self) -> None:
        qs = np.zeros(3)
        values = {name: np.zeros(3) for name in FLUX_NAMES}
        values["qs"] = qs
        fluxes = MusselFluxes(**values)
        qs[0] = 9.0

        assert fluxes.qs[0] == 0.0


class TestModelOutput:
    """Tests for the site run result."""

    def test_is_frozen(self, output: ModelOutput) -> None:
        with pytest.raises(AttributeError):
            output.site_id = 1  # type: ignore[misc]

    def test_arrays_are_read_only(self, output: ModelOutput) -> None:
        with pytest.raises(ValueError):
            output.mussels[0] = 100.0
        with pytest.raises(ValueError):
            output.discharge[0] = 100.0

    def test_length_and_state_time(self, output: ModelOutput) -> None:
        assert len(output) == 4
        assert len(output.state_time) == 4
        assert output.state_time[-1] == np.datetime64("1980-06-04")

    def test_to_dataframe(self, output: ModelOutput) -> None:
        df = output.to_dataframe()

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["discharge", "sediment", "mussels", "chlorophyll"]
        assert df.index.name == "time"
        assert len(df) == 4
        assert df.loc[pd.Timestamp("1980-06-02"), "sediment"] == 11.0
        assert df["discharge"].iloc[-1] == 400.0

    def test_at_exact_date(self, output: ModelOutput) -> None:
        assert output.at("1980-06-03") == {"sediment": 12.0, "mussels": 0.9, "chlorophyll": 0.2}

    def test_at_between_samples_uses_earlier(self, output: ModelOutput) -> None:
        assert output.at(np.datetime64("1980-06-02T12:00"))["sediment"] == 11.0

    def test_at_after_end_returns_last_state(self, output: ModelOutput) -> None:
        assert output.at("1995-09-01")["mussels"] == 1.0

    def test_at_before_start_raises(self, output: ModelOutput) -> None:
        with pytest.raises(ValueError, match="precedes"):
            output.at("1980-05-31")
