"""Structured output dataclasses for mussel model results.

This module provides dataclasses for organizing and accessing model outputs:
- MusselFluxes: Per-step terms of the sediment, mussel and chlorophyll updates
- ModelOutput: Trajectories of one site run with its time index
"""

from __future__ import annotations

from dataclasses import dataclass, fields

import numpy as np
import pandas as pd


def _read_only(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, copy=True)
    out.flags.writeable = False
    return out


@dataclass(frozen=True)
class MusselFluxes:
    """Per-step model terms as arrays.

    All arrays have one entry per integration step (time_steps).

    Attributes:
        clearance_rate: R_c - sediment-dependent clearance rate [m3/(g s)].
        filtration: lambda - per-mussel filtration coefficient [m2/(# s)].
        qs: Discharge-driven sediment flux [mg/L/s].
        ms: Sediment removed by mussel filtration [mg/L/s].
        eta_cm: Chlorophyll modifier on mussel carrying capacity [-].
        eta_sm: Sediment modifier on mussel birth rate [-].
        eta_sc: Sediment modifier on chlorophyll birth rate [-].
        mm1: Mussel rate term before sign correction [#/m2/s].
        mm2: Mussel carrying capacity term [-].
        mm: Mussel growth rate [#/m2/s].
        sign_corrected: 1.0 where the mussel sign correction was applied.
        cc: Chlorophyll logistic growth [mg/L/s].
        mc: Chlorophyll grazed by mussels [mg/L/s].
        qc: Chlorophyll dilution [mg/L/s].
    """

    # Stage A - filtration
    clearance_rate: np.ndarray
    filtration: np.ndarray

    # Stage B - sediment
    qs: np.ndarray
    ms: np.ndarray

    # Modifiers
    eta_cm: np.ndarray
    eta_sm: np.ndarray
    eta_sc: np.ndarray

    # Stage C - mussels
    mm1: np.ndarray
    mm2: np.ndarray
    mm: np.ndarray
    sign_corrected: np.ndarray

    # Stage D - chlorophyll
    cc: np.ndarray
    mc: np.ndarray
    qc: np.ndarray

    def __post_init__(self) -> None:
        for field in fields(self):
            object.__setattr__(self, field.name, _read_only(getattr(self, field.name)))

    def __len__(self) -> int:
        """Return the number of steps."""
        return len(self.qs)

    @property
    def n_sign_corrections(self) -> int:
        """Number of steps where the mussel sign correction was applied."""
        return int(np.count_nonzero(self.sign_corrected))

    def to_dict(self) -> dict[str, np.ndarray]:
        """Convert to dictionary of arrays.

        Returns:
            Dictionary mapping field names to their numpy array values.
        """
        return {field.name: getattr(self, field.name) for field in fields(self)}


@dataclass(frozen=True)
class ModelOutput:
    """Result of one site run.

    The discharge series keeps every retained sample; the state trajectories
    hold the initial state plus one entry per step and line up with
    ``state_time`` (all but the last timestamp). Arrays are read-only.

    Attributes:
        site_id: Site identifier.
        name: Site name.
        time: Retained timestamps (N).
        discharge: Floored, truncated discharge [L/s] (N).
        sediment: S - suspended sediment concentration [mg/L] (N - 1).
        mussels: M - mussel density [#/m2] (N - 1).
        chlorophyll: C - chlorophyll-a concentration [mg/L] (N - 1).
        fluxes: Per-step model terms (N - 2).
    """

    site_id: int
    name: str
    time: np.ndarray
    discharge: np.ndarray
    sediment: np.ndarray
    mussels: np.ndarray
    chlorophyll: np.ndarray
    fluxes: MusselFluxes

    def __post_init__(self) -> None:
        for name in ("time", "discharge", "sediment", "mussels", "chlorophyll"):
            object.__setattr__(self, name, _read_only(getattr(self, name)))

    @property
    def state_time(self) -> np.ndarray:
        """Timestamps aligned with the state trajectories."""
        return self.time[: len(self.sediment)]

    def __len__(self) -> int:
        """Return the number of state entries."""
        return len(self.sediment)

    def at(self, date: np.datetime64 | str) -> dict[str, float]:
        """Return the state on a given date.

        Dates past the end of the simulation return the last state, so model
        values can be compared with surveys made after the record ends.

        Args:
            date: Date to look up.

        Returns:
            Dictionary with sediment, mussels and chlorophyll.

        Raises:
            ValueError: If date precedes the first simulated date.
        """
        target = np.datetime64(date, "ns")
        times = self.state_time
        if target < times[0]:
            msg = f"date {target} precedes the start of the simulation ({times[0]})"
            raise ValueError(msg)
        idx = int(np.searchsorted(times, target, side="right")) - 1
        return {
            "sediment": float(self.sediment[idx]),
            "mussels": float(self.mussels[idx]),
            "chlorophyll": float(self.chlorophyll[idx]),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the trajectories to a DataFrame indexed by time.

        Returns:
            DataFrame with discharge, sediment, mussels and chlorophyll.
        """
        n = len(self.sediment)
        df = pd.DataFrame(
            {
                "discharge": self.discharge[:n],
                "sediment": self.sediment,
                "mussels": self.mussels,
                "chlorophyll": self.chlorophyll,
            },
            index=self.state_time,
        )
        df.index.name = "time"
        return df
