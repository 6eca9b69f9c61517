"""Input data structures for the mussel model.

This module defines validated input containers:
- ForcingData: Observed discharge time series for one site
- Dilution: Choice of dilution term in the chlorophyll update
- EndDate: Which of a site's end dates bounds a run
"""

from __future__ import annotations

from enum import Enum

import numpy as np
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# Serial day numbers count from 0000-01-01 as day 1, so 0001-01-01 is day 367
_DATENUM_EPOCH = np.datetime64("0001-01-01", "D")
_DATENUM_OFFSET = 367


class Dilution(str, Enum):
    """Finite-difference form of the discharge dilution term for chlorophyll."""

    forward = "forward"
    centered = "centered"


class EndDate(str, Enum):
    """Which site end date truncates the forcing series."""

    model = "model"
    calibration = "calibration"


def datenum_to_datetime64(datenums: np.ndarray) -> np.ndarray:
    """Convert serial day numbers to datetime64[ns].

    Uses the datenum convention of the site records, where 721964 is
    1976-09-01. This is ``datetime.date.toordinal`` plus 366.
    """
    days = np.asarray(datenums, dtype=np.int64) - _DATENUM_OFFSET
    return (_DATENUM_EPOCH + days.astype("timedelta64[D]")).astype("datetime64[ns]")


class ForcingData(BaseModel):
    """Validated discharge forcing for a single site.

    Both arrays must be 1D with the same length. Timestamps must be strictly
    increasing. Discharge may contain zero or negative values (they are floored
    during preprocessing) but not NaN.

    Attributes:
        time: Datetime array for each sample (datetime64). Integer input is
            interpreted as serial day numbers (see ``datenum_to_datetime64``).
        discharge: River discharge [L/s].
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    time: np.ndarray  # datetime64
    discharge: np.ndarray  # [L/s]

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v: np.ndarray) -> np.ndarray:
        """Validate time array: must be 1D and coerced to datetime64."""
        arr = np.asarray(v)
        if arr.ndim != 1:
            msg = f"time array must be 1D, got {arr.ndim}D"
            raise ValueError(msg)
        if np.issubdtype(arr.dtype, np.integer):
            return datenum_to_datetime64(arr)
        return arr.astype("datetime64[ns]")

    @field_validator("discharge", mode="before")
    @classmethod
    def validate_discharge(cls, v: np.ndarray) -> np.ndarray:
        """Validate discharge array: must be 1D float64 with no NaN values."""
        arr = np.asarray(v, dtype=np.float64)
        if arr.ndim != 1:
            msg = f"discharge array must be 1D, got {arr.ndim}D"
            raise ValueError(msg)
        if np.any(np.isnan(arr)):
            msg = "discharge array contains NaN values"
            raise ValueError(msg)
        return arr

    @model_validator(mode="after")
    def validate_array_lengths(self) -> ForcingData:
        """Ensure time and discharge have the same length."""
        if len(self.discharge) != len(self.time):
            msg = f"discharge length {len(self.discharge)} does not match time length {len(self.time)}"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_time_order(self) -> ForcingData:
        """Ensure timestamps are strictly increasing."""
        if len(self.time) > 1 and not np.all(np.diff(self.time) > np.timedelta64(0, "ns")):
            msg = "time array must be strictly increasing"
            raise ValueError(msg)
        return self

    def __len__(self) -> int:
        """Return the number of samples."""
        return len(self.time)
