"""Forcing preprocessing for the mussel model.

Turns a raw discharge record into the aligned series the integrator steps
through: floored discharge, truncated to the modelled period, with per-step
durations and the hydraulic radius proxy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .errors import ForcingInvariantError, InsufficientForcingError
from .model.constants import LITRES_TO_CUBIC_METRES, MIN_DISCHARGE, MIN_SAMPLES, MODEL_START
from .sites import Site
from .types import ForcingData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedForcing:
    """Forcing series ready for stepping.

    Attributes:
        time: Retained timestamps (N).
        discharge: Floored discharge [L/s] (N).
        dt: Step durations [s] (N - 2); the last interval is dropped.
        hydraulic_radius: Hydraulic radius proxy [m] (N).
    """

    time: np.ndarray
    discharge: np.ndarray
    dt: np.ndarray
    hydraulic_radius: np.ndarray

    @property
    def time_steps(self) -> int:
        """Number of integration steps."""
        return len(self.dt)

    def __len__(self) -> int:
        """Return the number of retained samples."""
        return len(self.time)


def hydraulic_radius(discharge: np.ndarray, alpha_qd: float, beta_qd: float) -> np.ndarray:
    """Approximate hydraulic radius by flow depth.

    Args:
        discharge: Discharge [L/s], converted to m3/s for the regression.
        alpha_qd: Coefficient of the discharge-depth power law.
        beta_qd: Exponent of the discharge-depth power law.

    Returns:
        Hydraulic radius proxy [m].
    """
    return alpha_qd * (np.asarray(discharge, dtype=np.float64) * LITRES_TO_CUBIC_METRES) ** beta_qd


def prepare_forcing(
    forcing: ForcingData,
    site: Site,
    model_start: np.datetime64 = MODEL_START,
    end_date: np.datetime64 | None = None,
) -> PreparedForcing:
    """Clean and truncate a site's discharge record.

    1. Replace discharge <= 0 with 1 L/s
    2. Drop samples before model_start
    3. Drop samples after the end date
    4. Compute step durations in seconds, dropping the last
    5. Compute the hydraulic radius from the discharge-depth regression

    Args:
        forcing: Raw discharge record for the site.
        site: Site parameters (end date and discharge-depth regression).
        model_start: First date of the modelled period.
        end_date: Last date to keep. Defaults to site.model_end_date.

    Returns:
        PreparedForcing with index-aligned series.

    Raises:
        InsufficientForcingError: If fewer than 3 samples remain.
        ForcingInvariantError: If the retained series is not steppable.
    """
    end = site.model_end_date if end_date is None else np.datetime64(end_date, "ns")
    start = np.datetime64(model_start, "ns")

    discharge = np.where(forcing.discharge <= 0.0, MIN_DISCHARGE, forcing.discharge)
    n_floored = int(np.count_nonzero(forcing.discharge <= 0.0))

    keep = (forcing.time >= start) & (forcing.time <= end)
    time = forcing.time[keep]
    discharge = discharge[keep]
    logger.debug(
        "Site %s: floored %d samples, kept %d of %d between %s and %s",
        site.site_id,
        n_floored,
        len(time),
        len(forcing),
        start,
        end,
    )

    if len(time) < MIN_SAMPLES:
        raise InsufficientForcingError(
            site.site_id,
            f"{len(time)} samples between {start} and {end}, at least {MIN_SAMPLES} are required",
        )

    dt = (np.diff(time) / np.timedelta64(1, "s")).astype(np.float64)[:-1]
    r_h = hydraulic_radius(discharge, site.alpha_qd, site.beta_qd)

    prepared = PreparedForcing(time=time, discharge=discharge, dt=dt, hydraulic_radius=r_h)
    validate_prepared(prepared, site.site_id)
    return prepared


def validate_prepared(forcing: PreparedForcing, site_id: int | None = None) -> None:
    """Check the invariants the integrator relies on.

    Raises:
        ForcingInvariantError: On mismatched lengths, non-positive step
            durations or non-positive discharge.
    """
    n = len(forcing.time)
    if len(forcing.discharge) != n or len(forcing.hydraulic_radius) != n:
        raise ForcingInvariantError(
            site_id,
            f"series lengths differ: time={n}, discharge={len(forcing.discharge)}, "
            f"hydraulic_radius={len(forcing.hydraulic_radius)}",
        )
    if len(forcing.dt) != n - 2:
        raise ForcingInvariantError(site_id, f"expected {n - 2} step durations, got {len(forcing.dt)}")
    if np.any(forcing.dt <= 0.0):
        raise ForcingInvariantError(site_id, "step durations must be strictly positive")
    if np.any(forcing.discharge <= 0.0):
        raise ForcingInvariantError(site_id, "discharge must be strictly positive")
