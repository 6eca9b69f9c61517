"""Mussel model data structures for configuration and state variables.

This module defines the core data types used by the integrator:
- Constants: The biological configuration shared by every site
- State: The sediment, mussel and chlorophyll levels at one step
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from .constants import DEFAULT_VALUES, PARAM_NAMES, TYPICAL_BOUNDS

if TYPE_CHECKING:
    from ..sites import Site

logger = logging.getLogger(__name__)


def _warn_if_outside_bounds(constants: Constants) -> None:
    """Log warnings for constants outside typical ranges.

    This does not raise errors - unusual values may still be wanted when
    exploring model sensitivity.
    """
    for name, (lower, upper) in TYPICAL_BOUNDS.items():
        value = getattr(constants, name)
        if value < lower or value > upper:
            logger.warning(
                "Constant %s=%.4g is outside typical range [%.4g, %.4g]",
                name,
                value,
                lower,
                upper,
            )


def _validate_constants(constants: Constants) -> None:
    """Reject configurations the integrator cannot evaluate."""
    if constants.k_c <= 0.0:
        msg = f"k_c must be positive, got {constants.k_c}"
        raise ValueError(msg)
    if constants.k_m <= 0.0:
        msg = f"k_m must be positive, got {constants.k_m}"
        raise ValueError(msg)
    if constants.sm_max <= constants.theta_sm:
        msg = f"sm_max ({constants.sm_max}) must exceed theta_sm ({constants.theta_sm})"
        raise ValueError(msg)
    if constants.sc_max <= constants.theta_sc:
        msg = f"sc_max ({constants.sc_max}) must exceed theta_sc ({constants.theta_sc})"
        raise ValueError(msg)
    if constants.c_rebound <= 0.0 or constants.m_rebound <= 0.0:
        msg = "rebound floors must be strictly positive"
        raise ValueError(msg)
    for name in ("min_eta_sm", "min_eta_sc", "min_eta_cm"):
        value = getattr(constants, name)
        if not 0.0 <= value <= 1.0:
            msg = f"{name} must lie in [0, 1], got {value}"
            raise ValueError(msg)


@dataclass(frozen=True)
class Constants:
    """Biological configuration of the mussel model.

    Frozen so a single instance can be shared by concurrent site runs. The
    defaults are the values calibrated for the Minnesota River Basin; only
    b_m, eps_m and m_initial were fitted, the rest come from literature.

    Attributes:
        b_m: Mussel birth rate [1/s].
        eps_m: Mussel death rate [1/s].
        m_initial: Initial mussel density [#/m2].
        k_m: Mussel carrying capacity [#/m2].
        b_c: Chlorophyll birth rate [1/s].
        k_c: Chlorophyll carrying capacity [mg/L]. Also the initial chlorophyll.
        theta_sm: Sediment level above which mussel growth is suppressed [mg/L].
        theta_sc: Sediment level above which chlorophyll growth is suppressed [mg/L].
        sm_max: Sediment level at which eta_SM reaches its floor [mg/L].
        sc_max: Sediment level at which eta_SC reaches its floor [mg/L].
        min_eta_sm: Floor of the sediment-mussel modifier [-].
        min_eta_sc: Floor of the sediment-chlorophyll modifier [-].
        min_eta_cm: Floor of the chlorophyll-mussel modifier [-].
        c_rebound: Value chlorophyll is reset to when it collapses [mg/L].
        m_rebound: Value mussel density is reset to when it collapses [#/m2].
    """

    b_m: float = DEFAULT_VALUES["b_m"]
    eps_m: float = DEFAULT_VALUES["eps_m"]
    m_initial: float = DEFAULT_VALUES["m_initial"]
    k_m: float = DEFAULT_VALUES["k_m"]
    b_c: float = DEFAULT_VALUES["b_c"]
    k_c: float = DEFAULT_VALUES["k_c"]
    theta_sm: float = DEFAULT_VALUES["theta_sm"]
    theta_sc: float = DEFAULT_VALUES["theta_sc"]
    sm_max: float = DEFAULT_VALUES["sm_max"]
    sc_max: float = DEFAULT_VALUES["sc_max"]
    min_eta_sm: float = DEFAULT_VALUES["min_eta_sm"]
    min_eta_sc: float = DEFAULT_VALUES["min_eta_sc"]
    min_eta_cm: float = DEFAULT_VALUES["min_eta_cm"]
    c_rebound: float = DEFAULT_VALUES["c_rebound"]
    m_rebound: float = DEFAULT_VALUES["m_rebound"]

    def __post_init__(self) -> None:
        """Validate the configuration and warn about unusual values."""
        _validate_constants(self)
        _warn_if_outside_bounds(self)

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Convert constants to a 1D array for Numba.

        Layout follows PARAM_NAMES (15 elements).
        """
        arr = np.array([getattr(self, name) for name in PARAM_NAMES], dtype=np.float64)
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Constants:
        """Reconstruct Constants from array."""
        if len(arr) != len(PARAM_NAMES):
            msg = f"Expected array of length {len(PARAM_NAMES)}, got {len(arr)}"
            raise ValueError(msg)
        return cls(**{name: float(value) for name, value in zip(PARAM_NAMES, arr, strict=True)})


DEFAULT_CONSTANTS = Constants()


@dataclass
class State:
    """Mussel model state variables.

    Mutable state that evolves during simulation.

    Attributes:
        sediment: S - suspended sediment concentration [mg/L].
        mussels: M - mussel areal density [#/m2].
        chlorophyll: C - chlorophyll-a concentration [mg/L].
    """

    sediment: float  # S [mg/L]
    mussels: float  # M [#/m2]
    chlorophyll: float  # C [mg/L]

    @classmethod
    def initialize(cls, site: Site, constants: Constants, discharge: float) -> State:
        """Create the initial state for a site.

        - Sediment from the site's discharge-sediment regression at the
          first discharge sample
        - Mussels at the calibrated initial density
        - Chlorophyll at carrying capacity

        Args:
            site: Site whose regression sets the initial sediment.
            constants: Biological configuration.
            discharge: First discharge sample [L/s].

        Returns:
            Initialized State object ready for simulation.
        """
        return cls(
            sediment=site.alpha_qs * discharge**site.beta_qs,
            mussels=constants.m_initial,
            chlorophyll=constants.k_c,
        )

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Convert state to a 1D array for Numba.

        Layout: [sediment, mussels, chlorophyll]
        """
        arr = np.array([self.sediment, self.mussels, self.chlorophyll], dtype=np.float64)
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray) -> State:
        """Reconstruct State from array."""
        return cls(
            sediment=float(arr[0]),
            mussels=float(arr[1]),
            chlorophyll=float(arr[2]),
        )
