"""Mussel model integrator subpackage.

Public API for the coupled sediment, mussel and chlorophyll integrator.
"""

from .constants import FLUX_NAMES, MODEL_START, PARAM_NAMES, STATE_SIZE
from .processes import eta_cm, eta_sc, eta_sm
from .run import run, step
from .types import DEFAULT_CONSTANTS, Constants, State

__all__ = [
    "DEFAULT_CONSTANTS",
    "FLUX_NAMES",
    "MODEL_START",
    "PARAM_NAMES",
    "STATE_SIZE",
    "Constants",
    "State",
    "eta_cm",
    "eta_sc",
    "eta_sm",
    "run",
    "step",
]
