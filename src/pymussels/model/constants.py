"""Mussel model numerical constants.

Fixed values used by the integrator, the default biological configuration
calibrated for the Minnesota River Basin sites, and the array layout used to
pass that configuration to the compiled kernel.
"""

import numpy as np

# Clearance rate fit: R_c = -(A * exp(-B * S)) / 1000 / 3600 [m3/(g s)]
CLEARANCE_COEFF: float = 0.066
CLEARANCE_DECAY: float = 0.087
CLEARANCE_UNITS: float = 1000.0 * 3600.0  # L/h -> m3/s

LITRES_TO_CUBIC_METRES: float = 0.001

MIN_DISCHARGE: float = 1.0  # Floor for zero or negative flow [L/s]
MIN_SAMPLES: int = 3  # Fewest retained samples that still give one step

# Start of the modelled period (9/1/1976)
MODEL_START: np.datetime64 = np.datetime64("1976-09-01", "ns")

# Configuration fields in canonical array order
PARAM_NAMES: tuple[str, ...] = (
    "b_m",
    "eps_m",
    "m_initial",
    "k_m",
    "b_c",
    "k_c",
    "theta_sm",
    "theta_sc",
    "sm_max",
    "sc_max",
    "min_eta_sm",
    "min_eta_sc",
    "min_eta_cm",
    "c_rebound",
    "m_rebound",
)

DEFAULT_VALUES: dict[str, float] = {
    "b_m": 4.12e-8,  # Mussel birth rate [1/s]
    "eps_m": 3.18699e-8,  # Mussel death rate [1/s]
    "m_initial": 0.7,  # Initial mussel density [#/m2]
    "k_m": 26.2,  # Mussel carrying capacity [#/m2]
    "b_c": 1.23e-5,  # Chlorophyll birth rate [1/s]
    "k_c": 0.4,  # Chlorophyll carrying capacity [mg/L]
    "theta_sm": 10.0,  # Sediment threshold for mussel growth [mg/L]
    "theta_sc": 420.0,  # Sediment threshold for chlorophyll growth [mg/L]
    "sm_max": 50.0,  # Gascho Landis, 2013 [mg/L]
    "sc_max": 1760.0,  # Stefan et al., 1983 [mg/L]
    "min_eta_sm": 0.0,
    "min_eta_sc": 0.0,
    "min_eta_cm": 0.0,
    "c_rebound": 0.0001,  # [mg/L]
    "m_rebound": 0.1,  # [#/m2]
}

# Typical ranges; values outside only trigger a warning
TYPICAL_BOUNDS: dict[str, tuple[float, float]] = {
    "b_m": (0.0, 1e-6),
    "eps_m": (0.0, 1e-6),
    "m_initial": (0.0, 100.0),
    "k_m": (1.0, 200.0),
    "b_c": (0.0, 1e-3),
    "k_c": (0.01, 10.0),
}

STATE_SIZE: int = 3  # S, M, C

# Per-step terms written by the kernel, in output column order
FLUX_NAMES: tuple[str, ...] = (
    "clearance_rate",
    "filtration",
    "qs",
    "ms",
    "eta_cm",
    "eta_sm",
    "eta_sc",
    "mm1",
    "mm2",
    "mm",
    "sign_corrected",
    "cc",
    "mc",
    "qc",
)
N_FLUXES: int = len(FLUX_NAMES)
