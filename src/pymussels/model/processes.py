"""Mussel model process functions.

Numba-compiled scalar functions for the feedback modifiers and for each term
of the sediment, mussel and chlorophyll updates. All inputs and outputs are
floats; none of them keep state.
"""

# ruff: noqa: SIM108
# SIM108: Ternary operators disabled in Numba functions for clarity
import numpy as np
from numba import njit

from .constants import CLEARANCE_COEFF, CLEARANCE_DECAY, CLEARANCE_UNITS


@njit(cache=True)
def eta_cm(c: float, k_c: float, min_eta: float) -> float:
    """Chlorophyll modifier on the mussel carrying capacity.

    Ramps linearly from 0.5 at zero chlorophyll to 1 at carrying capacity.

    Args:
        c: Chlorophyll concentration [mg/L].
        k_c: Chlorophyll carrying capacity [mg/L].
        min_eta: Floor of the modifier [-].

    Returns:
        Modifier in [min_eta, 1].
    """
    if c < k_c:
        eta = 0.5 + (0.5 / k_c) * c
    else:
        eta = 1.0
    return max(eta, min_eta)


@njit(cache=True)
def _sediment_ramp(s: float, theta: float, s_max: float, min_eta: float) -> float:
    """Linear decline from 1 at theta towards min_eta at s_max."""
    if s > theta:
        return max(1.0 - (s - theta) / (s_max - theta), min_eta)
    return 1.0


@njit(cache=True)
def eta_sm(s: float, theta_sm: float, sm_max: float, min_eta: float) -> float:
    """Sediment modifier on the mussel birth rate.

    Args:
        s: Suspended sediment concentration [mg/L].
        theta_sm: Threshold above which suppression starts [mg/L].
        sm_max: Sediment level at which the floor is reached [mg/L].
        min_eta: Floor of the modifier [-].

    Returns:
        Modifier in [min_eta, 1].
    """
    return _sediment_ramp(s, theta_sm, sm_max, min_eta)


@njit(cache=True)
def eta_sc(s: float, theta_sc: float, sc_max: float, min_eta: float) -> float:
    """Sediment modifier on the chlorophyll birth rate.

    Same shape as eta_sm with its own threshold and ceiling.
    """
    return _sediment_ramp(s, theta_sc, sc_max, min_eta)


@njit(cache=True)
def clearance_rate(s: float) -> float:
    """Sediment-dependent clearance rate R_c [m3/(g s)], negative by convention."""
    return -(CLEARANCE_COEFF * np.exp(-CLEARANCE_DECAY * s)) / CLEARANCE_UNITS


@njit(cache=True)
def filtration_coefficient(s: float, mussel_weight: float, r_h: float) -> tuple[float, float]:
    """Compute the per-mussel filtration coefficient.

    Args:
        s: Suspended sediment concentration [mg/L].
        mussel_weight: Mean wet weight of one mussel [g].
        r_h: Hydraulic radius proxy [m].

    Returns:
        Tuple of (r_c, lam):
        - r_c: Clearance rate [m3/(g s)].
        - lam: Filtration coefficient [m2/(# s)].
    """
    r_c = clearance_rate(s)
    lam = r_c * mussel_weight / r_h
    return r_c, lam


@njit(cache=True)
def sediment_flux(q: float, q_next: float, alpha_qs: float, beta_qs: float, dt: float) -> float:
    """Rate of sediment change driven by the change in discharge [mg/L/s]."""
    return alpha_qs * (q_next**beta_qs - q**beta_qs) / dt


@njit(cache=True)
def mussel_growth(
    m: float,
    eta_s: float,
    eta_c: float,
    b_m: float,
    eps_m: float,
    k_m: float,
) -> tuple[float, float, float, bool]:
    """Logistic mussel growth with sediment and chlorophyll modifiers.

    When the net growth rate and the carrying capacity term are both negative
    the rate term is negated, so a declining population above capacity keeps
    declining instead of the product turning positive.

    Args:
        m: Mussel density [#/m2].
        eta_s: Sediment modifier on the birth rate [-].
        eta_c: Chlorophyll modifier on the carrying capacity [-].
        b_m: Mussel birth rate [1/s].
        eps_m: Mussel death rate [1/s].
        k_m: Mussel carrying capacity [#/m2].

    Returns:
        Tuple of (mm1, mm2, mm, corrected):
        - mm1: Rate term before any sign correction [#/m2/s].
        - mm2: Carrying capacity term [-].
        - mm: Growth rate [#/m2/s].
        - corrected: Whether the sign correction was applied.
    """
    mm1 = (eta_s * b_m - eps_m) * m
    mm2 = 1.0 - m / (k_m * eta_c)
    if mm1 < 0.0 and mm2 < 0.0:
        return mm1, mm2, -mm1 * mm2, True
    return mm1, mm2, mm1 * mm2, False


@njit(cache=True)
def chlorophyll_growth(c: float, eta_s: float, b_c: float, k_c: float) -> float:
    """Logistic chlorophyll growth with a sediment-modulated rate [mg/L/s]."""
    return eta_s * b_c * c * (1.0 - c / k_c)


@njit(cache=True)
def dilution_forward(c: float, q: float, q_next: float, dt: float) -> float:
    """Chlorophyll dilution from the forward change in discharge [mg/L/s]."""
    return c * (1.0 - q_next / q) / dt


@njit(cache=True)
def dilution_centered(c: float, q_prev: float, q: float, q_next: float, dt: float) -> float:
    """Chlorophyll dilution from a centred difference in discharge [mg/L/s].

    Gives a smoother chlorophyll series; needs the previous sample.
    """
    return c * ((q_prev - q_next) / 2.0) / ((q + q_next) / 2.0) / dt
