"""Mussel model orchestration functions.

This module provides the main entry points for the integrator:
- step(): Advance sediment, mussels and chlorophyll by one timestep
- run(): Integrate a site's preprocessed forcing from the initial state
"""

# ruff: noqa: SIM108
# SIM108: Ternary operators disabled in Numba functions for clarity
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numba import njit

from ..outputs import ModelOutput, MusselFluxes
from ..types import Dilution
from .constants import FLUX_NAMES, N_FLUXES, STATE_SIZE
from .processes import (
    chlorophyll_growth,
    dilution_centered,
    dilution_forward,
    eta_cm,
    eta_sc,
    eta_sm,
    filtration_coefficient,
    mussel_growth,
    sediment_flux,
)
from .types import DEFAULT_CONSTANTS, Constants, State

if TYPE_CHECKING:
    from ..preprocessing import PreparedForcing
    from ..sites import Site


@njit(cache=True, nogil=True)
def _step_numba(
    state_arr: np.ndarray,  # Modified in place
    const_arr: np.ndarray,
    site_arr: np.ndarray,
    q_prev: float,
    q: float,
    q_next: float,
    q_sed: float,
    q_sed_next: float,
    r_h: float,
    dt: float,
    centered: bool,
    output_arr: np.ndarray,  # Output written here (14 elements)
) -> None:
    """Execute one timestep using arrays."""
    # Unpack constants (15 elements)
    b_m = const_arr[0]
    eps_m = const_arr[1]
    # m_initial = const_arr[2]  # Only used to build the initial state
    k_m = const_arr[3]
    b_c = const_arr[4]
    k_c = const_arr[5]
    theta_sm = const_arr[6]
    theta_sc = const_arr[7]
    sm_max = const_arr[8]
    sc_max = const_arr[9]
    min_eta_sm = const_arr[10]
    min_eta_sc = const_arr[11]
    min_eta_cm = const_arr[12]
    c_rebound = const_arr[13]
    m_rebound = const_arr[14]

    # Unpack site: [alpha_qs, beta_qs, mussel_weight]
    alpha_qs = site_arr[0]
    beta_qs = site_arr[1]
    mussel_weight = site_arr[2]

    s = state_arr[0]
    m = state_arr[1]
    c = state_arr[2]

    # A. Filtration coefficient
    r_c, lam = filtration_coefficient(s, mussel_weight, r_h)

    # B. Sediment
    qs = sediment_flux(q_sed, q_sed_next, alpha_qs, beta_qs, dt)
    ms = s * m * lam
    new_s = s + (qs + ms) * dt
    if new_s < 0.0:
        new_s = 0.0

    # C. Mussels
    e_cm = eta_cm(c, k_c, min_eta_cm)
    e_sm = eta_sm(s, theta_sm, sm_max, min_eta_sm)
    mm1, mm2, mm, corrected = mussel_growth(m, e_sm, e_cm, b_m, eps_m, k_m)
    new_m = m + dt * mm
    if new_m < m_rebound:
        new_m = m_rebound

    # D. Chlorophyll
    e_sc = eta_sc(s, theta_sc, sc_max, min_eta_sc)
    cc = chlorophyll_growth(c, e_sc, b_c, k_c)
    mc = c * m * lam
    if centered:
        qc = dilution_centered(c, q_prev, q, q_next, dt)
    else:
        qc = dilution_forward(c, q, q_next, dt)
    new_c = c + (cc + mc + qc) * dt
    if new_c < c_rebound:
        new_c = c_rebound

    state_arr[0] = new_s
    state_arr[1] = new_m
    state_arr[2] = new_c

    # Write outputs in FLUX_NAMES order
    output_arr[0] = r_c
    output_arr[1] = lam
    output_arr[2] = qs
    output_arr[3] = ms
    output_arr[4] = e_cm
    output_arr[5] = e_sm
    output_arr[6] = e_sc
    output_arr[7] = mm1
    output_arr[8] = mm2
    output_arr[9] = mm
    if corrected:
        output_arr[10] = 1.0
    else:
        output_arr[10] = 0.0
    output_arr[11] = cc
    output_arr[12] = mc
    output_arr[13] = qc


@njit(cache=True, nogil=True)
def _run_numba(
    state_arr: np.ndarray,  # Modified in place, holds the final state
    const_arr: np.ndarray,
    site_arr: np.ndarray,
    q_arr: np.ndarray,
    q_sed_arr: np.ndarray,
    r_h_arr: np.ndarray,
    dt_arr: np.ndarray,
    centered: bool,
    states_arr: np.ndarray,  # shape (n_steps + 1, 3), row 0 preset
    outputs_arr: np.ndarray,  # shape (n_steps, 14)
) -> None:
    """Integrate over every step duration."""
    n_steps = len(dt_arr)
    output_single = np.zeros(14)

    for t in range(n_steps):
        # The centred form needs Q(t-1); the first step falls back to forward
        if t > 0:
            q_prev = q_arr[t - 1]
            use_centered = centered
        else:
            q_prev = q_arr[t]
            use_centered = False

        _step_numba(
            state_arr,
            const_arr,
            site_arr,
            q_prev,
            q_arr[t],
            q_arr[t + 1],
            q_sed_arr[t],
            q_sed_arr[t + 1],
            r_h_arr[t],
            dt_arr[t],
            use_centered,
            output_single,
        )
        for i in range(3):
            states_arr[t + 1, i] = state_arr[i]
        for i in range(14):
            outputs_arr[t, i] = output_single[i]


def _site_array(site: Site) -> np.ndarray:
    """Pack the per-site values used by the kernel."""
    return np.array([site.alpha_qs, site.beta_qs, site.mussel_weight], dtype=np.float64)


def _sediment_discharge(site: Site, discharge: np.ndarray) -> np.ndarray:
    """Discharge seen by the discharge-sediment relation.

    Sites with a threshold break in the relation floor discharge at the
    threshold; elsewhere the discharge is used as is.
    """
    if site.has_discharge_threshold:
        return np.maximum(discharge, site.discharge_threshold)
    return discharge


def step(
    state: State,
    site: Site,
    constants: Constants,
    discharge: float,
    discharge_next: float,
    hydraulic_radius: float,
    dt: float,
    discharge_prev: float | None = None,
    dilution: Dilution | str = Dilution.forward,
) -> tuple[State, dict[str, float]]:
    """Execute one timestep of the mussel model.

    Stages, in order:
    1. Filtration coefficient from sediment, mussel weight and hydraulic radius
    2. Sediment update from discharge change and mussel filtration (floored at 0)
    3. Mussel logistic update with sediment and chlorophyll modifiers
       (floored at the rebound value)
    4. Chlorophyll logistic update with grazing and dilution
       (floored at the rebound value)

    Args:
        state: Current state. Not modified.
        site: Site parameters.
        constants: Biological configuration.
        discharge: Discharge at this step [L/s].
        discharge_next: Discharge at the next step [L/s].
        hydraulic_radius: Hydraulic radius proxy at this step [m].
        dt: Step duration [s].
        discharge_prev: Discharge at the previous step [L/s]. Required for
            centred dilution.
        dilution: Form of the chlorophyll dilution term.

    Returns:
        Tuple of (new_state, fluxes) where:
        - new_state: State after the timestep
        - fluxes: Dictionary of the step's terms (see MusselFluxes)

    Raises:
        ValueError: If centred dilution is requested without discharge_prev.
    """
    dilution = Dilution(dilution)
    centered = dilution is Dilution.centered
    if centered and discharge_prev is None:
        raise ValueError("discharge_prev required for centered dilution")

    q_sed, q_sed_next = _sediment_discharge(site, np.array([discharge, discharge_next], dtype=np.float64))

    state_arr = np.array(state, dtype=np.float64)
    output_arr = np.zeros(N_FLUXES, dtype=np.float64)
    _step_numba(
        state_arr,
        np.ascontiguousarray(constants, dtype=np.float64),
        _site_array(site),
        float(discharge if discharge_prev is None else discharge_prev),
        float(discharge),
        float(discharge_next),
        float(q_sed),
        float(q_sed_next),
        float(hydraulic_radius),
        float(dt),
        centered,
        output_arr,
    )

    fluxes: dict[str, float] = {name: float(value) for name, value in zip(FLUX_NAMES, output_arr, strict=True)}
    return State.from_array(state_arr), fluxes


def run(
    site: Site,
    forcing: PreparedForcing,
    constants: Constants = DEFAULT_CONSTANTS,
    initial_state: State | None = None,
    dilution: Dilution | str = Dilution.forward,
) -> ModelOutput:
    """Run the mussel model over a site's preprocessed forcing.

    Takes one step per step duration in the forcing, so the trajectories have
    time_steps + 1 entries with the initial state first. The last step uses
    the final retained duration, so the last state is computed from forcing
    rather than left undefined; a loop stopping one step earlier would leave
    that entry empty.

    Args:
        site: Site parameters.
        forcing: Output of prepare_forcing() for this site.
        constants: Biological configuration.
        initial_state: Initial state. If None, uses State.initialize().
        dilution: Form of the chlorophyll dilution term.

    Returns:
        ModelOutput with the discharge, sediment, mussel and chlorophyll
        series and the per-step terms.
        Convert to DataFrame via result.to_dataframe().

    Raises:
        ForcingInvariantError: If the forcing is not steppable.
    """
    from ..preprocessing import validate_prepared

    validate_prepared(forcing, site.site_id)
    centered = Dilution(dilution) is Dilution.centered

    discharge = np.ascontiguousarray(forcing.discharge, dtype=np.float64)
    state = State.initialize(site, constants, float(discharge[0])) if initial_state is None else initial_state

    n_steps = forcing.time_steps
    state_arr = np.array(state, dtype=np.float64)
    states_arr = np.zeros((n_steps + 1, STATE_SIZE), dtype=np.float64)
    states_arr[0] = state_arr
    outputs_arr = np.zeros((n_steps, N_FLUXES), dtype=np.float64)

    # Run the Numba kernel
    _run_numba(
        state_arr,
        np.ascontiguousarray(constants, dtype=np.float64),
        _site_array(site),
        discharge,
        np.ascontiguousarray(_sediment_discharge(site, discharge)),
        np.ascontiguousarray(forcing.hydraulic_radius, dtype=np.float64),
        np.ascontiguousarray(forcing.dt, dtype=np.float64),
        centered,
        states_arr,
        outputs_arr,
    )

    fluxes = MusselFluxes(**{name: outputs_arr[:, i] for i, name in enumerate(FLUX_NAMES)})

    return ModelOutput(
        site_id=site.site_id,
        name=site.name,
        time=forcing.time,
        discharge=forcing.discharge,
        sediment=states_arr[:, 0],
        mussels=states_arr[:, 1],
        chlorophyll=states_arr[:, 2],
        fluxes=fluxes,
    )
