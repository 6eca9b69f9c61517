"""PyMussels river reach ecology model.

Simulates coupled suspended sediment, freshwater mussel density and
chlorophyll-a concentration in a river reach at daily timesteps, driven by
observed discharge and site-specific regressions.
"""

from pymussels.errors import (
    ForcingInvariantError,
    InsufficientForcingError,
    SiteConfigurationError,
    SiteError,
    UnknownSiteError,
)
from pymussels.model import DEFAULT_CONSTANTS, MODEL_START, Constants, State, eta_cm, eta_sc, eta_sm, run, step
from pymussels.outputs import ModelOutput, MusselFluxes
from pymussels.preprocessing import PreparedForcing, hydraulic_radius, prepare_forcing
from pymussels.runner import BatchResult, run_site, run_sites
from pymussels.sites import MRB_SITE_NAMES, Site, SiteCatalog
from pymussels.types import Dilution, EndDate, ForcingData

__all__ = [
    "BatchResult",
    "Constants",
    "DEFAULT_CONSTANTS",
    "Dilution",
    "EndDate",
    "ForcingData",
    "ForcingInvariantError",
    "InsufficientForcingError",
    "MODEL_START",
    "MRB_SITE_NAMES",
    "ModelOutput",
    "MusselFluxes",
    "PreparedForcing",
    "Site",
    "SiteCatalog",
    "SiteConfigurationError",
    "SiteError",
    "State",
    "UnknownSiteError",
    "eta_cm",
    "eta_sc",
    "eta_sm",
    "hydraulic_radius",
    "prepare_forcing",
    "run",
    "run_site",
    "run_sites",
    "step",
]
