"""Site parameters and the catalogue used to look them up.

Each river site carries its own discharge regressions, mean mussel weight and
end dates. A SiteCatalog maps site identifiers to these parameters so that a
batch can resolve each site independently; an unknown identifier fails only
that site.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np

from .errors import SiteConfigurationError, UnknownSiteError

logger = logging.getLogger(__name__)

# Study sites of the Minnesota River Basin by index
MRB_SITE_NAMES: dict[int, str] = {
    1: "Yellow Bank",
    2: "Lac Qui Parle",
    3: "Chippewa",
    4: "MN-Montevideo",
    5: "Redwood-Marshall",
    6: "Redwood-R. Falls",
    7: "Cottonwood",
    8: "Watonwan",
    9: "Blue Earth",
    10: "Le Sueur",
    11: "MN-Jordan",
    12: "St. Croix",
}

# Site property bounds for validation warnings
_SITE_BOUNDS: dict[str, tuple[float, float]] = {
    "beta_qs": (0.0, 5.0),
    "beta_qd": (0.0, 2.0),
    "mussel_weight": (0.1, 1000.0),
}


def _warn_if_outside_bounds(site: Site) -> None:
    """Log warnings for site properties outside typical ranges."""
    for name, (lower, upper) in _SITE_BOUNDS.items():
        value = getattr(site, name)
        if value < lower or value > upper:
            logger.warning(
                "Site %s property %s=%.4f is outside typical range [%.2f, %.2f]",
                site.site_id,
                name,
                value,
                lower,
                upper,
            )


def _validate_site(site: Site) -> None:
    """Raise SiteConfigurationError for parameters the model cannot use."""
    if not site.name:
        raise SiteConfigurationError(site.site_id, "site name must not be empty")
    for name in ("alpha_qs", "beta_qs", "alpha_qd", "beta_qd", "mussel_weight"):
        if not np.isfinite(getattr(site, name)):
            raise SiteConfigurationError(site.site_id, f"{name} must be finite, got {getattr(site, name)}")
    if site.mussel_weight <= 0.0:
        raise SiteConfigurationError(site.site_id, f"mussel_weight must be positive, got {site.mussel_weight}")
    if site.alpha_qd <= 0.0:
        raise SiteConfigurationError(site.site_id, f"alpha_qd must be positive, got {site.alpha_qd}")
    if site.discharge_threshold is not None and site.discharge_threshold <= 0.0:
        raise SiteConfigurationError(
            site.site_id, f"discharge_threshold must be positive, got {site.discharge_threshold}"
        )


@dataclass(frozen=True)
class Site:
    """Immutable parameters of one river site.

    Attributes:
        site_id: Site identifier.
        name: Site name.
        alpha_qs: Coefficient of the discharge-sediment power law.
        beta_qs: Exponent of the discharge-sediment power law.
        alpha_qd: Coefficient of the discharge-depth power law.
        beta_qd: Exponent of the discharge-depth power law.
        mussel_weight: Mean wet weight of one mussel [g].
        model_end_date: Last date of a full-record run.
        calibration_end_date: Last date of a calibration-window run.
        discharge_threshold: Minimum discharge [L/s] applied before the
            discharge-sediment relation, for sites whose relation has a
            threshold break. None when the relation holds for all flows.
    """

    site_id: int
    name: str
    alpha_qs: float  # S [mg/L] from Q [L/s]
    beta_qs: float
    alpha_qd: float  # depth [m] from Q [m3/s]
    beta_qd: float
    mussel_weight: float  # [g wet/mussel]
    model_end_date: np.datetime64
    calibration_end_date: np.datetime64 | None = None
    discharge_threshold: float | None = None  # [L/s]

    def __post_init__(self) -> None:
        """Validate site parameters and warn if outside typical ranges."""
        _validate_site(self)
        _warn_if_outside_bounds(self)
        object.__setattr__(self, "model_end_date", np.datetime64(self.model_end_date, "ns"))
        if self.calibration_end_date is not None:
            object.__setattr__(self, "calibration_end_date", np.datetime64(self.calibration_end_date, "ns"))

    @property
    def has_discharge_threshold(self) -> bool:
        """Return True if the discharge-sediment relation has a threshold break."""
        return self.discharge_threshold is not None


class SiteCatalog:
    """Lookup of site parameters by identifier.

    Example:
        >>> catalog = SiteCatalog([chippewa, st_croix])
        >>> catalog.get(3).name
        'Chippewa'
    """

    def __init__(self, sites: Iterable[Site] = ()) -> None:
        self._sites: dict[int, Site] = {}
        for site in sites:
            self.register(site)

    def register(self, site: Site) -> None:
        """Add a site, replacing any site registered under the same id.

        Args:
            site: Site parameters to register.
        """
        if site.site_id in self._sites:
            logger.debug("Replacing parameters for site %s", site.site_id)
        self._sites[site.site_id] = site
        logger.debug("Registered site %s (%s)", site.site_id, site.name)

    def get(self, site_id: int) -> Site:
        """Get the parameters of a registered site.

        Raises:
            UnknownSiteError: If no site is registered under site_id.
        """
        if site_id not in self._sites:
            available = ", ".join(str(k) for k in sorted(self._sites)) if self._sites else "(none)"
            raise UnknownSiteError(site_id, f"unknown site. Available sites: {available}")
        return self._sites[site_id]

    def list_sites(self) -> list[int]:
        """Return the sorted list of registered site ids."""
        return sorted(self._sites)

    def __contains__(self, site_id: object) -> bool:
        return site_id in self._sites

    def __iter__(self) -> Iterator[Site]:
        return iter(self._sites[k] for k in sorted(self._sites))

    def __len__(self) -> int:
        return len(self._sites)
