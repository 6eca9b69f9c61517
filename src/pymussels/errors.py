"""Exceptions raised while configuring or running a site.

Every error carries the identifier of the site it belongs to so that a
multi-site batch can report which site failed and carry on with the rest.
Falling below a state floor is not an error and never raises.
"""

from __future__ import annotations


class SiteError(Exception):
    """Base class for failures scoped to a single site."""

    def __init__(self, site_id: int | None, message: str) -> None:
        self.site_id = site_id
        self.message = message
        prefix = f"site {site_id}: " if site_id is not None else ""
        super().__init__(f"{prefix}{message}")


class SiteConfigurationError(SiteError, ValueError):
    """Site parameters are missing or malformed."""


class InsufficientForcingError(SiteConfigurationError):
    """Too few forcing samples remain after truncation to run the site."""


class UnknownSiteError(SiteError, KeyError):
    """No parameters are registered for the requested site."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return Exception.__str__(self)


class ForcingInvariantError(SiteError, RuntimeError):
    """Preprocessed forcing breaks an invariant the integrator relies on."""
