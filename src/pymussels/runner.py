"""Site runner wiring preprocessing and the integrator together.

Provides one-call simulation of a site from its raw discharge record, and
independent runs over several sites where a failure at one site does not stop
the others.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from .errors import SiteConfigurationError, SiteError
from .model import run
from .model.constants import MODEL_START
from .model.types import DEFAULT_CONSTANTS, Constants
from .outputs import ModelOutput
from .preprocessing import prepare_forcing
from .progress import progress_context
from .sites import Site, SiteCatalog
from .types import Dilution, EndDate, ForcingData

logger = logging.getLogger(__name__)


def _resolve_end_date(site: Site, end: EndDate) -> np.datetime64:
    """Pick the end date a run is truncated at.

    Raises:
        SiteConfigurationError: If a calibration run is requested for a site
            without a calibration end date.
    """
    if end is EndDate.calibration:
        if site.calibration_end_date is None:
            raise SiteConfigurationError(site.site_id, "calibration_end_date is not set")
        return site.calibration_end_date
    return site.model_end_date


def _resolve_workers(n_workers: int) -> int:
    if n_workers == -1:
        return os.cpu_count() or 1
    if n_workers < 1:
        msg = f"n_workers must be a positive integer or -1, got {n_workers}"
        raise ValueError(msg)
    return n_workers


def run_site(
    site: Site,
    forcing: ForcingData,
    constants: Constants = DEFAULT_CONSTANTS,
    model_start: np.datetime64 = MODEL_START,
    end: EndDate | str = EndDate.model,
    dilution: Dilution | str = Dilution.forward,
) -> ModelOutput:
    """Simulate one site from its raw discharge record.

    Preprocesses the forcing, builds the initial state and integrates to the
    end of the retained record.

    Args:
        site: Site parameters.
        forcing: Raw discharge record for the site.
        constants: Biological configuration.
        model_start: First date of the modelled period.
        end: Truncate at the site's model end date (full record) or its
            calibration end date.
        dilution: Form of the chlorophyll dilution term.

    Returns:
        ModelOutput for the site.

    Raises:
        SiteConfigurationError: If the site cannot be run with this forcing.
        ForcingInvariantError: If preprocessing produced an unsteppable series.

    Example:
        >>> result = run_site(chippewa, forcing)
        >>> result.mussels[-1]
    """
    end_date = _resolve_end_date(site, EndDate(end))
    prepared = prepare_forcing(forcing, site, model_start=model_start, end_date=end_date)
    logger.debug("Running site %s (%s) over %d steps", site.site_id, site.name, prepared.time_steps)
    return run(site, prepared, constants=constants, dilution=dilution)


@dataclass(frozen=True)
class BatchResult:
    """Outcome of running several independent sites.

    Attributes:
        results: ModelOutput per successfully simulated site id.
        failures: Error per site id that could not be simulated.
    """

    results: dict[int, ModelOutput] = field(default_factory=dict)
    failures: dict[int, Exception] = field(default_factory=dict)

    @property
    def succeeded(self) -> list[int]:
        """Sorted ids of sites that ran."""
        return sorted(self.results)

    @property
    def failed(self) -> list[int]:
        """Sorted ids of sites that failed."""
        return sorted(self.failures)

    def summary(self) -> pd.DataFrame:
        """Final state of every successful site.

        Returns:
            DataFrame indexed by site id with name, end date and the final
            sediment, mussel and chlorophyll values.
        """
        rows = [
            {
                "site_id": site_id,
                "name": result.name,
                "end": result.state_time[-1],
                "sediment": float(result.sediment[-1]),
                "mussels": float(result.mussels[-1]),
                "chlorophyll": float(result.chlorophyll[-1]),
            }
            for site_id, result in sorted(self.results.items())
        ]
        columns = ["site_id", "name", "end", "sediment", "mussels", "chlorophyll"]
        return pd.DataFrame(rows, columns=columns).set_index("site_id")


def run_sites(
    catalog: SiteCatalog,
    forcings: Mapping[int, ForcingData],
    site_ids: Iterable[int] | None = None,
    constants: Constants = DEFAULT_CONSTANTS,
    n_workers: int = 1,
    progress: bool = True,
    **run_kwargs: object,
) -> BatchResult:
    """Run each requested site once, independently.

    A site whose parameters are unknown, whose forcing is missing or too short,
    or whose preprocessing breaks an invariant is recorded as a failure; the
    remaining sites still run.

    Args:
        catalog: Site parameters by id.
        forcings: Raw discharge record by site id.
        site_ids: Sites to run. Defaults to every site in the catalog.
        constants: Biological configuration shared by all sites.
        n_workers: Number of sites run concurrently. Use 1 for sequential
            execution (default), -1 for all CPU cores, or any positive integer.
        progress: Whether to display a progress bar.
        **run_kwargs: Passed to run_site() (model_start, end, dilution).

    Returns:
        BatchResult with per-site results and failures.
    """
    ids = catalog.list_sites() if site_ids is None else list(site_ids)
    workers = _resolve_workers(n_workers)
    logger.info("Running %d sites with %d worker(s)", len(ids), workers)

    def run_one(site_id: int) -> ModelOutput:
        site = catalog.get(site_id)
        if site_id not in forcings:
            raise SiteConfigurationError(site_id, "no forcing data supplied")
        return run_site(site, forcings[site_id], constants=constants, **run_kwargs)  # type: ignore[arg-type]

    results: dict[int, ModelOutput] = {}
    failures: dict[int, Exception] = {}

    def record(site_id: int, outcome: ModelOutput | Exception) -> bool:
        if isinstance(outcome, Exception):
            logger.warning("Site %s failed: %s", site_id, outcome)
            failures[site_id] = outcome
            return False
        results[site_id] = outcome
        return True

    def guarded(site_id: int) -> ModelOutput | Exception:
        try:
            return run_one(site_id)
        except (SiteError, KeyError, ValueError) as exc:
            return exc

    with progress_context(len(ids)) if progress else _NullTracker() as tracker:
        if workers == 1:
            for site_id in ids:
                ok = record(site_id, guarded(site_id))
                tracker.site_done(str(site_id), ok)
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = {pool.submit(guarded, site_id): site_id for site_id in ids}
                for future in as_completed(futures):
                    site_id = futures[future]
                    ok = record(site_id, future.result())
                    tracker.site_done(str(site_id), ok)

    logger.info("Finished: %d succeeded, %d failed", len(results), len(failures))
    return BatchResult(
        results={k: results[k] for k in sorted(results)},
        failures={k: failures[k] for k in sorted(failures)},
    )


class _NullTracker:
    """Stand-in for ProgressTracker when progress display is off."""

    def __enter__(self) -> _NullTracker:
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def site_done(self, name: str, ok: bool) -> None:
        return None
