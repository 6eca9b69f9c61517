"""Progress bar tracking for multi-site runs using tqdm."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from tqdm.auto import tqdm


class ProgressTracker:
    """Track how many sites have finished with a tqdm progress bar.

    Parameters
    ----------
    total
        Total number of sites to run.

    """

    def __init__(self, total: int) -> None:
        self._total = total
        self._failed = 0
        self._bar = tqdm(total=total, desc="Simulating", unit="site")

    def site_done(self, name: str, ok: bool) -> None:
        """Advance the bar after a site finishes.

        Parameters
        ----------
        name
            Name (or id) of the site that finished.
        ok
            Whether the site ran successfully.

        """
        if not ok:
            self._failed += 1
        self._bar.set_postfix(site=name, failed=self._failed)
        self._bar.update(1)

    def close(self) -> None:
        """Close the progress bar if not already closed."""
        if not self._bar.disable:
            self._bar.close()


@contextmanager
def progress_context(total: int) -> Generator[ProgressTracker, None, None]:
    """Context manager for progress tracking during a multi-site run.

    Ensures the progress bar is properly closed even if an exception occurs.

    Parameters
    ----------
    total
        Total number of sites to run.

    Yields
    ------
    ProgressTracker
        The progress tracker instance.

    Examples
    --------
    >>> with progress_context(3) as tracker:
    ...     tracker.site_done("Chippewa", ok=True)

    """
    tracker = ProgressTracker(total)
    try:
        yield tracker
    finally:
        tracker.close()
