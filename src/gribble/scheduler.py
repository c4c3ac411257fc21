"""Rate-limited refresh scheduling."""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Decides when the telemetry pipeline runs.

    The periodic path fires once ``update_interval`` seconds have passed
    since the last periodic refresh. The manual path fires at most once per
    ``cooldown`` seconds; presses inside the cooldown are dropped, not
    queued. Timestamps are monotonic seconds supplied by the caller.
    """

    def __init__(
        self,
        pipeline: Callable[[], None],
        update_interval: float = 2.0,
        cooldown: float = 0.5,
    ) -> None:
        """
        Initialize the RefreshScheduler.

        Args:
            pipeline: Runs one refresh: query provider, rebuild caches,
                feed network history.
            update_interval: Seconds between periodic refreshes.
            cooldown: Minimum seconds between manual refreshes.
        """
        self._pipeline = pipeline
        self._update_interval = update_interval
        self._cooldown = cooldown
        self._last_periodic: float | None = None
        self._last_manual: float | None = None

    @property
    def last_periodic(self) -> float | None:
        return self._last_periodic

    @property
    def last_manual(self) -> float | None:
        return self._last_manual

    def tick(self, now: float) -> bool:
        """Run the pipeline if the periodic interval has elapsed."""
        if self._last_periodic is not None and now - self._last_periodic < self._update_interval:
            return False
        logger.debug("Periodic refresh at %.3f", now)
        self._pipeline()
        self._last_periodic = now
        return True

    def manual_refresh(self, now: float) -> bool:
        """Run the pipeline immediately unless still cooling down."""
        if self._last_manual is not None and now - self._last_manual < self._cooldown:
            logger.debug("Manual refresh dropped, cooling down")
            return False
        logger.debug("Manual refresh at %.3f", now)
        self._pipeline()
        self._last_manual = now
        return True
