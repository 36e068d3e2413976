import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class WeatherRefreshScheduler:
    """
    Fixed-interval re-fetch as an explicit cancelable task.

    Every ``configure`` call cancels the armed timer before (optionally) arming a
    new one, so reconfiguration never leaves an orphaned periodic trigger behind.
    A generation counter makes a timer that already fired before cancellation a no-op.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval_seconds: float,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ) -> None:
        self._callback = callback
        self._interval = interval_seconds
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._timer is not None

    @property
    def generation(self) -> int:
        return self._generation

    def configure(self, enabled: bool) -> None:
        with self._lock:
            self._cancel_locked()
            if enabled:
                self._arm_locked()
        logger.debug("Weather auto-refresh %s", "armed" if enabled else "disarmed")

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm_locked(self) -> None:
        generation = self._generation
        timer = self._timer_factory(self._interval, self._fire, args=(generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None

        try:
            self._callback()
        except Exception:
            logger.exception("Weather auto-refresh tick failed")

        with self._lock:
            # Re-arm only if nobody reconfigured while the callback ran.
            if generation == self._generation and self._timer is None:
                self._arm_locked()
