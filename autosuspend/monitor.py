"""Load sampling and the suspend decision loop."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional, Protocol

from .config import Config
from .judge import HysteresisCounter, is_low
from .power import suspend_system

LOADAVG_PATH = Path("/proc/loadavg")


class LoadReadError(RuntimeError):
    """Raised when the load average cannot be read."""


class SuspendGuard(Protocol):
    def blocking_reason(self) -> Optional[str]: ...


def read_load_average(path: Path = LOADAVG_PATH) -> float:
    """Return the current 5-minute load average (second field of /proc/loadavg)."""

    try:
        fields = path.read_text(encoding="utf-8").split()
    except OSError as exc:
        raise LoadReadError(f"Unable to read load average from {path}: {exc}") from exc

    try:
        return float(fields[1])
    except (IndexError, ValueError) as exc:
        raise LoadReadError(f"Malformed load average data in {path}: {' '.join(fields)!r}") from exc


class SuspendMonitor:
    """Periodically sample the load average and suspend after a low-load streak."""

    def __init__(
        self,
        config: Config,
        threshold: float,
        *,
        sample_load: Callable[[], float] = read_load_average,
        suspend: Optional[Callable[[], None]] = None,
        guard: Optional[SuspendGuard] = None,
    ) -> None:
        self._config = config
        self._threshold = threshold
        self._sample_load = sample_load
        self._suspend = suspend or (lambda: suspend_system(config.suspend_method))
        self._guard = guard
        self._counter = HysteresisCounter(config.consecutive_checks_required)
        self._logger = logging.getLogger(__name__)
        self._stop_event = asyncio.Event()

    @property
    def count(self) -> int:
        return self._counter.count

    @property
    def threshold(self) -> float:
        return self._threshold

    async def tick(self) -> bool:
        """Run one sampling step. Returns True when the streak completed."""

        load = self._sample_load()
        self._logger.info("Current 5-min load average: %.2f", load)

        low = is_low(load, self._threshold)
        previous = self._counter.count
        committed = self._counter.observe(low)
        required = self._counter.required

        if low:
            self._logger.info(
                "Load is low (%.2f < %.2f). Low load count: %d/%d",
                load,
                self._threshold,
                self._counter.count,
                required,
            )
        elif previous > 0:
            self._logger.info(
                "Load is no longer low (%.2f >= %.2f). Resetting low load count.",
                load,
                self._threshold,
            )
        else:
            self._logger.info(
                "Load is high (%.2f >= %.2f). Not accumulating.", load, self._threshold
            )

        if not committed:
            return False

        reason = self._guard.blocking_reason() if self._guard is not None else None
        if reason:
            self._logger.info("%s. Suspend prevented, resetting low load count.", reason)
            self._counter.reset()
            return True

        self._logger.info("Load consistently low for %d checks. Initiating system suspend...", required)
        # Blocks until the host resumes; a failure propagates without resetting the streak.
        await asyncio.to_thread(self._suspend)
        self._logger.info("System resumed from suspend. Resuming monitoring.")
        self._counter.reset()
        return True

    async def run(self) -> None:
        """Sample continuously until stopped or a fatal error propagates."""
        while not self._stop_event.is_set():
            await self.tick()
            await asyncio.sleep(self._config.check_interval)

    def stop(self) -> None:
        self._stop_event.set()
