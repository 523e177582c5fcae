from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys

from .activity import ActivityGuard
from .config import ConfigError, load_config
from .judge import compute_threshold
from .logger import setup_logging
from .monitor import LoadReadError, SuspendMonitor
from .power import PrivilegeError, SuspendError, ensure_privileges, ensure_suspend_available
from .topology import TopologyError, resolve_physical_cores


logger = logging.getLogger(__name__)


async def main_async() -> None:
    try:
        config = load_config()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        raise SystemExit(1)

    try:
        ensure_privileges()
    except PrivilegeError as exc:
        print(f"Startup failed: {exc}", file=sys.stderr)
        raise SystemExit(1)

    try:
        setup_logging(config)
    except OSError as exc:
        print(f"Logging setup failed: {exc}", file=sys.stderr)
        raise SystemExit(1)

    logger.info("Auto-suspend daemon started. PID: %d", os.getpid())
    logger.info("Configuration: %s", config.describe())

    try:
        ensure_suspend_available(config.suspend_method)
        cores = resolve_physical_cores()
    except (SuspendError, TopologyError) as exc:
        logger.error("Startup failed: %s", exc)
        raise SystemExit(1)

    threshold = compute_threshold(config.load_threshold_ratio, cores)
    logger.info(
        "Detected %d physical core(s). Absolute load threshold: %.2f (ratio %s)",
        cores,
        threshold,
        config.load_threshold_ratio,
    )

    monitor = SuspendMonitor(config, threshold, guard=ActivityGuard(config))
    task = asyncio.create_task(monitor.run(), name="suspend-monitor")

    loop = asyncio.get_running_loop()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        monitor.stop()
        task.cancel()

    signal_supported = True
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except (NotImplementedError, RuntimeError):
            signal_supported = False
            break

    if not signal_supported:
        logger.debug("Signal handlers are not supported on this platform.")

    try:
        await task
    except asyncio.CancelledError:
        logger.info("Auto-suspend daemon stopped")
    except (LoadReadError, SuspendError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1)
    except Exception:
        logger.exception("Monitoring loop failed unexpectedly")
        raise SystemExit(1)


def main() -> None:
    try:
        asyncio.run(main_async())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
