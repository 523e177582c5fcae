"""Suspend-to-RAM invocation and the privilege checks it depends on."""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

POWER_STATE_PATH = Path("/sys/power/state")

logger = logging.getLogger(__name__)


class SuspendError(RuntimeError):
    """Raised when the host suspend facility is missing or fails."""


class PrivilegeError(RuntimeError):
    """Raised when the process lacks the privilege to suspend the host."""


def ensure_privileges() -> None:
    if os.geteuid() != 0:
        raise PrivilegeError("This daemon must be run as root to suspend the system")


def ensure_suspend_available(method: str, *, state_path: Path = POWER_STATE_PATH) -> None:
    """Fail early when the configured suspend facility cannot be used."""

    if method == "systemctl":
        if shutil.which("systemctl") is None:
            raise SuspendError("'systemctl' command not found; cannot suspend the system")
        return

    if method == "sysfs":
        try:
            states = state_path.read_text(encoding="utf-8").split()
        except OSError as exc:
            raise SuspendError(f"Unable to read supported power states from {state_path}: {exc}") from exc
        if "mem" not in states:
            raise SuspendError(f"Suspend-to-RAM is not supported by this host ({state_path}: {' '.join(states)})")
        return

    raise SuspendError(f"Unknown suspend method: {method}")


def suspend_system(method: str, *, state_path: Path = POWER_STATE_PATH) -> None:
    """Suspend the host to RAM. Returns only after the host has resumed."""

    logger.debug("Suspending via %s", method)
    if method == "systemctl":
        try:
            subprocess.run(["systemctl", "suspend"], check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise SuspendError(f"'systemctl suspend' failed: {exc}") from exc
        return

    if method == "sysfs":
        try:
            with state_path.open("w", encoding="utf-8") as handle:
                handle.write("mem")
        except OSError as exc:
            raise SuspendError(f"Writing 'mem' to {state_path} failed: {exc}") from exc
        return

    raise SuspendError(f"Unknown suspend method: {method}")
