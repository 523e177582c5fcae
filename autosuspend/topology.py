"""CPU topology detection."""
from __future__ import annotations

import logging
from pathlib import Path

CPUINFO_PATH = Path("/proc/cpuinfo")

logger = logging.getLogger(__name__)


class TopologyError(RuntimeError):
    """Raised when CPU identification data cannot be read."""


def _field_value(line: str) -> str:
    _, _, value = line.partition(":")
    return value.strip()


def parse_cpuinfo(text: str) -> int:
    """Return the physical core count described by ``/proc/cpuinfo`` content.

    Counts distinct ``physical id`` entries and multiplies by the ``cpu cores``
    value of the first processor that reports one. Missing data on either side
    counts as 1, so the result is never zero.
    """

    package_ids: set[str] = set()
    cores_per_package = ""

    for line in text.splitlines():
        key = line.split(":", 1)[0].strip()
        if key == "physical id":
            package_ids.add(_field_value(line))
        elif key == "cpu cores" and not cores_per_package:
            cores_per_package = _field_value(line)

    packages = len(package_ids) or 1

    try:
        cores = int(cores_per_package) if cores_per_package else 1
    except ValueError:
        logger.warning("Unparseable 'cpu cores' value %r, assuming 1", cores_per_package)
        cores = 1

    return max(1, packages * max(1, cores))


def resolve_physical_cores(path: Path = CPUINFO_PATH) -> int:
    """Read CPU identification data from the host and count physical cores."""

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TopologyError(f"Unable to read CPU information from {path}: {exc}") from exc
    return parse_cpuinfo(text)
