"""Load threshold evaluation and low-load streak tracking."""
from __future__ import annotations

from dataclasses import dataclass


def compute_threshold(ratio: float, cores: int) -> float:
    """Absolute load threshold for ``cores`` physical cores."""
    return float(ratio) * cores


def is_low(sample: float, threshold: float) -> bool:
    # Equality is not low: the load has to drop clearly below the threshold.
    return sample < threshold


@dataclass
class HysteresisCounter:
    """Count consecutive low-load verdicts and signal when a streak completes."""

    required: int
    count: int = 0

    def __post_init__(self) -> None:
        if self.required < 1:
            raise ValueError("required must be at least 1")

    def observe(self, low: bool) -> bool:
        """Feed one verdict. Returns True when the streak has reached ``required``.

        A high verdict erases the whole streak. The caller resets the counter
        once it has acted on the commit; until then further low verdicts keep
        re-signalling it without growing the count.
        """

        if not low:
            self.count = 0
            return False

        if self.count < self.required:
            self.count += 1
        return self.count >= self.required

    def reset(self) -> None:
        self.count = 0
