"""
Points account - the pack-opening currency.

INVARIANT: points >= 0.
INVARIANT: Points decrease only by spend() (a paid pack open) and
increase only by regenerate() (elapsed whole intervals).
"""

import time
from dataclasses import dataclass


def current_time_ms() -> int:
    """Wall clock in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class InsufficientPointsError(Exception):
    """Raised when spending more points than the account holds."""

    def __init__(self, available: int, required: int) -> None:
        self.available = available
        self.required = required
        super().__init__(f"Need {required} points, only {available} available")


@dataclass
class PointsAccount:
    """Point balance plus the anchor timestamp for regeneration."""

    points: int = 0
    last_regen_ms: int = 0

    def can_afford(self, cost: int) -> bool:
        return self.points >= cost

    def spend(self, cost: int) -> None:
        """
        Deduct `cost` points.

        Raises:
            InsufficientPointsError: If the balance is below cost.
        """
        if not self.can_afford(cost):
            raise InsufficientPointsError(self.points, cost)
        self.points -= cost

    def regenerate(self, now_ms: int, interval_ms: int) -> int:
        """
        Award one point per whole interval elapsed since the anchor.

        The anchor advances by the awarded intervals only, so partial
        progress toward the next point is kept.

        Returns:
            Number of points awarded.
        """
        elapsed = now_ms - self.last_regen_ms
        if elapsed < interval_ms:
            return 0

        intervals = elapsed // interval_ms
        self.points += intervals
        self.last_regen_ms += intervals * interval_ms
        return intervals

    def ms_until_next(self, now_ms: int, interval_ms: int) -> int:
        """Milliseconds until the next point is awarded."""
        return max(0, interval_ms - (now_ms - self.last_regen_ms))
