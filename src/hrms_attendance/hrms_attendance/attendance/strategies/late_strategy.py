from __future__ import annotations

from ...core.enums import CheckInStatus, CheckOutStatus
from ..model import WindowCalculation
from .base import WindowStrategy


class LateStrategy(WindowStrategy):
    """After the window closed: late on check-in, overtime on check-out."""

    def decide_checkin(self, *, actual: int, start: int, end: int) -> WindowCalculation:
        late = actual - end
        return WindowCalculation(
            status=CheckInStatus.LATE,
            duration=late,
            description=f"Late by {late} minutes",
        )

    def decide_checkout(self, *, actual: int, start: int, end: int) -> WindowCalculation:
        overtime = actual - end
        return WindowCalculation(
            status=CheckOutStatus.OVER_TIME,
            duration=overtime,
            description=f"Over time by {overtime} minutes",
        )
