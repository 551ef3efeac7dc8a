from __future__ import annotations

from ...core.enums import CheckInStatus, CheckOutStatus
from ..model import WindowCalculation
from .base import WindowStrategy


class NormalStrategy(WindowStrategy):
    """Inside the window (both bounds inclusive)."""

    def decide_checkin(self, *, actual: int, start: int, end: int) -> WindowCalculation:
        return WindowCalculation(status=CheckInStatus.ON_TIME, duration=0, description="On time")

    def decide_checkout(self, *, actual: int, start: int, end: int) -> WindowCalculation:
        return WindowCalculation(status=CheckOutStatus.ON_TIME, duration=0, description="On time")
