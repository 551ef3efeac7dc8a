from __future__ import annotations

from ...core.enums import CheckInStatus, CheckOutStatus
from ..model import WindowCalculation
from .base import WindowStrategy


class EarlyStrategy(WindowStrategy):
    """Before the window opened."""

    def decide_checkin(self, *, actual: int, start: int, end: int) -> WindowCalculation:
        early = start - actual
        return WindowCalculation(
            status=CheckInStatus.EARLY,
            duration=-early,
            description=f"Early by {early} minutes",
        )

    def decide_checkout(self, *, actual: int, start: int, end: int) -> WindowCalculation:
        early = start - actual
        return WindowCalculation(
            status=CheckOutStatus.EARLY,
            duration=-early,
            description=f"Early checkout by {early} minutes",
        )
