from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import WindowCalculation


class WindowStrategy(ABC):
    """Strategy Pattern: how a time on one side of a window is described.

    ``actual``/``start``/``end`` are minutes since midnight.
    """

    @abstractmethod
    def decide_checkin(self, *, actual: int, start: int, end: int) -> WindowCalculation:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, *, actual: int, start: int, end: int) -> WindowCalculation:
        raise NotImplementedError
