from __future__ import annotations

from dataclasses import dataclass

from .strategies.base import WindowStrategy
from .strategies.early_strategy import EarlyStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class WindowStrategyFactory:
    """Factory Pattern: choose the strategy for a time relative to a window."""

    def for_minutes(self, actual: int, start: int, end: int) -> WindowStrategy:
        if actual < start:
            return EarlyStrategy()
        if actual > end:
            return LateStrategy()
        return NormalStrategy()
