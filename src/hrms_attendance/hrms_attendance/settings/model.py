from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import (
    DEFAULT_CHECK_IN_END,
    DEFAULT_CHECK_IN_START,
    DEFAULT_CHECK_OUT_END,
    DEFAULT_CHECK_OUT_START,
    DEFAULT_OVERTIME_RATE,
    DEFAULT_WORK_HOURS,
)


@dataclass(frozen=True)
class AttendanceSettings:
    """Company-wide attendance windows (single row).

    Times are 'HH:MM' 24-hour strings, compared at minute resolution.
    """

    check_in_start: str
    check_in_end: str
    check_out_start: str
    check_out_end: str
    work_hours: float = DEFAULT_WORK_HOURS
    overtime_rate: float = DEFAULT_OVERTIME_RATE
    auto_checkout: bool = False


DEFAULT_ATTENDANCE_SETTINGS = AttendanceSettings(
    check_in_start=DEFAULT_CHECK_IN_START,
    check_in_end=DEFAULT_CHECK_IN_END,
    check_out_start=DEFAULT_CHECK_OUT_START,
    check_out_end=DEFAULT_CHECK_OUT_END,
)
