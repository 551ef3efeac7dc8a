"""Attendance status calculation.

Pure functions over minute-of-day values: seconds are ignored when a time
is placed in a window, and window bounds are inclusive. Nothing here reads
the clock or the database; callers pass ``now`` and the settings in.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import minute_of_day
from ..core.enums import AttendanceStatus, CheckInStatus, CheckOutStatus
from ..core.exceptions import ConfigurationError
from ..settings.model import AttendanceSettings
from .factory import WindowStrategyFactory
from .model import AttendanceStatusCalculation, WindowCalculation

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")

_factory = WindowStrategyFactory()


def time_to_minutes(value: str) -> int:
    """'HH:MM' -> minutes since midnight. Malformed settings are fatal."""
    m = _HHMM_RE.match(str(value or "").strip())
    if not m:
        raise ConfigurationError(f"Invalid time setting (HH:MM): {value!r}")
    hours, minutes = int(m.group(1)), int(m.group(2))
    if hours > 23 or minutes > 59:
        raise ConfigurationError(f"Invalid time setting (HH:MM): {value!r}")
    return hours * 60 + minutes


def calculate_check_in_status(actual: datetime, start: str, end: str) -> WindowCalculation:
    actual_m = minute_of_day(actual)
    start_m, end_m = time_to_minutes(start), time_to_minutes(end)
    return _factory.for_minutes(actual_m, start_m, end_m).decide_checkin(actual=actual_m, start=start_m, end=end_m)


def calculate_check_out_status(actual: datetime, start: str, end: str) -> WindowCalculation:
    actual_m = minute_of_day(actual)
    start_m, end_m = time_to_minutes(start), time_to_minutes(end)
    return _factory.for_minutes(actual_m, start_m, end_m).decide_checkout(actual=actual_m, start=start_m, end=end_m)


def calculate_work_hours(check_in: datetime, check_out: datetime) -> float:
    """Elapsed wall-clock hours, rounded to 2 decimals (8h30m -> 8.5)."""
    return round((check_out - check_in).total_seconds() / 3600, 2)


def _past_check_out_start(now: datetime, settings: AttendanceSettings) -> bool:
    return minute_of_day(now) >= time_to_minutes(settings.check_out_start)


def calculate_attendance_status(
    check_in: Optional[datetime],
    check_out: Optional[datetime],
    settings: AttendanceSettings,
    now: datetime,
) -> AttendanceStatusCalculation:
    """Final status of a day.

    Without a check-in the day is absent once ``now`` reaches check-out
    start, and half_day (not yet decided) before that. With a check-in but
    no check-out the same cut-off applies. With both, the day is present
    when check-in was early/on time and check-out on time/overtime, absent
    when late in and early out, and half_day otherwise.
    """

    if check_in is None:
        if _past_check_out_start(now, settings):
            return AttendanceStatusCalculation(
                attendance_status=AttendanceStatus.ABSENT,
                is_present=False,
                check_in_status=None,
                check_out_status=None,
                work_hours=0.0,
                description="Absent - No check-in by checkout start time",
            )
        return AttendanceStatusCalculation(
            attendance_status=AttendanceStatus.HALF_DAY,
            is_present=False,
            check_in_status=None,
            check_out_status=None,
            work_hours=0.0,
            description="No check-in yet",
        )

    check_in_calc = calculate_check_in_status(check_in, settings.check_in_start, settings.check_in_end)
    check_out_calc: Optional[WindowCalculation] = None
    work_hours = 0.0

    if check_out is not None:
        check_out_calc = calculate_check_out_status(check_out, settings.check_out_start, settings.check_out_end)
        work_hours = calculate_work_hours(check_in, check_out)

        valid_in = check_in_calc.status in (CheckInStatus.EARLY, CheckInStatus.ON_TIME)
        valid_out = check_out_calc.status in (CheckOutStatus.ON_TIME, CheckOutStatus.OVER_TIME)

        if valid_in and valid_out:
            status = AttendanceStatus.PRESENT
        elif check_in_calc.status == CheckInStatus.LATE and check_out_calc.status == CheckOutStatus.EARLY:
            status = AttendanceStatus.ABSENT
        else:
            status = AttendanceStatus.HALF_DAY
    elif _past_check_out_start(now, settings):
        status = AttendanceStatus.ABSENT
    else:
        status = AttendanceStatus.HALF_DAY

    description = f"{status.value} - Check-in: {check_in_calc.description}"
    if check_out_calc is not None:
        description += f", Check-out: {check_out_calc.description}"

    return AttendanceStatusCalculation(
        attendance_status=status,
        is_present=status == AttendanceStatus.PRESENT,
        check_in_status=check_in_calc,
        check_out_status=check_out_calc,
        work_hours=work_hours,
        description=description,
    )


def format_duration(minutes: int, include_sign: bool = True) -> str:
    """Render minutes as '+ 15m', '- 1h 30m' or '2h'."""
    total = abs(int(minutes))
    hours, mins = divmod(total, 60)
    sign = ("- " if minutes < 0 else "+ ") if include_sign else ""

    if hours == 0:
        return f"{sign}{mins}m"
    if mins == 0:
        return f"{sign}{hours}h"
    return f"{sign}{hours}h {mins}m"
