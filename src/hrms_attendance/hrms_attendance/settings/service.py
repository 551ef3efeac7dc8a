from __future__ import annotations

from dataclasses import replace

from ..attendance.calculator import time_to_minutes
from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_admin
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import DEFAULT_ATTENDANCE_SETTINGS, AttendanceSettings
from .repository import SettingsRepository


class SettingsService:
    """Use case: read and change the company attendance windows."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self) -> AttendanceSettings:
        stored = self._settings.get()
        if stored is None:
            return DEFAULT_ATTENDANCE_SETTINGS

        # A stored row must be usable as-is; defaults never paper over it.
        for value in (stored.check_in_start, stored.check_in_end, stored.check_out_start, stored.check_out_end):
            time_to_minutes(value)
        return stored

    def update_settings(
        self,
        *,
        current_role: Role,
        check_in_start: str,
        check_in_end: str,
        check_out_start: str,
        check_out_end: str,
        work_hours=None,
        overtime_rate=None,
        auto_checkout=None,
    ) -> AttendanceSettings:
        require_admin(current_role)

        ci_start = parse_hhmm(check_in_start, "Check-in start")
        ci_end = parse_hhmm(check_in_end, "Check-in end")
        co_start = parse_hhmm(check_out_start, "Check-out start")
        co_end = parse_hhmm(check_out_end, "Check-out end")

        if ci_start >= ci_end:
            raise ValidationError("Check-in start must be before check-in end")
        if co_start >= co_end:
            raise ValidationError("Check-out start must be before check-out end")

        current = self._settings.get() or DEFAULT_ATTENDANCE_SETTINGS
        updated = replace(
            current,
            check_in_start=ci_start.strftime("%H:%M"),
            check_in_end=ci_end.strftime("%H:%M"),
            check_out_start=co_start.strftime("%H:%M"),
            check_out_end=co_end.strftime("%H:%M"),
        )

        if work_hours is not None:
            try:
                hours = float(work_hours)
            except (TypeError, ValueError, OverflowError):
                raise ValidationError("Work hours must be a number")
            if not 0 < hours <= 24:
                raise ValidationError("Work hours must be greater than 0 and at most 24")
            updated = replace(updated, work_hours=hours)

        if overtime_rate is not None:
            try:
                rate = float(overtime_rate)
            except (TypeError, ValueError, OverflowError):
                raise ValidationError("Overtime rate must be a number")
            if not 1 <= rate < 100:
                raise ValidationError("Overtime rate must be at least 1 and below 100")
            updated = replace(updated, overtime_rate=rate)

        if auto_checkout is not None:
            updated = replace(updated, auto_checkout=bool(auto_checkout))

        self._settings.save(updated)
        return updated
