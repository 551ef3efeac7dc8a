from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import parse_hhmm, parse_iso_date, parse_timestamp
from ..common.validators import require_admin, require_positive_int
from ..core.constants import DEFAULT_ADMIN_LIST_LIMIT, DEFAULT_HISTORY_LIMIT, MAX_ADMIN_LIST_LIMIT
from ..core.enums import AttendanceStatus, CheckInStatus, CheckOutStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..restrictions.evaluator import RestrictionEvaluator
from ..restrictions.geo_matcher import parse_coordinate
from ..restrictions.model import RestrictionContext
from ..settings.service import SettingsService
from .calculator import (
    calculate_attendance_status,
    calculate_check_in_status,
    calculate_check_out_status,
    calculate_work_hours,
    format_duration,
)
from .model import AttendanceRecord, AttendanceStatusCalculation, CheckInOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_STATUS_LABELS = {
    AttendanceStatus.PRESENT: "✓ Present",
    AttendanceStatus.ABSENT: "✗ Absent",
    AttendanceStatus.HALF_DAY: "◐ Half Day",
}

_STATUS_CSS = {
    AttendanceStatus.PRESENT: "bg-success",
    AttendanceStatus.ABSENT: "bg-danger",
    AttendanceStatus.HALF_DAY: "bg-warning text-dark",
}

_CHECK_IN_LABELS = {
    CheckInStatus.EARLY: "✓ Early",
    CheckInStatus.ON_TIME: "✓ On Time",
    CheckInStatus.LATE: "⚠ Late",
}

_CHECK_OUT_LABELS = {
    CheckOutStatus.EARLY: "Early Checkout",
    CheckOutStatus.ON_TIME: "✓ On Time",
    CheckOutStatus.OVER_TIME: "⏱ Overtime",
}


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        settings: SettingsService,
        evaluator: RestrictionEvaluator,
    ):
        self._attendance = attendance
        self._employees = employees
        self._settings = settings
        self._evaluator = evaluator

    def _get_employee(self, employee_id: int):
        employee = self._employees.get_by_id(require_positive_int(employee_id, "Employee ID"))
        if not employee:
            raise NotFoundError("Employee record not found")
        if not employee.is_active:
            raise ValidationError("Employee is not active")
        return employee

    def check_in(self, employee_id: int, *, timestamp, client_ip: Optional[str], latitude=None, longitude=None) -> CheckInOutcome:
        moment = parse_timestamp(timestamp)
        work_date = moment.date()
        employee = self._get_employee(employee_id)

        result = self._evaluator.evaluate(
            employee.employee_id,
            RestrictionContext(client_ip=client_ip, latitude=latitude, longitude=longitude),
        )
        if not result.passed:
            logger.info(
                "Check-in refused for employee %s: %s (ip=%s)",
                employee.employee_id,
                result.failure_code.value,
                result.client_ip,
            )
            return CheckInOutcome(restriction=result)

        if self._attendance.get_for_employee_and_date(employee.employee_id, work_date):
            raise ValidationError("Already checked in today")

        settings = self._settings.get_settings()
        calc = calculate_check_in_status(moment, settings.check_in_start, settings.check_in_end)
        late_minutes = calc.duration if calc.status == CheckInStatus.LATE else 0

        coordinate = result.coordinate or parse_coordinate(latitude, longitude)
        failure_code = result.bypassed_code.value if result.bypassed_code else None

        fields = dict(
            employee_id=employee.employee_id,
            work_date=work_date,
            check_in_time=moment,
            # Not final until check-out.
            status=AttendanceStatus.HALF_DAY,
            check_in_status=calc.status,
            check_in_duration=calc.duration,
            late_minutes=late_minutes,
            check_in_ip=result.client_ip,
            check_in_latitude=coordinate.latitude if coordinate else None,
            check_in_longitude=coordinate.longitude if coordinate else None,
            restriction_passed=True,
            restriction_failure_code=failure_code,
        )
        attendance_id = self._attendance.create_checkin(**fields)
        record = AttendanceRecord(attendance_id=attendance_id, check_out_time=None, **fields)

        logger.info(
            "Employee %s checked in at %s (%s)",
            employee.employee_id,
            moment.strftime("%Y-%m-%d %H:%M"),
            calc.status.value,
        )
        return CheckInOutcome(restriction=result, record=record, check_in=calc)

    def check_out(self, employee_id: int, *, timestamp) -> AttendanceRecord:
        moment = parse_timestamp(timestamp)
        employee = self._get_employee(employee_id)

        record = self._attendance.get_for_employee_and_date(employee.employee_id, moment.date())
        if not record:
            raise ValidationError("No check-in record found for today")
        if record.check_in_time is None:
            raise ValidationError("Must check in before checking out")
        if record.check_out_time is not None:
            raise ValidationError("Already checked out today")
        if moment < record.check_in_time:
            raise ValidationError("Check-out time must be after check-in time")

        settings = self._settings.get_settings()
        out_calc = calculate_check_out_status(moment, settings.check_out_start, settings.check_out_end)
        work_hours = calculate_work_hours(record.check_in_time, moment)
        final = calculate_attendance_status(record.check_in_time, moment, settings, moment)
        overtime_minutes = out_calc.duration if out_calc.status == CheckOutStatus.OVER_TIME else 0
        early_checkout = out_calc.status == CheckOutStatus.EARLY

        updated = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=moment,
            status=final.attendance_status,
            check_out_status=out_calc.status,
            check_out_duration=out_calc.duration,
            work_hours=work_hours,
            overtime_minutes=overtime_minutes,
            early_checkout=early_checkout,
        )
        if not updated:
            raise ValidationError("Already checked out today")

        logger.info(
            "Employee %s checked out at %s (%s, %.2fh)",
            employee.employee_id,
            moment.strftime("%Y-%m-%d %H:%M"),
            final.attendance_status.value,
            work_hours,
        )
        return replace(
            record,
            check_out_time=moment,
            status=final.attendance_status,
            check_out_status=out_calc.status,
            check_out_duration=out_calc.duration,
            work_hours=work_hours,
            overtime_minutes=overtime_minutes,
            early_checkout=early_checkout,
        )

    def record_manual(
        self,
        *,
        current_role: Role,
        employee_id: int,
        work_date,
        check_in: str,
        check_out: str,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Admin entry of a whole day; overwrites any existing record."""

        require_admin(current_role)
        employee = self._get_employee(employee_id)

        day = work_date if isinstance(work_date, date) else parse_iso_date(work_date)
        check_in_time = datetime.combine(day, parse_hhmm(check_in, "Check-in"))
        check_out_time = datetime.combine(day, parse_hhmm(check_out, "Check-out"))
        if check_out_time <= check_in_time:
            raise ValidationError("Check-out time must be after check-in time")

        settings = self._settings.get_settings()
        final = calculate_attendance_status(check_in_time, check_out_time, settings, check_out_time)
        in_calc, out_calc = final.check_in_status, final.check_out_status

        fields = dict(
            employee_id=employee.employee_id,
            work_date=day,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=final.attendance_status,
            check_in_status=in_calc.status,
            check_in_duration=in_calc.duration,
            check_out_status=out_calc.status,
            check_out_duration=out_calc.duration,
            work_hours=final.work_hours,
            late_minutes=in_calc.duration if in_calc.status == CheckInStatus.LATE else 0,
            overtime_minutes=out_calc.duration if out_calc.status == CheckOutStatus.OVER_TIME else 0,
            early_checkout=out_calc.status == CheckOutStatus.EARLY,
            notes=str(notes or "").strip() or None,
        )
        attendance_id = self._attendance.upsert_manual(**fields)
        logger.info("Manual attendance saved for employee %s on %s", employee.employee_id, day.isoformat())
        return AttendanceRecord(attendance_id=attendance_id, is_manual_entry=True, **fields)

    def day_status(self, employee_id: int, work_date: date, now: datetime) -> AttendanceStatusCalculation:
        record = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        settings = self._settings.get_settings()
        if not record:
            return calculate_attendance_status(None, None, settings, now)
        return calculate_attendance_status(record.check_in_time, record.check_out_time, settings, now)

    def get_history_ui(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        rows = self._attendance.get_recent_for_employee(int(employee_id), limit)
        return [self._to_ui(r) for r in rows]

    def _to_ui(self, r: AttendanceRecord) -> dict:
        return {
            "date": r.work_date.strftime("%Y-%m-%d"),
            "check_in": r.check_in_time.strftime("%H:%M:%S") if r.check_in_time else "-",
            "check_out": r.check_out_time.strftime("%H:%M:%S") if r.check_out_time else "-",
            "status": _STATUS_LABELS.get(r.status, r.status.value),
            "css_class": _STATUS_CSS.get(r.status, "bg-secondary"),
            "check_in_status": _CHECK_IN_LABELS.get(r.check_in_status, "-") if r.check_in_status else "-",
            "check_in_duration": format_duration(r.check_in_duration) if r.check_in_duration else "-",
            "check_out_status": _CHECK_OUT_LABELS.get(r.check_out_status, "-") if r.check_out_status else "-",
            "check_out_duration": format_duration(r.check_out_duration) if r.check_out_duration else "-",
            "work_hours": f"{r.work_hours:.2f}",
            "manual": r.is_manual_entry,
        }

    def list_records(
        self,
        *,
        current_role: Role,
        now: datetime,
        work_date=None,
        limit=DEFAULT_ADMIN_LIST_LIMIT,
        offset=0,
    ) -> list[dict]:
        """Admin overview of every employee's days, newest first."""

        require_admin(current_role)
        day = None
        if work_date not in (None, ""):
            day = work_date if isinstance(work_date, date) else parse_iso_date(work_date)
        limit = min(require_positive_int(limit, "Limit"), MAX_ADMIN_LIST_LIMIT)
        try:
            offset = int(offset)
        except (TypeError, ValueError):
            raise ValidationError("Offset must be a non-negative integer")
        if offset < 0:
            raise ValidationError("Offset must be a non-negative integer")

        settings = self._settings.get_settings()
        rows = self._attendance.list_records(work_date=day, limit=limit, offset=offset)
        return [
            {**self._to_ui(r), "employee_id": r.employee_id, "summary": self._summary(r, settings, now)}
            for r in rows
        ]

    def _summary(self, r: AttendanceRecord, settings, now: datetime) -> str:
        if r.check_in_time is None:
            return "Not Checked In"

        minutes = abs(r.check_in_duration)
        if r.check_in_status == CheckInStatus.EARLY:
            msg = f"Early by {minutes} min"
        elif r.check_in_status == CheckInStatus.LATE:
            msg = f"Late by {minutes} min"
        else:
            msg = "On Time"

        if r.check_out_time is not None:
            if r.check_out_status == CheckOutStatus.EARLY:
                return f"{msg}; Early checkout {abs(r.check_out_duration)} min"
            if r.check_out_status == CheckOutStatus.OVER_TIME:
                return f"Overtime {r.check_out_duration} min"
            return msg

        # Still open: absent once the check-out window has started without a check-out.
        if now.date() > r.work_date:
            return "Absent"
        if now.date() == r.work_date:
            final = calculate_attendance_status(r.check_in_time, None, settings, now)
            if final.attendance_status == AttendanceStatus.ABSENT:
                return "Absent"
        return msg
