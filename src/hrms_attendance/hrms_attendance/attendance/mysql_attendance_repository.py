from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import AttendanceStatus, CheckInStatus, CheckOutStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, check_in_time, check_out_time, status,
    check_in_status, check_in_duration, check_out_status, check_out_duration,
    work_hours, late_minutes, overtime_minutes, early_checkout,
    check_in_ip, check_in_latitude, check_in_longitude,
    restriction_passed, restriction_failure_code, notes, is_manual_entry
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    check_in_status = r.get("check_in_status")
    check_out_status = r.get("check_out_status")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        check_in_status=CheckInStatus(check_in_status) if check_in_status else None,
        check_in_duration=int(r.get("check_in_duration") or 0),
        check_out_status=CheckOutStatus(check_out_status) if check_out_status else None,
        check_out_duration=int(r.get("check_out_duration") or 0),
        work_hours=to_float(r.get("work_hours")) or 0.0,
        late_minutes=int(r.get("late_minutes") or 0),
        overtime_minutes=int(r.get("overtime_minutes") or 0),
        early_checkout=bool(r.get("early_checkout") or 0),
        check_in_ip=r.get("check_in_ip"),
        check_in_latitude=to_float(r.get("check_in_latitude")),
        check_in_longitude=to_float(r.get("check_in_longitude")),
        restriction_passed=bool(r.get("restriction_passed", 1)),
        restriction_failure_code=r.get("restriction_failure_code"),
        notes=r.get("notes"),
        is_manual_entry=bool(r.get("is_manual_entry") or 0),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_records(self, *, work_date: Optional[date], limit: int, offset: int) -> Sequence[AttendanceRecord]:
        where = ""
        params: list = []
        if work_date is not None:
            where = "WHERE work_date=%s"
            params.append(work_date)
        params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {where}
                ORDER BY work_date DESC, employee_id
                LIMIT %s OFFSET %s
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        check_in_status: CheckInStatus,
        check_in_duration: int,
        late_minutes: int,
        check_in_ip: Optional[str],
        check_in_latitude: Optional[float],
        check_in_longitude: Optional[float],
        restriction_passed: bool,
        restriction_failure_code: Optional[str],
        notes: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, work_date, check_in_time, status,
                        check_in_status, check_in_duration, late_minutes,
                        check_in_ip, check_in_latitude, check_in_longitude,
                        restriction_passed, restriction_failure_code, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        work_date,
                        check_in_time,
                        status.value,
                        check_in_status.value,
                        int(check_in_duration),
                        int(late_minutes),
                        check_in_ip,
                        check_in_latitude,
                        check_in_longitude,
                        int(bool(restriction_passed)),
                        restriction_failure_code,
                        notes,
                    ),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError:
            # UNIQUE(employee_id, work_date): a concurrent check-in won.
            raise ValidationError("Already checked in today")

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        check_out_status: CheckOutStatus,
        check_out_duration: int,
        work_hours: float,
        overtime_minutes: int,
        early_checkout: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s, check_out_status=%s, check_out_duration=%s,
                    work_hours=%s, overtime_minutes=%s, early_checkout=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (
                    check_out_time,
                    status.value,
                    check_out_status.value,
                    int(check_out_duration),
                    work_hours,
                    int(overtime_minutes),
                    int(bool(early_checkout)),
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def upsert_manual(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        check_out_time: datetime,
        status: AttendanceStatus,
        check_in_status: CheckInStatus,
        check_in_duration: int,
        check_out_status: CheckOutStatus,
        check_out_duration: int,
        work_hours: float,
        late_minutes: int,
        overtime_minutes: int,
        early_checkout: bool,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, check_in_time, check_out_time, status,
                    check_in_status, check_in_duration, check_out_status, check_out_duration,
                    work_hours, late_minutes, overtime_minutes, early_checkout,
                    restriction_passed, notes, is_manual_entry
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1,%s,1)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    check_in_time=VALUES(check_in_time),
                    check_out_time=VALUES(check_out_time),
                    status=VALUES(status),
                    check_in_status=VALUES(check_in_status),
                    check_in_duration=VALUES(check_in_duration),
                    check_out_status=VALUES(check_out_status),
                    check_out_duration=VALUES(check_out_duration),
                    work_hours=VALUES(work_hours),
                    late_minutes=VALUES(late_minutes),
                    overtime_minutes=VALUES(overtime_minutes),
                    early_checkout=VALUES(early_checkout),
                    notes=VALUES(notes),
                    is_manual_entry=1
                """,
                (
                    int(employee_id),
                    work_date,
                    check_in_time,
                    check_out_time,
                    status.value,
                    check_in_status.value,
                    int(check_in_duration),
                    check_out_status.value,
                    int(check_out_duration),
                    work_hours,
                    int(late_minutes),
                    int(overtime_minutes),
                    int(bool(early_checkout)),
                    notes,
                ),
            )
            return int(cur.lastrowid)
