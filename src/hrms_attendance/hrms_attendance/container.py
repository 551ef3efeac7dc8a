from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .restrictions.evaluator import RestrictionEvaluator
from .restrictions.model import IPBypassPolicy
from .restrictions.mysql_restriction_repository import MySQLRestrictionRepository
from .restrictions.service import RestrictionService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    restrictions_repo: MySQLRestrictionRepository
    settings_repo: MySQLSettingsRepository
    attendance_repo: MySQLAttendanceRepository

    restriction_evaluator: RestrictionEvaluator
    restriction_service: RestrictionService
    settings_service: SettingsService
    attendance_service: AttendanceService


def build_container(*, db_config: dict, ip_bypass_enabled: bool = False) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    restrictions_repo = MySQLRestrictionRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    restriction_evaluator = RestrictionEvaluator(
        restrictions_repo,
        ip_bypass=IPBypassPolicy(enabled=bool(ip_bypass_enabled)),
    )
    restriction_service = RestrictionService(restrictions_repo, employees_repo)
    settings_service = SettingsService(settings_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        settings_service,
        restriction_evaluator,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        restrictions_repo=restrictions_repo,
        settings_repo=settings_repo,
        attendance_repo=attendance_repo,
        restriction_evaluator=restriction_evaluator,
        restriction_service=restriction_service,
        settings_service=settings_service,
        attendance_service=attendance_service,
    )
