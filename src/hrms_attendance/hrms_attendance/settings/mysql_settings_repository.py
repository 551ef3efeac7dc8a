from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, time_to_hhmm, to_float
from .model import AttendanceSettings
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[AttendanceSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT check_in_start, check_in_end, check_out_start, check_out_end,
                       work_hours, overtime_rate, auto_checkout
                FROM attendance_settings
                ORDER BY settings_id
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceSettings(
                check_in_start=time_to_hhmm(r["check_in_start"]),
                check_in_end=time_to_hhmm(r["check_in_end"]),
                check_out_start=time_to_hhmm(r["check_out_start"]),
                check_out_end=time_to_hhmm(r["check_out_end"]),
                work_hours=to_float(r["work_hours"]),
                overtime_rate=to_float(r["overtime_rate"]),
                auto_checkout=bool(r.get("auto_checkout") or 0),
            )

    def save(self, settings: AttendanceSettings) -> None:
        # Singleton row: id 1 is always the active settings.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_settings(
                    settings_id, check_in_start, check_in_end, check_out_start, check_out_end,
                    work_hours, overtime_rate, auto_checkout
                )
                VALUES(1,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    check_in_start=VALUES(check_in_start),
                    check_in_end=VALUES(check_in_end),
                    check_out_start=VALUES(check_out_start),
                    check_out_end=VALUES(check_out_end),
                    work_hours=VALUES(work_hours),
                    overtime_rate=VALUES(overtime_rate),
                    auto_checkout=VALUES(auto_checkout)
                """,
                (
                    settings.check_in_start,
                    settings.check_in_end,
                    settings.check_out_start,
                    settings.check_out_end,
                    settings.work_hours,
                    settings.overtime_rate,
                    int(bool(settings.auto_checkout)),
                ),
            )
