from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.enums import RestrictionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float
from .model import GeoRestriction, IPRestriction, RestrictionAssignment
from .repository import RestrictionRepository

_TABLE_BY_TYPE = {
    RestrictionType.IP: "ip_restrictions",
    RestrictionType.GEO: "geo_restrictions",
}


def _placeholders(values: Sequence[object]) -> str:
    return ",".join(["%s"] * len(values))


def _decode_allowed_ips(raw) -> tuple[str, ...]:
    # JSON column: connector returns str (or bytes on older servers).
    if raw is None:
        return ()
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    data = json.loads(raw) if isinstance(raw, str) else raw
    return tuple(str(x) for x in (data or []))


def _row_to_ip(r: dict) -> IPRestriction:
    return IPRestriction(
        restriction_id=int(r["restriction_id"]),
        title=r["title"],
        allowed_entries=_decode_allowed_ips(r.get("allowed_ips")),
    )


def _row_to_geo(r: dict) -> GeoRestriction:
    return GeoRestriction(
        restriction_id=int(r["restriction_id"]),
        title=r["title"],
        latitude=to_float(r["latitude"]),
        longitude=to_float(r["longitude"]),
        radius_meters=int(r["radius_meters"]),
    )


def _row_to_assignment(r: dict) -> RestrictionAssignment:
    return RestrictionAssignment(
        assignment_id=int(r["assignment_id"]),
        employee_id=int(r["employee_id"]),
        restriction_type=RestrictionType(r["restriction_type"]),
        restriction_id=int(r["restriction_id"]),
    )


class MySQLRestrictionRepository(RestrictionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_assignments(self, employee_id: int) -> Sequence[RestrictionAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT assignment_id, employee_id, restriction_type, restriction_id
                FROM employee_restrictions
                WHERE employee_id=%s
                ORDER BY assignment_id
                """,
                (int(employee_id),),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def get_ip_restrictions(self, restriction_ids: Sequence[int]) -> Sequence[IPRestriction]:
        ids = [int(x) for x in restriction_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT restriction_id, title, allowed_ips
                FROM ip_restrictions
                WHERE restriction_id IN ({_placeholders(ids)})
                ORDER BY restriction_id
                """,
                tuple(ids),
            )
            return [_row_to_ip(r) for r in fetchall(cur)]

    def get_geo_restrictions(self, restriction_ids: Sequence[int]) -> Sequence[GeoRestriction]:
        ids = [int(x) for x in restriction_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT restriction_id, title, latitude, longitude, radius_meters
                FROM geo_restrictions
                WHERE restriction_id IN ({_placeholders(ids)})
                ORDER BY restriction_id
                """,
                tuple(ids),
            )
            return [_row_to_geo(r) for r in fetchall(cur)]

    def list_ip_restrictions(self) -> Sequence[IPRestriction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT restriction_id, title, allowed_ips FROM ip_restrictions ORDER BY restriction_id")
            return [_row_to_ip(r) for r in fetchall(cur)]

    def list_geo_restrictions(self) -> Sequence[GeoRestriction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT restriction_id, title, latitude, longitude, radius_meters
                FROM geo_restrictions
                ORDER BY restriction_id
                """
            )
            return [_row_to_geo(r) for r in fetchall(cur)]

    def list_assignments(self, employee_id: Optional[int] = None) -> Sequence[RestrictionAssignment]:
        where = ""
        params: tuple = ()
        if employee_id is not None:
            where = "WHERE employee_id=%s"
            params = (int(employee_id),)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT assignment_id, employee_id, restriction_type, restriction_id
                FROM employee_restrictions
                {where}
                ORDER BY employee_id, assignment_id
                """,
                params,
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def create_ip_restriction(self, *, title: str, allowed_entries: Sequence[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO ip_restrictions(title, allowed_ips) VALUES(%s,%s)",
                (title, json.dumps(list(allowed_entries))),
            )
            return int(cur.lastrowid)

    def update_ip_restriction(self, *, restriction_id: int, title: str, allowed_entries: Sequence[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE ip_restrictions
                SET title=%s, allowed_ips=%s
                WHERE restriction_id=%s
                """,
                (title, json.dumps(list(allowed_entries)), int(restriction_id)),
            )
            return cur.rowcount > 0

    def create_geo_restriction(self, *, title: str, latitude: float, longitude: float, radius_meters: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO geo_restrictions(title, latitude, longitude, radius_meters)
                VALUES(%s,%s,%s,%s)
                """,
                (title, latitude, longitude, int(radius_meters)),
            )
            return int(cur.lastrowid)

    def delete_restriction(self, *, restriction_type: RestrictionType, restriction_id: int) -> bool:
        table = _TABLE_BY_TYPE[RestrictionType(restriction_type)]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {table} WHERE restriction_id=%s", (int(restriction_id),))
            return cur.rowcount > 0

    def count_assignments_for(self, *, restriction_type: RestrictionType, restriction_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS cnt
                FROM employee_restrictions
                WHERE restriction_type=%s AND restriction_id=%s
                """,
                (RestrictionType(restriction_type).value, int(restriction_id)),
            )
            r = fetchone(cur)
            return int(r["cnt"]) if r else 0

    def find_assignment(
        self,
        *,
        employee_id: int,
        restriction_type: RestrictionType,
        restriction_id: int,
    ) -> Optional[RestrictionAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT assignment_id, employee_id, restriction_type, restriction_id
                FROM employee_restrictions
                WHERE employee_id=%s AND restriction_type=%s AND restriction_id=%s
                """,
                (int(employee_id), RestrictionType(restriction_type).value, int(restriction_id)),
            )
            r = fetchone(cur)
            return _row_to_assignment(r) if r else None

    def create_assignment(self, *, employee_id: int, restriction_type: RestrictionType, restriction_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_restrictions(employee_id, restriction_type, restriction_id)
                VALUES(%s,%s,%s)
                """,
                (int(employee_id), RestrictionType(restriction_type).value, int(restriction_id)),
            )
            return int(cur.lastrowid)

    def delete_assignment(self, *, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employee_restrictions WHERE assignment_id=%s", (int(assignment_id),))
            return cur.rowcount > 0
