from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..common.validators import require_admin, require_non_empty, require_positive_int
from ..core.enums import RestrictionType, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .geo_matcher import parse_coordinate
from .ip_matcher import is_valid_cidr, is_valid_ipv4
from .model import GeoRestriction, IPRestriction, RestrictionAssignment
from .repository import RestrictionRepository

logger = logging.getLogger(__name__)


def _clean_entries(entries: Iterable[str]) -> list[str]:
    if isinstance(entries, str):
        entries = entries.replace("\n", ",").split(",")
    cleaned = [str(e).strip() for e in (entries or []) if e is not None and str(e).strip()]
    if not cleaned:
        raise ValidationError("At least one IP address or CIDR range is required")
    for entry in cleaned:
        if "/" in entry:
            if not is_valid_cidr(entry):
                raise ValidationError(f"Invalid CIDR range: {entry}")
        elif not is_valid_ipv4(entry):
            raise ValidationError(f"Invalid IP address: {entry}")
    return cleaned


def _to_type(value) -> RestrictionType:
    try:
        return RestrictionType(str(value).upper())
    except ValueError:
        raise ValidationError("Restriction type must be IP or GEO")


class RestrictionService:
    """Use case: manage IP/GEO restrictions and who they apply to (admin)."""

    def __init__(self, restrictions: RestrictionRepository, employees: EmployeeRepository):
        self._restrictions = restrictions
        self._employees = employees

    def list_ip_restrictions(self, *, current_role: Role) -> list[IPRestriction]:
        require_admin(current_role)
        return list(self._restrictions.list_ip_restrictions())

    def list_geo_restrictions(self, *, current_role: Role) -> list[GeoRestriction]:
        require_admin(current_role)
        return list(self._restrictions.list_geo_restrictions())

    def list_assignments(self, *, current_role: Role, employee_id: Optional[int] = None) -> list[RestrictionAssignment]:
        require_admin(current_role)
        if employee_id is not None:
            employee_id = require_positive_int(employee_id, "Employee ID")
        return list(self._restrictions.list_assignments(employee_id))

    def create_ip_restriction(self, *, current_role: Role, title: str, entries: Iterable[str]) -> int:
        require_admin(current_role)
        title = require_non_empty(title, "Title")
        allowed = _clean_entries(entries)
        restriction_id = self._restrictions.create_ip_restriction(title=title, allowed_entries=allowed)
        logger.info("Created IP restriction %s (%d entries)", restriction_id, len(allowed))
        return restriction_id

    def update_ip_restriction(self, *, current_role: Role, restriction_id: int, title: str, entries: Iterable[str]) -> None:
        require_admin(current_role)
        title = require_non_empty(title, "Title")
        allowed = _clean_entries(entries)
        if not self._restrictions.get_ip_restrictions([int(restriction_id)]):
            raise NotFoundError("IP restriction not found")
        self._restrictions.update_ip_restriction(
            restriction_id=int(restriction_id),
            title=title,
            allowed_entries=allowed,
        )

    def create_geo_restriction(self, *, current_role: Role, title: str, latitude, longitude, radius_meters) -> int:
        require_admin(current_role)
        title = require_non_empty(title, "Title")
        coordinate = parse_coordinate(latitude, longitude)
        if coordinate is None:
            raise ValidationError("Latitude must be within [-90, 90] and longitude within [-180, 180]")
        radius = require_positive_int(radius_meters, "Radius")

        restriction_id = self._restrictions.create_geo_restriction(
            title=title,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            radius_meters=radius,
        )
        logger.info("Created GEO restriction %s (radius=%sm)", restriction_id, radius)
        return restriction_id

    def _exists(self, restriction_type: RestrictionType, restriction_id: int) -> bool:
        if restriction_type == RestrictionType.IP:
            return bool(self._restrictions.get_ip_restrictions([restriction_id]))
        return bool(self._restrictions.get_geo_restrictions([restriction_id]))

    def _delete(self, restriction_type: RestrictionType, restriction_id: int) -> None:
        restriction_id = int(restriction_id)
        if not self._exists(restriction_type, restriction_id):
            raise NotFoundError(f"{restriction_type.value} restriction not found")

        in_use = self._restrictions.count_assignments_for(
            restriction_type=restriction_type,
            restriction_id=restriction_id,
        )
        if in_use:
            raise ValidationError(
                f"Cannot delete restriction: it is assigned to {in_use} employee(s). Remove assignments first."
            )
        self._restrictions.delete_restriction(restriction_type=restriction_type, restriction_id=restriction_id)

    def delete_ip_restriction(self, *, current_role: Role, restriction_id: int) -> None:
        require_admin(current_role)
        self._delete(RestrictionType.IP, restriction_id)

    def delete_geo_restriction(self, *, current_role: Role, restriction_id: int) -> None:
        require_admin(current_role)
        self._delete(RestrictionType.GEO, restriction_id)

    def assign(self, *, current_role: Role, employee_id: int, restriction_type, restriction_id: int) -> int:
        require_admin(current_role)
        rtype = _to_type(restriction_type)
        employee_id = require_positive_int(employee_id, "Employee ID")
        restriction_id = require_positive_int(restriction_id, "Restriction ID")

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if not employee.is_active:
            raise ValidationError("Employee is not active")

        if not self._exists(rtype, restriction_id):
            raise NotFoundError(f"{rtype.value} restriction not found")

        if self._restrictions.find_assignment(employee_id=employee_id, restriction_type=rtype, restriction_id=restriction_id):
            raise ValidationError("Restriction already assigned to this employee")

        return self._restrictions.create_assignment(
            employee_id=employee_id,
            restriction_type=rtype,
            restriction_id=restriction_id,
        )

    def unassign(self, *, current_role: Role, assignment_id: int) -> None:
        require_admin(current_role)
        if not self._restrictions.delete_assignment(assignment_id=int(assignment_id)):
            raise NotFoundError("Assignment not found")
