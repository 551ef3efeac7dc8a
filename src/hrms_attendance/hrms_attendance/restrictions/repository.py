from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RestrictionType
from .model import GeoRestriction, IPRestriction, RestrictionAssignment


class RestrictionRepository(Protocol):
    """Storage for IP/GEO restrictions and their employee assignments.

    Note (DIP): the evaluator and service depend on this interface only.
    """

    def get_assignments(self, employee_id: int) -> Sequence[RestrictionAssignment]:
        raise NotImplementedError

    def get_ip_restrictions(self, restriction_ids: Sequence[int]) -> Sequence[IPRestriction]:
        raise NotImplementedError

    def get_geo_restrictions(self, restriction_ids: Sequence[int]) -> Sequence[GeoRestriction]:
        raise NotImplementedError

    def list_ip_restrictions(self) -> Sequence[IPRestriction]:
        raise NotImplementedError

    def list_geo_restrictions(self) -> Sequence[GeoRestriction]:
        raise NotImplementedError

    def list_assignments(self, employee_id: Optional[int] = None) -> Sequence[RestrictionAssignment]:
        raise NotImplementedError

    def create_ip_restriction(self, *, title: str, allowed_entries: Sequence[str]) -> int:
        raise NotImplementedError

    def update_ip_restriction(self, *, restriction_id: int, title: str, allowed_entries: Sequence[str]) -> bool:
        raise NotImplementedError

    def create_geo_restriction(self, *, title: str, latitude: float, longitude: float, radius_meters: int) -> int:
        raise NotImplementedError

    def delete_restriction(self, *, restriction_type: RestrictionType, restriction_id: int) -> bool:
        raise NotImplementedError

    def count_assignments_for(self, *, restriction_type: RestrictionType, restriction_id: int) -> int:
        raise NotImplementedError

    def find_assignment(
        self,
        *,
        employee_id: int,
        restriction_type: RestrictionType,
        restriction_id: int,
    ) -> Optional[RestrictionAssignment]:
        raise NotImplementedError

    def create_assignment(self, *, employee_id: int, restriction_type: RestrictionType, restriction_id: int) -> int:
        raise NotImplementedError

    def delete_assignment(self, *, assignment_id: int) -> bool:
        raise NotImplementedError
