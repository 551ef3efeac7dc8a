from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Employee:
    """Domain entity: the employee behind a login account."""

    employee_id: int
    user_id: int
    full_name: str
    is_active: bool = True
