from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class EmployeeRow:
    """Read-model for the HR employee directory (profile joined with role)."""

    user_id: str
    name: str
    email: str
    role: Optional[Role]
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    employee_id: Optional[str] = None
