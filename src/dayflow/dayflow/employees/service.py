from __future__ import annotations

from typing import Optional

from ..auth.model import Profile
from ..core.constants import PLACEHOLDER_NAME
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import EmployeeRow
from .repository import EmployeeRepository


class EmployeeService:
    """Use case: employee directory and profile upkeep."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def search(self, query: str = "") -> list[EmployeeRow]:
        """Case-insensitive match on name, department or position."""
        q = (query or "").strip().lower()
        rows = list(self._employees.list_directory())
        if not q:
            return rows
        return [
            r
            for r in rows
            if q in r.name.lower() or q in (r.department or "").lower() or q in (r.position or "").lower()
        ]

    def update_contact(
        self,
        *,
        user_id: str,
        phone: str,
        department: str,
        position: str,
    ) -> None:
        def _clean(value: str, label: str, max_len: int) -> Optional[str]:
            value = (value or "").strip()
            if len(value) > max_len:
                raise ValidationError(f"{label} is too long")
            return value or None

        ok = self._employees.update_profile(
            user_id,
            phone=_clean(phone, "Phone", 50),
            department=_clean(department, "Department", 100),
            position=_clean(position, "Position", 100),
        )
        if not ok:
            raise ValidationError("Profile not found")

    @staticmethod
    def profile_view(profile: Optional[Profile], role: Optional[Role], email: str = "") -> dict:
        """Display values for a profile that may not have been fetched yet."""
        if profile is None:
            return {
                "name": PLACEHOLDER_NAME,
                "email": email,
                "role": role.value if role else "-",
                "department": "-",
                "position": "-",
                "phone": "",
                "company": "-",
                "employee_id": "-",
                "avatar_url": None,
                "initials": PLACEHOLDER_NAME[:1],
            }
        return {
            "name": profile.name or PLACEHOLDER_NAME,
            "email": profile.email,
            "role": role.value if role else "-",
            "department": profile.department or "-",
            "position": profile.position or "-",
            "phone": profile.phone or "",
            "company": profile.company or "-",
            "employee_id": profile.employee_id or "-",
            "avatar_url": profile.avatar_url,
            "initials": "".join(part[:1] for part in (profile.name or PLACEHOLDER_NAME).split()[:2]).upper(),
        }
