from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EmployeeRow


class EmployeeRepository(Protocol):
    def list_directory(self) -> Sequence[EmployeeRow]:
        raise NotImplementedError

    def update_profile(
        self,
        user_id: str,
        *,
        phone: Optional[str],
        department: Optional[str],
        position: Optional[str],
    ) -> bool:
        raise NotImplementedError
