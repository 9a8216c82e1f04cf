from __future__ import annotations

from typing import Optional, Protocol

from .model import Payslip


class PayrollRepository(Protocol):
    def latest_for_user(self, user_id: str) -> Optional[Payslip]:
        raise NotImplementedError
