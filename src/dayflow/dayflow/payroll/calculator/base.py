from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import Payslip


class NetPayCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def net_pay(self, slip: Payslip) -> float:
        raise NotImplementedError
