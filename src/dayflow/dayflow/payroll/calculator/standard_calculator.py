from __future__ import annotations

from ..model import Payslip
from .base import NetPayCalculator


class StandardNetPayCalculator(NetPayCalculator):
    """Standard rule: basic + hra + allowances + bonus - deductions - tax."""

    def net_pay(self, slip: Payslip) -> float:
        gross = slip.basic_salary + slip.hra + slip.allowances + slip.bonus
        return round(gross - slip.deductions - slip.tax, 2)
