from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Optional

from .calculator.base import NetPayCalculator
from .calculator.standard_calculator import StandardNetPayCalculator
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _next_pay_date(pay_date: date) -> date:
    if pay_date.month == 12:
        return date(pay_date.year + 1, 1, 1)
    return date(pay_date.year, pay_date.month + 1, 1)


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        *,
        calculator: Optional[NetPayCalculator] = None,
    ):
        self._payroll = payroll
        self._calculator = calculator or StandardNetPayCalculator()

    def latest_payslip_ui(self, user_id: str) -> Optional[dict]:
        slip = self._payroll.latest_for_user(user_id)
        if slip is None:
            return None

        net = self._calculator.net_pay(slip)
        if abs(net - slip.net_pay) > 0.01:
            logger.warning(
                "stored net pay %.2f differs from computed %.2f for payslip %s",
                slip.net_pay,
                net,
                slip.payslip_id,
            )

        return {
            "period": f"{calendar.month_name[slip.month]} {slip.year}",
            "basic_salary": _money(slip.basic_salary),
            "hra": _money(slip.hra),
            "allowances": _money(slip.allowances),
            "bonus": _money(slip.bonus),
            "deductions": _money(slip.deductions),
            "tax": _money(slip.tax),
            "net_pay": _money(net),
            "last_pay_date": slip.pay_date.strftime("%B %d, %Y") if slip.pay_date else "-",
            "next_pay_date": _next_pay_date(slip.pay_date).strftime("%B %d, %Y") if slip.pay_date else "-",
            "status": slip.status,
        }
