from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Payslip:
    """One month of pay for one employee."""

    payslip_id: str
    user_id: str
    month: int
    year: int
    basic_salary: float
    hra: float
    allowances: float
    bonus: float
    deductions: float
    tax: float
    net_pay: float
    pay_date: Optional[date]
    status: str
