from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance for one day."""

    record_id: str
    user_id: str
    work_date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    total_hours: Optional[float]
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceDayRow:
    """Read-model for the HR daily view (record joined with the employee name)."""

    user_id: str
    name: str
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    total_hours: Optional[float]
