from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    request_id: str
    user_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str]
    status: LeaveStatus
    created_at: datetime
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class LeaveBalance:
    user_id: str
    year: int
    vacation_days: int
    vacation_used: int
    sick_days: int
    sick_used: int
    personal_days: int
    personal_used: int

    def remaining(self, leave_type: LeaveType) -> Optional[int]:
        """Days left for a balance-tracked type, None for untracked types."""
        if leave_type == LeaveType.VACATION:
            return self.vacation_days - self.vacation_used
        if leave_type == LeaveType.SICK:
            return self.sick_days - self.sick_used
        if leave_type == LeaveType.PERSONAL:
            return self.personal_days - self.personal_used
        return None
