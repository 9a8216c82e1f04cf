from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceDayRow, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: str,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
    ) -> str:
        raise NotImplementedError

    def update_checkout(self, *, record_id: str, check_out: datetime, total_hours: float) -> bool:
        raise NotImplementedError

    def list_for_user_between(self, user_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceDayRow]:
        raise NotImplementedError
