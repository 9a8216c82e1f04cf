from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import format_hours, now_local
from ..core.constants import STANDARD_WORK_HOURS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .repository import AttendanceRepository


def month_bounds(month_start: date) -> tuple[date, date]:
    first = month_start.replace(day=1)
    last_day = calendar.monthrange(first.year, first.month)[1]
    return first, first.replace(day=last_day)


def extra_hours(total_hours: Optional[float]) -> Optional[float]:
    if total_hours is None:
        return None
    return max(total_hours - STANDARD_WORK_HOURS, 0.0)


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def check_in(self, user_id: str, *, now: datetime | None = None) -> None:
        now = now or now_local()
        today = now.date()

        existing = self._attendance.get_for_user_and_date(user_id, today)
        if existing:
            raise ValidationError("You have already checked in today")

        self._attendance.create_checkin(
            user_id=user_id,
            work_date=today,
            check_in=now,
            status=AttendanceStatus.PRESENT,
        )

    def check_out(self, user_id: str, *, now: datetime | None = None) -> float:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record or record.check_in is None:
            raise ValidationError("You have not checked in today")
        if record.check_out is not None:
            raise ValidationError("You have already checked out today")
        if now < record.check_in:
            raise ValidationError("Check-out time cannot be before check-in time")

        total_hours = (now - record.check_in).total_seconds() / 3600
        if not self._attendance.update_checkout(record_id=record.record_id, check_out=now, total_hours=total_hours):
            raise ValidationError("Check-out failed")
        return total_hours

    def today_summary(self, user_id: str, *, today: date | None = None) -> dict:
        today = today or date.today()
        record = self._attendance.get_for_user_and_date(user_id, today)
        return {
            "checked_in": bool(record and record.check_in),
            "checked_out": bool(record and record.check_out),
            "check_in": record.check_in.strftime("%H:%M") if record and record.check_in else "-",
            "check_out": record.check_out.strftime("%H:%M") if record and record.check_out else "-",
            "total_hours": format_hours(record.total_hours if record else None),
        }

    def month_view(self, user_id: str, *, month_start: date, today: date | None = None) -> list[dict]:
        """Working days of the month up to today, absent where no record exists."""
        today = today or date.today()
        first, last = month_bounds(month_start)
        last = min(last, today)
        if last < first:
            return []

        by_day = {r.work_date: r for r in self._attendance.list_for_user_between(user_id, start=first, end=last)}
        rows: list[dict] = []
        day = first
        while day <= last:
            record = by_day.get(day)
            if record is not None:
                rows.append(self._to_ui(day, record.check_in, record.check_out, record.total_hours, record.status))
            elif day.weekday() < 5:
                rows.append(self._to_ui(day, None, None, None, AttendanceStatus.ABSENT))
            day += timedelta(days=1)
        return rows

    def day_view(self, work_date: date, *, query: str = "") -> list[dict]:
        q = (query or "").strip().lower()
        rows = []
        for r in self._attendance.list_for_date(work_date):
            if q and q not in r.name.lower():
                continue
            rows.append(
                {
                    "user_id": r.user_id,
                    "name": r.name,
                    "check_in": r.check_in.strftime("%H:%M") if r.check_in else "-",
                    "check_out": r.check_out.strftime("%H:%M") if r.check_out else "-",
                    "work_hours": format_hours(r.total_hours),
                    "extra_hours": format_hours(extra_hours(r.total_hours)),
                }
            )
        return rows

    def _to_ui(self, day: date, check_in, check_out, total_hours, status: AttendanceStatus) -> dict:
        label = {
            AttendanceStatus.PRESENT: "Present",
            AttendanceStatus.ABSENT: "Absent",
            AttendanceStatus.HALF_DAY: "Half day",
        }.get(status, status.value)

        css = {
            AttendanceStatus.PRESENT: "status-active",
            AttendanceStatus.ABSENT: "status-inactive",
            AttendanceStatus.HALF_DAY: "status-pending",
        }.get(status, "status-inactive")

        return {
            "date": day.strftime("%Y-%m-%d"),
            "check_in": check_in.strftime("%H:%M") if check_in else "-",
            "check_out": check_out.strftime("%H:%M") if check_out else "-",
            "work_hours": format_hours(total_hours),
            "extra_hours": format_hours(extra_hours(total_hours)),
            "status": label,
            "css_class": css,
        }
