from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveBalance, LeaveRequest


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> str:
        raise NotImplementedError

    def get(self, *, request_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        user_id: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        """Return UI rows (joined with the requester's profile name)."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: str,
        status: LeaveStatus,
        reviewed_by: Optional[str],
        review_notes: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status``; False if it was not pending."""

        raise NotImplementedError

    def get_balance(self, *, user_id: str, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def consume_balance(self, *, user_id: str, year: int, leave_type: LeaveType, days: int) -> bool:
        raise NotImplementedError
