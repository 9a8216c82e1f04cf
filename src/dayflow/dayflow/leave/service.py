from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .repository import LeaveRepository


class LeaveService:
    def __init__(self, leaves: LeaveRepository):
        self._leaves = leaves

    @staticmethod
    def _parse_type(value: str) -> LeaveType:
        try:
            return LeaveType((value or "").strip().lower())
        except ValueError:
            raise ValidationError("Leave type is not valid")

    def create(
        self,
        *,
        current_role: Optional[Role],
        user_id: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str = "",
    ) -> str:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can request time off")

        kind = self._parse_type(leave_type)
        if end_date < start_date:
            raise ValidationError("End date must be on or after the start date")

        balance = self._leaves.get_balance(user_id=user_id, year=start_date.year)
        if balance is not None:
            remaining = balance.remaining(kind)
            days = (end_date - start_date).days + 1
            if remaining is not None and days > remaining:
                raise ValidationError(f"Not enough {kind.value} days left ({remaining} remaining)")

        return self._leaves.create(
            user_id=user_id,
            leave_type=kind,
            start_date=start_date,
            end_date=end_date,
            reason=(reason or "").strip() or None,
        )

    def approve(
        self,
        *,
        current_role: Optional[Role],
        reviewer_id: str,
        request_id: str,
        review_notes: str = "",
    ) -> None:
        if current_role != Role.HR:
            raise AuthorizationError("You do not have permission")

        req = self._leaves.get(request_id=request_id)
        if not req:
            raise ValidationError("Request does not exist")
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Request has already been processed")

        decided = self._leaves.decide(
            request_id=request_id,
            status=LeaveStatus.APPROVED,
            reviewed_by=reviewer_id,
            review_notes=(review_notes or "").strip() or None,
        )
        if not decided:
            raise ValidationError("Approving the request failed")

        self._leaves.consume_balance(
            user_id=req.user_id,
            year=req.start_date.year,
            leave_type=req.leave_type,
            days=req.days,
        )

    def reject(
        self,
        *,
        current_role: Optional[Role],
        reviewer_id: str,
        request_id: str,
        review_notes: str = "",
    ) -> None:
        if current_role != Role.HR:
            raise AuthorizationError("You do not have permission")

        decided = self._leaves.decide(
            request_id=request_id,
            status=LeaveStatus.REJECTED,
            reviewed_by=reviewer_id,
            review_notes=(review_notes or "").strip() or None,
        )
        if not decided:
            raise ValidationError("Rejecting the request failed")

    def cancel(self, *, user_id: str, request_id: str) -> None:
        req = self._leaves.get(request_id=request_id)
        if not req or req.user_id != user_id:
            raise ValidationError("Request does not exist")
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Only pending requests can be cancelled")

        if not self._leaves.decide(request_id=request_id, status=LeaveStatus.CANCELLED, reviewed_by=None):
            raise ValidationError("Cancelling the request failed")

    def list_mine(self, *, user_id: str, limit: int = 20):
        return self._leaves.list_requests(user_id=user_id, limit=limit)

    def list_for_review(self, *, status: Optional[LeaveStatus] = None, limit: int = 500):
        return self._leaves.list_requests(status=status, limit=limit)

    def balance_summary(self, *, user_id: str, year: Optional[int] = None) -> dict:
        year = year or date.today().year
        balance = self._leaves.get_balance(user_id=user_id, year=year)
        if balance is None:
            return {"vacation": 0, "sick": 0, "personal": 0}
        return {
            "vacation": balance.remaining(LeaveType.VACATION),
            "sick": balance.remaining(LeaveType.SICK),
            "personal": balance.remaining(LeaveType.PERSONAL),
        }
