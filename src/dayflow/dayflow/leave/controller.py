from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, request, url_for

from ..auth.decorators import route_protector
from ..common.datetime_utils import parse_iso_date
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    protected = route_protector(container)

    @app.route("/employee/leave", methods=["POST"], endpoint="new_leave")
    @protected(allowed_roles=[Role.EMPLOYEE])
    def new_leave():
        try:
            try:
                start = parse_iso_date(request.form.get("start_date") or "")
                end = parse_iso_date(request.form.get("end_date") or "")
            except ValueError:
                raise ValidationError("Dates must use the YYYY-MM-DD format")

            container.leave_service.create(
                current_role=g.current.role,
                user_id=g.current.identity.user_id,
                leave_type=request.form.get("leave_type", ""),
                start_date=start,
                end_date=end,
                reason=request.form.get("reason", ""),
            )
            flash("Time off request submitted.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("leave request failed")
            flash("System error while submitting the request", "danger")
        return redirect(url_for("employee_dashboard"))

    @app.route("/employee/leave/<request_id>/cancel", methods=["POST"], endpoint="cancel_leave")
    @protected(allowed_roles=[Role.EMPLOYEE])
    def cancel_leave(request_id: str):
        try:
            container.leave_service.cancel(user_id=g.current.identity.user_id, request_id=request_id)
            flash("Request cancelled.", "info")
        except ValidationError as e:
            flash(str(e), "danger")
        return redirect(url_for("employee_dashboard"))

    @app.route("/hr/leave/<request_id>/<action>", methods=["POST"], endpoint="decide_leave")
    @protected(allowed_roles=[Role.HR])
    def decide_leave(request_id: str, action: str):
        notes = request.form.get("review_notes", "")
        try:
            if action == "approve":
                container.leave_service.approve(
                    current_role=g.current.role,
                    reviewer_id=g.current.identity.user_id,
                    request_id=request_id,
                    review_notes=notes,
                )
                flash("Request approved.", "success")
            elif action == "reject":
                container.leave_service.reject(
                    current_role=g.current.role,
                    reviewer_id=g.current.identity.user_id,
                    request_id=request_id,
                    review_notes=notes,
                )
                flash("Request rejected.", "info")
            else:
                raise ValidationError("Unknown action")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("leave decision failed")
            flash("System error while processing the request", "danger")
        return redirect(url_for("hr_dashboard", tab="time-off"))
