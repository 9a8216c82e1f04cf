from __future__ import annotations

import logging
from datetime import date, datetime

from flask import Flask, flash, g, redirect, render_template, request, url_for

from ..auth.decorators import route_protector
from ..common.datetime_utils import format_hours, parse_iso_date
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    protected = route_protector(container)

    def _parse_month(value: str) -> date:
        try:
            return datetime.strptime(value, "%Y-%m").date()
        except ValueError:
            return date.today().replace(day=1)

    @app.route("/employee/attendance", endpoint="employee_attendance")
    @protected(allowed_roles=[Role.EMPLOYEE])
    def employee_attendance():
        month = _parse_month(request.args.get("month", ""))
        rows = container.attendance_service.month_view(g.current.identity.user_id, month_start=month)
        return render_template(
            "employee/attendance.html",
            rows=rows,
            month=month,
            current=g.current,
            active_page="employee_attendance",
        )

    @app.route("/employee/attendance/check-in", methods=["POST"], endpoint="check_in")
    @protected(allowed_roles=[Role.EMPLOYEE])
    def check_in():
        try:
            container.attendance_service.check_in(g.current.identity.user_id)
            flash("Checked in.", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except Exception:
            logger.exception("check-in failed")
            flash("System error while checking in", "danger")
        return redirect(request.referrer or url_for("employee_dashboard"))

    @app.route("/employee/attendance/check-out", methods=["POST"], endpoint="check_out")
    @protected(allowed_roles=[Role.EMPLOYEE])
    def check_out():
        try:
            hours = container.attendance_service.check_out(g.current.identity.user_id)
            flash(f"Checked out. Worked {format_hours(hours)} today.", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except Exception:
            logger.exception("check-out failed")
            flash("System error while checking out", "danger")
        return redirect(request.referrer or url_for("employee_dashboard"))

    @app.route("/hr/attendance", endpoint="hr_attendance")
    @protected(allowed_roles=[Role.HR])
    def hr_attendance():
        try:
            selected = parse_iso_date(request.args.get("date", ""))
        except ValueError:
            selected = date.today()
        query = request.args.get("q", "")
        rows = container.attendance_service.day_view(selected, query=query)
        return render_template(
            "hr/attendance.html",
            rows=rows,
            selected=selected,
            query=query,
            current=g.current,
            active_page="hr_attendance",
        )
