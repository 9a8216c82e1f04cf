from __future__ import annotations

import logging
from datetime import date

from flask import Flask, flash, g, redirect, render_template, request

from ..auth.decorators import route_protector
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    protected = route_protector(container)

    def _profile_page(template_role: str):
        snapshot = g.current
        if request.method == "POST":
            try:
                container.employee_service.update_contact(
                    user_id=snapshot.identity.user_id,
                    phone=request.form.get("phone", ""),
                    department=request.form.get("department", ""),
                    position=request.form.get("position", ""),
                )
                container.sessions.run(g.session_client.store.refresh_profile())
                flash("Profile updated.", "success")
                return redirect(request.path)
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("profile update failed")
                flash("System error while updating the profile", "danger")

        profile = container.employee_service.profile_view(
            snapshot.profile, snapshot.role, snapshot.identity.email
        )
        return render_template("profile.html", profile=profile, area=template_role, current=snapshot)

    @app.route("/hr/dashboard", endpoint="hr_dashboard")
    @protected(allowed_roles=[Role.HR])
    def hr_dashboard():
        tab = request.args.get("tab", "employees")
        query = request.args.get("q", "")
        employees = []
        leave_requests = []
        if tab == "time-off":
            leave_requests = container.leave_service.list_for_review()
        else:
            tab = "employees"
            employees = container.employee_service.search(query)
        return render_template(
            "hr/dashboard.html",
            tab=tab,
            query=query,
            employees=employees,
            leave_requests=leave_requests,
            pending=LeaveStatus.PENDING.value,
            current=g.current,
            active_page="hr_dashboard",
        )

    @app.route("/hr/profile", methods=["GET", "POST"], endpoint="hr_profile")
    @protected(allowed_roles=[Role.HR])
    def hr_profile():
        return _profile_page("hr")

    @app.route("/employee/profile", methods=["GET", "POST"], endpoint="employee_profile")
    @protected(allowed_roles=[Role.EMPLOYEE])
    def employee_profile():
        return _profile_page("employee")

    @app.route("/employee/dashboard", endpoint="employee_dashboard")
    @protected(allowed_roles=[Role.EMPLOYEE])
    def employee_dashboard():
        snapshot = g.current
        user_id = snapshot.identity.user_id
        return render_template(
            "employee/dashboard.html",
            profile=container.employee_service.profile_view(snapshot.profile, snapshot.role, snapshot.identity.email),
            today=date.today().strftime("%A, %B %d, %Y"),
            attendance=container.attendance_service.today_summary(user_id),
            leave_requests=container.leave_service.list_mine(user_id=user_id, limit=5),
            leave_balance=container.leave_service.balance_summary(user_id=user_id),
            payslip=container.payroll_service.latest_payslip_ui(user_id),
            current=snapshot,
            active_page="employee_dashboard",
        )

    @app.context_processor
    def inject_nav():
        return {"role_hr": Role.HR, "role_employee": Role.EMPLOYEE}
