from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, flash, g, redirect, render_template, request, session, url_for

from ..common.validators import password_requirements, require_email, require_min_length, require_non_empty, validate_new_password
from ..core.constants import PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .decorators import CLIENT_ID_KEY, NEXT_PATH_KEY, current_client, existing_client, route_protector

logger = logging.getLogger(__name__)


def _safe_next(path: Optional[str]) -> Optional[str]:
    # Only same-site relative paths are followed after login.
    if path and path.startswith("/") and not path.startswith("//"):
        return path
    return None


def register(app: Flask, container: Container) -> None:
    app.jinja_env.globals["csrf_token"] = lambda: ""
    protected = route_protector(container)
    guard = container.route_guard

    def _landing_path(snapshot) -> str:
        if snapshot.is_first_login:
            return guard.change_password_path
        remembered = _safe_next(session.pop(NEXT_PATH_KEY, None))
        if remembered and remembered != guard.login_path:
            return remembered
        return guard.home_for(snapshot.role)

    @app.route("/", endpoint="index")
    def index():
        return redirect(url_for("login"))

    def _forget_if_signed_out(client) -> None:
        # Failed attempts must not leave a client behind for every visitor.
        if not container.sessions.snapshot(client).authenticated:
            container.sessions.discard(client.client_id)
            session.pop(CLIENT_ID_KEY, None)

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if request.method == "GET":
            client = existing_client(container)
            if client is not None:
                snapshot = container.sessions.snapshot(client)
                if snapshot.authenticated:
                    return redirect(_landing_path(snapshot))
            return render_template("auth/login.html", email="")

        client = current_client(container)
        email = request.form.get("email", "")
        password = request.form.get("password", "")
        try:
            result = container.sessions.run(client.store.login(email, password))
        except Exception as e:
            logger.exception("login failed unexpectedly")
            if bool(app.config.get("DEBUG", False)):
                flash(f"System error while signing in: {e}", "danger")
            else:
                flash("System error while signing in", "danger")
            _forget_if_signed_out(client)
            return render_template("auth/login.html", email=email)

        if result.success:
            flash("Signed in successfully!", "success")
            return redirect(_landing_path(container.sessions.snapshot(client)))
        flash(result.error or "Login failed", "danger")
        _forget_if_signed_out(client)
        return render_template("auth/login.html", email=email)

    @app.route("/signup", methods=["GET", "POST"], endpoint="signup")
    def signup():
        form = {
            "name": request.form.get("name", ""),
            "email": request.form.get("email", ""),
            "company": request.form.get("company", ""),
            "phone": request.form.get("phone", ""),
            "role": request.form.get("role", Role.EMPLOYEE.value),
        }
        if request.method == "POST":
            client = None
            try:
                name = require_non_empty(form["name"], "Name")
                email = require_email(form["email"])
                password = require_min_length(request.form.get("password", ""), "Password", PASSWORD_MIN_LENGTH)
                try:
                    role = Role(form["role"])
                except ValueError:
                    raise ValidationError("Account type is not valid")

                client = current_client(container)
                result = container.sessions.run(
                    client.store.signup(
                        name,
                        email,
                        password,
                        form["company"].strip() or None,
                        form["phone"].strip() or None,
                        role,
                    )
                )
                if result.success:
                    flash("Account created. Please set a new password to continue.", "success")
                    return redirect(guard.change_password_path)
                flash(result.error or "Signup failed", "danger")
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("signup failed unexpectedly")
                flash("System error while creating the account", "danger")
            if client is not None:
                _forget_if_signed_out(client)

        return render_template("auth/signup.html", form=form, roles=list(Role))

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        client = existing_client(container)
        if client is not None:
            try:
                container.sessions.run(client.store.logout())
            finally:
                container.sessions.discard(client.client_id)
        session.pop(CLIENT_ID_KEY, None)
        session.pop(NEXT_PATH_KEY, None)
        flash("You have been signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/change-password", methods=["GET", "POST"], endpoint="change_password")
    @protected()
    def change_password():
        new_password = request.form.get("new_password", "")
        if request.method == "POST":
            try:
                require_non_empty(request.form.get("current_password", ""), "Current password")
                validate_new_password(new_password, request.form.get("confirm_password", ""))

                result = container.sessions.run(g.session_client.backend.update_password(new_password))
                if result.error:
                    raise ValidationError(result.error)

                container.sessions.complete_password_change(g.session_client)
                flash("Password updated.", "success")
                snapshot = container.sessions.snapshot(g.session_client)
                return redirect(guard.home_for(snapshot.role))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("password change failed unexpectedly")
                flash("System error while changing the password", "danger")

        return render_template(
            "auth/change_password.html",
            requirements=password_requirements(new_password),
            current=g.current,
        )

    @app.errorhandler(404)
    def not_found(_error):
        return render_template("404.html"), 404
