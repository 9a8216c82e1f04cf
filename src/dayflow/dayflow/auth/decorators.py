from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, Iterable, Optional

from flask import g, redirect, render_template, request, session

from ..core.enums import Role
from .guard import DecisionKind
from .model import SessionSnapshot
from .registry import SessionClient

if TYPE_CHECKING:
    from ..container import Container

CLIENT_ID_KEY = "client_id"
NEXT_PATH_KEY = "next_path"


def existing_client(container: "Container") -> Optional[SessionClient]:
    """Session client of this browser, or None if it never signed in."""
    return container.sessions.get(session.get(CLIENT_ID_KEY))


def current_client(container: "Container") -> SessionClient:
    """Session client of the browser making this request, created on first use."""
    client_id = session.get(CLIENT_ID_KEY)
    if not client_id:
        client_id = container.sessions.new_client_id()
        session[CLIENT_ID_KEY] = client_id
    return container.sessions.get_or_create(client_id)


def route_protector(container: "Container"):
    """Build the ``protected`` decorator bound to a container."""

    def protected(allowed_roles: Optional[Iterable[Role]] = None):
        roles = tuple(allowed_roles) if allowed_roles is not None else None

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                client = existing_client(container)
                if client is None:
                    snapshot = SessionSnapshot.anonymous()
                else:
                    snapshot = container.sessions.snapshot(client)
                decision = container.route_guard.decide(snapshot, request.path, roles)

                if decision.kind is DecisionKind.LOADING:
                    return render_template("loading.html")
                if decision.kind is DecisionKind.REDIRECT:
                    if decision.remembered_path:
                        session[NEXT_PATH_KEY] = decision.remembered_path
                    return redirect(decision.location)

                g.session_client = client
                g.current = snapshot
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return protected
