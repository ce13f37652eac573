"""
Route guards.

Evaluation is pure: each evaluate_* function maps a Session to a
GuardResult of LOADING, ALLOW or REDIRECT. The decorators at the bottom of
the module apply the side effect: a loading page or a redirect.

While the session is loading no guard redirects, whatever is_authenticated
says.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Iterable, Optional

from flask import redirect, render_template, request, url_for

from portal.models import UserRecord
from portal.session_context import use_session
from portal.session_store import Session

logger = logging.getLogger(__name__)


class GuardDecision(str, Enum):
    LOADING = "loading"
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GuardResult:
    decision: GuardDecision
    redirect_to: Optional[str] = None
    reason: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.decision is GuardDecision.ALLOW


LOADING = GuardResult(GuardDecision.LOADING)
ALLOW = GuardResult(GuardDecision.ALLOW)


def evaluate_protected(session: Session, login_url: str = "/login") -> GuardResult:
    """Only signed-in users pass."""
    if session.is_loading:
        return LOADING
    if not session.is_authenticated:
        return GuardResult(GuardDecision.REDIRECT, login_url, "unauthenticated")
    return ALLOW


def evaluate_public_only(session: Session, dashboard_url: str = "/dashboard") -> GuardResult:
    """Only signed-out visitors pass (login, register)."""
    if session.is_loading:
        return LOADING
    if session.is_authenticated:
        return GuardResult(GuardDecision.REDIRECT, dashboard_url, "already authenticated")
    return ALLOW


def evaluate_role(
    session: Session,
    roles: Iterable[str],
    login_url: str = "/login",
    denied_url: str = "/access-denied",
) -> GuardResult:
    """Signed-in users holding one of `roles` pass; the protected rule applies first."""
    result = evaluate_protected(session, login_url)
    if not result.allowed:
        return result
    if not any(session.user.has_role(role) for role in roles):
        return GuardResult(GuardDecision.REDIRECT, denied_url, "missing role")
    return ALLOW


# ============================================================================
# Flask side
# ============================================================================

def dashboard_endpoint_for(user: Optional[UserRecord]) -> str:
    """Landing page by user type; unknown types land on the candidate dashboard."""
    user_type = (user.user_type if user else "").lower()
    if user_type == "admin":
        return "admin.dashboard"
    if user_type == "employee":
        return "employee.dashboard"
    return "candidate.dashboard"


def apply_guard(result: GuardResult):
    """Turn a non-ALLOW result into a response. Returns None for ALLOW."""
    if result.decision is GuardDecision.ALLOW:
        return None
    if result.decision is GuardDecision.LOADING:
        return render_template("loading.html"), 200

    logger.debug(f"Guard redirect {request.path} -> {result.redirect_to} ({result.reason})")
    return redirect(result.redirect_to)


def login_required(f):
    """
    Decorator to require authentication for routes.

    Redirects to the login page if not authenticated.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        response = apply_guard(evaluate_protected(use_session(), url_for("auth.login_page")))
        if response is not None:
            return response
        return f(*args, **kwargs)
    return decorated_function


def public_only(f):
    """Decorator sending signed-in users to their dashboard."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        session = use_session()
        dashboard_url = url_for(dashboard_endpoint_for(session.user))
        response = apply_guard(evaluate_public_only(session, dashboard_url))
        if response is not None:
            return response
        return f(*args, **kwargs)
    return decorated_function


def role_required(*roles: str, denied_endpoint: str = "auth.access_denied"):
    """
    Decorator requiring one of `roles` (user type or token role).

    Usage:
        @admin_bp.route("/dashboard")
        @role_required("Admin")
        def dashboard(): ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            result = evaluate_role(
                use_session(),
                roles,
                login_url=url_for("auth.login_page"),
                denied_url=url_for(denied_endpoint),
            )
            response = apply_guard(result)
            if response is not None:
                return response
            return f(*args, **kwargs)
        return decorated_function
    return decorator
