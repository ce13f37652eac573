"""
Public pages: home, login, register, logout, access denied, health.
"""

import logging

from flask import Blueprint, jsonify, redirect, render_template, request, url_for

from portal.error_handling import describe_error
from portal.guards import dashboard_endpoint_for, public_only
from portal.notifications import toast_error, toast_success
from portal.services import ApiError, ApiHTTPError, ApiTransportError, AuthService
from portal.session_context import get_api_client, get_session_store, use_session
from portal.session_store import StorageError
from portal.validators import validate_login, validate_register
from version import __version__

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)

NETWORK_ERROR = "Network error. Please try again."


@auth_bp.route("/")
def home():
    """Landing page; signed-in users get a link to their dashboard."""
    session = use_session()
    dashboard_url = url_for(dashboard_endpoint_for(session.user)) if session.is_authenticated else None
    return render_template("home.html", dashboard_url=dashboard_url)


@auth_bp.route("/login", methods=["GET", "POST"])
@public_only
def login_page():
    """Handle login page and authentication."""
    if request.method == "GET":
        return render_template("auth/login.html", errors={}, form={})

    result = validate_login(request.form)
    if not result.is_valid:
        return render_template("auth/login.html", errors=result.errors, form=request.form), 400

    try:
        response = AuthService(get_api_client()).login(**result.data)
    except ApiTransportError as e:
        logger.warning(f"Login transport failure: {e}")
        toast_error(NETWORK_ERROR)
        return render_template("auth/login.html", errors={}, form=request.form), 503
    except ApiError as e:
        logger.info(f"Login rejected for {result.data['email']}: {e}")
        message = describe_error(e, "Login failed")
        status = e.status_code if isinstance(e, ApiHTTPError) else 502
        return render_template("auth/login.html", errors={"form": message}, form=request.form), status

    user = response.to_user_record()
    try:
        get_session_store().login(response.token, user)
    except StorageError as e:
        logger.error(f"[user:{user.user_id[:8]}] could not persist session: {e}")
        toast_error("Could not save your session. Please try again.")
        return render_template("auth/login.html", errors={}, form=request.form), 500

    logger.info(f"[user:{user.user_id[:8]}] logged in as {user.user_type or 'unknown'}")
    toast_success(f"Welcome back, {user.first_name}!")
    return redirect(url_for(dashboard_endpoint_for(user)))


@auth_bp.route("/register", methods=["GET", "POST"])
@public_only
def register_page():
    """Candidate self sign-up."""
    if request.method == "GET":
        return render_template("auth/register.html", errors={}, form={})

    result = validate_register(request.form)
    if not result.is_valid:
        return render_template("auth/register.html", errors=result.errors, form=request.form), 400

    try:
        body = AuthService(get_api_client()).register(**result.data)
    except ApiTransportError as e:
        logger.warning(f"Register transport failure: {e}")
        toast_error(NETWORK_ERROR)
        return render_template("auth/register.html", errors={}, form=request.form), 503
    except ApiError as e:
        logger.info(f"Registration rejected for {result.data['email']}: {e}")
        message = describe_error(e, "Registration failed")
        return render_template("auth/register.html", errors={"form": message}, form=request.form), 400

    toast_success(body.get("message") or "Registration successful! Please log in.")
    return redirect(url_for("auth.login_page"))


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """Handle logout."""
    user = use_session().user
    get_session_store().logout()
    if user is not None:
        logger.info(f"[user:{user.user_id[:8]}] logged out")
    return redirect(url_for("auth.login_page"))


@auth_bp.route("/access-denied")
def access_denied():
    return render_template("access_denied.html"), 403


@auth_bp.route("/health", methods=["GET"])
def health_check():
    """
    Public health endpoint for external monitoring.

    No authentication required. The backend is not contacted; this only says
    the web process is up.
    """
    return jsonify({"status": "healthy", "version": __version__})
