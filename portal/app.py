"""
Flask application for the recruitment portal.

Server-rendered views over the ATS REST backend:
- Candidates: profile, job search, applications, interviews, documents, offers
- Employees / HR: job positions, screening, interviews, offers, onboarding
- Admins: staff accounts and roles

Stack: Flask + Jinja + Tailwind CSS (CDN), requests for the backend.
"""

import logging
from datetime import timedelta
from typing import Any, Mapping, Optional

from flask import Flask, redirect, request, url_for

from portal.config import PortalSettings, get_settings, validate_config_on_startup
from portal.guards import dashboard_endpoint_for
from portal.logger import setup_logging
from portal.notifications import toast_error
from portal.routes import ALL_BLUEPRINTS
from portal.services.base import ApiError, ApiHTTPError
from portal.session_context import SessionProvider, StorageFactory, get_session_store
from version import __version__

logger = logging.getLogger(__name__)


def create_app(
    overrides: Optional[Mapping[str, Any]] = None,
    settings: Optional[PortalSettings] = None,
    storage_factory: Optional[StorageFactory] = None,
) -> Flask:
    """
    Build the portal app.

    Args:
        overrides: Flask config values applied last (tests use TESTING etc.)
        settings: PortalSettings to use instead of the environment
        storage_factory: Session storage factory; defaults to the signed cookie
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    validate_config_on_startup(settings)

    app = Flask(__name__)
    app.secret_key = settings.resolve_secret_key()

    # Cookie security settings
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SECURE"] = settings.is_production
    # SameSite=None requires Secure, so only in production (HTTPS)
    app.config["SESSION_COOKIE_SAMESITE"] = "None" if settings.is_production else "Lax"
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=settings.session_lifetime_days)
    app.config["MAX_CONTENT_LENGTH"] = 12 * 1024 * 1024

    if overrides:
        app.config.update(overrides)

    SessionProvider(app, settings, storage_factory)
    for blueprint in ALL_BLUEPRINTS:
        app.register_blueprint(blueprint)

    @app.context_processor
    def inject_version():
        """Inject version info into all templates."""
        return {"version": __version__}

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        """
        Last resort for backend errors no view handled.

        401 ends the session. Anything else becomes a toast and a trip back
        to the user's dashboard.
        """
        if isinstance(error, ApiHTTPError) and error.is_unauthorized:
            store = get_session_store()
            user = store.session.user
            store.logout()
            logger.info(f"[user:{user.user_id[:8] if user else '-'}] backend rejected token, session ended")
            toast_error("Your session has expired. Please log in again.")
            return redirect(url_for("auth.login_page"))

        logger.warning(f"Unhandled backend error on {request.path}: {error}")
        toast_error(error.message or "Something went wrong. Please try again.")
        user = get_session_store().session.user
        target = url_for(dashboard_endpoint_for(user)) if user else url_for("auth.home")
        if target == request.path:
            # the dashboard itself failed; don't bounce back to it
            target = url_for("auth.home")
        return redirect(target)

    logger.info(f"Portal {__version__} ready ({len(ALL_BLUEPRINTS)} blueprints)")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=not get_settings().is_production)
