"""Page blueprints."""

from portal.routes.admin import admin_bp
from portal.routes.auth import auth_bp
from portal.routes.candidate import candidate_bp
from portal.routes.employee import employee_bp

ALL_BLUEPRINTS = (auth_bp, candidate_bp, employee_bp, admin_bp)

__all__ = ["ALL_BLUEPRINTS", "admin_bp", "auth_bp", "candidate_bp", "employee_bp"]
