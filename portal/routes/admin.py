"""
Admin area: staff account management and roles.
"""

import logging

from flask import Blueprint, redirect, render_template, request, url_for

from portal.error_handling import api_operation, safe_api_call
from portal.guards import role_required
from portal.logger import get_logger
from portal.notifications import toast_success
from portal.services import AdminService
from portal.session_context import current_user, get_api_client
from portal.validators import validate_staff_account

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

admin_required = role_required("Admin")


@admin_bp.route("/dashboard")
@admin_required
def dashboard():
    """Stats, staff accounts, and the add-employee form."""
    client = get_api_client()
    service = AdminService(client)
    stats = safe_api_call(
        service.get_stats,
        operation_name="load admin stats",
        error_message="Failed to load statistics",
        logger=logger,
    )
    accounts = safe_api_call(
        service.get_staff_accounts,
        operation_name="load staff accounts",
        error_message="Failed to load employees",
        fallback=[],
        logger=logger,
    )
    roles = safe_api_call(
        service.get_roles,
        operation_name="load roles",
        error_message="Failed to load roles",
        fallback=[],
        logger=logger,
    )

    search = request.args.get("q", "").strip().lower()
    if search:
        accounts = [a for a in accounts if search in a.full_name.lower() or search in a.email.lower()]

    return render_template(
        "admin/dashboard.html",
        stats=stats,
        accounts=accounts,
        roles=[r for r in roles if r.is_active],
        search=search,
        errors={},
        form={},
    )


@admin_bp.route("/employees", methods=["POST"])
@admin_required
def create_employee():
    result = validate_staff_account(request.form)
    service = AdminService(get_api_client())

    if not result.is_valid:
        roles = safe_api_call(service.get_roles, operation_name="load roles", fallback=[], logger=logger)
        accounts = safe_api_call(
            service.get_staff_accounts, operation_name="load staff accounts", fallback=[], logger=logger
        )
        return render_template(
            "admin/dashboard.html",
            stats=None,
            accounts=accounts,
            roles=[r for r in roles if r.is_active],
            search="",
            errors=result.errors,
            form=request.form,
            show_form=True,
        ), 400

    created = safe_api_call(
        service.create_staff_account,
        result.data,
        operation_name="create staff account",
        error_message="Failed to add employee",
        fallback=False,
        logger=logger,
    )
    if created is not False:
        get_logger(__name__, user_id=current_user().user_id, area="admin").info(
            f"created staff account for {result.data['email']} with roles {result.data['roleIds']}"
        )
        toast_success("Employee added successfully")
    return redirect(url_for("admin.dashboard"))


@api_operation("update staff account status", error_message="Failed to update employee status", fallback_value=False)
def _set_active(service: AdminService, account_id: str, is_active: bool) -> bool:
    service.set_staff_active(account_id, is_active)
    return True


@admin_bp.route("/employees/<account_id>/status", methods=["POST"])
@admin_required
def toggle_employee(account_id: str):
    """Activate or deactivate a staff account."""
    is_active = request.form.get("is_active") == "true"
    if _set_active(AdminService(get_api_client()), account_id, is_active):
        toast_success("Employee activated" if is_active else "Employee deactivated")
    return redirect(url_for("admin.dashboard"))


@admin_bp.route("/roles")
@admin_required
def roles():
    role_list = safe_api_call(
        AdminService(get_api_client()).get_roles,
        operation_name="load roles",
        error_message="Failed to load roles",
        fallback=[],
        logger=logger,
    )
    return render_template("admin/roles.html", roles=role_list)
