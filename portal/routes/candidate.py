"""
Candidate dashboard.

One page with tabs. Every request runs the profile-completion gate first;
tabs other than dashboard and profile stay locked until the backend reports
the profile complete, and a locked (or unspecified) tab lands on the profile
tab instead.
"""

import logging
from typing import Any, Callable, Dict

from flask import Blueprint, redirect, render_template, request, url_for

from portal.error_handling import api_operation, safe_api_call
from portal.guards import login_required
from portal.logger import get_logger
from portal.models import DOCUMENT_CONTENT_TYPES, DOCUMENT_TYPES, ApplicationStatus, OfferStatus
from portal.notifications import toast_error, toast_info, toast_success
from portal.profile_completion import (
    CANDIDATE_TABS,
    DEFAULT_TAB,
    PROFILE_TAB,
    ProfileCompletionGate,
    ProfileCompletionStatus,
    is_tab_locked,
    missing_profile_fields,
    resolve_active_tab,
)
from portal.services import (
    ApiError,
    ApiHTTPError,
    ApplicationService,
    CandidateService,
    DocumentService,
    JobPositionService,
    OfferService,
    SkillService,
)
from portal.session_context import current_user, get_api_client
from portal.validators import validate_profile

logger = logging.getLogger(__name__)

candidate_bp = Blueprint("candidate", __name__)

INCOMPLETE_PROFILE_MESSAGE = "Please complete your profile to access all features."
MAX_FILE_BYTES = 10 * 1024 * 1024


def _gate() -> ProfileCompletionGate:
    return ProfileCompletionGate(CandidateService(get_api_client()))


def _file_size(storage) -> int:
    storage.stream.seek(0, 2)
    size = storage.stream.tell()
    storage.stream.seek(0)
    return size


def _require_complete_profile() -> bool:
    """Server-side lock for actions behind the gate. Toasts and returns False when locked."""
    status = _gate().check_completion(current_user().user_id)
    if not status.unlocked:
        toast_info(INCOMPLETE_PROFILE_MESSAGE)
        return False
    return True


def _to_profile():
    return redirect(url_for("candidate.dashboard", tab=PROFILE_TAB))


# ============================================================================
# Tab loaders
# ============================================================================

def _load_overview() -> Dict[str, Any]:
    client = get_api_client()
    applications = safe_api_call(
        ApplicationService(client).get_my_applications,
        operation_name="load my applications",
        fallback=[],
        logger=logger,
    )
    counts = {status.label: 0 for status in ApplicationStatus}
    for application in applications:
        try:
            counts[ApplicationStatus(application.status_id).label] += 1
        except ValueError:
            continue
    return {"applications": applications[:5], "status_counts": counts, "total_applications": len(applications)}


def _load_jobs() -> Dict[str, Any]:
    jobs = safe_api_call(
        JobPositionService(get_api_client()).get_active_job_listings,
        operation_name="load active jobs",
        error_message="Failed to load jobs",
        fallback=[],
        logger=logger,
    )
    search = request.args.get("q", "").strip().lower()
    if search:
        jobs = [
            job for job in jobs
            if search in job.title.lower() or search in job.department.lower() or search in job.location.lower()
        ]
    return {"jobs": jobs, "search": search}


def _load_applications() -> Dict[str, Any]:
    applications = safe_api_call(
        ApplicationService(get_api_client()).get_my_applications,
        operation_name="load my applications",
        error_message="Failed to load applications",
        fallback=[],
        logger=logger,
    )
    status_filter = request.args.get("status", "")
    if status_filter.isdigit():
        applications = [a for a in applications if a.status_id == int(status_filter)]
    return {"applications": applications, "status_filter": status_filter, "statuses": list(ApplicationStatus)}


def _load_interviews() -> Dict[str, Any]:
    applications = safe_api_call(
        ApplicationService(get_api_client()).get_my_applications,
        operation_name="load my applications",
        error_message="Failed to load interviews",
        fallback=[],
        logger=logger,
    )
    return {"interviews": [a for a in applications if a.status_id == ApplicationStatus.INTERVIEW]}


def _load_documents() -> Dict[str, Any]:
    client = get_api_client()
    profile = safe_api_call(
        CandidateService(client).get_my_profile,
        operation_name="load profile",
        error_message="Failed to load profile",
        logger=logger,
    )
    documents = []
    if profile is not None and profile.id:
        documents = safe_api_call(
            DocumentService(client).get_candidate_documents,
            profile.id,
            operation_name="load documents",
            error_message="Failed to load documents",
            fallback=[],
            logger=logger,
        )
    uploaded = {doc.document_type: doc for doc in documents}
    return {
        "candidate_id": profile.id if profile else None,
        "documents": documents,
        "document_types": DOCUMENT_TYPES,
        "uploaded": uploaded,
    }


def _load_offers() -> Dict[str, Any]:
    offers = safe_api_call(
        OfferService(get_api_client()).get_my_offers,
        operation_name="load my offers",
        error_message="Failed to fetch offers",
        fallback=[],
        logger=logger,
    )
    return {"offers": offers, "pending": [o for o in offers if o.status_name == "Pending"]}


def _load_profile() -> Dict[str, Any]:
    client = get_api_client()
    user = current_user()
    profile = None
    try:
        profile = CandidateService(client).get_profile(user.user_id)
    except ApiHTTPError as e:
        # 404: no profile row yet, the normal state for a new candidate
        if e.is_unauthorized:
            raise
        if not e.is_not_found:
            logger.warning(f"[user:{user.user_id[:8]}] profile load failed: {e}")
            toast_error("Failed to load profile data.")
    except ApiError as e:
        logger.warning(f"[user:{user.user_id[:8]}] profile load failed: {e}")
        toast_error("Failed to load profile data.")
    skills = safe_api_call(
        SkillService(client).get_all_skills,
        operation_name="load skills",
        error_message="Failed to load skills data.",
        fallback=[],
        logger=logger,
    )
    return {
        "profile": profile,
        "missing_fields": missing_profile_fields(profile),
        "skills": [s for s in skills if s.is_active],
    }


TAB_LOADERS: Dict[str, Callable[[], Dict[str, Any]]] = {
    "dashboard": _load_overview,
    "jobs": _load_jobs,
    "applications": _load_applications,
    "interviews": _load_interviews,
    "documents": _load_documents,
    "offers": _load_offers,
    "profile": _load_profile,
}


# ============================================================================
# Pages
# ============================================================================

@candidate_bp.route("/dashboard")
@candidate_bp.route("/dashboard/<tab>")
@login_required
def dashboard(tab=None):
    """Candidate dashboard with profile-gated tabs."""
    user = current_user()
    log = get_logger(__name__, user_id=user.user_id, area="dashboard")
    status: ProfileCompletionStatus = _gate().check_completion(user.user_id)
    active = resolve_active_tab(tab, status.is_complete)

    if active != (tab or DEFAULT_TAB):
        log.info(f"tab {tab or DEFAULT_TAB} -> {active} (profile complete: {status.is_complete})")
        if active == PROFILE_TAB and not status.is_complete and status.warning is None:
            toast_info(INCOMPLETE_PROFILE_MESSAGE)
        return redirect(url_for("candidate.dashboard", tab=active))

    context = TAB_LOADERS[active]()
    tabs = [
        {"id": t.id, "label": t.label, "locked": is_tab_locked(t.id, status.is_complete)}
        for t in CANDIDATE_TABS
    ]
    return render_template(
        "candidate/dashboard.html",
        active_tab=active,
        tabs=tabs,
        completion=status,
        **context,
    )


# ============================================================================
# Profile actions
# ============================================================================

@candidate_bp.route("/dashboard/profile", methods=["POST"])
@login_required
def save_profile():
    """Save the profile, then re-check completion so the tabs unlock."""
    user = current_user()
    result = validate_profile(request.form)
    if not result.is_valid:
        for message in result.errors.values():
            toast_error(message)
        return _to_profile()

    saved = safe_api_call(
        CandidateService(get_api_client()).update_profile,
        user.user_id,
        result.data,
        operation_name="update profile",
        error_message="Failed to update profile.",
        fallback=False,
        logger=logger,
    )
    if saved is False:
        return _to_profile()

    toast_success("Profile updated successfully!")
    status = _gate().check_completion(user.user_id)
    if status.is_complete:
        return redirect(url_for("candidate.dashboard", tab=DEFAULT_TAB))
    return _to_profile()


@candidate_bp.route("/dashboard/profile/refresh", methods=["POST"])
@login_required
def refresh_profile_status():
    status = _gate().refresh(current_user().user_id)
    if status.is_complete:
        return redirect(url_for("candidate.dashboard", tab=DEFAULT_TAB))
    return _to_profile()


@candidate_bp.route("/dashboard/profile/resume", methods=["POST"])
@login_required
def upload_resume():
    upload = request.files.get("resume")
    if upload is None or not upload.filename:
        toast_error("Please choose a file to upload")
        return _to_profile()
    if not upload.filename.lower().endswith((".pdf", ".doc", ".docx")):
        toast_error("Only PDF, DOC and DOCX files are allowed")
        return _to_profile()
    if _file_size(upload) > MAX_FILE_BYTES:
        toast_error("File size must be less than 10MB")
        return _to_profile()

    safe_api_call(
        CandidateService(get_api_client()).upload_resume,
        current_user().user_id,
        upload.filename,
        upload.stream,
        upload.mimetype,
        operation_name="upload resume",
        error_message="Failed to upload resume",
        logger=logger,
    )
    return _to_profile()


# ============================================================================
# Gated actions
# ============================================================================

@api_operation("apply for job", error_message="Failed to submit application. Please try again.")
def _apply(service: ApplicationService, job_id: str):
    return service.apply(job_id)


@candidate_bp.route("/jobs/<job_id>/apply", methods=["POST"])
@login_required
def apply_for_job(job_id: str):
    """Check eligibility with the backend, then apply."""
    if not _require_complete_profile():
        return _to_profile()

    service = ApplicationService(get_api_client())
    eligibility = safe_api_call(
        service.check_eligibility,
        job_id,
        operation_name="check eligibility",
        error_message="Failed to check eligibility. Please try again.",
        logger=logger,
    )
    if not isinstance(eligibility, dict):
        return redirect(url_for("candidate.dashboard", tab="jobs"))
    if not eligibility.get("isEligible"):
        toast_error(
            eligibility.get("message")
            or "You are not eligible to apply for this position. Please check the eligibility requirements."
        )
        return redirect(url_for("candidate.dashboard", tab="jobs"))

    result = _apply(service, job_id)
    if result is not None:
        message = result.get("message") if isinstance(result, dict) else None
        toast_success(message or "Application submitted successfully")
        return redirect(url_for("candidate.dashboard", tab="applications"))
    return redirect(url_for("candidate.dashboard", tab="jobs"))


@candidate_bp.route("/documents/upload", methods=["POST"])
@login_required
def upload_document():
    if not _require_complete_profile():
        return _to_profile()
    back = redirect(url_for("candidate.dashboard", tab="documents"))

    candidate_id = request.form.get("candidate_id", "")
    document_type = request.form.get("document_type", "")
    upload = request.files.get("file")
    known = {d.type: d for d in DOCUMENT_TYPES}

    if not candidate_id:
        toast_error("Candidate ID not found. Please refresh the page.")
        return back
    if document_type not in known:
        toast_error("Unknown document type")
        return back
    if upload is None or not upload.filename:
        toast_error("Please choose a file to upload")
        return back
    if _file_size(upload) > MAX_FILE_BYTES:
        toast_error("File size must be less than 10MB")
        return back
    if upload.mimetype not in DOCUMENT_CONTENT_TYPES:
        toast_error("Only PDF, JPG, and PNG files are allowed")
        return back

    document = safe_api_call(
        DocumentService(get_api_client()).upload_document,
        candidate_id,
        document_type,
        upload.filename,
        upload.stream,
        upload.mimetype,
        is_required=known[document_type].required,
        operation_name="upload document",
        error_message="Failed to upload document",
        logger=logger,
    )
    if document is not None:
        toast_success(f"{document_type} uploaded successfully")
    return back


@candidate_bp.route("/documents/<document_id>/delete", methods=["POST"])
@login_required
def delete_document(document_id: str):
    if not _require_complete_profile():
        return _to_profile()
    deleted = safe_api_call(
        DocumentService(get_api_client()).delete_document,
        document_id,
        operation_name="delete document",
        error_message="Failed to delete document",
        fallback=False,
        logger=logger,
    )
    if deleted is not False:
        toast_success("Document deleted successfully")
    return redirect(url_for("candidate.dashboard", tab="documents"))


@candidate_bp.route("/offers/<offer_id>/respond", methods=["POST"])
@login_required
def respond_to_offer(offer_id: str):
    """Accept (26) or reject (27) a pending offer."""
    if not _require_complete_profile():
        return _to_profile()

    decision = request.form.get("decision")
    if decision not in ("accept", "reject"):
        toast_error("Unknown offer response")
        return redirect(url_for("candidate.dashboard", tab="offers"))

    accept = decision == "accept"
    status = OfferStatus.ACCEPTED if accept else OfferStatus.REJECTED
    offer = safe_api_call(
        OfferService(get_api_client()).update_offer_status,
        offer_id,
        status,
        operation_name="respond to offer",
        error_message="Failed to respond to offer",
        logger=logger,
    )
    if offer is not None:
        toast_success("Offer accepted!" if accept else "Offer rejected")
    return redirect(url_for("candidate.dashboard", tab="offers"))
