"""
Employee / HR area.

Job positions, applications, screening (reviewers only), interviews, offers,
document verification, onboarding, bulk candidate upload and analytics.
Every page requires the Employee or Admin role.
"""

import logging
from typing import List, Optional

from flask import Blueprint, Response, redirect, render_template, request, url_for

from portal.error_handling import api_operation, safe_api_call
from portal.guards import role_required
from portal.logger import get_logger
from portal.models import (
    EMPLOYMENT_TYPES,
    EXPERIENCE_LEVELS,
    JOB_POSITION_STATUSES,
    OFFER_STATUS_NAMES,
    PARTICIPANT_TYPES,
    RECOMMENDATIONS,
    ROUND_TYPES,
    Application,
    ApplicationStatus,
    AttendanceStatus,
    DocumentStatus,
    InterviewStatus,
)
from portal.notifications import toast_error, toast_success, toast_warning
from portal.services import (
    AdminService,
    ApplicationService,
    DocumentService,
    EmployeeService,
    InterviewService,
    JobPositionReviewerService,
    JobPositionService,
    OfferService,
    ScreeningService,
    SkillService,
)
from portal.services.bulk_upload_service import BulkUploadService, validate_upload
from portal.session_context import current_user, get_api_client
from portal.validators import (
    validate_feedback,
    validate_interview,
    validate_job_position,
    validate_offer,
    validate_onboarding,
    validate_screening_review,
)

logger = logging.getLogger(__name__)

employee_bp = Blueprint("employee", __name__, url_prefix="/employee")

STAFF_ROLES = ("Employee", "Admin")
employee_required = role_required(*STAFF_ROLES)
reviewer_required = role_required("Reviewer", denied_endpoint="employee.dashboard")


def _form_errors(errors) -> None:
    for message in errors.values():
        toast_error(message)


def _safe_next(default: str) -> str:
    """Same-site redirect target from the form, or `default`."""
    target = request.form.get("next", "")
    if target.startswith("/") and not target.startswith("//"):
        return target
    return default


def _filter_applications(
    applications: List[Application],
    search: str,
    status_id: Optional[int],
    job_id: Optional[str],
) -> List[Application]:
    """Client-side filters for the applications list."""
    search = search.strip().lower()
    result = []
    for application in applications:
        if status_id is not None and application.status_id != status_id:
            continue
        if job_id and application.job_position_id != job_id:
            continue
        if search:
            haystack = " ".join(
                filter(None, [application.candidate_name, application.candidate_email, application.job_title])
            ).lower()
            if search not in haystack:
                continue
        result.append(application)
    return result


# ============================================================================
# Overview
# ============================================================================

@employee_bp.route("/dashboard")
@employee_required
def dashboard():
    """Employee overview: headline statistics and recent applications."""
    client = get_api_client()
    stats = safe_api_call(
        ApplicationService(client).get_statistics,
        operation_name="load application statistics",
        logger=logger,
    )
    interview_stats = safe_api_call(
        InterviewService(client).get_statistics,
        operation_name="load interview statistics",
        logger=logger,
    )
    applications = safe_api_call(
        ApplicationService(client).get_all_applications,
        operation_name="load applications",
        fallback=[],
        logger=logger,
    )
    jobs = safe_api_call(
        JobPositionService(client).get_all_job_positions,
        operation_name="load job positions",
        fallback=[],
        logger=logger,
    )
    pending_offers = safe_api_call(
        OfferService(client).get_pending_offers,
        operation_name="load pending offers",
        fallback=[],
        logger=logger,
    )
    return render_template(
        "employee/dashboard.html",
        stats=stats,
        interview_stats=interview_stats,
        recent_applications=applications[:5],
        open_jobs=[j for j in jobs if j.status_id == 1],
        pending_offers=pending_offers,
        is_reviewer=current_user().has_role("Reviewer"),
    )


# ============================================================================
# Job positions
# ============================================================================

@employee_bp.route("/jobs")
@employee_required
def jobs():
    positions = safe_api_call(
        JobPositionService(get_api_client()).get_all_job_positions,
        operation_name="load job positions",
        error_message="Failed to load job positions",
        fallback=[],
        logger=logger,
    )
    status = request.args.get("status", "")
    if status.isdigit():
        positions = [p for p in positions if p.status_id == int(status)]
    return render_template(
        "employee/jobs.html", jobs=positions, statuses=JOB_POSITION_STATUSES, status_filter=status
    )


def _job_form(job=None, errors=None, form=None):
    skills = safe_api_call(
        SkillService(get_api_client()).get_all_skills,
        operation_name="load skills",
        fallback=[],
        logger=logger,
    )
    return render_template(
        "employee/job_form.html",
        job=job,
        form=form or {},
        errors=errors or {},
        skills=[s for s in skills if s.is_active],
        statuses=JOB_POSITION_STATUSES,
        employment_types=EMPLOYMENT_TYPES,
        experience_levels=EXPERIENCE_LEVELS,
    )


@employee_bp.route("/jobs/new", methods=["GET", "POST"])
@employee_required
def create_job():
    if request.method == "GET":
        return _job_form()

    result = validate_job_position(request.form)
    if not result.is_valid:
        return _job_form(errors=result.errors, form=request.form), 400

    job = safe_api_call(
        JobPositionService(get_api_client()).create_job_position,
        result.data,
        operation_name="create job position",
        error_message="Failed to create job position",
        logger=logger,
    )
    if job is None:
        return _job_form(form=request.form), 502
    toast_success("Job position created successfully")
    return redirect(url_for("employee.job_detail", job_id=job.id))


@employee_bp.route("/jobs/<job_id>")
@employee_required
def job_detail(job_id: str):
    client = get_api_client()
    job = safe_api_call(
        JobPositionService(client).get_job_position,
        job_id,
        operation_name="load job position",
        error_message="Failed to fetch job position",
        logger=logger,
    )
    if job is None:
        return redirect(url_for("employee.jobs"))
    applications = safe_api_call(
        ApplicationService(client).get_applications_by_job,
        job_id,
        operation_name="load applications for job",
        fallback=[],
        logger=logger,
    )
    reviewers = safe_api_call(
        JobPositionReviewerService(client).get_reviewers_for_job,
        job_id,
        operation_name="load reviewers",
        fallback=[],
        logger=logger,
    )
    return render_template(
        "employee/job_detail.html",
        job=job,
        applications=applications,
        reviewers=reviewers,
        statuses=JOB_POSITION_STATUSES,
    )


@employee_bp.route("/jobs/<job_id>/edit", methods=["GET", "POST"])
@employee_required
def edit_job(job_id: str):
    service = JobPositionService(get_api_client())
    if request.method == "GET":
        job = safe_api_call(
            service.get_job_position,
            job_id,
            operation_name="load job position",
            error_message="Failed to fetch job position",
            logger=logger,
        )
        if job is None:
            return redirect(url_for("employee.jobs"))
        return _job_form(job=job)

    result = validate_job_position(request.form)
    if not result.is_valid:
        return _job_form(errors=result.errors, form=request.form), 400

    updated = safe_api_call(
        service.update_job_position,
        job_id,
        result.data,
        operation_name="update job position",
        error_message="Failed to update job position",
        logger=logger,
    )
    if updated is None:
        return _job_form(form=request.form), 502
    toast_success("Job position updated successfully")
    return redirect(url_for("employee.job_detail", job_id=job_id))


@api_operation(
    "delete job position",
    error_message="Failed to delete job position",
    fallback_value=False,
    success_message="Job position deleted successfully",
)
def _delete_job(service: JobPositionService, job_id: str) -> bool:
    service.delete_job_position(job_id)
    return True


@employee_bp.route("/jobs/<job_id>/delete", methods=["POST"])
@employee_required
def delete_job(job_id: str):
    if _delete_job(JobPositionService(get_api_client()), job_id):
        return redirect(url_for("employee.jobs"))
    return redirect(url_for("employee.job_detail", job_id=job_id))


@employee_bp.route("/jobs/<job_id>/reviewers", methods=["POST"])
@employee_required
def assign_reviewers(job_id: str):
    reviewer_ids = [r for r in request.form.getlist("reviewer_id") if r]
    if not reviewer_ids:
        toast_error("Please select at least one reviewer")
        return redirect(url_for("employee.job_detail", job_id=job_id))

    service = JobPositionReviewerService(get_api_client())
    if len(reviewer_ids) == 1:
        call, arg = service.assign_reviewer, reviewer_ids[0]
    else:
        call, arg = service.bulk_assign_reviewers, reviewer_ids
    result = safe_api_call(
        call,
        job_id,
        arg,
        operation_name="assign reviewers",
        error_message="Failed to assign reviewers",
        fallback=False,
        logger=logger,
    )
    if result is not False:
        toast_success("Reviewers assigned successfully")
    return redirect(url_for("employee.job_detail", job_id=job_id))


@employee_bp.route("/jobs/<job_id>/reviewers/<assignment_id>/remove", methods=["POST"])
@employee_required
def remove_reviewer(job_id: str, assignment_id: str):
    result = safe_api_call(
        JobPositionReviewerService(get_api_client()).remove_reviewer,
        assignment_id,
        operation_name="remove reviewer",
        error_message="Failed to remove reviewer",
        fallback=False,
        logger=logger,
    )
    if result is not False:
        toast_success("Reviewer removed")
    return redirect(url_for("employee.job_detail", job_id=job_id))


# ============================================================================
# Applications
# ============================================================================

@employee_bp.route("/applications")
@employee_required
def applications():
    """All applications with search, status and job filters."""
    client = get_api_client()
    all_applications = safe_api_call(
        ApplicationService(client).get_all_applications,
        operation_name="load applications",
        error_message="Failed to load applications",
        fallback=[],
        logger=logger,
    )
    positions = safe_api_call(
        JobPositionService(client).get_all_job_positions,
        operation_name="load job positions",
        fallback=[],
        logger=logger,
    )

    search = request.args.get("q", "")
    raw_status = request.args.get("status", "")
    status_id = int(raw_status) if raw_status.isdigit() else None
    job_id = request.args.get("job") or None

    return render_template(
        "employee/applications.html",
        applications=_filter_applications(all_applications, search, status_id, job_id),
        total=len(all_applications),
        jobs=positions,
        statuses=list(ApplicationStatus),
        search=search,
        status_filter=raw_status,
        job_filter=job_id or "",
    )


@employee_bp.route("/applications/<application_id>")
@employee_required
def application_detail(application_id: str):
    client = get_api_client()
    application = safe_api_call(
        ApplicationService(client).get_application,
        application_id,
        operation_name="load application",
        error_message="Failed to load application",
        logger=logger,
    )
    if application is None:
        return redirect(url_for("employee.applications"))
    interviews = safe_api_call(
        InterviewService(client).get_interviews_by_application,
        application_id,
        operation_name="load interviews for application",
        fallback=[],
        logger=logger,
    )
    screenings = safe_api_call(
        ScreeningService(client).get_by_application,
        application_id,
        operation_name="load screenings for application",
        fallback=[],
        logger=logger,
    )
    offer = None
    if application.status_id == ApplicationStatus.SELECTED:
        # 404 until an offer exists
        offer = safe_api_call(
            OfferService(client).get_offer_by_application,
            application_id,
            operation_name="load offer for application",
            notify=lambda message: None,
            logger=logger,
        )
    return render_template(
        "employee/application_detail.html",
        application=application,
        interviews=interviews,
        screenings=screenings,
        offer=offer,
        statuses=list(ApplicationStatus),
    )


@employee_bp.route("/applications/<application_id>/status", methods=["POST"])
@employee_required
def update_application_status(application_id: str):
    raw = request.form.get("status_id", "")
    try:
        status = ApplicationStatus(int(raw))
    except ValueError:
        toast_error("Unknown application status")
        return redirect(url_for("employee.application_detail", application_id=application_id))

    result = safe_api_call(
        ApplicationService(get_api_client()).update_status,
        application_id,
        int(status),
        request.form.get("reason", "").strip() or None,
        operation_name="update application status",
        error_message="Failed to update application status",
        fallback=False,
        logger=logger,
    )
    if result is not False:
        toast_success(f"Application moved to {status.label}")
    return redirect(_safe_next(url_for("employee.application_detail", application_id=application_id)))


# ============================================================================
# Screening (reviewers)
# ============================================================================

@employee_bp.route("/screening")
@reviewer_required
def screening():
    client = get_api_client()
    pending = safe_api_call(
        ScreeningService(client).get_pending,
        operation_name="load pending screenings",
        error_message="Failed to load pending screenings",
        fallback=[],
        logger=logger,
    )
    stats = safe_api_call(
        ScreeningService(client).get_statistics,
        current_user().user_id,
        operation_name="load screening statistics",
        logger=logger,
    )
    assignments = safe_api_call(
        JobPositionReviewerService(client).get_my_assigned_jobs,
        operation_name="load my assignments",
        fallback=[],
        logger=logger,
    )
    return render_template("employee/screening.html", pending=pending, stats=stats, assignments=assignments)


@employee_bp.route("/screening/<application_id>", methods=["GET", "POST"])
@reviewer_required
def screening_review(application_id: str):
    """Review one pending application; a second submission updates the existing review."""
    client = get_api_client()
    service = ScreeningService(client)
    existing = safe_api_call(
        service.get_by_application,
        application_id,
        operation_name="load existing screening",
        fallback=[],
        notify=lambda message: None,
        logger=logger,
    )
    existing = existing[0] if existing else None

    if request.method == "GET":
        pending = safe_api_call(
            service.get_pending,
            operation_name="load pending screenings",
            fallback=[],
            logger=logger,
        )
        candidate = next((p for p in pending if p.application_id == application_id), None)
        if candidate is None and existing is None:
            toast_error("Application not found")
            return redirect(url_for("employee.screening"))
        return render_template("employee/screening_review.html", candidate=candidate, existing=existing,
                               application_id=application_id)

    result = validate_screening_review(request.form)
    if not result.is_valid:
        _form_errors(result.errors)
        return redirect(url_for("employee.screening_review", application_id=application_id))

    log = get_logger(__name__, user_id=current_user().user_id, area="screening")
    if existing is not None:
        dto = dict(result.data, screeningReviewId=existing.id)
        dto.pop("applicationId")
        call = service.update_review
    else:
        dto = result.data
        call = service.create_review

    saved = safe_api_call(
        call,
        dto,
        operation_name="submit screening review",
        error_message="Failed to submit screening review",
        fallback=False,
        logger=logger,
    )
    if saved is False:
        return redirect(url_for("employee.screening_review", application_id=application_id))

    log.info(f"screening for {application_id} submitted (recommended={dto['isRecommendedForInterview']})")
    toast_success("Screening review submitted")
    return redirect(url_for("employee.screening"))


# ============================================================================
# Interviews
# ============================================================================

@employee_bp.route("/interviews")
@employee_required
def interviews():
    interview_list = safe_api_call(
        InterviewService(get_api_client()).get_all_interviews,
        operation_name="load interviews",
        error_message="Failed to load interviews",
        fallback=[],
        logger=logger,
    )
    status = request.args.get("status", "")
    if status.isdigit():
        interview_list = [i for i in interview_list if i.status_id == int(status)]
    return render_template("employee/interviews.html", interviews=interview_list, status_filter=status)


@employee_bp.route("/interviews/mine")
@employee_required
def my_interviews():
    schedule = safe_api_call(
        InterviewService(get_api_client()).get_my_schedule,
        operation_name="load my interview schedule",
        error_message="Failed to load your interviews",
        fallback=[],
        logger=logger,
    )
    return render_template("employee/my_interviews.html", schedule=schedule)


@employee_bp.route("/interviews/schedule/<application_id>", methods=["GET", "POST"])
@employee_required
def schedule_interview(application_id: str):
    client = get_api_client()
    service = InterviewService(client)

    if request.method == "POST":
        result = validate_interview(request.form)
        if result.is_valid:
            created = safe_api_call(
                service.schedule_interview,
                result.data,
                operation_name="schedule interview",
                error_message="Failed to schedule interview",
                fallback=False,
                logger=logger,
            )
            if created is not False:
                message = created.get("message") if isinstance(created, dict) else None
                toast_success(message or "Interview scheduled successfully")
                return redirect(url_for("employee.application_detail", application_id=application_id))
        else:
            _form_errors(result.errors)

    application = safe_api_call(
        ApplicationService(client).get_application,
        application_id,
        operation_name="load application",
        error_message="Failed to fetch application details",
        logger=logger,
    )
    if application is None:
        return redirect(url_for("employee.applications"))
    existing = safe_api_call(
        service.get_interviews_by_application,
        application_id,
        operation_name="load existing rounds",
        fallback=[],
        logger=logger,
    )
    interviewers = safe_api_call(
        AdminService(client).get_staff_accounts,
        operation_name="load interviewers",
        error_message="Could not load interviewers",
        fallback=[],
        notify=toast_warning,
        logger=logger,
    )
    next_round = max((i.round_number for i in existing), default=0) + 1
    return render_template(
        "employee/schedule_interview.html",
        application=application,
        next_round=next_round,
        interviewers=[s for s in interviewers if s.is_active],
        round_types=ROUND_TYPES,
        participant_types=PARTICIPANT_TYPES,
        form=request.form,
    )


@employee_bp.route("/interviews/<interview_id>")
@employee_required
def interview_detail(interview_id: str):
    client = get_api_client()
    interview = safe_api_call(
        InterviewService(client).get_interview,
        interview_id,
        operation_name="load interview",
        error_message="Failed to fetch interview details",
        logger=logger,
    )
    if interview is None:
        return redirect(url_for("employee.interviews"))
    feedbacks = safe_api_call(
        InterviewService(client).get_feedbacks,
        interview_id,
        operation_name="load feedbacks",
        fallback=interview.feedbacks,
        logger=logger,
    )
    staff = safe_api_call(
        AdminService(client).get_staff_accounts,
        operation_name="load interviewers",
        fallback=[],
        notify=lambda message: None,
        logger=logger,
    )
    taken = {p.user_id for p in interview.participants}
    return render_template(
        "employee/interview_detail.html",
        interview=interview,
        feedbacks=feedbacks,
        interviewers=[s for s in staff if s.is_active and s.id not in taken],
        participant_types=PARTICIPANT_TYPES,
        statuses=list(InterviewStatus),
    )


@employee_bp.route("/interviews/<interview_id>/status", methods=["POST"])
@employee_required
def update_interview_status(interview_id: str):
    """Mark a round completed or cancelled."""
    try:
        status = InterviewStatus(int(request.form.get("status_id", "")))
    except ValueError:
        toast_error("Unknown interview status")
        return redirect(url_for("employee.interview_detail", interview_id=interview_id))

    updated = safe_api_call(
        InterviewService(get_api_client()).update_interview,
        {"id": interview_id, "statusId": int(status)},
        operation_name="update interview",
        error_message="Failed to update interview",
        fallback=False,
        logger=logger,
    )
    if updated is not False:
        toast_success(f"Interview marked {status.name.lower()}")
    return redirect(url_for("employee.interview_detail", interview_id=interview_id))


@employee_bp.route("/interviews/<interview_id>/participants", methods=["POST"])
@employee_required
def add_interview_participant(interview_id: str):
    user_id = request.form.get("user_id", "").strip()
    participant_type = request.form.get("participant_type") or PARTICIPANT_TYPES[0]
    if not user_id:
        toast_error("Please select an interviewer")
        return redirect(url_for("employee.interview_detail", interview_id=interview_id))
    if participant_type not in PARTICIPANT_TYPES:
        toast_error("Unknown participant type")
        return redirect(url_for("employee.interview_detail", interview_id=interview_id))

    added = safe_api_call(
        InterviewService(get_api_client()).add_participant,
        interview_id,
        {"userId": user_id, "participantType": participant_type, "attendanceStatusId": int(AttendanceStatus.PENDING)},
        operation_name="add participant",
        error_message="Failed to add interviewer",
        fallback=False,
        logger=logger,
    )
    if added is not False:
        toast_success("Interviewer added")
    return redirect(url_for("employee.interview_detail", interview_id=interview_id))


@employee_bp.route("/interviews/<interview_id>/feedback", methods=["GET", "POST"])
@employee_required
def interview_feedback(interview_id: str):
    """Submit feedback for a round; an interviewer's second submission edits the first."""
    service = InterviewService(get_api_client())
    interview = safe_api_call(
        service.get_interview,
        interview_id,
        operation_name="load interview",
        error_message="Failed to fetch interview details",
        logger=logger,
    )
    if interview is None:
        return redirect(url_for("employee.my_interviews"))
    user_id = current_user().user_id
    own = next((fb for fb in interview.feedbacks if fb.interviewer_id == user_id), None)

    if request.method == "POST":
        result = validate_feedback({**request.form.to_dict(), "interview_round_id": interview_id})
        if result.is_valid:
            if own is not None:
                dto = dict(result.data, id=own.id)
                dto.pop("interviewRoundId")
                call = service.update_feedback
            else:
                dto = result.data
                call = service.submit_feedback
            submitted = safe_api_call(
                call,
                dto,
                operation_name="submit feedback",
                error_message="Failed to submit feedback",
                fallback=False,
                logger=logger,
            )
            if submitted is not False:
                toast_success("Feedback updated successfully" if own else "Feedback submitted successfully")
                return redirect(url_for("employee.my_interviews"))
        else:
            _form_errors(result.errors)

    return render_template(
        "employee/interview_feedback.html", interview=interview, own=own, recommendations=RECOMMENDATIONS
    )


@employee_bp.route("/interviews/<interview_id>/delete", methods=["POST"])
@employee_required
def delete_interview(interview_id: str):
    deleted = safe_api_call(
        InterviewService(get_api_client()).delete_interview,
        interview_id,
        operation_name="delete interview",
        error_message="Failed to delete interview",
        fallback=False,
        logger=logger,
    )
    if deleted is False:
        return redirect(url_for("employee.interview_detail", interview_id=interview_id))
    toast_success("Interview deleted")
    return redirect(url_for("employee.interviews"))


# ============================================================================
# Offers
# ============================================================================

@employee_bp.route("/offers")
@employee_required
def offers():
    offer_list = safe_api_call(
        OfferService(get_api_client()).get_all_offers,
        operation_name="load offers",
        error_message="Failed to load offers",
        fallback=[],
        logger=logger,
    )
    status = request.args.get("status", "")
    search = request.args.get("q", "").strip().lower()
    if status in OFFER_STATUS_NAMES:
        offer_list = [o for o in offer_list if o.status_name == status]
    if search:
        offer_list = [
            o for o in offer_list if search in o.candidate_name.lower() or search in o.job_title.lower()
        ]
    return render_template(
        "employee/offers.html",
        offers=offer_list,
        status_names=OFFER_STATUS_NAMES,
        status_filter=status,
        search=search,
    )


@employee_bp.route("/offers/new/<application_id>", methods=["GET", "POST"])
@employee_required
def create_offer(application_id: str):
    """Offer for a selected candidate; warns when documents are not verified yet."""
    client = get_api_client()
    application = safe_api_call(
        ApplicationService(client).get_application,
        application_id,
        operation_name="load application",
        error_message="Failed to fetch application details",
        logger=logger,
    )
    if application is None:
        return redirect(url_for("employee.applications"))
    if application.status_id != ApplicationStatus.SELECTED:
        toast_error("Can only create offers for selected candidates")
        return redirect(url_for("employee.application_detail", application_id=application_id))

    has_verified_docs = False
    if application.candidate_id:
        has_verified_docs = safe_api_call(
            DocumentService(client).has_required_documents,
            application.candidate_id,
            operation_name="check required documents",
            fallback=False,
            notify=lambda message: None,
            logger=logger,
        )

    if request.method == "POST":
        result = validate_offer({**request.form.to_dict(), "application_id": application_id})
        if not result.is_valid:
            _form_errors(result.errors)
        elif not has_verified_docs and request.form.get("confirm_unverified") != "yes":
            toast_warning("Required documents are not verified yet. Confirm to proceed anyway.")
        else:
            offer = safe_api_call(
                OfferService(client).create_offer,
                result.data,
                operation_name="create offer",
                error_message="Failed to create offer",
                logger=logger,
            )
            if offer is not None:
                toast_success("Offer created successfully")
                return redirect(url_for("employee.offer_detail", offer_id=offer.id))
    elif not has_verified_docs:
        toast_warning("Candidate documents are not verified yet")

    return render_template(
        "employee/offer_form.html",
        application=application,
        has_verified_docs=has_verified_docs,
        form=request.form,
    )


@employee_bp.route("/offers/<offer_id>")
@employee_required
def offer_detail(offer_id: str):
    offer = safe_api_call(
        OfferService(get_api_client()).get_offer,
        offer_id,
        operation_name="load offer",
        error_message="Failed to load offer",
        logger=logger,
    )
    if offer is None:
        return redirect(url_for("employee.offers"))
    return render_template("employee/offer_detail.html", offer=offer)


# ============================================================================
# Document verification
# ============================================================================

@employee_bp.route("/documents")
@employee_required
def documents():
    pending = safe_api_call(
        DocumentService(get_api_client()).get_pending_verification,
        operation_name="load pending documents",
        error_message="Failed to load documents",
        fallback=[],
        logger=logger,
    )
    return render_template("employee/documents.html", documents=pending)


@employee_bp.route("/documents/<document_id>/verify", methods=["POST"])
@employee_required
def verify_document(document_id: str):
    """Verify (28) or reject (29) a pending document."""
    decision = request.form.get("decision")
    if decision not in ("verify", "reject"):
        toast_error("Unknown verification decision")
        return redirect(url_for("employee.documents"))

    comments = request.form.get("comments", "").strip() or None
    if decision == "reject" and not comments:
        toast_error("Please give a reason for rejecting the document")
        return redirect(url_for("employee.documents"))

    status = DocumentStatus.VERIFIED if decision == "verify" else DocumentStatus.REJECTED
    document = safe_api_call(
        DocumentService(get_api_client()).verify_document,
        document_id,
        status,
        comments,
        operation_name="verify document",
        error_message="Failed to update document",
        logger=logger,
    )
    if document is not None:
        toast_success("Document verified" if status is DocumentStatus.VERIFIED else "Document rejected")
    return redirect(url_for("employee.documents"))


# ============================================================================
# Employees (onboarding)
# ============================================================================

@employee_bp.route("/employees")
@employee_required
def employees():
    staff = safe_api_call(
        EmployeeService(get_api_client()).get_all_employees,
        operation_name="load employees",
        error_message="Failed to load employees",
        fallback=[],
        logger=logger,
    )
    return render_template("employee/employees.html", employees=staff)


@employee_bp.route("/employees/onboard", methods=["GET", "POST"])
@employee_required
def onboard_employee():
    """Convert a candidate with an accepted offer into an employee."""
    client = get_api_client()
    all_offers = safe_api_call(
        OfferService(client).get_all_offers,
        operation_name="load offers",
        error_message="Failed to fetch accepted offers",
        fallback=[],
        logger=logger,
    )
    accepted = [o for o in all_offers if o.status_name == "Accepted"]

    if request.method == "POST":
        result = validate_onboarding(request.form)
        offer = next((o for o in accepted if o.id == result.data["offerId"]), None)
        if result.is_valid and offer is None:
            toast_error("Please select an offer")
        elif not result.is_valid:
            _form_errors(result.errors)
        else:
            application = safe_api_call(
                ApplicationService(client).get_application,
                offer.application_id,
                operation_name="load application",
                error_message="Failed to fetch application details",
                logger=logger,
            )
            if application is not None:
                employee = safe_api_call(
                    EmployeeService(client).onboard_candidate,
                    {
                        "candidateId": application.candidate_id,
                        "jobPositionId": application.job_position_id,
                        "joiningDate": result.data["joiningDate"],
                        "department": result.data["department"],
                    },
                    operation_name="onboard employee",
                    error_message="Failed to onboard employee",
                    logger=logger,
                )
                if employee is not None:
                    toast_success("Employee onboarded successfully")
                    return redirect(url_for("employee.employees"))

    return render_template("employee/onboard.html", offers=accepted, form=request.form)


# ============================================================================
# Bulk upload
# ============================================================================

@employee_bp.route("/bulk-upload", methods=["GET", "POST"])
@employee_required
def bulk_upload():
    """Excel candidate import. Files are checked for type and size before sending."""
    service = BulkUploadService(get_api_client())

    if request.method == "POST":
        upload = request.files.get("file")
        filename = upload.filename if upload is not None else ""
        size = 0
        if upload is not None and filename:
            upload.stream.seek(0, 2)
            size = upload.stream.tell()
            upload.stream.seek(0)
        error = validate_upload(filename, size)
        if error:
            toast_error(error)
            return redirect(url_for("employee.bulk_upload"))

        response = safe_api_call(
            service.upload_excel,
            filename,
            upload.stream,
            upload.mimetype,
            operation_name="bulk upload",
            error_message="Failed to upload file",
            logger=logger,
        )
        if response is not None:
            get_logger(__name__, user_id=current_user().user_id, area="bulk-upload").info(
                f"uploaded {filename} ({size} bytes) as {response.bulk_upload_id}"
            )
            toast_success(response.message or "File uploaded, processing started")
            return redirect(url_for("employee.bulk_upload_status", upload_id=response.bulk_upload_id))
        return redirect(url_for("employee.bulk_upload"))

    page = request.args.get("page", "1")
    page_number = int(page) if page.isdigit() and int(page) > 0 else 1
    history = safe_api_call(
        service.get_history,
        page_number,
        operation_name="load upload history",
        error_message="Failed to load upload history",
        logger=logger,
    )
    return render_template("employee/bulk_upload.html", history=history, page=page_number)


@employee_bp.route("/bulk-upload/<upload_id>")
@employee_required
def bulk_upload_status(upload_id: str):
    status = safe_api_call(
        BulkUploadService(get_api_client()).get_status,
        upload_id,
        operation_name="load upload status",
        error_message="Failed to load upload status",
        logger=logger,
    )
    if status is None:
        return redirect(url_for("employee.bulk_upload"))
    return render_template("employee/bulk_upload_status.html", status=status)


@employee_bp.route("/bulk-upload/template")
@employee_required
def bulk_upload_template():
    response = safe_api_call(
        BulkUploadService(get_api_client()).download_template,
        operation_name="download template",
        error_message="Failed to download template",
        logger=logger,
    )
    if response is None:
        return redirect(url_for("employee.bulk_upload"))
    return Response(
        response.content,
        mimetype=response.headers.get(
            "Content-Type", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        ),
        headers={"Content-Disposition": "attachment; filename=candidate_upload_template.xlsx"},
    )


# ============================================================================
# Analytics
# ============================================================================

@employee_bp.route("/analytics")
@employee_required
def analytics():
    client = get_api_client()
    job_id = request.args.get("job") or None
    stats = safe_api_call(
        ApplicationService(client).get_statistics,
        job_id,
        operation_name="load application statistics",
        error_message="Failed to load statistics",
        logger=logger,
    )
    positions = safe_api_call(
        JobPositionService(client).get_all_job_positions,
        operation_name="load job positions",
        fallback=[],
        logger=logger,
    )
    interview_stats = safe_api_call(
        InterviewService(client).get_statistics,
        operation_name="load interview statistics",
        logger=logger,
    )
    return render_template(
        "employee/analytics.html",
        stats=stats,
        interview_stats=interview_stats,
        jobs=positions,
        job_filter=job_id or "",
    )
