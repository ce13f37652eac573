"""
Form validation.

Each validate_* function takes the submitted form (a werkzeug MultiDict or a
plain mapping) and returns a FormResult: the backend payload in the
backend's camelCase shape, plus a field -> message dict. The payload is only
meaningful when `errors` is empty.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from portal.models import (
    EMPLOYMENT_TYPES,
    EXPERIENCE_LEVELS,
    JOB_POSITION_STATUSES,
    PARTICIPANT_TYPES,
    RECOMMENDATIONS,
    ROUND_TYPES,
    AttendanceStatus,
    InterviewStatus,
)

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
STAFF_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s\-()]+$")
MIN_PASSWORD_LENGTH = 6


class FormResult(NamedTuple):
    data: Dict[str, Any]
    errors: Dict[str, str]

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    return value.strip() if isinstance(value, str) else ""


def _getlist(form: Mapping[str, Any], key: str) -> List[str]:
    if hasattr(form, "getlist"):
        return [v for v in form.getlist(key) if v != ""]
    value = form.get(key)
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _number(
    form: Mapping[str, Any],
    key: str,
    errors: Dict[str, str],
    label: str,
    cast=None,
    default: Optional[float] = None,
):
    raw = _text(form, key)
    if raw == "":
        return default
    try:
        return (cast or _finite)(raw)
    except (ValueError, OverflowError):
        errors[key] = f"{label} must be a number"
        return default


def _finite(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"not a finite number: {raw!r}")
    return value


def _whole(raw: str) -> int:
    # Browsers echo back stored floats ("50000.0") into number inputs.
    return int(_finite(raw))


def _parse_date(raw: str) -> Optional[date]:
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        return None


# ============================================================================
# Auth
# ============================================================================

def validate_login(form: Mapping[str, Any]) -> FormResult:
    errors: Dict[str, str] = {}
    email = _text(form, "email")
    password = form.get("password") or ""

    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.search(email):
        errors["email"] = "Email is invalid"
    if not password:
        errors["password"] = "Password is required"

    return FormResult({"email": email, "password": password}, errors)


def validate_register(form: Mapping[str, Any]) -> FormResult:
    """
    Candidate sign-up form. The password confirmation is checked here and
    never forwarded to the backend.
    """
    errors: Dict[str, str] = {}
    first_name = _text(form, "first_name")
    last_name = _text(form, "last_name")
    email = _text(form, "email")
    phone = _text(form, "phone_number")
    password = form.get("password") or ""
    confirm = form.get("confirm_password") or ""

    if not first_name:
        errors["first_name"] = "First name is required"
    if not last_name:
        errors["last_name"] = "Last name is required"
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.search(email):
        errors["email"] = "Email is invalid"
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if password != confirm:
        errors["confirm_password"] = "Passwords do not match"
    if phone and not PHONE_RE.match(phone):
        errors["phone_number"] = "Phone number is invalid"

    data = {
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "password": password,
        "phone_number": phone or None,
    }
    return FormResult(data, errors)


# ============================================================================
# Candidate profile
# ============================================================================

def validate_profile(form: Mapping[str, Any], today: Optional[date] = None) -> FormResult:
    """
    Profile edit form. Blank numbers are sent as 0, a blank graduation year
    as the current year. Each checked skill_id carries its years in
    skill_years_<id>.
    """
    today = today or date.today()
    errors: Dict[str, str] = {}

    total_experience = _number(form, "total_experience", errors, "Total experience", default=0)
    current_salary = _number(form, "current_salary", errors, "Current salary", _whole, default=0)
    expected_salary = _number(form, "expected_salary", errors, "Expected salary", _whole, default=0)
    notice_period = _number(form, "notice_period", errors, "Notice period", _whole, default=0)
    graduation_year = _number(form, "graduation_year", errors, "Graduation year", _whole, default=today.year)

    for key, value in (
        ("total_experience", total_experience),
        ("current_salary", current_salary),
        ("expected_salary", expected_salary),
        ("notice_period", notice_period),
    ):
        if key not in errors and value is not None and value < 0:
            errors[key] = "Must not be negative"
    if "graduation_year" not in errors and not 1950 <= graduation_year <= today.year + 6:
        errors["graduation_year"] = "Graduation year is out of range"

    skills = []
    for skill_id in _getlist(form, "skill_id"):
        raw_years = _text(form, f"skill_years_{skill_id}") or "0"
        try:
            skills.append({"skillId": skill_id, "yearsOfExperience": _finite(raw_years)})
        except ValueError:
            errors["skills"] = "Skill experience must be a number"

    data = {
        "currentLocation": _text(form, "current_location"),
        "totalExperience": total_experience,
        "currentCompany": _text(form, "current_company"),
        "currentSalary": current_salary,
        "expectedSalary": expected_salary,
        "noticePeriod": notice_period,
        "collegeName": _text(form, "college_name"),
        "graduationYear": graduation_year,
        "degree": _text(form, "degree"),
        "source": _text(form, "source") or None,
        "skills": skills,
    }
    return FormResult(data, errors)


# ============================================================================
# Employee area
# ============================================================================

def validate_job_position(form: Mapping[str, Any]) -> FormResult:
    errors: Dict[str, str] = {}
    data = {
        "title": _text(form, "title"),
        "description": _text(form, "description"),
        "department": _text(form, "department"),
        "location": _text(form, "location"),
        "employmentType": _text(form, "employment_type") or EMPLOYMENT_TYPES[0],
        "experienceLevel": _text(form, "experience_level") or EXPERIENCE_LEVELS[1],
        "minExperience": _number(form, "min_experience", errors, "Minimum experience", default=0),
        "salary": _number(form, "salary", errors, "Salary"),
        "statusId": _number(form, "status_id", errors, "Status", int, default=1),
        "statusReason": _text(form, "status_reason") or None,
        "requiredSkills": [{"skillId": s} for s in _getlist(form, "required_skill_ids")],
        "preferredSkills": [{"skillId": s} for s in _getlist(form, "preferred_skill_ids")],
    }

    for key, label in (("title", "Title"), ("department", "Department"),
                       ("location", "Location"), ("description", "Description")):
        if not data[key]:
            errors[key] = f"{label} is required"
    if data["employmentType"] not in EMPLOYMENT_TYPES:
        errors["employment_type"] = "Unknown employment type"
    if data["experienceLevel"] not in EXPERIENCE_LEVELS:
        errors["experience_level"] = "Unknown experience level"
    if "status_id" not in errors and data["statusId"] not in JOB_POSITION_STATUSES:
        errors["status_id"] = "Unknown status"
    if data["salary"] is not None and data["salary"] < 0:
        errors["salary"] = "Salary must not be negative"

    return FormResult(data, errors)


def validate_offer(form: Mapping[str, Any], today: Optional[date] = None) -> FormResult:
    """
    Offer creation. The candidate must accept before the expiry date, which
    therefore has to fall before the joining date.
    """
    today = today or date.today()
    errors: Dict[str, str] = {}
    application_id = _text(form, "application_id")
    raw_salary = _text(form, "offered_salary")
    raw_joining = _text(form, "joining_date")
    raw_expiry = _text(form, "expiry_date")

    if not application_id or not raw_salary or not raw_joining or not raw_expiry:
        return FormResult({}, {"form": "Please fill all required fields"})

    try:
        salary = _finite(raw_salary)
    except ValueError:
        salary = 0
    if salary <= 0:
        errors["offered_salary"] = "Please enter a valid salary amount"

    joining = _parse_date(raw_joining)
    expiry = _parse_date(raw_expiry)
    if joining is None:
        errors["joining_date"] = "Joining date is invalid"
    elif joining < today:
        errors["joining_date"] = "Joining date cannot be in the past"
    if expiry is None:
        errors["expiry_date"] = "Expiry date is invalid"
    elif expiry < today:
        errors["expiry_date"] = "Expiry date cannot be in the past"
    if joining and expiry and "expiry_date" not in errors and expiry >= joining:
        errors["expiry_date"] = "Expiry date must be before joining date"

    if errors:
        return FormResult({}, errors)

    data = {
        "applicationId": application_id,
        "offeredSalary": salary,
        "joiningDate": f"{joining.isoformat()}T00:00:00",
        "expiryDate": f"{expiry.isoformat()}T00:00:00",
    }
    return FormResult(data, errors)


def validate_interview(form: Mapping[str, Any]) -> FormResult:
    """
    Interview scheduling. Participants arrive as a participant_user_id list
    with each one's type under participant_type_<user id>.
    """
    errors: Dict[str, str] = {}
    user_ids = _getlist(form, "participant_user_id")
    participants = []
    seen = set()
    for user_id in user_ids:
        if user_id in seen:
            errors["participants"] = "This interviewer is already added"
            continue
        seen.add(user_id)
        participant_type = _text(form, f"participant_type_{user_id}") or PARTICIPANT_TYPES[0]
        if participant_type not in PARTICIPANT_TYPES:
            errors["participants"] = "Unknown participant type"
        participants.append({
            "userId": user_id,
            "participantType": participant_type,
            "attendanceStatusId": int(AttendanceStatus.PENDING),
        })
    if not participants:
        errors["participants"] = "Please add at least one interviewer"

    scheduled = _text(form, "scheduled_date")
    if not scheduled:
        errors["scheduled_date"] = "Please select a date and time"
    else:
        try:
            scheduled = datetime.fromisoformat(scheduled).isoformat()
        except ValueError:
            errors["scheduled_date"] = "Date and time is invalid"

    round_type = _text(form, "round_type") or ROUND_TYPES[0]
    if round_type not in ROUND_TYPES:
        errors["round_type"] = "Unknown round type"

    application_id = _text(form, "application_id")
    if not application_id:
        errors["application_id"] = "Application is required"

    data = {
        "applicationId": application_id,
        "roundNumber": _number(form, "round_number", errors, "Round number", int, default=1),
        "roundType": round_type,
        "roundName": _text(form, "round_name") or None,
        "scheduledDate": scheduled,
        "duration": _number(form, "duration", errors, "Duration", int),
        "meetingLink": _text(form, "meeting_link") or None,
        "location": _text(form, "location") or None,
        "statusId": int(InterviewStatus.SCHEDULED),
        "participants": participants,
    }
    return FormResult(data, errors)


def validate_feedback(form: Mapping[str, Any]) -> FormResult:
    errors: Dict[str, str] = {}
    overall = _number(form, "overall_rating", errors, "Overall rating", int)
    if overall is None and "overall_rating" not in errors:
        errors["overall_rating"] = "Please provide an overall rating"
    elif overall is not None and not 1 <= overall <= 5:
        errors["overall_rating"] = "Rating must be between 1 and 5"

    recommendation = _text(form, "recommendation")
    if not recommendation:
        errors["recommendation"] = "Please provide a recommendation"
    elif recommendation not in RECOMMENDATIONS:
        errors["recommendation"] = "Unknown recommendation"

    data = {
        "interviewRoundId": _text(form, "interview_round_id"),
        "overallRating": overall,
        "technicalRating": _number(form, "technical_rating", errors, "Technical rating", int),
        "communicationRating": _number(form, "communication_rating", errors, "Communication rating", int),
        "comments": _text(form, "comments"),
        "recommendation": recommendation,
    }
    return FormResult(data, errors)


def validate_screening_review(form: Mapping[str, Any]) -> FormResult:
    """
    Screening review. Each candidate_skill_id may carry verified_years_<id>;
    a skill counts as verified when its id is also listed under
    verified_skill_id.
    """
    errors: Dict[str, str] = {}
    rating = _number(form, "rating", errors, "Rating", int, default=3)
    if "rating" not in errors and not 1 <= rating <= 5:
        errors["rating"] = "Rating must be between 1 and 5"

    verified_ids = set(_getlist(form, "verified_skill_id"))
    skills = []
    for skill_id in _getlist(form, "candidate_skill_id"):
        years = None
        raw_years = _text(form, f"verified_years_{skill_id}")
        if raw_years:
            try:
                years = _finite(raw_years)
            except ValueError:
                errors["verified_skills"] = "Verified years must be a number"
        skills.append({
            "candidateSkillId": skill_id,
            "verifiedYears": years,
            "isVerified": skill_id in verified_ids,
        })

    data = {
        "applicationId": _text(form, "application_id"),
        "rating": rating,
        "comments": _text(form, "comments"),
        "isRecommendedForInterview": _text(form, "decision") == "recommend",
        "verifiedSkills": skills,
    }
    if not data["applicationId"]:
        errors["application_id"] = "Application is required"
    return FormResult(data, errors)


def validate_onboarding(form: Mapping[str, Any]) -> FormResult:
    errors: Dict[str, str] = {}
    offer_id = _text(form, "offer_id")
    joining = _text(form, "joining_date")
    department = _text(form, "department")

    if not offer_id:
        errors["offer_id"] = "Please select an offer"
    if not joining:
        errors["joining_date"] = "Joining date is required"
    elif _parse_date(joining) is None:
        errors["joining_date"] = "Joining date is invalid"
    if not department:
        errors["department"] = "Department is required"

    return FormResult({"offerId": offer_id, "joiningDate": joining, "department": department}, errors)


# ============================================================================
# Admin
# ============================================================================

def validate_staff_account(form: Mapping[str, Any]) -> FormResult:
    errors: Dict[str, str] = {}
    first_name = _text(form, "first_name")
    last_name = _text(form, "last_name")
    email = _text(form, "email")
    phone = _text(form, "phone_number")

    if not first_name:
        errors["first_name"] = "First name is required"
    if not last_name:
        errors["last_name"] = "Last name is required"
    if not email:
        errors["email"] = "Email is required"
    elif not STAFF_EMAIL_RE.match(email):
        errors["email"] = "Invalid email format"
    if phone and len(re.sub(r"\D", "", phone)) != 10:
        errors["phone_number"] = "Phone number must be 10 digits"

    role_ids = []
    for raw in _getlist(form, "role_ids"):
        try:
            role_ids.append(int(raw))
        except ValueError:
            errors["role_ids"] = "Unknown role"
    if not role_ids and "role_ids" not in errors:
        errors["role_ids"] = "At least one role must be selected"

    data = {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "phoneNumber": phone or None,
        "roleIds": role_ids,
    }
    return FormResult(data, errors)
