"""
Pydantic models for the ATS backend's JSON payloads.

The backend speaks camelCase; every model accepts either the camelCase alias
or the snake_case field name and keeps unknown keys so templates can still
reach fields this module does not declare.
"""

from enum import IntEnum
from typing import Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for all backend payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )


# === Status ids (shared lookup table on the backend) ===

class ApplicationStatus(IntEnum):
    APPLIED = 4
    SCREENING = 5
    INTERVIEW = 6
    SELECTED = 7
    REJECTED = 8

    @property
    def label(self) -> str:
        return self.name.title()


class InterviewStatus(IntEnum):
    SCHEDULED = 9
    COMPLETED = 10
    CANCELLED = 11


class AttendanceStatus(IntEnum):
    PRESENT = 12
    ABSENT = 13
    PENDING = 14


class OfferStatus(IntEnum):
    ACCEPTED = 26
    REJECTED = 27


class DocumentStatus(IntEnum):
    VERIFIED = 28
    REJECTED = 29


ROUND_TYPES = ["Technical", "HR", "Panel", "Managerial"]
PARTICIPANT_TYPES = ["Primary_Interviewer", "Co_Interviewer"]
OFFER_STATUS_NAMES = ["Pending", "Accepted", "Rejected", "Expired"]
JOB_POSITION_STATUSES = {1: "Active/Open", 2: "On Hold", 3: "Closed"}
EMPLOYMENT_TYPES = ["Full-time", "Part-time", "Contract", "Internship"]
EXPERIENCE_LEVELS = ["Entry-level", "Mid-level", "Senior", "Lead"]
RECOMMENDATIONS = ["Strongly_Recommend", "Recommend", "Maybe", "Do_Not_Recommend"]


class DocumentType(NamedTuple):
    type: str
    description: str
    required: bool


DOCUMENT_TYPES = [
    DocumentType("Resume", "Updated resume/CV", True),
    DocumentType("AadharCard", "Aadhaar Card (front & back)", True),
    DocumentType("PanCard", "PAN Card", True),
    DocumentType("EducationCertificate", "Highest Education Certificate", True),
    DocumentType("ExperienceLetter", "Previous Employment Letter", False),
    DocumentType("PaySlip", "Last 3 months salary slips", False),
    DocumentType("PhotoID", "Passport size photograph", True),
    DocumentType("AddressProof", "Address Proof Document", True),
]
DOCUMENT_CONTENT_TYPES = ("application/pdf", "image/jpeg", "image/jpg", "image/png")


# === Identity ===

class UserRecord(ApiModel):
    """
    The signed-in user's identity as returned by the login endpoint.

    Frozen: a record is created at login and discarded at logout.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
        frozen=True,
    )

    user_id: str = Field(..., min_length=1)
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    phone_number: Optional[str] = None
    user_type: str = ""
    roles: List[str] = Field(default_factory=list)

    @field_validator("roles", mode="before")
    @classmethod
    def _roles_as_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def has_role(self, role: str) -> bool:
        """Match a role against the user type or any token role, ignoring case."""
        wanted = role.lower()
        if self.user_type.lower() == wanted:
            return True
        return any(r.lower() == wanted for r in self.roles)


class LoginResponse(ApiModel):
    """Body of a successful POST /auth/login."""

    token: str = Field(..., min_length=1)
    user_id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    phone_number: Optional[str] = None
    user_type: str = ""
    expires_at: Optional[str] = None

    def to_user_record(self) -> UserRecord:
        return UserRecord(
            user_id=self.user_id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            phone_number=self.phone_number,
            user_type=self.user_type,
        )


# === Candidate profile ===

class Skill(ApiModel):
    id: str
    skill_name: str = ""
    category: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True


class CandidateSkill(ApiModel):
    skill_id: str
    skill_name: str = ""
    category: Optional[str] = None
    years_of_experience: float = 0


class CandidateProfile(ApiModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    current_location: Optional[str] = None
    total_experience: Optional[float] = None
    current_company: Optional[str] = None
    current_salary: Optional[float] = None
    expected_salary: Optional[float] = None
    notice_period: Optional[int] = None
    source: Optional[str] = None
    college_name: Optional[str] = None
    graduation_year: Optional[int] = None
    degree: Optional[str] = None
    resume_file_path: Optional[str] = None
    is_profile_completed: Optional[bool] = None
    user_name: Optional[str] = None
    email: Optional[str] = None
    skills: List[CandidateSkill] = Field(default_factory=list)


# === Jobs ===

class SkillRequirement(ApiModel):
    skill_id: str
    skill_name: str = ""
    category: Optional[str] = None
    min_years_experience: Optional[float] = None


class JobPosition(ApiModel):
    id: str
    title: str
    description: str = ""
    department: str = ""
    location: str = ""
    employment_type: str = ""
    experience_level: str = ""
    min_experience: Optional[float] = None
    salary: Optional[float] = None
    status_id: int = 0
    status_name: Optional[str] = None
    status_reason: Optional[str] = None
    created_by: Optional[str] = None
    created_by_name: Optional[str] = None
    created_at: Optional[str] = None
    required_skills: List[SkillRequirement] = Field(default_factory=list)
    preferred_skills: List[SkillRequirement] = Field(default_factory=list)


class JobListing(ApiModel):
    """Candidate-facing view of an open position."""

    id: str
    title: str
    description: str = ""
    department: str = ""
    location: str = ""
    employment_type: str = ""
    experience_level: str = ""
    experience_range: str = ""
    salary: Optional[float] = None
    posted_date: Optional[str] = None
    required_skills: List[str] = Field(default_factory=list)
    preferred_skills: List[str] = Field(default_factory=list)


class JobPositionReviewer(ApiModel):
    id: str
    job_position_id: str
    job_title: Optional[str] = None
    reviewer_id: str
    reviewer_name: Optional[str] = None
    reviewer_email: Optional[str] = None
    assigned_at: Optional[str] = None
    assigned_by_name: Optional[str] = None
    is_active: bool = True


# === Applications ===

class Application(ApiModel):
    id: str
    candidate_id: Optional[str] = None
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    job_position_id: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    application_date: Optional[str] = None
    status_id: int = 0
    status_name: Optional[str] = None
    status_reason: Optional[str] = None
    created_at: Optional[str] = None
    total_experience: Optional[float] = None
    expected_salary: Optional[float] = None
    notice_period: Optional[int] = None
    resume_file_path: Optional[str] = None
    candidate_skills: List[str] = Field(default_factory=list)
    required_skills: List[str] = Field(default_factory=list)
    matching_skills_count: int = 0


class ApplicationStatistics(ApiModel):
    total_applications: int = 0
    pending_applications: int = 0
    in_screening_applications: int = 0
    in_interview_applications: int = 0
    selected_applications: int = 0
    rejected_applications: int = 0


# === Interviews ===

class InterviewParticipant(ApiModel):
    id: Optional[str] = None
    user_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    participant_type: str = ""
    attendance_status_id: int = AttendanceStatus.PENDING
    attendance_status_name: Optional[str] = None
    has_submitted_feedback: bool = False


class InterviewFeedback(ApiModel):
    id: str
    interviewer_id: Optional[str] = None
    interviewer_name: Optional[str] = None
    overall_rating: Optional[float] = None
    technical_rating: Optional[float] = None
    communication_rating: Optional[float] = None
    comments: Optional[str] = None
    recommendation: Optional[str] = None
    submitted_at: Optional[str] = None


class InterviewRound(ApiModel):
    id: str
    application_id: str
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    job_title: Optional[str] = None
    round_number: int = 1
    round_type: str = ""
    round_name: Optional[str] = None
    scheduled_date: Optional[str] = None
    duration: Optional[int] = None
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    status_id: int = InterviewStatus.SCHEDULED
    status_name: Optional[str] = None
    created_at: Optional[str] = None
    participants: List[InterviewParticipant] = Field(default_factory=list)
    feedbacks: List[InterviewFeedback] = Field(default_factory=list)
    average_rating: Optional[float] = None
    total_feedbacks_received: int = 0
    total_participants: int = 0


class InterviewerSchedule(ApiModel):
    interview_round_id: str
    application_id: str
    candidate_name: Optional[str] = None
    job_title: Optional[str] = None
    round_number: int = 1
    round_type: Optional[str] = None
    scheduled_date: Optional[str] = None
    duration: Optional[int] = None
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    participant_type: Optional[str] = None
    has_submitted_feedback: bool = False


class InterviewStatistics(ApiModel):
    total_interviews: int = 0
    scheduled_interviews: int = 0
    completed_interviews: int = 0
    cancelled_interviews: int = 0
    pending_feedbacks: int = 0
    average_rating: float = 0
    interviews_by_type: Dict[str, int] = Field(default_factory=dict)


# === Screening ===

class SkillVerification(ApiModel):
    candidate_skill_id: str
    skill_name: Optional[str] = None
    claimed_years: Optional[float] = None
    verified_years: Optional[float] = None
    is_verified: bool = False
    comments: Optional[str] = None


class ScreeningReview(ApiModel):
    id: str
    application_id: str
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    job_title: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewer_name: Optional[str] = None
    review_date: Optional[str] = None
    status_id: int = 0
    status_name: Optional[str] = None
    rating: Optional[float] = None
    comments: Optional[str] = None
    is_recommended_for_interview: bool = False
    verified_skills: List[SkillVerification] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ScreeningCandidateSkill(ApiModel):
    candidate_skill_id: str
    skill_id: str
    skill_name: Optional[str] = None
    years_of_experience: Optional[float] = None
    is_verified: bool = False
    is_required: bool = False


class PendingScreening(ApiModel):
    application_id: str
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    job_title: Optional[str] = None
    application_date: Optional[str] = None
    total_experience: Optional[float] = None
    current_company: Optional[str] = None
    resume_file_path: Optional[str] = None
    matching_skills: int = 0
    required_skills: int = 0
    has_been_screened_before: bool = False
    candidate_skills: List[ScreeningCandidateSkill] = Field(default_factory=list)


class ScreeningStatistics(ApiModel):
    total_pending_screenings: int = 0
    total_completed_screenings: int = 0
    approved_count: int = 0
    rejected_count: int = 0
    average_rating: float = 0
    approval_rate: float = 0


# === Offers & documents ===

class Offer(ApiModel):
    id: str
    application_id: str
    candidate_name: str = ""
    job_title: str = ""
    offer_date: Optional[str] = None
    status_id: int = 0
    status_name: str = ""
    offered_salary: float = 0
    joining_date: Optional[str] = None
    expiry_date: Optional[str] = None
    offer_letter_path: Optional[str] = None
    created_by: Optional[str] = None
    created_by_name: Optional[str] = None
    created_at: Optional[str] = None


class CandidateDocument(ApiModel):
    id: str
    candidate_id: str
    candidate_name: str = ""
    document_type: str = ""
    document_name: str = ""
    file_path: str = ""
    file_size: Optional[int] = None
    content_type: Optional[str] = None
    status_id: int = 0
    status_name: str = ""
    verified_by: Optional[str] = None
    verified_by_name: Optional[str] = None
    verified_at: Optional[str] = None
    is_required: bool = False
    uploaded_at: Optional[str] = None


# === Employees & admin ===

class Employee(ApiModel):
    """An onboarded hire (candidate converted to employee)."""

    id: str
    candidate_id: Optional[str] = None
    employee_name: str = ""
    email: str = ""
    job_position_id: Optional[str] = None
    job_title: str = ""
    employee_code: str = ""
    joining_date: Optional[str] = None
    department: str = ""
    status_id: int = 0
    status_name: str = ""
    created_by: Optional[str] = None
    created_by_name: Optional[str] = None
    created_at: Optional[str] = None


class Role(ApiModel):
    id: int
    role_name: str
    is_active: bool = True


class StaffAccount(ApiModel):
    """An employee login account managed from the admin area."""

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: Optional[str] = None
    user_type: str = ""
    is_active: bool = True
    roles: List[Role] = Field(default_factory=list)
    created_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class AdminStats(ApiModel):
    total_employees: int = 0
    active_recruiters: int = 0
    active_interviewers: int = 0


# === Bulk upload ===

class BulkUploadResponse(ApiModel):
    message: str = ""
    bulk_upload_id: str
    note: str = ""


class BulkUploadStatus(ApiModel):
    id: str
    file_name: str = ""
    upload_type: str = ""
    total_records: int = 0
    successful_records: int = 0
    failed_records: int = 0
    status: str = "Processing"
    error_log: Optional[str] = None
    uploaded_at: Optional[str] = None
    uploaded_by_name: str = ""
    progress_percentage: float = 0


class BulkUploadHistory(ApiModel):
    page_number: int = 1
    page_size: int = 10
    data: List[BulkUploadStatus] = Field(default_factory=list)
