"""
Backend resource services.

Each service wraps one group of ATS REST endpoints and returns pydantic
models from portal.models.
"""

from portal.services.admin_service import AdminService
from portal.services.application_service import ApplicationService
from portal.services.auth_service import AuthService
from portal.services.base import (
    ApiClient,
    ApiError,
    ApiHTTPError,
    ApiResponseError,
    ApiTransportError,
)
from portal.services.bulk_upload_service import BulkUploadService
from portal.services.candidate_service import CandidateService
from portal.services.document_service import DocumentService
from portal.services.employee_service import EmployeeService
from portal.services.interview_service import InterviewService
from portal.services.job_position_service import JobPositionReviewerService, JobPositionService
from portal.services.offer_service import OfferService
from portal.services.screening_service import ScreeningService
from portal.services.skill_service import SkillService

__all__ = [
    "AdminService",
    "ApiClient",
    "ApiError",
    "ApiHTTPError",
    "ApiResponseError",
    "ApiTransportError",
    "ApplicationService",
    "AuthService",
    "BulkUploadService",
    "CandidateService",
    "DocumentService",
    "EmployeeService",
    "InterviewService",
    "JobPositionReviewerService",
    "JobPositionService",
    "OfferService",
    "ScreeningService",
    "SkillService",
]
