"""
Profile-completion gate for candidates.

Candidates may browse jobs, apply, and see interviews, documents and offers
only once the backend reports their profile complete. The check never
raises: every outcome resolves to a ProfileCompletionStatus, with a toast
for failures other than "no profile yet" (404).
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, NamedTuple, Optional, Union

from portal.models import CandidateProfile
from portal.notifications import Notifier, toast_success, toast_warning
from portal.services.base import ApiError, ApiHTTPError
from portal.services.candidate_service import CandidateService

logger = logging.getLogger(__name__)

CHECK_FAILED_WARNING = "Failed to verify profile status. Please complete your profile."


@dataclass(frozen=True)
class ProfileCompletionStatus:
    """is_complete is None until a check has run."""

    is_complete: Optional[bool] = None
    warning: Optional[str] = None

    @property
    def unlocked(self) -> bool:
        return bool(self.is_complete)


NOT_CHECKED = ProfileCompletionStatus()


class ProfileCompletionGate:
    """Runs the completion check against the backend."""

    def __init__(
        self,
        candidate_service: CandidateService,
        notify: Notifier = toast_warning,
    ):
        self.candidate_service = candidate_service
        self.notify = notify

    def check_completion(self, user_id: Optional[str]) -> ProfileCompletionStatus:
        if not user_id:
            return NOT_CHECKED

        try:
            return ProfileCompletionStatus(self.candidate_service.is_profile_complete(user_id))
        except ApiHTTPError as e:
            if e.is_not_found:
                logger.info(f"[user:{user_id[:8]}] no candidate profile yet")
                return ProfileCompletionStatus(False)
            error = e
        except ApiError as e:
            error = e

        logger.warning(f"[user:{user_id[:8]}] profile completion check failed: {error}")
        self.notify(CHECK_FAILED_WARNING)
        return ProfileCompletionStatus(False, CHECK_FAILED_WARNING)

    def refresh(self, user_id: Optional[str]) -> ProfileCompletionStatus:
        """User-triggered re-check."""
        status = self.check_completion(user_id)
        if status.warning is None and status.is_complete is not None:
            toast_success("Profile status refreshed")
        return status


# ============================================================================
# Required-field checklist
# ============================================================================

class RequiredField(NamedTuple):
    key: str
    label: str


REQUIRED_FOR_ALL = [
    RequiredField("current_location", "Current Location"),
    RequiredField("expected_salary", "Expected Salary"),
    RequiredField("college_name", "College Name"),
    RequiredField("graduation_year", "Graduation Year"),
    RequiredField("degree", "Degree"),
]

REQUIRED_FOR_EXPERIENCED = [
    RequiredField("total_experience", "Total Experience"),
    RequiredField("current_company", "Current Company"),
    RequiredField("current_salary", "Current Salary"),
    RequiredField("notice_period", "Notice Period"),
]


def _is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (int, float)):
        return value <= 0
    return False


def missing_profile_fields(profile: Union[CandidateProfile, Mapping[str, Any], None]) -> List[RequiredField]:
    """
    Required fields still empty on a profile.

    Freshers (no total experience) are only held to REQUIRED_FOR_ALL.
    """
    if profile is None:
        data: Mapping[str, Any] = {}
    elif isinstance(profile, CandidateProfile):
        data = profile.model_dump()
    else:
        data = profile

    experience = data.get("total_experience")
    is_fresher = _is_blank(experience)
    required = REQUIRED_FOR_ALL if is_fresher else REQUIRED_FOR_ALL + REQUIRED_FOR_EXPERIENCED
    return [field for field in required if _is_blank(data.get(field.key))]


# ============================================================================
# Candidate tabs
# ============================================================================

class CandidateTab(NamedTuple):
    id: str
    label: str
    requires_complete_profile: bool


CANDIDATE_TABS = [
    CandidateTab("dashboard", "Dashboard", False),
    CandidateTab("jobs", "Jobs", True),
    CandidateTab("applications", "Applications", True),
    CandidateTab("interviews", "Interviews", True),
    CandidateTab("documents", "Documents", True),
    CandidateTab("offers", "Offers", True),
    CandidateTab("profile", "Profile", False),
]

_TABS_BY_ID = {tab.id: tab for tab in CANDIDATE_TABS}
DEFAULT_TAB = "dashboard"
PROFILE_TAB = "profile"


def is_tab_locked(tab_id: str, is_complete: Optional[bool]) -> bool:
    tab = _TABS_BY_ID.get(tab_id)
    return tab is not None and tab.requires_complete_profile and not is_complete


def resolve_active_tab(requested: Optional[str], is_complete: Optional[bool]) -> str:
    """
    Tab to show for a request.

    An incomplete profile lands on the profile tab unless the visitor
    explicitly asked for another unlocked tab.
    """
    if requested not in _TABS_BY_ID:
        requested = None
    if not is_complete:
        if requested is None or is_tab_locked(requested, is_complete):
            return PROFILE_TAB
        return requested
    return requested or DEFAULT_TAB
