"""Candidate profile endpoints."""

from typing import Any, BinaryIO, Dict

from portal.models import CandidateProfile
from portal.services.base import ApiResponseError, BaseService, parse_model


class CandidateService(BaseService):

    def is_profile_complete(self, user_id: str) -> bool:
        """
        Ask the backend whether the candidate's required fields are filled.

        Raises:
            ApiHTTPError: 404 when no profile row exists yet
            ApiResponseError: when the body lacks a boolean isComplete
        """
        payload = self.client.get(f"/Candidate/{user_id}/isComplete")
        if not isinstance(payload, dict) or not isinstance(payload.get("isComplete"), bool):
            raise ApiResponseError("isComplete response is missing a boolean 'isComplete'")
        return payload["isComplete"]

    def get_profile(self, user_id: str) -> CandidateProfile:
        return parse_model(CandidateProfile, self.client.get(f"/Candidate/{user_id}"))

    def get_my_profile(self) -> CandidateProfile:
        """Profile of the token's owner; carries the candidate id used by documents."""
        return parse_model(CandidateProfile, self.client.get("/Candidate/profile"))

    def update_profile(self, user_id: str, update: Dict[str, Any]) -> Any:
        return self.client.put(f"/Candidate/{user_id}/profile", json=update)

    def upload_resume(self, user_id: str, filename: str, stream: BinaryIO, content_type: str) -> Any:
        files = {"file": (filename, stream, content_type)}
        return self.client.post(f"/Candidate/{user_id}/upload-resume", files=files)
