"""Interview round and feedback endpoints."""

from typing import Any, Dict, List

from portal.models import InterviewFeedback, InterviewerSchedule, InterviewRound, InterviewStatistics
from portal.services.base import BaseService, parse_list, parse_model


class InterviewService(BaseService):

    def schedule_interview(self, dto: Dict[str, Any]) -> Any:
        return self.client.post("/Interview/schedule", json=dto)

    def get_interview(self, interview_id: str) -> InterviewRound:
        return parse_model(InterviewRound, self.client.get(f"/Interview/{interview_id}"))

    def get_all_interviews(self) -> List[InterviewRound]:
        return parse_list(InterviewRound, self.client.get("/Interview/all"))

    def get_interviews_by_application(self, application_id: str) -> List[InterviewRound]:
        return parse_list(InterviewRound, self.client.get(f"/Interview/application/{application_id}"))

    def get_my_schedule(self) -> List[InterviewerSchedule]:
        return parse_list(InterviewerSchedule, self.client.get("/Interview/my-schedule"))

    def update_interview(self, dto: Dict[str, Any]) -> Any:
        return self.client.put("/Interview/update", json=dto)

    def add_participant(self, interview_id: str, participant: Dict[str, Any]) -> Any:
        return self.client.post(f"/Interview/{interview_id}/add-participant", json=participant)

    def delete_interview(self, interview_id: str) -> Any:
        return self.client.delete(f"/Interview/{interview_id}")

    def submit_feedback(self, dto: Dict[str, Any]) -> Any:
        return self.client.post("/Interview/submit-feedback", json=dto)

    def update_feedback(self, dto: Dict[str, Any]) -> Any:
        return self.client.put("/Interview/update-feedback", json=dto)

    def get_feedbacks(self, interview_id: str) -> List[InterviewFeedback]:
        return parse_list(InterviewFeedback, self.client.get(f"/Interview/{interview_id}/feedbacks"))

    def get_statistics(self) -> InterviewStatistics:
        return parse_model(InterviewStatistics, self.client.get("/Interview/statistics"))
