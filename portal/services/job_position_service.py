"""Job position endpoints and reviewer assignments."""

from typing import Any, Dict, List

from portal.models import JobListing, JobPosition, JobPositionReviewer
from portal.services.base import BaseService, parse_list, parse_model


class JobPositionService(BaseService):

    def create_job_position(self, dto: Dict[str, Any]) -> JobPosition:
        return parse_model(JobPosition, self.client.post("/JobPositions", json=dto))

    def get_job_position(self, job_id: str) -> JobPosition:
        return parse_model(JobPosition, self.client.get(f"/JobPositions/{job_id}"))

    def get_all_job_positions(self) -> List[JobPosition]:
        return parse_list(JobPosition, self.client.get("/JobPositions"))

    def get_active_job_listings(self) -> List[JobListing]:
        return parse_list(JobListing, self.client.get("/JobPositions/active"))

    def update_job_position(self, job_id: str, dto: Dict[str, Any]) -> JobPosition:
        body = dict(dto, id=job_id)
        return parse_model(JobPosition, self.client.put(f"/JobPositions/{job_id}", json=body))

    def delete_job_position(self, job_id: str) -> None:
        self.client.delete(f"/JobPositions/{job_id}")


class JobPositionReviewerService(BaseService):

    def assign_reviewer(self, job_position_id: str, reviewer_id: str) -> Any:
        return self.client.post(
            "/JobPositionReviewer/assign",
            json={"jobPositionId": job_position_id, "reviewerId": reviewer_id},
        )

    def bulk_assign_reviewers(self, job_position_id: str, reviewer_ids: List[str]) -> Any:
        return self.client.post(
            "/JobPositionReviewer/bulk-assign",
            json={"jobPositionId": job_position_id, "reviewerIds": reviewer_ids},
        )

    def remove_reviewer(self, assignment_id: str) -> Any:
        return self.client.delete(f"/JobPositionReviewer/remove/{assignment_id}")

    def get_reviewers_for_job(self, job_position_id: str) -> List[JobPositionReviewer]:
        return parse_list(
            JobPositionReviewer, self.client.get(f"/JobPositionReviewer/job/{job_position_id}")
        )

    def get_my_assigned_jobs(self) -> List[JobPositionReviewer]:
        return parse_list(JobPositionReviewer, self.client.get("/JobPositionReviewer/my-assignments"))
