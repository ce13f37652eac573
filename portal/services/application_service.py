"""Job application endpoints."""

from typing import Any, List, Optional

from portal.models import Application, ApplicationStatistics
from portal.services.base import BaseService, parse_list, parse_model


class ApplicationService(BaseService):

    def apply(self, job_position_id: str) -> Any:
        return self.client.post("/Application/apply", json={"jobPositionId": job_position_id})

    def check_eligibility(self, job_position_id: str) -> Any:
        return self.client.get(f"/Application/check-eligibility/{job_position_id}")

    def get_application(self, application_id: str) -> Application:
        return parse_model(Application, self.client.get(f"/Application/{application_id}"))

    def get_all_applications(self) -> List[Application]:
        return parse_list(Application, self.client.get("/Application/all"))

    def get_my_applications(self) -> List[Application]:
        return parse_list(Application, self.client.get("/Application/my-applications"))

    def get_applications_by_job(self, job_position_id: str) -> List[Application]:
        return parse_list(Application, self.client.get(f"/Application/job/{job_position_id}"))

    def update_status(self, application_id: str, status_id: int, reason: Optional[str] = None) -> Any:
        body = {"applicationId": application_id, "statusId": status_id}
        if reason:
            body["statusReason"] = reason
        return self.client.put("/Application/update-status", json=body)

    def get_statistics(self, job_position_id: Optional[str] = None) -> ApplicationStatistics:
        params = {"jobPositionId": job_position_id} if job_position_id else None
        return parse_model(
            ApplicationStatistics, self.client.get("/Application/statistics", params=params)
        )
