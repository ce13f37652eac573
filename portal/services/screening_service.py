"""Screening review endpoints used by reviewers."""

from typing import Any, Dict, List, Optional

from portal.models import PendingScreening, ScreeningReview, ScreeningStatistics
from portal.services.base import BaseService, parse_list, parse_model


class ScreeningService(BaseService):

    def create_review(self, dto: Dict[str, Any]) -> Any:
        return self.client.post("/Screening/create", json=dto)

    def update_review(self, dto: Dict[str, Any]) -> Any:
        return self.client.put("/Screening/update", json=dto)

    def get_review(self, review_id: str) -> ScreeningReview:
        return parse_model(ScreeningReview, self.client.get(f"/Screening/{review_id}"))

    def get_pending(self) -> List[PendingScreening]:
        return parse_list(PendingScreening, self.client.get("/Screening/pending"))

    def get_by_application(self, application_id: str) -> List[ScreeningReview]:
        return parse_list(ScreeningReview, self.client.get(f"/Screening/application/{application_id}"))

    def get_statistics(self, reviewer_id: Optional[str] = None) -> ScreeningStatistics:
        params = {"reviewerId": reviewer_id} if reviewer_id else None
        return parse_model(ScreeningStatistics, self.client.get("/Screening/statistics", params=params))
