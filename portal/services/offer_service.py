"""Offer endpoints. Results arrive wrapped in a {data} envelope."""

from typing import Any, Dict, List

from portal.models import Offer, OfferStatus
from portal.services.base import BaseService, parse_list, parse_model, unwrap


class OfferService(BaseService):

    def create_offer(self, dto: Dict[str, Any]) -> Offer:
        return parse_model(Offer, unwrap(self.client.post("/offer", json=dto)))

    def update_offer_status(self, offer_id: str, status: OfferStatus) -> Offer:
        payload = self.client.put("/offer/status", json={"offerId": offer_id, "statusId": int(status)})
        return parse_model(Offer, unwrap(payload))

    def get_all_offers(self) -> List[Offer]:
        return parse_list(Offer, unwrap(self.client.get("/offer")))

    def get_pending_offers(self) -> List[Offer]:
        return parse_list(Offer, unwrap(self.client.get("/offer/pending")))

    def get_my_offers(self) -> List[Offer]:
        return parse_list(Offer, unwrap(self.client.get("/offer/my-offers")))

    def get_offer(self, offer_id: str) -> Offer:
        return parse_model(Offer, unwrap(self.client.get(f"/offer/{offer_id}")))

    def get_offer_by_application(self, application_id: str) -> Offer:
        return parse_model(Offer, unwrap(self.client.get(f"/offer/application/{application_id}")))
