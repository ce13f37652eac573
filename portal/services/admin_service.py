"""Admin endpoints for staff accounts and roles."""

from typing import Any, Dict, List

from portal.models import AdminStats, Role, StaffAccount
from portal.services.base import BaseService, parse_list, parse_model


def _data_or_body(payload: Any) -> Any:
    # The admin controller wraps most results in {data}, but not all of them.
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class AdminService(BaseService):

    def get_stats(self) -> AdminStats:
        payload = _data_or_body(self.client.get("/admin/stats"))
        return parse_model(AdminStats, payload or {})

    def get_staff_accounts(self) -> List[StaffAccount]:
        return parse_list(StaffAccount, _data_or_body(self.client.get("/admin/employees")))

    def create_staff_account(self, dto: Dict[str, Any]) -> Any:
        return self.client.post("/admin/employees", json=dto)

    def set_staff_active(self, account_id: str, is_active: bool) -> Any:
        return self.client.patch(f"/admin/employees/{account_id}/status", json={"isActive": is_active})

    def get_roles(self) -> List[Role]:
        return parse_list(Role, _data_or_body(self.client.get("/role")))
