"""Onboarded employee endpoints. Results arrive wrapped in a {data} envelope."""

from typing import Any, Dict, List

from portal.models import Employee
from portal.services.base import BaseService, parse_list, parse_model, unwrap


class EmployeeService(BaseService):

    def onboard_candidate(self, dto: Dict[str, Any]) -> Employee:
        return parse_model(Employee, unwrap(self.client.post("/employee/onboard", json=dto)))

    def get_all_employees(self) -> List[Employee]:
        return parse_list(Employee, unwrap(self.client.get("/employee")))

    def get_employee(self, employee_id: str) -> Employee:
        return parse_model(Employee, unwrap(self.client.get(f"/employee/{employee_id}")))

    def get_employee_by_code(self, code: str) -> Employee:
        return parse_model(Employee, unwrap(self.client.get(f"/employee/code/{code}")))
