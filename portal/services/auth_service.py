"""Authentication endpoints (no bearer token required)."""

from typing import Any, Dict, Optional

from portal.models import LoginResponse
from portal.services.base import BaseService, parse_model


class AuthService(BaseService):

    def login(self, email: str, password: str) -> LoginResponse:
        payload = self.client.post("/auth/login", json={"email": email, "password": password})
        return parse_model(LoginResponse, payload)

    def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        phone_number: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a candidate account. Returns the backend's message body."""
        body = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        }
        if phone_number:
            body["phoneNumber"] = phone_number
        return self.client.post("/auth/register", json=body) or {}
