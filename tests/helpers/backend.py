"""
Test doubles for the ATS backend and the signed-in session.

FakeBackend replaces requests.request in portal.services.base and answers
from registered routes, so every view test states exactly which endpoints
it expects.
"""

import base64
import json
from typing import Any, Dict, List, Optional, Tuple

import requests

from portal.models import UserRecord

API_BASE_URL = "https://ats.test/api"


def make_response(status_code: int = 200, body: Any = None, headers: Optional[Dict[str, str]] = None):
    """Build a real requests.Response carrying `body` (JSON-encoded unless bytes)."""
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        response._content = b""
    elif isinstance(body, bytes):
        response._content = body
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.headers.update(headers or {"Content-Type": "application/json"})
    response.url = API_BASE_URL
    return response


def make_jwt(claims: Dict[str, Any]) -> str:
    """Unsigned JWT carrying `claims`; the portal never verifies signatures."""
    def segment(data: Dict[str, Any]) -> str:
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    return f"{segment({'alg': 'HS256', 'typ': 'JWT'})}.{segment(claims)}.signature"


class FakeBackend:
    """
    Route table standing in for the ATS REST API.

    Unregistered routes answer 404 so an unexpected call shows up as a
    failed lookup rather than a hang.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def add(self, method: str, path: str, body: Any = None, status: int = 200,
            headers: Optional[Dict[str, str]] = None) -> None:
        """Register a response. `body` may be an exception instance to raise."""
        self.routes[(method.upper(), path)] = (status, body, headers)

    def __call__(self, method: str, url: str, **kwargs):
        path = url[len(API_BASE_URL):] if url.startswith(API_BASE_URL) else url
        self.calls.append((method, path, kwargs))
        if (method, path) not in self.routes:
            return make_response(404, {"message": f"No route for {method} {path}"})
        status, body, headers = self.routes[(method, path)]
        if isinstance(body, Exception):
            raise body
        return make_response(status, body, headers)

    def requests_to(self, method: str, path: str) -> List[Dict[str, Any]]:
        """Keyword arguments of every call made to method+path."""
        return [kwargs for m, p, kwargs in self.calls if m == method and p == path]

    def called(self, method: str, path: str) -> bool:
        return bool(self.requests_to(method, path))


def sign_in(client, user_type: str = "Candidate", roles=(), user_id: str = "u1",
            token: str = "t1", first_name: str = "Ada") -> UserRecord:
    """Write a signed-in session straight into the test client's cookie."""
    user = UserRecord(
        user_id=user_id,
        email=f"{first_name.lower()}@example.com",
        first_name=first_name,
        last_name="Lovelace",
        user_type=user_type,
        roles=list(roles),
    )
    with client.session_transaction() as sess:
        sess["token"] = token
        sess["user"] = user.model_dump_json(by_alias=True)
    return user


def flashed(client) -> List[Tuple[str, str]]:
    """(category, message) pairs waiting in the session."""
    with client.session_transaction() as sess:
        return [tuple(item) for item in sess.get("_flashes", [])]
