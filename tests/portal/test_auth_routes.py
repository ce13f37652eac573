"""
View tests for the public pages in portal/routes/auth.py

Backend calls go through the FakeBackend fixture; session state is read back
from the test client's cookie.
"""

import json

import requests

from helpers.backend import flashed, sign_in


LOGIN_BODY = {
    "token": "t1",
    "userId": "u1",
    "email": "a@b.com",
    "firstName": "Ada",
    "lastName": "Lovelace",
    "userType": "Candidate",
}


def _session(client):
    with client.session_transaction() as sess:
        return dict(sess)


# =============================================================================
# Login
# =============================================================================


class TestLogin:

    def test_get_renders_form(self, client):
        response = client.get("/login")

        assert response.status_code == 200
        assert b"Sign in" in response.data

    def test_candidate_login_lands_on_profile_when_incomplete(self, client, backend):
        """Should store the session, send a candidate to /dashboard, then on to the profile tab."""
        backend.add("POST", "/auth/login", LOGIN_BODY)
        backend.add("GET", "/Candidate/u1/isComplete", {"isComplete": False})

        response = client.post("/login", data={"email": "a@b.com", "password": "x"})

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/dashboard")
        stored = _session(client)
        assert stored["token"] == "t1"
        assert json.loads(stored["user"])["userId"] == "u1"
        assert ("success", "Welcome back, Ada!") in flashed(client)
        assert backend.requests_to("POST", "/auth/login")[0]["json"] == {"email": "a@b.com", "password": "x"}

        follow = client.get("/dashboard")

        assert follow.status_code == 302
        assert follow.headers["Location"].endswith("/dashboard/profile")

    def test_employee_login_goes_to_employee_dashboard(self, client, backend):
        backend.add("POST", "/auth/login", dict(LOGIN_BODY, userType="Employee"))

        response = client.post("/login", data={"email": "a@b.com", "password": "x"})

        assert response.headers["Location"].endswith("/employee/dashboard")

    def test_invalid_form_is_400(self, client, backend):
        response = client.post("/login", data={"email": "", "password": ""})

        assert response.status_code == 400
        assert b"Email is required" in response.data
        assert not backend.called("POST", "/auth/login")

    def test_rejected_credentials_show_backend_message(self, client, backend):
        backend.add("POST", "/auth/login", {"message": "Invalid email or password"}, status=401)

        response = client.post("/login", data={"email": "a@b.com", "password": "wrong"})

        assert response.status_code == 401
        assert b"Invalid email or password" in response.data
        assert "token" not in _session(client)

    def test_backend_down_is_503(self, client, backend):
        backend.add("POST", "/auth/login", requests.exceptions.ConnectionError())

        response = client.post("/login", data={"email": "a@b.com", "password": "x"})

        assert response.status_code == 503
        assert b"Network error" in response.data

    def test_login_body_without_token_is_an_error(self, client, backend):
        """A 200 that does not parse as a login response should not sign anyone in."""
        backend.add("POST", "/auth/login", {"userId": "u1"})

        response = client.post("/login", data={"email": "a@b.com", "password": "x"})

        assert response.status_code == 502
        assert "token" not in _session(client)

    def test_signed_in_visitor_is_redirected(self, candidate_client):
        response = candidate_client.get("/login")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/dashboard")


# =============================================================================
# Register / logout
# =============================================================================


class TestRegister:

    FORM = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone_number": "",
        "password": "secret1",
        "confirm_password": "secret1",
    }

    def test_success_redirects_to_login(self, client, backend):
        backend.add("POST", "/auth/register", {"message": "Registration successful"})

        response = client.post("/register", data=self.FORM)

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/login")
        assert ("success", "Registration successful") in flashed(client)
        body = backend.requests_to("POST", "/auth/register")[0]["json"]
        assert body == {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "password": "secret1"}

    def test_password_mismatch_never_calls_backend(self, client, backend):
        response = client.post("/register", data=dict(self.FORM, confirm_password="other"))

        assert response.status_code == 400
        assert b"Passwords do not match" in response.data
        assert not backend.calls

    def test_duplicate_email(self, client, backend):
        backend.add("POST", "/auth/register", {"message": "Email already registered"}, status=409)

        response = client.post("/register", data=self.FORM)

        assert response.status_code == 400
        assert b"Email already registered" in response.data


class TestLogout:

    def test_clears_session(self, candidate_client):
        response = candidate_client.post("/logout")

        assert response.headers["Location"].endswith("/login")
        stored = _session(candidate_client)
        assert "token" not in stored
        assert "user" not in stored

    def test_protected_page_after_logout(self, candidate_client):
        candidate_client.post("/logout")

        response = candidate_client.get("/dashboard")

        assert response.headers["Location"].endswith("/login")


# =============================================================================
# Misc pages
# =============================================================================


class TestPublicPages:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"

    def test_access_denied_is_403(self, client):
        assert client.get("/access-denied").status_code == 403

    def test_home_links_signed_in_user_to_dashboard(self, client):
        sign_in(client, "Employee", user_id="e1")

        response = client.get("/")

        assert response.status_code == 200
        assert b"/employee/dashboard" in response.data

    def test_corrupt_session_is_treated_as_signed_out(self, client):
        """A token without a parseable user should not authenticate."""
        with client.session_transaction() as sess:
            sess["token"] = "t1"
            sess["user"] = "{broken"

        response = client.get("/dashboard")

        assert response.headers["Location"].endswith("/login")
        assert "token" not in _session(client)
