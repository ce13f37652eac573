"""
View tests for portal/routes/candidate.py

Every candidate request runs the profile-completion gate against
GET /Candidate/<id>/isComplete, so most tests register that route first.
"""

from io import BytesIO

import pytest

from helpers.backend import flashed
from portal.profile_completion import CHECK_FAILED_WARNING

INCOMPLETE = ("info", "Please complete your profile to access all features.")


@pytest.fixture
def complete(backend):
    backend.add("GET", "/Candidate/u1/isComplete", {"isComplete": True})
    return backend


@pytest.fixture
def incomplete(backend):
    backend.add("GET", "/Candidate/u1/isComplete", {"isComplete": False})
    return backend


# =============================================================================
# Gate and tabs
# =============================================================================


class TestDashboardGate:

    def test_signed_out_goes_to_login(self, client):
        response = client.get("/dashboard/jobs")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/login")

    @pytest.mark.parametrize("tab", ["jobs", "applications", "interviews", "documents", "offers"])
    def test_locked_tab_redirects_to_profile(self, candidate_client, incomplete, tab):
        response = candidate_client.get(f"/dashboard/{tab}")

        assert response.headers["Location"].endswith("/dashboard/profile")
        assert INCOMPLETE in flashed(candidate_client)

    def test_unknown_tab_for_complete_profile_goes_to_overview(self, candidate_client, complete):
        response = candidate_client.get("/dashboard/bogus")

        assert response.headers["Location"].endswith("/dashboard/dashboard")

    def test_gate_failure_warns_instead_of_info(self, candidate_client, backend):
        """A failed check locks the tabs and shows the warning toast only."""
        backend.add("GET", "/Candidate/u1/isComplete", {"message": "boom"}, status=500)

        response = candidate_client.get("/dashboard/jobs")

        assert response.headers["Location"].endswith("/dashboard/profile")
        messages = flashed(candidate_client)
        assert ("warning", CHECK_FAILED_WARNING) in messages
        assert INCOMPLETE not in messages

    def test_overview_stays_open_when_incomplete(self, candidate_client, incomplete):
        backend = incomplete
        backend.add("GET", "/Application/my-applications", [])

        response = candidate_client.get("/dashboard/dashboard")

        assert response.status_code == 200

    def test_profile_tab_renders_without_profile(self, candidate_client, incomplete):
        """A 404 for the profile means a new candidate, not an error."""
        backend = incomplete
        backend.add("GET", "/Skill", [{"id": "s1", "skillName": "Python"}])

        response = candidate_client.get("/dashboard/profile")

        assert response.status_code == 200
        assert b"Create Your Profile" in response.data
        assert b"Python" in response.data
        assert b"&#128274;" in response.data

    def test_jobs_tab_lists_and_filters(self, candidate_client, complete):
        complete.add("GET", "/JobPositions/active", [
            {"id": "j1", "title": "Backend Engineer", "department": "Engineering", "location": "Pune"},
            {"id": "j2", "title": "Designer", "department": "Design", "location": "Remote"},
        ])

        response = candidate_client.get("/dashboard/jobs?q=pune")

        assert response.status_code == 200
        assert b"Backend Engineer" in response.data
        assert b"Designer" not in response.data

    def test_backend_401_logs_the_user_out(self, candidate_client, complete):
        """Should end the session when the backend rejects the token."""
        complete.add("GET", "/Application/my-applications", {"title": "Unauthorized"}, status=401)

        response = candidate_client.get("/dashboard/applications")

        assert response.headers["Location"].endswith("/login")
        with candidate_client.session_transaction() as sess:
            assert "token" not in sess
            assert "user" not in sess
        assert ("error", "Your session has expired. Please log in again.") in flashed(candidate_client)


# =============================================================================
# Profile
# =============================================================================


class TestProfileActions:

    def test_save_unlocks_when_backend_reports_complete(self, candidate_client, complete):
        complete.add("PUT", "/Candidate/u1/profile", {"message": "ok"})

        response = candidate_client.post("/dashboard/profile", data={
            "current_location": "Pune", "expected_salary": "600000", "college_name": "COEP",
            "graduation_year": "2024", "degree": "B.Tech",
        })

        assert response.headers["Location"].endswith("/dashboard/dashboard")
        body = complete.requests_to("PUT", "/Candidate/u1/profile")[0]["json"]
        assert body["currentLocation"] == "Pune"
        assert body["expectedSalary"] == 600000
        assert ("success", "Profile updated successfully!") in flashed(candidate_client)

    def test_invalid_profile_is_not_sent(self, candidate_client, backend):
        response = candidate_client.post("/dashboard/profile", data={"total_experience": "-2"})

        assert response.headers["Location"].endswith("/dashboard/profile")
        assert not backend.called("PUT", "/Candidate/u1/profile")

    def test_overflowing_year_is_a_form_error(self, candidate_client, backend):
        response = candidate_client.post("/dashboard/profile", data={"graduation_year": "1e999"})

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/dashboard/profile")
        assert not backend.called("PUT", "/Candidate/u1/profile")

    def test_refresh_toasts(self, candidate_client, complete):
        response = candidate_client.post("/dashboard/profile/refresh")

        assert response.headers["Location"].endswith("/dashboard/dashboard")
        assert ("success", "Profile status refreshed") in flashed(candidate_client)

    def test_resume_must_be_a_document(self, candidate_client, backend):
        response = candidate_client.post(
            "/dashboard/profile/resume",
            data={"resume": (BytesIO(b"abc"), "photo.png")},
            content_type="multipart/form-data",
        )

        assert response.headers["Location"].endswith("/dashboard/profile")
        assert ("error", "Only PDF, DOC and DOCX files are allowed") in flashed(candidate_client)
        assert not backend.called("POST", "/Candidate/u1/upload-resume")


# =============================================================================
# Gated actions
# =============================================================================


class TestApply:

    def test_blocked_while_incomplete(self, candidate_client, incomplete):
        """Should refuse server-side even if the locked tab was bypassed."""
        response = candidate_client.post("/jobs/j1/apply")

        assert response.headers["Location"].endswith("/dashboard/profile")
        assert INCOMPLETE in flashed(candidate_client)
        assert not incomplete.called("POST", "/Application/apply")

    def test_eligible_candidate_applies(self, candidate_client, complete):
        complete.add("GET", "/Application/check-eligibility/j1", {"isEligible": True})
        complete.add("POST", "/Application/apply", {"message": "Application submitted"})

        response = candidate_client.post("/jobs/j1/apply")

        assert response.headers["Location"].endswith("/dashboard/applications")
        assert complete.requests_to("POST", "/Application/apply")[0]["json"] == {"jobPositionId": "j1"}
        assert ("success", "Application submitted") in flashed(candidate_client)

    def test_ineligible_candidate_sees_reason(self, candidate_client, complete):
        complete.add("GET", "/Application/check-eligibility/j1",
                     {"isEligible": False, "message": "Requires 3 years of experience"})

        response = candidate_client.post("/jobs/j1/apply")

        assert response.headers["Location"].endswith("/dashboard/jobs")
        assert ("error", "Requires 3 years of experience") in flashed(candidate_client)
        assert not complete.called("POST", "/Application/apply")

    def test_apply_failure_toasts(self, candidate_client, complete):
        complete.add("GET", "/Application/check-eligibility/j1", {"isEligible": True})
        complete.add("POST", "/Application/apply", {"message": "Request failed"}, status=500)

        response = candidate_client.post("/jobs/j1/apply")

        assert response.headers["Location"].endswith("/dashboard/jobs")
        assert ("error", "Failed to submit application. Please try again.") in flashed(candidate_client)


class TestOffers:

    def test_accept_sends_accepted_status(self, candidate_client, complete):
        complete.add("PUT", "/offer/status", {"data": {"id": "o1", "applicationId": "a1", "statusName": "Accepted"}})

        response = candidate_client.post("/offers/o1/respond", data={"decision": "accept"})

        assert response.headers["Location"].endswith("/dashboard/offers")
        assert complete.requests_to("PUT", "/offer/status")[0]["json"] == {"offerId": "o1", "statusId": 26}
        assert ("success", "Offer accepted!") in flashed(candidate_client)

    def test_reject_sends_rejected_status(self, candidate_client, complete):
        complete.add("PUT", "/offer/status", {"data": {"id": "o1", "applicationId": "a1"}})

        candidate_client.post("/offers/o1/respond", data={"decision": "reject"})

        assert complete.requests_to("PUT", "/offer/status")[0]["json"]["statusId"] == 27

    def test_unknown_decision(self, candidate_client, complete):
        candidate_client.post("/offers/o1/respond", data={"decision": "maybe"})

        assert not complete.called("PUT", "/offer/status")

    def test_offers_tab_shows_pending_actions(self, candidate_client, complete):
        complete.add("GET", "/offer/my-offers", {"data": [
            {"id": "o1", "applicationId": "a1", "jobTitle": "Backend Engineer",
             "statusName": "Pending", "offeredSalary": 1200000},
        ]})

        response = candidate_client.get("/dashboard/offers")

        assert response.status_code == 200
        assert b"1,200,000" in response.data
        assert b"/offers/o1/respond" in response.data
