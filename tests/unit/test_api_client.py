"""
Unit tests for portal/services/base.py and the resource services built on it.

Tests:
- URL joining, bearer header, timeout and TLS settings on every call
- Error mapping: transport failures, non-2xx answers, undecodable bodies
- Envelope unwrapping and model parsing in services
- Bulk upload file checks
"""

import pytest
import requests

from helpers.backend import API_BASE_URL, make_response
from portal.models import ApplicationStatus, DocumentStatus, OfferStatus
from portal.services import (
    AdminService,
    ApiClient,
    ApiHTTPError,
    ApiResponseError,
    ApiTransportError,
    ApplicationService,
    CandidateService,
    DocumentService,
    EmployeeService,
    InterviewService,
    OfferService,
    ScreeningService,
    SkillService,
)
from portal.services.bulk_upload_service import MAX_UPLOAD_BYTES, validate_upload


@pytest.fixture
def mock_request(mocker):
    """Mock requests.request as used by ApiClient."""
    return mocker.patch("portal.services.base.requests.request")


@pytest.fixture
def client():
    return ApiClient(API_BASE_URL + "/", token="t1", timeout=12, verify_ssl=False)


# =============================================================================
# ApiClient
# =============================================================================


class TestApiClientRequests:

    def test_get_sends_bearer_token_and_settings(self, client, mock_request):
        """Should join the path onto the base URL and forward auth and transport settings."""
        mock_request.return_value = make_response(200, {"ok": True})

        result = client.get("/Skill", params={"q": "py"})

        assert result == {"ok": True}
        args, kwargs = mock_request.call_args
        assert args == ("GET", f"{API_BASE_URL}/Skill")
        assert kwargs["headers"]["Authorization"] == "Bearer t1"
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["params"] == {"q": "py"}
        assert kwargs["timeout"] == 12
        assert kwargs["verify"] is False

    def test_anonymous_client_sends_no_authorization(self, mock_request):
        mock_request.return_value = make_response(200, {})

        ApiClient(API_BASE_URL).post("/auth/login", json={"email": "a@b.com"})

        headers = mock_request.call_args[1]["headers"]
        assert "Authorization" not in headers

    def test_multipart_leaves_content_type_to_requests(self, client, mock_request):
        mock_request.return_value = make_response(200, {})

        client.post("/document/upload", files={"file": ("a.pdf", b"%PDF", "application/pdf")})

        assert "Content-Type" not in mock_request.call_args[1]["headers"]

    def test_empty_body_is_none(self, client, mock_request):
        mock_request.return_value = make_response(204)

        assert client.delete("/document/d1") is None

    def test_raw_returns_response(self, client, mock_request):
        response = make_response(200, b"PK\x03\x04", {"Content-Type": "application/octet-stream"})
        mock_request.return_value = response

        assert client.get("/bulkupload/template", raw=True) is response


class TestApiClientErrors:

    def test_http_error_carries_backend_message(self, client, mock_request):
        mock_request.return_value = make_response(400, {"message": "Email already registered"})

        with pytest.raises(ApiHTTPError) as exc_info:
            client.post("/auth/register", json={})

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Email already registered"
        assert exc_info.value.payload == {"message": "Email already registered"}

    def test_http_error_without_message(self, client, mock_request):
        mock_request.return_value = make_response(500, b"<html>oops</html>")

        with pytest.raises(ApiHTTPError) as exc_info:
            client.get("/Application/all")

        assert exc_info.value.message == "Request failed with status 500"

    def test_unauthorized_flag(self, client, mock_request):
        mock_request.return_value = make_response(401, {"title": "Unauthorized"})

        with pytest.raises(ApiHTTPError) as exc_info:
            client.get("/Application/all")

        assert exc_info.value.is_unauthorized
        assert not exc_info.value.is_not_found

    @pytest.mark.parametrize("exc, message", [
        (requests.exceptions.Timeout(), "Backend service timeout"),
        (requests.exceptions.ConnectionError(), "Cannot connect to backend service"),
    ])
    def test_transport_failures(self, client, mock_request, exc, message):
        mock_request.side_effect = exc

        with pytest.raises(ApiTransportError) as exc_info:
            client.get("/Skill")

        assert exc_info.value.message == message
        assert exc_info.value.status_code is None

    def test_non_json_success_body(self, client, mock_request):
        mock_request.return_value = make_response(200, b"not json")

        with pytest.raises(ApiResponseError):
            client.get("/Skill")


# =============================================================================
# Services
# =============================================================================


class TestServices:

    def test_is_profile_complete(self, client, mock_request):
        mock_request.return_value = make_response(200, {"isComplete": True})

        assert CandidateService(client).is_profile_complete("u1") is True
        assert mock_request.call_args[0][1] == f"{API_BASE_URL}/Candidate/u1/isComplete"

    @pytest.mark.parametrize("body", [{}, {"isComplete": "yes"}, [True]])
    def test_is_profile_complete_rejects_malformed_body(self, client, mock_request, body):
        mock_request.return_value = make_response(200, body)

        with pytest.raises(ApiResponseError):
            CandidateService(client).is_profile_complete("u1")

    def test_offers_are_unwrapped_from_envelope(self, client, mock_request):
        mock_request.return_value = make_response(200, {"data": [
            {"id": 7, "applicationId": "a1", "candidateName": "Ada", "statusName": "Pending", "offeredSalary": 900000},
        ]})

        offers = OfferService(client).get_my_offers()

        assert offers[0].id == "7"
        assert offers[0].candidate_name == "Ada"
        assert offers[0].offered_salary == 900000

    def test_missing_envelope_is_a_response_error(self, client, mock_request):
        mock_request.return_value = make_response(200, [])

        with pytest.raises(ApiResponseError):
            OfferService(client).get_my_offers()

    def test_offer_status_body(self, client, mock_request):
        mock_request.return_value = make_response(200, {"data": {"id": "o1", "applicationId": "a1"}})

        OfferService(client).update_offer_status("o1", OfferStatus.ACCEPTED)

        assert mock_request.call_args[1]["json"] == {"offerId": "o1", "statusId": 26}

    def test_verify_document_body(self, client, mock_request):
        mock_request.return_value = make_response(200, {"data": {"id": "d1", "candidateId": "c1"}})

        DocumentService(client).verify_document("d1", DocumentStatus.REJECTED, "Blurry scan")

        assert mock_request.call_args[1]["json"] == {"documentId": "d1", "statusId": 29, "comments": "Blurry scan"}

    def test_verify_document_always_sends_comments(self, client, mock_request):
        mock_request.return_value = make_response(200, {"data": {"id": "d1", "candidateId": "c1"}})

        DocumentService(client).verify_document("d1", DocumentStatus.VERIFIED)

        assert mock_request.call_args[1]["json"] == {"documentId": "d1", "statusId": 28, "comments": None}

    def test_update_application_status_body(self, client, mock_request):
        mock_request.return_value = make_response(200, {})

        ApplicationService(client).update_status("a1", int(ApplicationStatus.SELECTED))

        assert mock_request.call_args[1]["json"] == {"applicationId": "a1", "statusId": 7}

    def test_list_endpoint_rejects_object(self, client, mock_request):
        mock_request.return_value = make_response(200, {"id": "a1"})

        with pytest.raises(ApiResponseError):
            ApplicationService(client).get_all_applications()

    def test_admin_accepts_wrapped_and_bare_lists(self, client, mock_request):
        mock_request.side_effect = [
            make_response(200, {"data": [{"id": 1, "roleName": "Reviewer"}]}),
            make_response(200, [{"id": 2, "roleName": "Interviewer"}]),
        ]
        service = AdminService(client)

        assert service.get_roles()[0].role_name == "Reviewer"
        assert service.get_roles()[0].id == 2


class TestResourceEndpoints:
    """Lookups and updates that no page calls directly but the portal exposes as service API."""

    def test_skill_management(self, client, mock_request):
        mock_request.return_value = make_response(200, {"id": 3, "skillName": "Go"})
        service = SkillService(client)

        assert service.create_skill({"skillName": "Go"}).skill_name == "Go"
        service.update_skill("3", {"skillName": "Golang"})
        assert service.get_skill("3").id == "3"

        calls = [(c[0][0], c[0][1]) for c in mock_request.call_args_list]
        assert calls == [
            ("POST", f"{API_BASE_URL}/Skill"),
            ("PUT", f"{API_BASE_URL}/Skill/3"),
            ("GET", f"{API_BASE_URL}/Skill/3"),
        ]

    def test_skill_deactivate_and_delete(self, client, mock_request):
        mock_request.return_value = make_response(204)
        service = SkillService(client)

        service.deactivate_skill("3")
        service.delete_skill("3")

        methods = [c[0][0] for c in mock_request.call_args_list]
        assert methods == ["PATCH", "DELETE"]

    def test_employee_lookups_unwrap_envelope(self, client, mock_request):
        mock_request.return_value = make_response(200, {"data": {"id": "e1", "employeeCode": "EMP001"}})
        service = EmployeeService(client)

        assert service.get_employee("e1").id == "e1"
        assert service.get_employee_by_code("EMP001").id == "e1"
        assert mock_request.call_args[0][1] == f"{API_BASE_URL}/employee/code/EMP001"

    def test_screening_review_by_id(self, client, mock_request):
        mock_request.return_value = make_response(200, {"id": "sr1", "applicationId": "a1", "rating": 4})

        review = ScreeningService(client).get_review("sr1")

        assert review.id == "sr1"
        assert mock_request.call_args[0][1] == f"{API_BASE_URL}/Screening/sr1"

    def test_interview_update_bodies(self, client, mock_request):
        mock_request.return_value = make_response(200, {"message": "ok"})
        service = InterviewService(client)

        service.update_interview({"id": "i1", "statusId": 11})
        service.update_feedback({"id": "f1", "overallRating": 4})

        first, second = mock_request.call_args_list
        assert first[0] == ("PUT", f"{API_BASE_URL}/Interview/update")
        assert first[1]["json"] == {"id": "i1", "statusId": 11}
        assert second[0] == ("PUT", f"{API_BASE_URL}/Interview/update-feedback")


class TestValidateUpload:

    def test_accepts_excel(self):
        assert validate_upload("candidates.xlsx", 1024) == ""
        assert validate_upload("CANDIDATES.XLS", 1024) == ""

    @pytest.mark.parametrize("filename, size, message", [
        ("", 0, "Please choose a file to upload"),
        ("candidates.csv", 10, "Only .xlsx, .xls files are accepted"),
        ("candidates.xlsx", MAX_UPLOAD_BYTES + 1, "File is larger than 10 MB"),
        ("candidates.xlsx", 0, "File is empty"),
    ])
    def test_rejects(self, filename, size, message):
        assert validate_upload(filename, size) == message
