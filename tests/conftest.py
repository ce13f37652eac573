"""
Pytest fixtures shared by unit and view tests.
"""

import os

import pytest

# Set test environment BEFORE any imports so settings never read real values
os.environ["ENVIRONMENT"] = "development"
os.environ["API_BASE_URL"] = "https://ats.test/api"

from helpers.backend import API_BASE_URL, FakeBackend, sign_in
from portal.app import create_app
from portal.config import PortalSettings


@pytest.fixture
def settings():
    return PortalSettings(
        api_base_url=API_BASE_URL,
        flask_secret_key="test-secret-key",
        environment="development",
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    """Flask app fixture with test configuration."""
    return create_app(overrides={"TESTING": True}, settings=settings)


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def backend(mocker):
    """Replace every backend HTTP call with a FakeBackend."""
    fake = FakeBackend()
    mocker.patch("portal.services.base.requests.request", side_effect=fake)
    return fake


@pytest.fixture
def candidate_client(client):
    sign_in(client, "Candidate")
    return client


@pytest.fixture
def employee_client(client):
    sign_in(client, "Employee", user_id="e1", first_name="Grace")
    return client


@pytest.fixture
def reviewer_client(client):
    sign_in(client, "Employee", roles=["Reviewer"], user_id="r1", first_name="Rita")
    return client


@pytest.fixture
def admin_client(client):
    sign_in(client, "Admin", user_id="a1", first_name="Alan")
    return client
