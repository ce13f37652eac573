"""
Unit tests for portal/config.py
"""

import pytest
from pydantic import ValidationError

from portal.config import PortalSettings, validate_config_on_startup


class TestPortalSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("API_BASE_URL", raising=False)

        settings = PortalSettings(_env_file=None)

        assert settings.api_base_url == "https://localhost:7057/api"
        assert settings.request_timeout == 30
        assert settings.is_production is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("API_BASE_URL", "https://ats.example.com/api/")
        monkeypatch.setenv("API_VERIFY_SSL", "false")
        monkeypatch.setenv("REQUEST_TIMEOUT", "5")

        settings = PortalSettings()

        assert settings.api_base_url == "https://ats.example.com/api"
        assert settings.api_verify_ssl is False
        assert settings.request_timeout == 5

    @pytest.mark.parametrize("field, value", [
        ("api_base_url", "ats.example.com"),
        ("environment", "qa"),
        ("log_format", "xml"),
        ("request_timeout", 0),
    ])
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            PortalSettings(**{field: value})

    def test_environment_is_normalised(self):
        assert PortalSettings(environment="PRODUCTION", flask_secret_key="k").is_production


class TestSecretKey:

    def test_configured_key_wins(self):
        assert PortalSettings(flask_secret_key="abc").resolve_secret_key() == "abc"

    def test_development_generates_a_key(self):
        key = PortalSettings(flask_secret_key="", environment="development").resolve_secret_key()

        assert len(key) == 48

    def test_production_requires_a_key(self):
        with pytest.raises(RuntimeError):
            PortalSettings(flask_secret_key="", environment="production").resolve_secret_key()


class TestStartupValidation:

    def test_missing_production_secret_is_fatal(self):
        settings = PortalSettings(
            flask_secret_key="", environment="production", api_base_url="https://ats.example.com/api"
        )

        with pytest.raises(ValueError, match="FLASK_SECRET_KEY"):
            validate_config_on_startup(settings)

    def test_production_warnings_are_not_fatal(self):
        settings = PortalSettings(
            flask_secret_key="k", environment="production",
            api_base_url="https://localhost:7057/api", api_verify_ssl=False,
        )

        issues = settings.validate_production_config()

        assert len(issues) == 2
        validate_config_on_startup(settings)

    def test_development_has_no_issues(self):
        assert PortalSettings(environment="development").validate_production_config() == []
