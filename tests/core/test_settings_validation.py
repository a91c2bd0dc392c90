"""
Tests for Settings validation.
"""
import pytest
from pydantic import ValidationError

from attempt_service.core.config import Settings


def _settings(**overrides) -> Settings:
    values = {"JWT_SECRET_KEY": "settings-test-secret"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestRequiredSecret:
    def test_missing_secret_fails(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None)
        assert "JWT_SECRET_KEY" in str(exc_info.value)

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET_KEY", "from-env")

        assert Settings(_env_file=None).JWT_SECRET_KEY == "from-env"


class TestDefaults:
    def test_lifecycle_guards_disabled_by_default(self):
        s = _settings()

        assert s.ENFORCE_SINGLE_ACTIVE_ATTEMPT is False
        assert s.ENFORCE_ATTEMPT_OWNERSHIP is False

    def test_header_carrier_first_by_default(self):
        assert _settings().AUTH_CREDENTIAL_CARRIERS == ["header", "cookie"]

    def test_api_prefix(self):
        assert _settings().API_V1_PREFIX == "/v1"


class TestCredentialCarriers:
    def test_single_carrier(self):
        assert _settings(AUTH_CREDENTIAL_CARRIERS=["cookie"]).AUTH_CREDENTIAL_CARRIERS == [
            "cookie"
        ]

    def test_empty_list_rejected(self):
        with pytest.raises(ValidationError, match="at least one carrier"):
            _settings(AUTH_CREDENTIAL_CARRIERS=[])

    def test_duplicates_rejected(self):
        with pytest.raises(ValidationError, match="must not repeat"):
            _settings(AUTH_CREDENTIAL_CARRIERS=["header", "header"])

    def test_unknown_carrier_rejected(self):
        with pytest.raises(ValidationError):
            _settings(AUTH_CREDENTIAL_CARRIERS=["query"])

    def test_parsed_from_json_environment_value(self, monkeypatch):
        monkeypatch.setenv("AUTH_CREDENTIAL_CARRIERS", '["cookie", "header"]')

        assert _settings().AUTH_CREDENTIAL_CARRIERS == ["cookie", "header"]


class TestCorsOrigins:
    def test_trailing_slash_stripped(self):
        s = _settings(CORS_ORIGINS=["https://app.example.com/", "http://localhost:3000"])

        assert s.CORS_ORIGINS == ["https://app.example.com", "http://localhost:3000"]


class TestSentrySampleRate:
    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_out_of_range_rejected(self, rate):
        with pytest.raises(ValidationError):
            _settings(SENTRY_TRACES_SAMPLE_RATE=rate)

    def test_bounds_accepted(self):
        assert _settings(SENTRY_TRACES_SAMPLE_RATE=0.0).SENTRY_TRACES_SAMPLE_RATE == 0.0
        assert _settings(SENTRY_TRACES_SAMPLE_RATE=1.0).SENTRY_TRACES_SAMPLE_RATE == 1.0
