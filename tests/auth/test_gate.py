"""
Tests for the token authentication gate.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from jose import jwt

from attempt_service.core.auth import (
    CredentialCarrier,
    CredentialCarriers,
    Principal,
    TokenAuthenticationGate,
    create_access_token,
)
from attempt_service.core.config import settings
from attempt_service.core.exceptions import (
    InvalidCredentialError,
    MissingCredentialError,
)

SECRET = "gate-test-secret"
FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _sign(claims, secret=SECRET, algorithm="HS256"):
    return jwt.encode(claims, secret, algorithm=algorithm)


@pytest.fixture
def gate():
    return TokenAuthenticationGate(SECRET, clock=lambda: FIXED_NOW)


class TestConstruction:
    def test_empty_secret_is_rejected(self):
        with pytest.raises(ValueError):
            TokenAuthenticationGate("")

    def test_from_settings_uses_configured_carriers(self, monkeypatch):
        monkeypatch.setattr(settings, "AUTH_CREDENTIAL_CARRIERS", ["cookie"])
        monkeypatch.setattr(settings, "AUTH_COOKIE_NAME", "session")

        gate = TokenAuthenticationGate.from_settings(settings)

        assert gate.carrier_order == (CredentialCarrier.COOKIE,)
        assert gate.cookie_name == "session"
        assert gate.algorithm == settings.JWT_ALGORITHM


class TestAuthenticate:
    """Tests for TokenAuthenticationGate.authenticate."""

    def test_valid_header_token(self, gate):
        token = _sign({"id": 7, "exp": int((FIXED_NOW + timedelta(hours=1)).timestamp())})

        principal = gate.authenticate(CredentialCarriers(authorization=f"Bearer {token}"))

        assert isinstance(principal, Principal)
        assert principal.id == 7
        assert principal.claims["id"] == 7

    def test_valid_cookie_token(self, gate):
        token = _sign({"id": "user-9"})

        principal = gate.authenticate(CredentialCarriers(cookie=token))

        assert principal.id == "user-9"

    def test_no_carriers(self, gate):
        with pytest.raises(MissingCredentialError):
            gate.authenticate(CredentialCarriers())

    def test_bearer_prefix_without_token(self, gate):
        with pytest.raises(MissingCredentialError):
            gate.authenticate(CredentialCarriers(authorization="Bearer "))

    def test_invalid_header_token_does_not_fall_back_to_cookie(self, gate):
        valid = _sign({"id": 7})
        carriers = CredentialCarriers(authorization="Bearer garbage", cookie=valid)

        with pytest.raises(InvalidCredentialError):
            gate.authenticate(carriers)


class TestVerify:
    """Tests for TokenAuthenticationGate.verify."""

    def test_foreign_secret_is_rejected(self, gate):
        token = _sign({"id": 7}, secret="someone-elses-secret")

        with pytest.raises(InvalidCredentialError) as exc_info:
            gate.verify(token)
        assert "signature" in exc_info.value.reason

    def test_malformed_token_is_rejected(self, gate):
        with pytest.raises(InvalidCredentialError):
            gate.verify("not-a-jwt")

    def test_unexpected_algorithm_is_rejected(self, gate):
        token = _sign({"id": 7}, algorithm="HS512")

        with pytest.raises(InvalidCredentialError):
            gate.verify(token)

    def test_expired_token_is_rejected(self, gate):
        token = _sign({"id": 7, "exp": int((FIXED_NOW - timedelta(seconds=1)).timestamp())})

        with pytest.raises(InvalidCredentialError) as exc_info:
            gate.verify(token)
        assert exc_info.value.reason == "token expired"

    def test_expiry_equal_to_now_is_rejected(self, gate):
        token = _sign({"id": 7, "exp": int(FIXED_NOW.timestamp())})

        with pytest.raises(InvalidCredentialError):
            gate.verify(token)

    def test_expiry_uses_injected_clock(self):
        token = _sign({"id": 7, "exp": int(FIXED_NOW.timestamp())})
        earlier = TokenAuthenticationGate(
            SECRET, clock=lambda: FIXED_NOW - timedelta(minutes=5)
        )

        assert earlier.verify(token).id == 7

    def test_not_yet_valid_token_is_rejected(self, gate):
        token = _sign({"id": 7, "nbf": int((FIXED_NOW + timedelta(minutes=1)).timestamp())})

        with pytest.raises(InvalidCredentialError) as exc_info:
            gate.verify(token)
        assert exc_info.value.reason == "token not yet valid"

    def test_non_numeric_expiry_is_rejected(self, gate):
        token = _sign({"id": 7, "exp": "tomorrow"})

        with pytest.raises(InvalidCredentialError):
            gate.verify(token)

    @pytest.mark.parametrize("claim", ["exp", "nbf"])
    @pytest.mark.parametrize("value", [10**20, 1e300], ids=["huge-int", "huge-float"])
    def test_out_of_range_time_claim_is_rejected(self, gate, claim, value):
        token = _sign({"id": 7, claim: value})

        with pytest.raises(InvalidCredentialError) as exc_info:
            gate.verify(token)
        assert exc_info.value.reason == f"'{claim}' claim is out of range"

    def test_missing_identity_claim_is_rejected(self, gate):
        token = _sign({"user_id": 7})

        with pytest.raises(InvalidCredentialError) as exc_info:
            gate.verify(token)
        assert "'id'" in exc_info.value.reason

    def test_custom_identity_claim(self):
        gate = TokenAuthenticationGate(SECRET, identity_claim="sub")
        token = _sign({"sub": "42"})

        assert gate.verify(token).id == "42"

    def test_token_from_create_access_token(self):
        gate = TokenAuthenticationGate(settings.JWT_SECRET_KEY)
        token = create_access_token({"id": 11})

        principal = gate.verify(token)

        assert principal.id == 11
        assert "jti" in principal.claims

    def test_already_expired_token_from_negative_delta(self):
        gate = TokenAuthenticationGate(settings.JWT_SECRET_KEY)
        token = create_access_token({"id": 11}, expires_delta=timedelta(minutes=-1))

        with pytest.raises(InvalidCredentialError):
            gate.verify(token)

    def test_rejection_is_logged(self, gate):
        with patch("attempt_service.core.auth.gate.logger") as mock_logger:
            with pytest.raises(InvalidCredentialError):
                gate.verify("not-a-jwt")

        mock_logger.warning.assert_called_once()
        assert "JWT verification failed" in mock_logger.warning.call_args[0][0]
