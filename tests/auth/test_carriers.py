"""
Tests for credential extraction from request carriers.
"""
import pytest

from attempt_service.core.auth.carriers import (
    CredentialCarrier,
    CredentialCarriers,
    extract_credential,
    token_from_authorization,
)
from attempt_service.core.exceptions import MissingCredentialError


class TestTokenFromAuthorization:
    """Tests for parsing the Authorization header."""

    def test_bearer_prefix_is_stripped(self):
        assert token_from_authorization("Bearer abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize(
        "value",
        [None, "", "Bearer ", "bearer abc", "Basic abc", "abc.def.ghi"],
        ids=["none", "empty", "prefix-only", "lowercase", "basic", "raw"],
    )
    def test_no_credential(self, value):
        assert token_from_authorization(value) is None

    def test_remainder_is_taken_verbatim(self):
        assert token_from_authorization("Bearer    tok") == "   tok"
        assert token_from_authorization("Bearer tok ") == "tok "


class TestExtractCredential:
    """Tests for carrier precedence."""

    def test_header_only(self):
        carriers = CredentialCarriers(authorization="Bearer header-token")
        assert extract_credential(carriers) == "header-token"

    def test_cookie_only(self):
        carriers = CredentialCarriers(cookie="cookie-token")
        assert extract_credential(carriers) == "cookie-token"

    def test_header_wins_by_default(self):
        carriers = CredentialCarriers(
            authorization="Bearer header-token", cookie="cookie-token"
        )
        assert extract_credential(carriers) == "header-token"

    def test_configured_order_is_respected(self):
        carriers = CredentialCarriers(
            authorization="Bearer header-token", cookie="cookie-token"
        )
        order = [CredentialCarrier.COOKIE, CredentialCarrier.HEADER]
        assert extract_credential(carriers, order) == "cookie-token"

    def test_falls_through_to_next_carrier(self):
        """A header without the Bearer prefix does not block the cookie."""
        carriers = CredentialCarriers(authorization="Token abc", cookie="cookie-token")
        assert extract_credential(carriers) == "cookie-token"

    def test_disabled_carrier_is_ignored(self):
        carriers = CredentialCarriers(cookie="cookie-token")
        with pytest.raises(MissingCredentialError) as exc_info:
            extract_credential(carriers, [CredentialCarrier.HEADER])
        assert exc_info.value.carriers == ["header"]

    def test_no_carriers_raises_missing_credential(self):
        with pytest.raises(MissingCredentialError) as exc_info:
            extract_credential(CredentialCarriers())
        assert exc_info.value.carriers == ["header", "cookie"]

    def test_empty_cookie_is_absent(self):
        with pytest.raises(MissingCredentialError):
            extract_credential(CredentialCarriers(authorization="", cookie=""))
