"""
Token authentication gate.

Resolves a credential from the request carriers and verifies it against the
signing secret, producing a Principal or raising a rejection.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, NoReturn, Optional, Sequence

from pydantic import BaseModel, Field

from attempt_service.core.config import Settings
from attempt_service.core.datetime_utils import from_epoch_seconds, utc_now
from attempt_service.core.exceptions import InvalidCredentialError
from .carriers import (
    DEFAULT_CARRIER_ORDER,
    CredentialCarrier,
    CredentialCarriers,
    extract_credential,
)
from .security import decode_token

logger = logging.getLogger(__name__)


class Principal(BaseModel):
    """Authenticated identity derived from a verified credential."""

    id: Any = Field(..., description="Identity value embedded in the credential")
    claims: Dict[str, Any] = Field(
        default_factory=dict, description="All claims carried by the credential"
    )


class TokenAuthenticationGate:
    """
    Extracts and verifies bearer credentials.

    The gate holds no mutable state: the secret, algorithm, carrier order and
    clock are fixed at construction. It never touches the attempt store.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        carrier_order: Sequence[CredentialCarrier] = DEFAULT_CARRIER_ORDER,
        identity_claim: str = "id",
        cookie_name: str = "token",
        clock: Callable[[], datetime] = utc_now,
    ):
        if not secret_key:
            raise ValueError("secret_key must be a non-empty string")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.carrier_order = tuple(carrier_order)
        self.identity_claim = identity_claim
        self.cookie_name = cookie_name
        self._clock = clock

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Callable[[], datetime] = utc_now
    ) -> "TokenAuthenticationGate":
        """Build a gate from application settings."""
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            carrier_order=[
                CredentialCarrier(name) for name in settings.AUTH_CREDENTIAL_CARRIERS
            ],
            identity_claim=settings.JWT_IDENTITY_CLAIM,
            cookie_name=settings.AUTH_COOKIE_NAME,
            clock=clock,
        )

    def authenticate(self, carriers: CredentialCarriers) -> Principal:
        """
        Extract a credential from the carriers and verify it.

        Args:
            carriers: Authorization header and cookie values from the request

        Returns:
            The authenticated Principal

        Raises:
            MissingCredentialError: If no carrier yields a credential
            InvalidCredentialError: If verification fails
        """
        token = extract_credential(carriers, self.carrier_order)
        return self.verify(token)

    def verify(self, token: str) -> Principal:
        """
        Verify a credential's signature, validity window and identity claim.

        Args:
            token: Encoded JWT

        Returns:
            Principal carrying the token's identity and claims

        Raises:
            InvalidCredentialError: If the token is malformed, wrongly signed,
                expired, not yet valid, or has no identity claim
        """
        payload = decode_token(token, self._secret_key, self.algorithm)
        if payload is None:
            self._reject("signature verification failed or token malformed")

        now = self._clock()
        expires_at = self._claim_time(payload, "exp")
        if expires_at is not None and expires_at <= now:
            self._reject("token expired")

        not_before = self._claim_time(payload, "nbf")
        if not_before is not None and not_before > now:
            self._reject("token not yet valid")

        identity = payload.get(self.identity_claim)
        if identity is None:
            self._reject(f"missing '{self.identity_claim}' claim")

        logger.debug("Authenticated principal", extra={"user_id": identity})
        return Principal(id=identity, claims=payload)

    def _claim_time(self, payload: Dict[str, Any], claim: str) -> Optional[datetime]:
        value = payload.get(claim)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            self._reject(f"'{claim}' claim is not a NumericDate")
        try:
            return from_epoch_seconds(value)
        except (OverflowError, OSError, ValueError):
            self._reject(f"'{claim}' claim is out of range")

    def _reject(self, reason: str) -> NoReturn:
        logger.warning(f"JWT verification failed: {reason}")
        raise InvalidCredentialError(reason)
