"""
Credential extraction from request carriers.

A carrier is a transport location a credential may arrive in. Two are
supported:

- ``header``: the ``Authorization`` header, credential follows ``Bearer ``
- ``cookie``: the session cookie, credential is the raw value

Carriers are searched in a fixed, configured order and the first non-empty
credential wins.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from attempt_service.core.exceptions import MissingCredentialError

BEARER_PREFIX = "Bearer "


class CredentialCarrier(str, Enum):
    """Transport locations a credential can be read from."""

    HEADER = "header"
    COOKIE = "cookie"


DEFAULT_CARRIER_ORDER = (CredentialCarrier.HEADER, CredentialCarrier.COOKIE)


@dataclass(frozen=True)
class CredentialCarriers:
    """Raw carrier values supplied by a request."""

    authorization: Optional[str] = None
    cookie: Optional[str] = None


def token_from_authorization(value: Optional[str]) -> Optional[str]:
    """Return the credential following a literal 'Bearer ' prefix, if any."""
    if not value or not value.startswith(BEARER_PREFIX):
        return None
    return value[len(BEARER_PREFIX) :] or None


def token_from_cookie(value: Optional[str]) -> Optional[str]:
    """Return the raw cookie value, if non-empty."""
    return value or None


def extract_credential(
    carriers: CredentialCarriers,
    order: Sequence[CredentialCarrier] = DEFAULT_CARRIER_ORDER,
) -> str:
    """
    Search the carriers in order and return the first credential found.

    Args:
        carriers: Values taken from the request
        order: Carrier precedence, highest first

    Returns:
        The credential string

    Raises:
        MissingCredentialError: If no carrier yields a non-empty value
    """
    for carrier in order:
        if carrier == CredentialCarrier.HEADER:
            token = token_from_authorization(carriers.authorization)
        else:
            token = token_from_cookie(carriers.cookie)
        if token:
            return token

    raise MissingCredentialError([carrier.value for carrier in order])
