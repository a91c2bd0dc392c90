"""
FastAPI authentication dependencies.
"""
from fastapi import Request

from attempt_service.core.config import settings
from attempt_service.core.error_responses import (
    ErrorMessages,
    raise_forbidden,
    raise_unauthorized,
)
from attempt_service.core.exceptions import (
    InvalidCredentialError,
    MissingCredentialError,
)
from .carriers import CredentialCarriers
from .gate import Principal, TokenAuthenticationGate


def get_token_gate(request: Request) -> TokenAuthenticationGate:
    """
    Return the gate installed on the application, building one on first use.

    The gate is created once per application from settings (see lifespan in
    attempt_service.main) and reused for every request.
    """
    gate = getattr(request.app.state, "token_gate", None)
    if gate is None:
        gate = TokenAuthenticationGate.from_settings(settings)
        request.app.state.token_gate = gate
    return gate


def carriers_from_request(
    request: Request, gate: TokenAuthenticationGate
) -> CredentialCarriers:
    """Collect the Authorization header and session cookie from a request."""
    return CredentialCarriers(
        authorization=request.headers.get("Authorization"),
        cookie=request.cookies.get(gate.cookie_name),
    )


async def get_current_principal(request: Request) -> Principal:
    """
    Authenticate the request and return its Principal.

    Args:
        request: Incoming request

    Returns:
        Principal for the verified credential

    Raises:
        HTTPException: 401 if no credential was presented,
            403 if the credential was rejected
    """
    gate = get_token_gate(request)
    try:
        principal = gate.authenticate(carriers_from_request(request, gate))
    except MissingCredentialError:
        raise_unauthorized(ErrorMessages.ACCESS_TOKEN_REQUIRED)
    except InvalidCredentialError:
        raise_forbidden(ErrorMessages.INVALID_TOKEN)

    # Exposed to exception handlers and request logging
    request.state.user_id = principal.id
    return principal
