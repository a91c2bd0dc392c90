"""
Token authentication: credential extraction, verification and FastAPI wiring.
"""
from .carriers import (
    CredentialCarrier,
    CredentialCarriers,
    extract_credential,
)
from .dependencies import get_current_principal, get_token_gate
from .gate import Principal, TokenAuthenticationGate
from .security import create_access_token, decode_token

__all__ = [
    "CredentialCarrier",
    "CredentialCarriers",
    "extract_credential",
    "get_current_principal",
    "get_token_gate",
    "Principal",
    "TokenAuthenticationGate",
    "create_access_token",
    "decode_token",
]
