"""Signed-assertion authentication against the store's authorization server.

Public API
----------
CredentialManager
    Caches a bearer token and re-acquires it shortly before expiry.
SigningIdentity
    Issuer, private key, audience and scope used to sign assertions.
Credential
    An obtained token and the instant it was obtained.
"""

from __future__ import annotations

from docbridge.errors import (
    AuthenticationError,
    CredentialConfigError,
    CredentialTimeoutError,
)

from .assertion import (
    ASSERTION_ALGORITHM,
    GRANT_TYPE,
    assertion_claims,
    build_assertion,
    load_signing_key,
    normalise_key_material,
)
from .manager import CredentialManager
from .models import (
    DEFAULT_SCOPE,
    DEFAULT_TOKEN_AUDIENCE,
    Credential,
    SigningIdentity,
    TokenResponse,
)

__all__ = [
    "ASSERTION_ALGORITHM",
    "DEFAULT_SCOPE",
    "DEFAULT_TOKEN_AUDIENCE",
    "GRANT_TYPE",
    "AuthenticationError",
    "Credential",
    "CredentialConfigError",
    "CredentialManager",
    "CredentialTimeoutError",
    "SigningIdentity",
    "TokenResponse",
    "assertion_claims",
    "build_assertion",
    "load_signing_key",
    "normalise_key_material",
]
