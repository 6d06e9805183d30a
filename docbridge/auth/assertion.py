"""Signed JWT-bearer assertions for the token exchange."""

from __future__ import annotations

import typing as typ

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.serialization import load_pem_private_key

from docbridge.common.time import epoch_seconds
from docbridge.errors import AuthenticationError

if typ.TYPE_CHECKING:
    import datetime as dt

    from .models import SigningIdentity

GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_ALGORITHM = "RS256"
ASSERTION_LIFETIME_S = 3600


def normalise_key_material(material: str | bytes) -> bytes:
    """Return PEM bytes, expanding literal ``\\n`` escapes into newlines."""
    text = material.decode("utf-8") if isinstance(material, bytes) else material
    return text.replace("\\n", "\n").strip().encode("utf-8")


def load_signing_key(material: str | bytes) -> RSAPrivateKey:
    """Load an unencrypted RSA private key from PEM material.

    Raises
    ------
    AuthenticationError
        If the material is not a PEM key or not an RSA key.

    """
    try:
        key = load_pem_private_key(normalise_key_material(material), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise AuthenticationError.invalid_key(str(exc) or type(exc).__name__) from exc
    if not isinstance(key, RSAPrivateKey):
        raise AuthenticationError.invalid_key(f"expected RSA, got {type(key).__name__}")
    return key


def assertion_claims(
    identity: SigningIdentity, *, issued_at: dt.datetime
) -> dict[str, typ.Any]:
    """Return the claim set for an assertion issued at ``issued_at``."""
    iat = epoch_seconds(issued_at)
    return {
        "iss": identity.service_identity,
        "scope": identity.scope,
        "aud": identity.token_audience,
        "iat": iat,
        "exp": iat + ASSERTION_LIFETIME_S,
    }


def build_assertion(identity: SigningIdentity, *, issued_at: dt.datetime) -> str:
    """Build the compact ``header.payload.signature`` assertion.

    The header is ``{"alg": "RS256", "typ": "JWT"}``; all three segments are
    unpadded base64url, and the signature is RSA PKCS#1 v1.5 over SHA-256.

    Raises
    ------
    AuthenticationError
        If the key cannot be loaded or signing fails.

    """
    key = load_signing_key(identity.private_key)
    claims = assertion_claims(identity, issued_at=issued_at)
    try:
        return jwt.encode(
            claims,
            key,
            algorithm=ASSERTION_ALGORITHM,
            headers={"typ": "JWT"},
        )
    except (jwt.PyJWTError, ValueError, TypeError) as exc:
        raise AuthenticationError.signing_failed(str(exc)) from exc
