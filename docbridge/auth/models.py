"""Signing identity and cached credential models."""

from __future__ import annotations

import dataclasses
import datetime as dt
import os

import msgspec

from docbridge.errors import CredentialConfigError

DEFAULT_TOKEN_AUDIENCE = "https://oauth2.googleapis.com/token"
DEFAULT_SCOPE = "https://www.googleapis.com/auth/datastore"
DEFAULT_TOKEN_LIFETIME_S = 3600


def _required_env(variable: str) -> str:
    raw = os.environ.get(variable)
    if raw is None:
        raise CredentialConfigError.missing(variable)
    value = raw.strip()
    if not value:
        raise CredentialConfigError.empty(variable)
    return value


@dataclasses.dataclass(frozen=True, slots=True)
class SigningIdentity:
    """Service identity used to sign token assertions.

    Attributes
    ----------
    service_identity
        Issuer of the assertion, typically a service account email.
    private_key
        PEM-encoded PKCS8 RSA private key. Literal ``\\n`` escapes, as
        commonly found in environment variables, are accepted.
    token_audience
        Authorization server URL; both the ``aud`` claim and the exchange
        endpoint.
    scope
        OAuth scope requested for the bearer token.

    """

    service_identity: str
    private_key: str | bytes = dataclasses.field(repr=False)
    token_audience: str = DEFAULT_TOKEN_AUDIENCE
    scope: str = DEFAULT_SCOPE

    @classmethod
    def from_env(cls) -> SigningIdentity:
        """Build an identity from environment variables.

        Reads ``DOCBRIDGE_CLIENT_EMAIL`` and ``DOCBRIDGE_PRIVATE_KEY``
        (required) plus ``DOCBRIDGE_TOKEN_URI`` and ``DOCBRIDGE_SCOPE``
        (optional overrides).

        Raises
        ------
        CredentialConfigError
            If a required variable is missing or blank.

        """
        return cls(
            service_identity=_required_env("DOCBRIDGE_CLIENT_EMAIL"),
            private_key=_required_env("DOCBRIDGE_PRIVATE_KEY"),
            token_audience=os.environ.get(
                "DOCBRIDGE_TOKEN_URI", DEFAULT_TOKEN_AUDIENCE
            ),
            scope=os.environ.get("DOCBRIDGE_SCOPE", DEFAULT_SCOPE),
        )


@dataclasses.dataclass(frozen=True, slots=True)
class Credential:
    """A bearer token and the moment it was obtained.

    Instances are replaced wholesale on refresh and never mutated.
    """

    token: str
    obtained_at: dt.datetime
    expires_in_s: int = DEFAULT_TOKEN_LIFETIME_S

    def is_fresh(self, now: dt.datetime, *, margin_s: float) -> bool:
        """Return whether the token is still inside its validity minus margin."""
        age = now - self.obtained_at
        return age < dt.timedelta(seconds=self.expires_in_s - margin_s)


class TokenResponse(msgspec.Struct, kw_only=True):
    """JSON body returned by the authorization server."""

    access_token: str
    expires_in: int = DEFAULT_TOKEN_LIFETIME_S
    token_type: str = "Bearer"
