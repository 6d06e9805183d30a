"""Exception hierarchy for credential, codec, and document store failures.

Every error derives from :class:`DocBridgeError`, giving the HTTP edge a
single catch point. Errors are built through named classmethod factories
and raised ``from`` their underlying cause so nothing is lost on the way up.
"""

from __future__ import annotations

# Response body preview length for error messages
_BODY_PREVIEW_LIMIT = 200


def _preview(body: str) -> str:
    if len(body) > _BODY_PREVIEW_LIMIT:
        return body[:_BODY_PREVIEW_LIMIT] + "..."
    return body


class DocBridgeError(Exception):
    """Base exception for every error raised by docbridge."""


class AuthenticationError(DocBridgeError):
    """Raised when a bearer token cannot be obtained.

    Covers both local signing failures (malformed key material) and
    rejected or unreadable token exchanges.

    Attributes
    ----------
    status_code
        HTTP status of the token exchange, when the server answered.
    body
        Raw response body of the token exchange, when available.

    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        """Initialise with a message and optional exchange response details."""
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @classmethod
    def invalid_key(cls, detail: str) -> AuthenticationError:
        """Return an error for private key material that cannot sign."""
        return cls(f"Private key cannot be used for RS256 signing: {detail}")

    @classmethod
    def signing_failed(cls, detail: str) -> AuthenticationError:
        """Return an error for a failure while producing the assertion."""
        return cls(f"Failed to sign token assertion: {detail}")

    @classmethod
    def exchange_rejected(cls, status_code: int, body: str) -> AuthenticationError:
        """Return an error for a non-success token exchange response."""
        return cls(
            f"Token exchange HTTP {status_code}: {_preview(body)}",
            status_code=status_code,
            body=body,
        )

    @classmethod
    def invalid_response(cls, body: str) -> AuthenticationError:
        """Return an error for an exchange body lacking a usable access token."""
        return cls(
            f"Token exchange returned no usable access_token: {_preview(body)}",
            body=body,
        )

    @classmethod
    def network_error(cls, detail: str) -> AuthenticationError:
        """Return an error for DNS, connection, or TLS failures."""
        return cls(f"Token exchange network error: {detail}")


class CredentialTimeoutError(AuthenticationError, TimeoutError):
    """Raised when the token exchange does not complete within the timeout."""

    @classmethod
    def exchange_timed_out(cls, timeout_s: float) -> CredentialTimeoutError:
        """Return an error for an exchange that exceeded ``timeout_s``."""
        return cls(f"Token exchange timed out after {timeout_s:g}s")


class CredentialConfigError(DocBridgeError):
    """Raised when signing identity configuration is missing or invalid."""

    @classmethod
    def missing(cls, variable: str) -> CredentialConfigError:
        """Return an error for a required environment variable that is unset."""
        return cls(f"{variable} environment variable is required")

    @classmethod
    def empty(cls, name: str) -> CredentialConfigError:
        """Return an error for a configuration value that is blank."""
        return cls(f"{name} must be non-empty")


class EncodingError(DocBridgeError):
    """Raised when a record value has no wire representation at all.

    Values that merely lack a dedicated field type are not errors: they are
    serialised to JSON text under the opaque-text policy. Only values that
    cannot be expressed as JSON in the first place end up here.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Initialise with a message and the offending field name."""
        self.field = field
        super().__init__(message)

    @classmethod
    def non_finite(cls, field: str, value: float) -> EncodingError:
        """Return an error for NaN or infinite floats."""
        return cls(f"field {field!r} holds non-finite number {value!r}", field=field)

    @classmethod
    def integer_too_long(cls, field: str, limit: int) -> EncodingError:
        """Return an error for integers beyond the decimal conversion limit."""
        return cls(
            f"field {field!r} holds an integer longer than {limit} digits",
            field=field,
        )

    @classmethod
    def unserialisable(cls, field: str, type_name: str) -> EncodingError:
        """Return an error for values JSON cannot represent."""
        return cls(
            f"field {field!r} holds a {type_name} value with no JSON form",
            field=field,
        )

    @classmethod
    def invalid_key(cls, key: object) -> EncodingError:
        """Return an error for non-string record keys."""
        return cls(f"record keys must be strings, got {type(key).__name__}")


class StoreOperationError(DocBridgeError):
    """Raised when a create or list call against the store fails.

    Attributes
    ----------
    status_code
        HTTP status code from the store, if it answered.
    body
        Raw response body from the store, if it answered.

    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        """Initialise with a message and optional response details."""
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @classmethod
    def http_error(
        cls, operation: str, status_code: int, body: str
    ) -> StoreOperationError:
        """Return an error for a non-success store response."""
        return cls(
            f"Document store {operation} HTTP {status_code}: {_preview(body)}",
            status_code=status_code,
            body=body,
        )

    @classmethod
    def network_error(cls, operation: str, detail: str) -> StoreOperationError:
        """Return an error for DNS, connection, or TLS failures."""
        return cls(f"Document store {operation} network error: {detail}")


class StoreTimeoutError(StoreOperationError, TimeoutError):
    """Raised when a store call does not complete within the timeout."""

    @classmethod
    def timed_out(cls, operation: str, timeout_s: float) -> StoreTimeoutError:
        """Return an error for a store call that exceeded ``timeout_s``."""
        return cls(f"Document store {operation} timed out after {timeout_s:g}s")


class StoreResponseShapeError(StoreOperationError):
    """Raised when a store response body cannot be parsed."""

    @classmethod
    def invalid(cls, operation: str, body: str) -> StoreResponseShapeError:
        """Return an error for an unparsable or mis-shaped response."""
        return cls(
            f"Document store {operation} returned an unexpected body: "
            f"{_preview(body)}",
            body=body,
        )


class StoreConfigError(DocBridgeError):
    """Raised when document store configuration is invalid."""

    @classmethod
    def missing_project(cls) -> StoreConfigError:
        """Return an error when no project identifier is configured."""
        return cls("DOCBRIDGE_PROJECT_ID environment variable is required")

    @classmethod
    def invalid_timeout(cls, value: str) -> StoreConfigError:
        """Return an error for a non-positive or non-numeric timeout."""
        return cls(f"Invalid timeout '{value}'. Must be a positive number of seconds")


class InvalidCollectionError(DocBridgeError, ValueError):
    """Raised when a collection path is empty or malformed."""

    @classmethod
    def blank(cls) -> InvalidCollectionError:
        """Return an error for an empty collection name."""
        return cls("collection name must be non-empty")

    @classmethod
    def empty_segment(cls, collection: str) -> InvalidCollectionError:
        """Return an error for a collection path with an empty segment."""
        return cls(f"collection path {collection!r} contains an empty segment")
