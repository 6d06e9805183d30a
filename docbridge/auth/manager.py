"""Bearer token acquisition and caching via the JWT-bearer grant."""

from __future__ import annotations

import asyncio
import typing as typ

import httpx
import msgspec

from docbridge.common.time import utcnow
from docbridge.errors import AuthenticationError, CredentialTimeoutError
from docbridge.logging import get_logger, log_debug
from docbridge.observability import StoreEventLogger

from .assertion import GRANT_TYPE, build_assertion
from .models import Credential, TokenResponse

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from .models import SigningIdentity

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
_DEFAULT_TIMEOUT_S = 20.0
_DEFAULT_REFRESH_MARGIN_S = 60.0


class CredentialManager:
    """Obtain and cache a bearer token for one signing identity.

    The first call to :meth:`get_token` signs an assertion and exchanges it
    with the authorization server. The resulting token is reused until it is
    within ``refresh_margin_s`` of its declared expiry, at which point the
    next caller transparently re-acquires it.

    Acquisition is single-flight: concurrent callers that find no fresh token
    wait on one exchange rather than each issuing their own.

    Parameters
    ----------
    identity
        Signing identity supplying issuer, key, audience and scope.
    http_client
        Optional ``httpx.AsyncClient`` for testing. If not provided, the
        manager creates and owns its own client.
    timeout_s
        Bound on the token exchange, in seconds.
    refresh_margin_s
        Safety margin subtracted from the token lifetime.
    clock
        Callable returning the current aware datetime.
    event_logger
        Structured event sink; defaults to :class:`StoreEventLogger`.

    Examples
    --------
    >>> import asyncio
    >>> manager = CredentialManager(SigningIdentity.from_env())
    >>> # token = asyncio.run(manager.get_token())
    >>> asyncio.run(manager.aclose())

    """

    def __init__(  # noqa: PLR0913 - keyword-only collaborators
        self,
        identity: SigningIdentity,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_s: float = _DEFAULT_TIMEOUT_S,
        refresh_margin_s: float = _DEFAULT_REFRESH_MARGIN_S,
        clock: cabc.Callable[[], dt.datetime] = utcnow,
        event_logger: StoreEventLogger | None = None,
    ) -> None:
        """Initialise the manager with an empty cache."""
        self._identity = identity
        self._timeout_s = timeout_s
        self._refresh_margin_s = refresh_margin_s
        self._clock = clock
        self._events = event_logger or StoreEventLogger()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_s)
        self._credential: Credential | None = None
        self._lock = asyncio.Lock()

    @property
    def identity(self) -> SigningIdentity:
        """Return the signing identity this manager authenticates as."""
        return self._identity

    @property
    def credential(self) -> Credential | None:
        """Return the cached credential, fresh or not, if any."""
        return self._credential

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    def invalidate(self) -> None:
        """Drop the cached credential so the next call re-acquires."""
        self._credential = None

    def _fresh_token(self) -> str | None:
        credential = self._credential
        if credential is None:
            return None
        if not credential.is_fresh(self._clock(), margin_s=self._refresh_margin_s):
            return None
        return credential.token

    async def get_token(self) -> str:
        """Return a bearer token that is valid for at least the refresh margin.

        Raises
        ------
        AuthenticationError
            If signing fails, the exchange is rejected or unreachable, or the
            response carries no usable ``access_token``.
        CredentialTimeoutError
            If the exchange exceeds the configured timeout.

        """
        token = self._fresh_token()
        if token is not None:
            return token

        async with self._lock:
            # Another caller may have refreshed while this one waited.
            token = self._fresh_token()
            if token is not None:
                return token
            try:
                credential = await self._acquire()
            except AuthenticationError as exc:
                self._events.log_credential_failed(
                    issuer=self._identity.service_identity, error=exc
                )
                raise
            self._credential = credential

        self._events.log_credential_acquired(
            issuer=self._identity.service_identity,
            expires_in_s=credential.expires_in_s,
        )
        return credential.token

    async def _acquire(self) -> Credential:
        """Sign a fresh assertion and exchange it for a credential."""
        issued_at = self._clock()
        assertion = build_assertion(self._identity, issued_at=issued_at)
        response = await self._send_exchange(assertion)
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise AuthenticationError.exchange_rejected(
                response.status_code, response.text
            )
        parsed = self._parse_token_response(response)
        log_debug(
            logger,
            "Token exchange for %s succeeded (expires_in=%d)",
            self._identity.service_identity,
            parsed.expires_in,
        )
        return Credential(
            token=parsed.access_token,
            obtained_at=issued_at,
            expires_in_s=parsed.expires_in,
        )

    async def _send_exchange(self, assertion: str) -> httpx.Response:
        """POST the form-encoded assertion to the authorization server.

        Raises
        ------
        CredentialTimeoutError
            If the request times out.
        AuthenticationError
            If a network error occurs.

        """
        try:
            return await self._client.post(
                self._identity.token_audience,
                data={"grant_type": GRANT_TYPE, "assertion": assertion},
                timeout=self._timeout_s,
            )
        except httpx.TimeoutException as exc:
            raise CredentialTimeoutError.exchange_timed_out(self._timeout_s) from exc
        except httpx.RequestError as exc:
            raise AuthenticationError.network_error(str(exc)) from exc

    @staticmethod
    def _parse_token_response(response: httpx.Response) -> TokenResponse:
        try:
            parsed = msgspec.json.decode(response.content, type=TokenResponse)
        except msgspec.DecodeError as exc:
            raise AuthenticationError.invalid_response(response.text) from exc
        if not parsed.access_token:
            raise AuthenticationError.invalid_response(response.text)
        return parsed
