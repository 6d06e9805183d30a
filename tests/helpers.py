"""Shared test utilities."""

from __future__ import annotations

import asyncio
import dataclasses
import datetime as dt
import json
import typing as typ

import httpx

TOKEN_URL = "https://auth.example.test/token"
STORE_ENDPOINT = "https://store.example.test/v1"
PROJECT_ID = "demo-project"
SERVICE_IDENTITY = "ingest@demo-project.iam.example.test"

_TOKEN_HOST = "auth.example.test"
_DOCUMENTS_MARKER = "/documents/"
_STORE_TIME = "2025-01-01T00:00:00.000000Z"


def run_async[T](coro_func: typ.Callable[[], typ.Coroutine[typ.Any, typ.Any, T]]) -> T:
    """Execute an async callable within the test context."""
    return asyncio.run(coro_func())


class FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        del stack_info
        self.calls.append((level, message, exc_info))
        return message

    @property
    def messages(self) -> list[str]:
        """Return the captured messages in order."""
        return [message for _, message, _ in self.calls]


class FakeClock:
    """Controllable clock returning aware UTC datetimes."""

    def __init__(self, start: dt.datetime | None = None) -> None:
        self.now = start or dt.datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=dt.UTC)

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        """Move the clock forward by ``seconds``."""
        self.now += dt.timedelta(seconds=seconds)


@dataclasses.dataclass(slots=True)
class FakeStoreServer:
    """In-memory authorization server and document store.

    Token requests mint ``token-1``, ``token-2``... Store requests must
    carry one of the minted tokens. Queued ``token_failures`` and
    ``store_failures`` responses are served before normal handling, and
    ``store_errors`` are raised instead of answering.
    """

    page_size: int | None = None
    token_expires_in: int = 3600
    documents: dict[str, list[dict[str, typ.Any]]] = dataclasses.field(
        default_factory=dict
    )
    token_requests: list[httpx.Request] = dataclasses.field(default_factory=list)
    store_requests: list[httpx.Request] = dataclasses.field(default_factory=list)
    token_failures: list[httpx.Response] = dataclasses.field(default_factory=list)
    store_failures: list[httpx.Response] = dataclasses.field(default_factory=list)
    store_errors: list[Exception] = dataclasses.field(default_factory=list)
    _next_id: int = 0
    _minted: int = 0

    @property
    def issued_tokens(self) -> list[str]:
        """Return the tokens minted so far."""
        return [f"token-{n}" for n in range(1, self._minted + 1)]

    def transport(self) -> httpx.MockTransport:
        """Return a transport routing requests to this server."""
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.AsyncClient:
        """Return an ``httpx.AsyncClient`` bound to this server."""
        return httpx.AsyncClient(transport=self.transport())

    def seed(self, collection: str, fields: dict[str, typ.Any], doc_id: str) -> None:
        """Insert a stored document with raw wire ``fields``."""
        self.documents.setdefault(collection, []).append(
            self._document(collection, doc_id, fields)
        )

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Dispatch a request to the token or store handler."""
        if request.url.host == _TOKEN_HOST:
            return self._handle_token(request)
        return self._handle_store(request)

    def _handle_token(self, request: httpx.Request) -> httpx.Response:
        self.token_requests.append(request)
        if self.token_failures:
            return self.token_failures.pop(0)
        self._minted += 1
        token = f"token-{self._minted}"
        return httpx.Response(
            200,
            json={
                "access_token": token,
                "expires_in": self.token_expires_in,
                "token_type": "Bearer",
            },
        )

    def _handle_store(self, request: httpx.Request) -> httpx.Response:
        self.store_requests.append(request)
        if self.store_errors:
            raise self.store_errors.pop(0)
        if self.store_failures:
            return self.store_failures.pop(0)

        bearer = request.headers.get("Authorization", "")
        if bearer.removeprefix("Bearer ") not in self.issued_tokens:
            return httpx.Response(401, json={"error": {"status": "UNAUTHENTICATED"}})

        collection = request.url.path.split(_DOCUMENTS_MARKER, 1)[1]
        if request.method == "POST":
            return self._create(collection, request)
        return self._list(collection, request)

    def _document(
        self, collection: str, doc_id: str, fields: dict[str, typ.Any]
    ) -> dict[str, typ.Any]:
        return {
            "name": (
                f"projects/{PROJECT_ID}/databases/(default)/documents/"
                f"{collection}/{doc_id}"
            ),
            "fields": fields,
            "createTime": _STORE_TIME,
            "updateTime": _STORE_TIME,
        }

    def _create(self, collection: str, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content.decode("utf-8"))
        self._next_id += 1
        document = self._document(collection, f"doc{self._next_id:04d}", body["fields"])
        self.documents.setdefault(collection, []).append(document)
        return httpx.Response(200, json=document)

    def _list(self, collection: str, request: httpx.Request) -> httpx.Response:
        stored = self.documents.get(collection, [])
        offset = int(request.url.params.get("pageToken", "0"))
        size = self.page_size or len(stored) or 1
        page = stored[offset : offset + size]
        payload: dict[str, typ.Any] = {}
        if page:
            payload["documents"] = page
        if offset + size < len(stored):
            payload["nextPageToken"] = str(offset + size)
        return httpx.Response(200, json=payload)
