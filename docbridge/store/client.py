"""Async client for the document store REST API."""

from __future__ import annotations

import typing as typ
from urllib.parse import quote

import httpx
import msgspec

from docbridge.codec import DocumentCodec, fields_to_wire
from docbridge.errors import (
    InvalidCollectionError,
    StoreOperationError,
    StoreResponseShapeError,
    StoreTimeoutError,
)
from docbridge.logging import get_logger, log_debug
from docbridge.observability import StoreEventLogger

from .models import DocumentPayload, ListDocumentsPayload, StoredDocument

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docbridge.auth import CredentialManager
    from docbridge.codec import GenericRecord

    from .config import DocumentStoreConfig

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400

_CREATE = "create"
_LIST = "list"


def collection_path(collection: str) -> str:
    """Validate a collection path and return it percent-encoded per segment.

    Nested collections (``parent/doc/child``) are accepted; every segment
    must be non-empty.

    Raises
    ------
    InvalidCollectionError
        If the path is blank or contains an empty segment.

    """
    if not collection.strip():
        raise InvalidCollectionError.blank()
    segments = collection.split("/")
    if any(not segment for segment in segments):
        raise InvalidCollectionError.empty_segment(collection)
    return "/".join(quote(segment, safe="") for segment in segments)


class DocumentStoreClient:
    """Create and list documents in a store collection.

    Every call first obtains a bearer token from the credential manager,
    then issues a single HTTP request per page. Nothing is retried: failures
    surface immediately as :class:`~docbridge.errors.StoreOperationError`
    subclasses.

    Parameters
    ----------
    config
        Store endpoint, project, and timeout.
    credentials
        Credential manager supplying bearer tokens.
    codec
        Record codec; a default :class:`DocumentCodec` is used when omitted.
    http_client
        Optional ``httpx.AsyncClient`` for testing. If not provided, the
        client creates and owns its own.
    event_logger
        Structured event sink; defaults to :class:`StoreEventLogger`.

    Examples
    --------
    >>> import asyncio
    >>> client = DocumentStoreClient(DocumentStoreConfig.from_env(), manager)
    >>> # doc = asyncio.run(client.create_document("received_data", {"a": 1}))
    >>> asyncio.run(client.aclose())

    """

    def __init__(  # noqa: PLR0913 - keyword-only collaborators
        self,
        config: DocumentStoreConfig,
        credentials: CredentialManager,
        *,
        codec: DocumentCodec | None = None,
        http_client: httpx.AsyncClient | None = None,
        event_logger: StoreEventLogger | None = None,
    ) -> None:
        """Initialise the client with configuration and collaborators."""
        self._config = config
        self._credentials = credentials
        self._codec = codec or DocumentCodec()
        self._events = event_logger or StoreEventLogger()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    @property
    def config(self) -> DocumentStoreConfig:
        """Read-only access to the client configuration."""
        return self._config

    @property
    def codec(self) -> DocumentCodec:
        """Return the codec used to encode and decode records."""
        return self._codec

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    def _collection_url(self, collection: str) -> str:
        return f"{self._config.documents_url}/{collection_path(collection)}"

    async def create_document(
        self,
        collection: str,
        record: cabc.Mapping[str, object],
    ) -> StoredDocument:
        """Encode ``record`` and store it as a new document in ``collection``.

        The store assigns the document identifier; it is available as
        :attr:`StoredDocument.document_id` on the result. The record is
        encoded before a token is requested, so a record that cannot be
        encoded issues no network requests.

        Raises
        ------
        InvalidCollectionError
            If ``collection`` is blank or malformed.
        EncodingError
            If a record value has no JSON representation.
        AuthenticationError
            If no bearer token can be obtained.
        StoreOperationError
            If the store rejects the request or cannot be reached.

        """
        url = self._collection_url(collection)
        fields = self._codec.encode(record)
        token = await self._credentials.get_token()
        try:
            response = await self._send(
                _CREATE,
                "POST",
                url,
                token=token,
                json={"fields": fields_to_wire(fields)},
            )
            payload = _decode_body(_CREATE, response, DocumentPayload)
        except StoreOperationError as exc:
            self._events.log_operation_failed(
                operation=_CREATE, collection=collection, error=exc
            )
            raise

        document = StoredDocument.from_payload(payload)
        self._events.log_document_created(
            collection=collection, document_id=document.document_id
        )
        return document

    async def list_stored_documents(self, collection: str) -> list[StoredDocument]:
        """Fetch every document in ``collection`` in store order.

        Follows ``nextPageToken`` until the listing is exhausted. A missing
        ``documents`` array is an empty page, not an error.

        Raises
        ------
        InvalidCollectionError
            If ``collection`` is blank or malformed.
        AuthenticationError
            If no bearer token can be obtained.
        StoreOperationError
            If any page request fails.

        """
        url = self._collection_url(collection)
        documents: list[StoredDocument] = []
        page_token: str | None = None
        pages = 0
        try:
            while True:
                token = await self._credentials.get_token()
                response = await self._send(
                    _LIST,
                    "GET",
                    url,
                    token=token,
                    params=self._page_params(page_token),
                )
                page = _decode_body(_LIST, response, ListDocumentsPayload)
                pages += 1
                documents.extend(StoredDocument.from_payload(d) for d in page.documents)
                page_token = page.next_page_token or None
                if page_token is None:
                    break
                log_debug(
                    logger,
                    "Fetching page %d of %s (%d documents so far)",
                    pages + 1,
                    collection,
                    len(documents),
                )
        except StoreOperationError as exc:
            self._events.log_operation_failed(
                operation=_LIST, collection=collection, error=exc
            )
            raise

        self._events.log_documents_listed(
            collection=collection, count=len(documents), pages=pages
        )
        return documents

    async def list_documents(self, collection: str) -> list[GenericRecord]:
        """Return every document in ``collection`` decoded into records.

        Each record carries the document identifier under ``id``. Order is
        the store's; callers wanting a display order must sort themselves.
        """
        stored = await self.list_stored_documents(collection)
        return [document.to_record(self._codec) for document in stored]

    def _page_params(self, page_token: str | None) -> dict[str, str]:
        params: dict[str, str] = {}
        if self._config.page_size is not None:
            params["pageSize"] = str(self._config.page_size)
        if page_token is not None:
            params["pageToken"] = page_token
        return params

    async def _send(  # noqa: PLR0913 - request parts are passed through
        self,
        operation: str,
        method: str,
        url: str,
        *,
        token: str,
        json: dict[str, object] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Issue one authorised request and reject non-success statuses.

        Raises
        ------
        StoreTimeoutError
            If the request exceeds the configured timeout.
        StoreOperationError
            If a network error occurs or the store answers with an error.

        """
        try:
            response = await self._client.request(
                method,
                url,
                json=json,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self._config.timeout_s,
            )
        except httpx.TimeoutException as exc:
            raise StoreTimeoutError.timed_out(operation, self._config.timeout_s) from exc
        except httpx.RequestError as exc:
            raise StoreOperationError.network_error(operation, str(exc)) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise StoreOperationError.http_error(
                operation, response.status_code, response.text
            )
        return response


def _decode_body[StructT: msgspec.Struct](
    operation: str,
    response: httpx.Response,
    struct_type: type[StructT],
) -> StructT:
    """Decode a response body into ``struct_type``.

    Raises
    ------
    StoreResponseShapeError
        If the body is not JSON or does not match the expected shape.

    """
    try:
        return msgspec.json.decode(response.content, type=struct_type)
    except msgspec.DecodeError as exc:
        raise StoreResponseShapeError.invalid(operation, response.text) from exc
