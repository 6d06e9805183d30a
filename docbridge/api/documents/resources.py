"""Document ingestion and listing resources.

``POST /receive`` stores an arbitrary JSON object as a new document and
``GET /api/data`` returns the whole collection, newest first. ``GET /``
describes the available endpoints.

Usage
-----
Register the resources on the Falcon app::

    deps = DocumentResourceDependencies(store_client=client)
    app.add_route("/receive", ReceiveResource(deps))
    app.add_route("/api/data", DataResource(deps))

"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import typing as typ

import falcon

from docbridge.api.errors import InvalidInputError
from docbridge.codec import TIMESTAMP_FIELD
from docbridge.common.time import format_timestamp, parse_timestamp, utcnow
from docbridge.errors import DocBridgeError
from docbridge.observability import StoreEventLogger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from falcon.asgi import Request, Response

    from docbridge.codec import GenericRecord
    from docbridge.store import DocumentStoreClient, StoredDocument

__all__ = [
    "DEFAULT_COLLECTION",
    "DataResource",
    "DocumentResourceDependencies",
    "IndexResource",
    "ReceiveResource",
]

DEFAULT_COLLECTION = "received_data"

_OLDEST = dt.datetime.min.replace(tzinfo=dt.UTC)


@dc.dataclass(frozen=True, slots=True)
class DocumentResourceDependencies:
    """Dependencies shared by the document resources.

    Attributes
    ----------
    store_client
        Client used to create and list documents.
    collection
        Collection that receives and serves documents.
    clock
        Callable returning the current aware datetime.
    event_logger
        Structured event sink for degraded listings.

    """

    store_client: DocumentStoreClient
    collection: str = DEFAULT_COLLECTION
    clock: cabc.Callable[[], dt.datetime] = utcnow
    event_logger: StoreEventLogger = dc.field(default_factory=StoreEventLogger)


def newest_first(records: list[GenericRecord]) -> list[GenericRecord]:
    """Return ``records`` ordered by ``timestamp`` descending.

    Records without a parseable timestamp sort last, keeping store order
    among themselves.
    """

    def sort_key(record: GenericRecord) -> dt.datetime:
        return parse_timestamp(record.get(TIMESTAMP_FIELD)) or _OLDEST

    return sorted(records, key=sort_key, reverse=True)


def _received_at(document: StoredDocument, fallback: dt.datetime) -> str:
    field = document.fields.get(TIMESTAMP_FIELD)
    if field is not None and isinstance(field.value, str):
        return field.value
    return format_timestamp(fallback)


class IndexResource:
    """Service banner listing the available endpoints."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET / requests."""
        resp.media = {
            "message": "docbridge is running",
            "endpoints": {
                "receive": "POST /receive - store a JSON object",
                "data": "GET /api/data - list stored documents",
                "health": "GET /health - liveness probe",
                "ready": "GET /ready - readiness probe",
            },
        }
        resp.status = falcon.HTTP_200


class ReceiveResource:
    """Store each posted JSON object as a new document.

    The response echoes the store-assigned identifier and the receipt
    timestamp written into the document.
    """

    def __init__(self, dependencies: DocumentResourceDependencies) -> None:
        """Configure the resource with its dependencies."""
        self._store = dependencies.store_client
        self._collection = dependencies.collection
        self._clock = dependencies.clock

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /receive requests.

        Raises
        ------
        InvalidInputError
            If the body is not a JSON object.

        """
        body = await req.get_media()
        if not isinstance(body, dict):
            msg = "request body must be a JSON object"
            raise InvalidInputError(msg)

        record = typ.cast("dict[str, object]", body)
        document = await self._store.create_document(self._collection, record)

        resp.media = {
            "success": True,
            "message": "Data saved successfully",
            "documentId": document.document_id,
            "timestamp": _received_at(document, self._clock()),
        }
        resp.status = falcon.HTTP_200


class DataResource:
    """Return every stored document, newest first.

    Listing failures degrade to an empty, unsuccessful payload with HTTP 200
    so dashboards keep rendering; the failure is logged as a warning.
    """

    def __init__(self, dependencies: DocumentResourceDependencies) -> None:
        """Configure the resource with its dependencies."""
        self._store = dependencies.store_client
        self._collection = dependencies.collection
        self._clock = dependencies.clock
        self._events = dependencies.event_logger

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /api/data requests."""
        last_updated = format_timestamp(self._clock())
        try:
            records = await self._store.list_documents(self._collection)
        except DocBridgeError as exc:
            self._events.log_list_degraded(collection=self._collection, error=exc)
            resp.media = {
                "success": False,
                "message": "Failed to fetch data",
                "error": str(exc),
                "data": [],
                "total": 0,
                "lastUpdated": last_updated,
            }
            resp.status = falcon.HTTP_200
            return

        ordered = newest_first(records)
        resp.media = {
            "success": True,
            "data": ordered,
            "total": len(ordered),
            "lastUpdated": last_updated,
        }
        resp.status = falcon.HTTP_200
