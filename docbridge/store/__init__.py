"""Document store client.

Public API
----------
DocumentStoreClient
    Creates documents and lists whole collections over the REST API.
DocumentStoreConfig
    Endpoint, project, and timeout, loadable from ``DOCBRIDGE_*`` variables.
StoredDocument
    A persisted document: resource path, typed fields, store timestamps.
"""

from __future__ import annotations

from docbridge.errors import (
    InvalidCollectionError,
    StoreConfigError,
    StoreOperationError,
    StoreResponseShapeError,
    StoreTimeoutError,
)

from .client import DocumentStoreClient, collection_path
from .config import DocumentStoreConfig
from .models import DocumentPayload, ListDocumentsPayload, StoredDocument

__all__ = [
    "DocumentPayload",
    "DocumentStoreClient",
    "DocumentStoreConfig",
    "InvalidCollectionError",
    "ListDocumentsPayload",
    "StoreConfigError",
    "StoreOperationError",
    "StoreResponseShapeError",
    "StoreTimeoutError",
    "StoredDocument",
    "collection_path",
]
