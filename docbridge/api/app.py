"""Application factory for the docbridge Falcon ASGI application.

This module provides ``create_app()`` which builds and configures the
Falcon ASGI application with health endpoints and, when a store client is
available, the document ingestion and listing endpoints.

Usage
-----
Create a health-only app (no store credentials)::

    app = create_app()

Create a full app with document endpoints::

    from docbridge.api.app import AppDependencies, create_app

    deps = AppDependencies(store_client=client, credentials=manager)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from docbridge.api.documents.resources import (
    DEFAULT_COLLECTION,
    DataResource,
    DocumentResourceDependencies,
    IndexResource,
    ReceiveResource,
)
from docbridge.api.errors import (
    InvalidInputError,
    handle_docbridge_error,
    handle_invalid_input,
)
from docbridge.api.health.resources import HealthResource, ReadyResource
from docbridge.api.middleware import ClientLifespan
from docbridge.errors import DocBridgeError

if typ.TYPE_CHECKING:
    from docbridge.auth import CredentialManager
    from docbridge.store import DocumentStoreClient

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    When ``store_client`` is provided the application registers the
    document endpoints. Otherwise only the banner and health endpoints are
    registered.

    Attributes
    ----------
    store_client
        Client used by ``/receive`` and ``/api/data``.
    credentials
        Credential manager backing ``store_client``; closed on shutdown.
    collection
        Collection that receives and serves documents.

    """

    store_client: DocumentStoreClient | None = None
    credentials: CredentialManager | None = None
    collection: str = DEFAULT_COLLECTION


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    CORS is enabled for every route so browser dashboards on other origins
    can post and read documents.

    Parameters
    ----------
    dependencies
        Optional application dependencies.  When ``None`` or missing a store
        client, only ``/``, ``/health`` and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    store_client = dependencies.store_client if dependencies is not None else None

    middleware: list[object] = []
    if dependencies is not None and store_client is not None:
        closables: list[typ.Any] = [store_client]
        if dependencies.credentials is not None:
            closables.append(dependencies.credentials)
        middleware.append(ClientLifespan(*closables))

    app = falcon.asgi.App(middleware=middleware, cors_enable=True)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/", IndexResource())
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(store_configured=store_client is not None))

    if dependencies is not None and store_client is not None:
        resource_deps = DocumentResourceDependencies(
            store_client=store_client,
            collection=dependencies.collection,
        )
        app.add_route("/receive", ReceiveResource(resource_deps))
        app.add_route("/api/data", DataResource(resource_deps))

    # Error handlers
    app.add_error_handler(DocBridgeError, handle_docbridge_error)
    app.add_error_handler(InvalidInputError, handle_invalid_input)

    return app
