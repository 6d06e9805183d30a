"""Health probe resources for liveness and readiness checks.

Neither probe touches the store: liveness only proves the process answers
and readiness only reports whether a store client was wired in.

Usage
-----
Register health endpoints on the Falcon app::

    from docbridge.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(store_configured=True))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource.

    Responds ``{"status": "ready"}`` with HTTP 200 when the document routes
    are registered, and ``{"status": "unconfigured"}`` with HTTP 503 when the
    app runs without store credentials.

    Parameters
    ----------
    store_configured
        Whether the app was built with a store client.

    """

    def __init__(self, *, store_configured: bool) -> None:
        """Record whether document routes are available."""
        self._store_configured = store_configured

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with readiness status.

        """
        if self._store_configured:
            resp.media = {"status": "ready"}
            resp.status = HTTPStatus.OK
            return
        resp.media = {"status": "unconfigured"}
        resp.status = HTTPStatus.SERVICE_UNAVAILABLE
