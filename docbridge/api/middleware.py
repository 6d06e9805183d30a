"""Lifespan middleware closing outbound HTTP clients on shutdown.

The store client and credential manager each hold an
``httpx.AsyncClient``. Falcon's ASGI lifespan hooks give the app a single
place to release them when the server stops.

Usage
-----
Register the middleware when creating the Falcon app::

    app = falcon.asgi.App(middleware=[ClientLifespan(store_client, credentials)])

"""

from __future__ import annotations

import typing as typ

from docbridge.logging import get_logger, log_info

__all__ = ["AsyncClosable", "ClientLifespan"]

logger = get_logger(__name__)


class AsyncClosable(typ.Protocol):
    """Anything exposing an ``aclose`` coroutine."""

    async def aclose(self) -> None:
        """Release held resources."""
        ...


class ClientLifespan:
    """Falcon middleware that closes outbound clients on ASGI shutdown.

    Parameters
    ----------
    *clients
        Resources to close, in order, when the server shuts down.

    """

    def __init__(self, *clients: AsyncClosable) -> None:
        """Initialize the middleware with the clients it owns."""
        self._clients = clients

    async def process_shutdown(self, _scope: object, _event: object) -> None:
        """Close every registered client.

        Parameters
        ----------
        _scope
            ASGI lifespan scope (unused).
        _event
            ASGI shutdown event (unused).

        """
        for client in self._clients:
            await client.aclose()
        log_info(logger, "Closed %d outbound HTTP client(s)", len(self._clients))
