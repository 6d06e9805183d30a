"""docbridge runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`docbridge.api.app.create_app` for application
construction while keeping the ``docbridge.runtime:create_app`` entrypoint
stable.

When ``DOCBRIDGE_PROJECT_ID`` is set and non-blank, the runtime builds the credential
manager and store client so the app includes the document endpoints.
Otherwise it starts with only the banner and health endpoints.

Configuration is driven by environment variables:

- ``DOCBRIDGE_HOST``: Bind address (default ``0.0.0.0``)
- ``DOCBRIDGE_PORT``: Listen port (default ``8080``)
- ``DOCBRIDGE_LOG_LEVEL``: Log level (default ``INFO``)
- ``DOCBRIDGE_PROJECT_ID``: Store project (optional; enables document
  endpoints when set, together with ``DOCBRIDGE_CLIENT_EMAIL`` and
  ``DOCBRIDGE_PRIVATE_KEY``)

Run the service directly with ``python -m docbridge.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from docbridge.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid DOCBRIDGE_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    When ``DOCBRIDGE_PROJECT_ID`` is set and non-blank, builds the store
    dependencies so the app includes ``POST /receive`` and
    ``GET /api/data``. Otherwise only ``/``, ``/health`` and ``/ready`` are
    available.

    Raises
    ------
    CredentialConfigError
        If the project is set but the signing identity is incomplete.
    StoreConfigError
        If the store configuration is invalid.

    """
    from docbridge.api.app import create_app as _create_api_app

    if not os.environ.get("DOCBRIDGE_PROJECT_ID", "").strip():
        log_warning(
            logger,
            "DOCBRIDGE_PROJECT_ID is unset or blank; document endpoints are disabled",
        )
        return _create_api_app()

    from docbridge.api.factory import build_app_dependencies

    return _create_api_app(build_app_dependencies())


def main() -> None:
    """Start the docbridge runtime server using Granian.

    Reads ``DOCBRIDGE_HOST``, ``DOCBRIDGE_PORT``, and ``DOCBRIDGE_LOG_LEVEL``
    from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("DOCBRIDGE_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port_str = os.environ.get("DOCBRIDGE_PORT", "8080")
    port = _parse_port(port_str)
    log_level_str = os.environ.get("DOCBRIDGE_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid DOCBRIDGE_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting docbridge runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "docbridge.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
