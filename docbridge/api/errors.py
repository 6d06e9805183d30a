"""Domain exceptions and Falcon error handlers for the API layer.

Ingestion responses share one envelope, ``{"success", "message", ...}``,
so failures carry ``success: false`` alongside a human-readable message
and the underlying error text.

Usage
-----
Register error handlers on the Falcon app::

    from docbridge.api.errors import (
        InvalidInputError,
        handle_docbridge_error,
        handle_invalid_input,
    )

    app.add_error_handler(DocBridgeError, handle_docbridge_error)
    app.add_error_handler(InvalidInputError, handle_invalid_input)

"""

from __future__ import annotations

import typing as typ

import falcon

from docbridge.errors import DocBridgeError, EncodingError
from docbridge.logging import get_logger, log_error

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = [
    "InvalidInputError",
    "handle_docbridge_error",
    "handle_invalid_input",
]

logger = get_logger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save data"


class InvalidInputError(Exception):
    """Raised for client validation errors that should map to HTTP 400.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.
    field
        Optional name of the input field that failed validation.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialize with a validation reason and optional field name."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


def _failure_media(message: str, error: str) -> dict[str, typ.Any]:
    return {"success": False, "message": message, "error": error}


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The validation exception containing reason and optional field.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_400
    media = _failure_media("Invalid input", ex.reason)
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_docbridge_error(
    req: Request,
    resp: Response,
    ex: DocBridgeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map credential, codec, and store failures to a JSON error response.

    Values the codec cannot represent are the caller's fault and map to 400;
    everything else is a server-side failure and maps to 500.

    Parameters
    ----------
    req
        Falcon request, used for the log line.
    resp
        Falcon response whose status and media are set.
    ex
        The failure raised while serving the request.
    _params
        URI template parameters (unused).

    """
    if isinstance(ex, EncodingError):
        resp.status = falcon.HTTP_400
        resp.media = _failure_media(SAVE_FAILED_MESSAGE, str(ex))
        return

    log_error(
        logger,
        "Request %s %s failed: %s",
        req.method,
        req.path,
        ex,
        exc_info=ex,
    )
    resp.status = falcon.HTTP_500
    resp.media = _failure_media(SAVE_FAILED_MESSAGE, str(ex))
