"""Structured log events for credential and document store operations.

Every event is a single pre-formatted line of the form
``[event.type] key=value ...`` so log aggregators can parse it without a
structured handler.

Usage
-----
>>> events = StoreEventLogger()
>>> events.log_documents_listed(collection="received_data", count=3)

"""

from __future__ import annotations

import enum

from docbridge.errors import (
    AuthenticationError,
    CredentialConfigError,
    CredentialTimeoutError,
    EncodingError,
    StoreConfigError,
    StoreOperationError,
    StoreResponseShapeError,
    StoreTimeoutError,
)
from docbridge.logging import get_logger, log_error, log_info, log_warning

logger = get_logger(__name__)

# HTTP status code threshold for server errors (5xx)
_HTTP_SERVER_ERROR_THRESHOLD = 500


class StoreEventType(enum.StrEnum):
    """Structured log event types."""

    CREDENTIAL_ACQUIRED = "credential.acquired"
    CREDENTIAL_FAILED = "credential.failed"
    DOCUMENT_CREATED = "store.document.created"
    DOCUMENTS_LISTED = "store.documents.listed"
    OPERATION_FAILED = "store.operation.failed"
    LIST_DEGRADED = "store.documents.degraded"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in alerts."""

    TRANSIENT = "transient"
    TIMEOUT = "timeout"
    CLIENT_ERROR = "client_error"
    AUTHENTICATION = "authentication"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    ENCODING = "encoding"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (CredentialTimeoutError, ErrorCategory.TIMEOUT),
    (StoreTimeoutError, ErrorCategory.TIMEOUT),
    (AuthenticationError, ErrorCategory.AUTHENTICATION),
    (StoreResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (CredentialConfigError, ErrorCategory.CONFIGURATION),
    (StoreConfigError, ErrorCategory.CONFIGURATION),
    (EncodingError, ErrorCategory.ENCODING),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for alert routing."""
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    if isinstance(exc, StoreOperationError):
        if exc.status_code is None or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    return ErrorCategory.UNKNOWN


class StoreEventLogger:
    """Emit structured credential and store events via femtologging."""

    def log_credential_acquired(self, *, issuer: str, expires_in_s: int) -> None:
        """Log a successful token exchange."""
        log_info(
            logger,
            "[%s] issuer=%s expires_in_s=%d",
            StoreEventType.CREDENTIAL_ACQUIRED,
            issuer,
            expires_in_s,
        )

    def log_credential_failed(self, *, issuer: str, error: BaseException) -> None:
        """Log a failed token acquisition with its category."""
        log_error(
            logger,
            "[%s] issuer=%s error_type=%s error_category=%s error_message=%s",
            StoreEventType.CREDENTIAL_FAILED,
            issuer,
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_document_created(self, *, collection: str, document_id: str) -> None:
        """Log a created document."""
        log_info(
            logger,
            "[%s] collection=%s document_id=%s",
            StoreEventType.DOCUMENT_CREATED,
            collection,
            document_id,
        )

    def log_documents_listed(
        self, *, collection: str, count: int, pages: int = 1
    ) -> None:
        """Log a completed collection listing."""
        log_info(
            logger,
            "[%s] collection=%s count=%d pages=%d",
            StoreEventType.DOCUMENTS_LISTED,
            collection,
            count,
            pages,
        )

    def log_operation_failed(
        self, *, operation: str, collection: str, error: BaseException
    ) -> None:
        """Log a failed store operation with its category."""
        log_error(
            logger,
            "[%s] operation=%s collection=%s error_type=%s error_category=%s "
            "error_message=%s",
            StoreEventType.OPERATION_FAILED,
            operation,
            collection,
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_list_degraded(self, *, collection: str, error: BaseException) -> None:
        """Log a listing failure that was served as an empty result."""
        log_warning(
            logger,
            "[%s] collection=%s error_type=%s error_category=%s",
            StoreEventType.LIST_DEGRADED,
            collection,
            type(error).__name__,
            categorize_error(error),
        )
