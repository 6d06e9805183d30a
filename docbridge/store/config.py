"""Configuration for the document store client."""

from __future__ import annotations

import dataclasses
import math
import os

from docbridge.errors import StoreConfigError

_DEFAULT_ENDPOINT = "https://firestore.googleapis.com/v1"
_DEFAULT_DATABASE = "(default)"
_DEFAULT_TIMEOUT_S = 20.0


@dataclasses.dataclass(frozen=True, slots=True)
class DocumentStoreConfig:
    """Configuration for :class:`~docbridge.store.client.DocumentStoreClient`.

    Attributes
    ----------
    project_id
        Project that owns the database.
    endpoint
        Base URL of the REST API, without a trailing slash.
    database
        Database identifier within the project.
    timeout_s
        Bound on each store request, in seconds.
    page_size
        Documents requested per listing page; ``None`` leaves the choice to
        the store.

    """

    project_id: str
    endpoint: str = _DEFAULT_ENDPOINT
    database: str = _DEFAULT_DATABASE
    timeout_s: float = _DEFAULT_TIMEOUT_S
    page_size: int | None = None

    @property
    def documents_url(self) -> str:
        """Return the URL of the database's document root."""
        base = self.endpoint.rstrip("/")
        return (
            f"{base}/projects/{self.project_id}/databases/{self.database}/documents"
        )

    @staticmethod
    def _parse_timeout_from_env() -> float:
        """Parse and validate ``DOCBRIDGE_TIMEOUT_S``.

        Raises
        ------
        StoreConfigError
            If the value is not a positive finite number.

        """
        raw_timeout = os.environ.get("DOCBRIDGE_TIMEOUT_S")
        if raw_timeout is None:
            return _DEFAULT_TIMEOUT_S

        try:
            timeout_s = float(raw_timeout)
        except ValueError as exc:
            raise StoreConfigError.invalid_timeout(raw_timeout) from exc

        if not math.isfinite(timeout_s) or timeout_s <= 0:
            raise StoreConfigError.invalid_timeout(raw_timeout)

        return timeout_s

    @classmethod
    def from_env(cls) -> DocumentStoreConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``DOCBRIDGE_PROJECT_ID``: Required project identifier
        - ``DOCBRIDGE_STORE_ENDPOINT``: Optional REST endpoint override
        - ``DOCBRIDGE_TIMEOUT_S``: Optional request timeout in seconds

        Raises
        ------
        StoreConfigError
            If the project is missing or the timeout is invalid.

        """
        project_id = os.environ.get("DOCBRIDGE_PROJECT_ID", "").strip()
        if not project_id:
            raise StoreConfigError.missing_project()

        endpoint = os.environ.get("DOCBRIDGE_STORE_ENDPOINT", _DEFAULT_ENDPOINT)

        return cls(
            project_id=project_id,
            endpoint=endpoint,
            timeout_s=cls._parse_timeout_from_env(),
        )
