"""Factory for building store dependencies from environment configuration.

Usage
-----
Build the app dependencies for the runtime::

    from docbridge.api.factory import build_app_dependencies

    deps = build_app_dependencies()

"""

from __future__ import annotations

import os

from docbridge.api.app import AppDependencies
from docbridge.api.documents.resources import DEFAULT_COLLECTION
from docbridge.auth import CredentialManager, SigningIdentity
from docbridge.store import DocumentStoreClient, DocumentStoreConfig

__all__ = ["build_app_dependencies"]


def build_app_dependencies() -> AppDependencies:
    """Build ``AppDependencies`` from ``DOCBRIDGE_*`` environment variables.

    The credential manager and store client share the configured timeout.
    ``DOCBRIDGE_COLLECTION`` selects the collection (default
    ``received_data``).

    Raises
    ------
    CredentialConfigError
        If the signing identity variables are missing or blank.
    StoreConfigError
        If the project is missing or the timeout is invalid.

    """
    identity = SigningIdentity.from_env()
    config = DocumentStoreConfig.from_env()
    credentials = CredentialManager(identity, timeout_s=config.timeout_s)
    store_client = DocumentStoreClient(config, credentials)
    collection = os.environ.get("DOCBRIDGE_COLLECTION", "").strip()
    return AppDependencies(
        store_client=store_client,
        credentials=credentials,
        collection=collection or DEFAULT_COLLECTION,
    )
