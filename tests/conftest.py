"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import falcon.testing
import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from docbridge.api.app import AppDependencies, create_app
from docbridge.auth import CredentialManager, SigningIdentity
from docbridge.codec import DocumentCodec
from docbridge.store import DocumentStoreClient, DocumentStoreConfig
from tests.helpers import (
    PROJECT_ID,
    SERVICE_IDENTITY,
    STORE_ENDPOINT,
    TOKEN_URL,
    FakeClock,
    FakeStoreServer,
)

if typ.TYPE_CHECKING:
    import httpx


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """Generate one RSA key for the whole session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    """Return the session key as unencrypted PKCS8 PEM text."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def signing_identity(private_key_pem: str) -> SigningIdentity:
    """Provide a signing identity pointed at the fake token endpoint."""
    return SigningIdentity(
        service_identity=SERVICE_IDENTITY,
        private_key=private_key_pem,
        token_audience=TOKEN_URL,
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def store_server() -> FakeStoreServer:
    """Provide an empty in-memory token server and document store."""
    return FakeStoreServer()


@pytest.fixture
def store_config() -> DocumentStoreConfig:
    """Provide store configuration for the fake endpoint."""
    return DocumentStoreConfig(project_id=PROJECT_ID, endpoint=STORE_ENDPOINT)


@pytest_asyncio.fixture
async def http_client(
    store_server: FakeStoreServer,
) -> typ.AsyncIterator[httpx.AsyncClient]:
    """Yield an ``httpx.AsyncClient`` routed to the fake server."""
    client = store_server.client()
    yield client
    await client.aclose()


@pytest.fixture
def credential_manager(
    signing_identity: SigningIdentity,
    http_client: httpx.AsyncClient,
    fake_clock: FakeClock,
) -> CredentialManager:
    """Provide a credential manager using the fake server and clock."""
    return CredentialManager(
        signing_identity, http_client=http_client, clock=fake_clock
    )


@pytest.fixture
def store_client(
    store_config: DocumentStoreConfig,
    credential_manager: CredentialManager,
    http_client: httpx.AsyncClient,
) -> DocumentStoreClient:
    """Provide a store client wired to the fake server."""
    return DocumentStoreClient(
        store_config, credential_manager, http_client=http_client
    )


@pytest.fixture
def app_deps(
    signing_identity: SigningIdentity,
    store_server: FakeStoreServer,
    store_config: DocumentStoreConfig,
    fake_clock: FakeClock,
) -> AppDependencies:
    """Build full app dependencies backed by the fake server.

    Falcon's test client drives each request on its own event loop, so these
    collaborators are built synchronously rather than from async fixtures.
    """
    client = store_server.client()
    credentials = CredentialManager(
        signing_identity, http_client=client, clock=fake_clock
    )
    store = DocumentStoreClient(
        store_config,
        credentials,
        codec=DocumentCodec(clock=fake_clock),
        http_client=client,
    )
    return AppDependencies(store_client=store, credentials=credentials)


@pytest.fixture
def full_client(app_deps: AppDependencies) -> falcon.testing.TestClient:
    """Build a test client with the document endpoints."""
    return falcon.testing.TestClient(create_app(app_deps))


@pytest.fixture
def health_client() -> falcon.testing.TestClient:
    """Build a test client without store dependencies."""
    return falcon.testing.TestClient(create_app())
