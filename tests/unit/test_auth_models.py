"""Unit tests for signing identity and credential models."""

from __future__ import annotations

import datetime as dt
import os
from unittest import mock

import pytest

from docbridge.auth import (
    DEFAULT_SCOPE,
    DEFAULT_TOKEN_AUDIENCE,
    Credential,
    CredentialConfigError,
    SigningIdentity,
)

_OBTAINED = dt.datetime(2025, 1, 2, 3, 0, 0, tzinfo=dt.UTC)


class TestSigningIdentityFromEnv:
    """Tests for SigningIdentity.from_env."""

    def test_reads_required_and_default_values(self) -> None:
        """Required variables are read and optional ones default."""
        env = {
            "DOCBRIDGE_CLIENT_EMAIL": " svc@example.test ",
            "DOCBRIDGE_PRIVATE_KEY": "pem",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            identity = SigningIdentity.from_env()

        assert identity.service_identity == "svc@example.test"
        assert identity.private_key == "pem"
        assert identity.token_audience == DEFAULT_TOKEN_AUDIENCE
        assert identity.scope == DEFAULT_SCOPE

    def test_optional_overrides(self) -> None:
        """Token URI and scope can be overridden."""
        env = {
            "DOCBRIDGE_CLIENT_EMAIL": "svc@example.test",
            "DOCBRIDGE_PRIVATE_KEY": "pem",
            "DOCBRIDGE_TOKEN_URI": "https://auth.example.test/token",
            "DOCBRIDGE_SCOPE": "custom.scope",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            identity = SigningIdentity.from_env()

        assert identity.token_audience == "https://auth.example.test/token"
        assert identity.scope == "custom.scope"

    def test_missing_variable_raises(self) -> None:
        """A missing client email is a configuration error."""
        with (
            mock.patch.dict(os.environ, {"DOCBRIDGE_PRIVATE_KEY": "pem"}, clear=True),
            pytest.raises(CredentialConfigError, match="DOCBRIDGE_CLIENT_EMAIL"),
        ):
            SigningIdentity.from_env()

    def test_blank_variable_raises(self) -> None:
        """A whitespace-only private key is a configuration error."""
        env = {"DOCBRIDGE_CLIENT_EMAIL": "svc@example.test", "DOCBRIDGE_PRIVATE_KEY": " "}
        with (
            mock.patch.dict(os.environ, env, clear=True),
            pytest.raises(CredentialConfigError, match="non-empty"),
        ):
            SigningIdentity.from_env()

    def test_private_key_is_hidden_from_repr(self) -> None:
        """The key never appears in the dataclass repr."""
        identity = SigningIdentity(service_identity="svc", private_key="secret-pem")
        assert "secret-pem" not in repr(identity)


class TestCredentialFreshness:
    """Tests for Credential.is_fresh."""

    def test_fresh_inside_lifetime_minus_margin(self) -> None:
        """A token younger than lifetime minus margin is fresh."""
        credential = Credential(token="t", obtained_at=_OBTAINED, expires_in_s=3600)
        now = _OBTAINED + dt.timedelta(seconds=3539)
        assert credential.is_fresh(now, margin_s=60)

    def test_stale_at_margin_boundary(self) -> None:
        """A token exactly at lifetime minus margin is no longer fresh."""
        credential = Credential(token="t", obtained_at=_OBTAINED, expires_in_s=3600)
        now = _OBTAINED + dt.timedelta(seconds=3540)
        assert not credential.is_fresh(now, margin_s=60)

    def test_short_lifetimes_are_immediately_stale(self) -> None:
        """Lifetimes shorter than the margin are never fresh."""
        credential = Credential(token="t", obtained_at=_OBTAINED, expires_in_s=30)
        assert not credential.is_fresh(_OBTAINED, margin_s=60)
