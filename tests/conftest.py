"""Shared pytest fixtures for secretbox tests.

Provides fixed key material, an in-memory secret provider and an autouse
fixture that resets the process-wide key store around every test.
"""

import base64

import pytest

from secretbox.encryption import reset_key_store
from tests.support.providers import StaticSecretProvider


@pytest.fixture
def key_bytes() -> bytes:
    """32 bytes of 0x01."""
    return b"\x01" * 32


@pytest.fixture
def other_key_bytes() -> bytes:
    """A second valid key, different from key_bytes."""
    return b"\x02" * 32


@pytest.fixture
def static_provider(key_bytes: bytes) -> StaticSecretProvider:
    """Secret provider returning key_bytes."""
    return StaticSecretProvider(key_bytes)


@pytest.fixture(autouse=True)
def reset_default_key_store(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Reset the process-wide key store before and after each test.

    SECRETS_DIR points at an empty directory so a host's /run/secrets never
    leaks into tests.
    """
    monkeypatch.setenv("SECRETS_DIR", str(tmp_path / "no-secrets"))
    monkeypatch.delenv("AES_KEY", raising=False)
    monkeypatch.delenv("AES_KEY_ENCODING", raising=False)
    reset_key_store()
    yield
    reset_key_store()


@pytest.fixture
def aes_key_env(key_bytes: bytes, monkeypatch: pytest.MonkeyPatch) -> bytes:
    """Set AES_KEY to base64-encoded key_bytes."""
    monkeypatch.setenv("AES_KEY", base64.b64encode(key_bytes).decode())
    return key_bytes
