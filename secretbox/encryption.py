"""AES-256-GCM authenticated encryption with a lazily loaded process key.

This module provides seal/open operations over byte payloads. The 256-bit key
is fetched from a secret provider on first use and kept for the rest of the
process lifetime.

Sealed messages have the layout::

    nonce (12 bytes) || ciphertext (len(plaintext) bytes) || tag (16 bytes)

There is no version byte, no length prefix and no associated data.

Usage:
    from secretbox import open_sealed, seal

    sealed = seal(b"my-secret")
    assert open_sealed(sealed) == b"my-secret"

Security Notes:
    - NEVER log or expose the key, plaintext or ciphertext
    - Set AES_KEY (env var or secrets file) to a base64-encoded 32-byte key,
      generated with `scripts/generate_aes_key.py`
    - Ciphertexts are not bound to any context; swapping two sealed values
      between records is not detected
"""

import secrets
import threading

import structlog
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from secretbox.config import get_secret_key_name
from secretbox.exceptions import (
    AuthenticationError,
    ConfigurationError,
    MalformedInputError,
    RandomnessFailureError,
)
from secretbox.secret_provider import EnvSecretProvider, SecretProvider

log = structlog.get_logger(__name__)

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16


class KeyStore:
    """Holds the process encryption key, loading it at most once.

    The key is fetched from ``provider`` on the first call to ensure_key()
    that succeeds. A failed load leaves the store uninitialized, so a later
    call tries again. Once loaded, the key never changes.

    Attributes:
        provider: Secret provider queried for the key.
        secret_name: Identifier passed to the provider (default "AES_KEY").

    Example:
        >>> store = KeyStore(EnvSecretProvider())
        >>> key = store.ensure_key()
        >>> len(key)
        32
    """

    def __init__(self, provider: SecretProvider, secret_name: str | None = None) -> None:
        self.provider = provider
        self.secret_name = secret_name or get_secret_key_name()
        self._key: bytes | None = None
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        """Whether the key has been loaded."""
        return self._initialized

    def ensure_key(self) -> bytes:
        """Return the key, loading it from the provider on first use.

        Concurrent first callers block on a lock; exactly one performs the
        fetch and the rest observe its result.

        Returns:
            The 32-byte key.

        Raises:
            ConfigurationError: If the lookup fails or the key is not 32 bytes.
        """
        if self._initialized:
            return self._key

        with self._lock:
            if not self._initialized:
                self._key = self._load()
                self._initialized = True
        return self._key

    def _load(self) -> bytes:
        try:
            material = self.provider.get_secret_value(self.secret_name)
        except Exception as e:
            log.error(
                "secret_key_load_failed",
                secret_name=self.secret_name,
                reason=type(e).__name__,
            )
            if isinstance(e, ConfigurationError):
                raise
            # Custom providers may raise arbitrary exceptions
            raise ConfigurationError(
                f"Secret lookup failed: {type(e).__name__}",
                secret_name=self.secret_name,
            ) from e

        if not isinstance(material, (bytes, bytearray)):
            log.error(
                "secret_key_load_failed",
                secret_name=self.secret_name,
                reason="wrong_type",
            )
            raise ConfigurationError(
                f"Secret lookup returned {type(material).__name__}, expected bytes",
                secret_name=self.secret_name,
            )

        if len(material) != KEY_SIZE:
            log.error(
                "secret_key_load_failed",
                secret_name=self.secret_name,
                reason="wrong_length",
                length=len(material),
            )
            raise ConfigurationError("key is not 32 bytes", secret_name=self.secret_name)

        log.info(
            "secret_key_loaded",
            secret_name=self.secret_name,
            source=self.provider.last_source,
        )
        return bytes(material)


def _cipher(key: bytes) -> AESGCM:
    try:
        return AESGCM(key)
    except ValueError as e:
        raise ConfigurationError(f"Cannot construct AES-GCM cipher: {e}") from e


def _random_nonce() -> bytes:
    try:
        return secrets.token_bytes(NONCE_SIZE)
    except (OSError, NotImplementedError) as e:
        raise RandomnessFailureError(
            f"Secure random source failed: {type(e).__name__}"
        ) from e


def seal_with_store(store: KeyStore, plaintext: bytes) -> bytes:
    """Encrypt and authenticate ``plaintext`` with the key held by ``store``.

    Args:
        store: Key store supplying the key.
        plaintext: Bytes-like payload; may be empty.

    Returns:
        nonce || ciphertext || tag, NONCE_SIZE + len(plaintext) + TAG_SIZE bytes.

    Raises:
        ConfigurationError: If the key cannot be loaded.
        RandomnessFailureError: If no nonce can be drawn.
        TypeError: If ``plaintext`` is not bytes-like.
    """
    aead = _cipher(store.ensure_key())
    nonce = _random_nonce()
    return nonce + aead.encrypt(nonce, bytes(memoryview(plaintext)), None)


def open_with_store(store: KeyStore, sealed: bytes) -> bytes:
    """Verify and decrypt a sealed message with the key held by ``store``.

    Args:
        store: Key store supplying the key.
        sealed: nonce || ciphertext || tag as produced by seal.

    Returns:
        The original plaintext.

    Raises:
        ConfigurationError: If the key cannot be loaded.
        TypeError: If ``sealed`` is not bytes-like.
        MalformedInputError: If ``sealed`` is shorter than the nonce.
        AuthenticationError: If the message was tampered with or sealed
            under a different key.
    """
    aead = _cipher(store.ensure_key())
    sealed = bytes(memoryview(sealed))

    if len(sealed) < NONCE_SIZE:
        log.warning("sealed_message_rejected", reason="malformed", length=len(sealed))
        raise MalformedInputError("malformed ciphertext")

    nonce, body = sealed[:NONCE_SIZE], sealed[NONCE_SIZE:]
    if len(body) < TAG_SIZE:
        log.warning("sealed_message_rejected", reason="authentication", length=len(sealed))
        raise AuthenticationError("message authentication failed")

    try:
        return aead.decrypt(nonce, body, None)
    except InvalidTag as e:
        log.warning("sealed_message_rejected", reason="authentication", length=len(sealed))
        raise AuthenticationError("message authentication failed") from e


def generate_key() -> bytes:
    """Generate a fresh random 256-bit key.

    Raises:
        RandomnessFailureError: If the OS random source fails.
    """
    try:
        return secrets.token_bytes(KEY_SIZE)
    except (OSError, NotImplementedError) as e:
        raise RandomnessFailureError(
            f"Secure random source failed: {type(e).__name__}"
        ) from e


class SecretBox:
    """Object form of seal/open bound to its own key store.

    Example:
        >>> box = SecretBox(EnvSecretProvider())
        >>> box.open(box.seal(b"token"))
        b'token'
    """

    def __init__(self, provider: SecretProvider | None = None) -> None:
        self.key_store = KeyStore(provider or EnvSecretProvider())

    def seal(self, plaintext: bytes) -> bytes:
        """Encrypt ``plaintext``; see seal_with_store."""
        return seal_with_store(self.key_store, plaintext)

    def open(self, sealed: bytes) -> bytes:
        """Decrypt ``sealed``; see open_with_store."""
        return open_with_store(self.key_store, sealed)


_default_store = KeyStore(EnvSecretProvider())
_default_store_lock = threading.Lock()


def get_key_store() -> KeyStore:
    """Return the process-wide key store used by seal/open_sealed."""
    return _default_store


def configure_secret_provider(provider: SecretProvider) -> KeyStore:
    """Install a new process-wide key store backed by ``provider``.

    Intended for process startup, before the first seal/open call. Any key
    already loaded is discarded.

    Returns:
        The new key store.
    """
    global _default_store
    with _default_store_lock:
        _default_store = KeyStore(provider)
        return _default_store


def reset_key_store() -> None:
    """Discard the process-wide key (for testing only).

    The next seal/open call reloads the key from the default environment
    provider. Should NOT be used in production code.
    """
    configure_secret_provider(EnvSecretProvider())


def seal(plaintext: bytes) -> bytes:
    """Encrypt ``plaintext`` with the process key.

    Returns:
        nonce || ciphertext || tag.

    Raises:
        ConfigurationError: If AES_KEY is missing or not 32 bytes.
        RandomnessFailureError: If the OS random source fails.

    Example:
        >>> sealed = seal(b"hello")
        >>> len(sealed)
        33
    """
    return seal_with_store(get_key_store(), plaintext)


def open_sealed(sealed: bytes) -> bytes:
    """Decrypt a message produced by seal() with the process key.

    Raises:
        ConfigurationError: If AES_KEY is missing or not 32 bytes.
        MalformedInputError: If ``sealed`` is shorter than 12 bytes.
        AuthenticationError: If authentication fails.

    Example:
        >>> open_sealed(seal(b"hello"))
        b'hello'
    """
    return open_with_store(get_key_store(), sealed)
