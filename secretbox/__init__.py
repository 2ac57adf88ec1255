"""SecretBox: AES-256-GCM sealing of byte payloads under a process-wide key.

The key is read once, on first use, from the AES_KEY secret (a file in the
secrets directory or an environment variable of that name).
"""

from secretbox.encryption import (
    KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    KeyStore,
    SecretBox,
    configure_secret_provider,
    generate_key,
    get_key_store,
    open_sealed,
    reset_key_store,
    seal,
)
from secretbox.exceptions import (
    AuthenticationError,
    ConfigurationError,
    MalformedInputError,
    RandomnessFailureError,
    SecretBoxError,
    SecretLookupError,
)
from secretbox.secret_provider import EnvSecretProvider, SecretProvider

__all__ = [
    "KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "AuthenticationError",
    "ConfigurationError",
    "EnvSecretProvider",
    "KeyStore",
    "MalformedInputError",
    "RandomnessFailureError",
    "SecretBox",
    "SecretBoxError",
    "SecretLookupError",
    "SecretProvider",
    "configure_secret_provider",
    "generate_key",
    "get_key_store",
    "open_sealed",
    "reset_key_store",
    "seal",
]
