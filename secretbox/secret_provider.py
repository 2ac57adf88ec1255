"""Secret providers for loading the encryption key.

A provider turns a secret name into raw key bytes. The default provider reads
a mounted secret file first (e.g. Docker/Kubernetes secrets under
/run/secrets) and falls back to an environment variable of the same name.

Usage:
    from secretbox.secret_provider import EnvSecretProvider

    provider = EnvSecretProvider()
    key = provider.get_secret_value("AES_KEY")

Security Notes:
    - NEVER log or include secret values in exception messages
    - Secret files should be readable only by the service user
"""

import base64
import binascii
import os
from pathlib import Path
from typing import Protocol

from secretbox.config import get_key_encoding, get_secrets_dir
from secretbox.exceptions import SecretLookupError


class SecretProvider(Protocol):
    """Lookup interface for secret material.

    Attributes:
        last_source: Where the last successful lookup came from (e.g. "file",
            "env"), or None if unknown. Logged when the key is loaded.
    """

    last_source: str | None

    def get_secret_value(self, name: str) -> bytes:
        """Return the decoded secret bytes for ``name``.

        Raises:
            SecretLookupError: If the secret is missing or cannot be decoded.
        """
        ...


def decode_secret(value: str, encoding: str) -> bytes:
    """Decode a textual secret value into bytes.

    Args:
        value: Secret as read from a file or environment variable.
        encoding: One of "base64", "hex", "raw".

    Returns:
        Decoded secret bytes.

    Raises:
        ValueError: If the value is not valid for the given encoding.
    """
    if encoding == "raw":
        return value.encode()
    if encoding == "hex":
        return bytes.fromhex(value)
    if encoding == "base64":
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise ValueError("invalid base64 value") from e
    raise ValueError(f"unsupported encoding: {encoding}")


class EnvSecretProvider:
    """Resolve secrets from a secrets directory, then from the environment.

    Attributes:
        secrets_dir: Directory holding one file per secret. Defaults to
            SECRETS_DIR (see secretbox.config).
        encoding: Encoding of the stored values. Defaults to AES_KEY_ENCODING.

    Example:
        >>> provider = EnvSecretProvider(encoding="hex")
        >>> key = provider.get_secret_value("AES_KEY")
    """

    def __init__(self, secrets_dir: str | None = None, encoding: str | None = None) -> None:
        self.secrets_dir = secrets_dir
        self.encoding = encoding
        self.last_source: str | None = None

    def _read_raw(self, name: str) -> tuple[str, str] | None:
        """Return (value, source) for ``name`` or None if not configured."""
        secret_file = Path(self.secrets_dir or get_secrets_dir()) / name
        if secret_file.is_file():
            try:
                value = secret_file.read_text().rstrip("\r\n")
            except OSError as e:
                raise SecretLookupError(
                    f"Cannot read secret file: {type(e).__name__}", secret_name=name
                ) from e
            if value:
                return value, "file"

        value = os.environ.get(name, "").rstrip("\r\n")
        if value:
            return value, "env"
        return None

    def get_secret_value(self, name: str) -> bytes:
        """Look up and decode the secret ``name``.

        Args:
            name: Secret identifier, used as both file name and env var name.

        Returns:
            Decoded secret bytes.

        Raises:
            SecretLookupError: If the secret is not set, unreadable, or not
                valid for the configured encoding.
        """
        found = self._read_raw(name)
        if found is None:
            raise SecretLookupError(
                f"{name} is not set: provide it as an environment variable "
                f"or a file in the secrets directory",
                secret_name=name,
            )
        value, source = found
        encoding = self.encoding or get_key_encoding()
        try:
            decoded = decode_secret(value, encoding)
        except ValueError as e:
            raise SecretLookupError(
                f"Invalid {name} format: expected {encoding}-encoded value",
                secret_name=name,
            ) from e
        self.last_source = source
        return decoded
