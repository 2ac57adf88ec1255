"""Configuration management for secretbox.

All values are read from environment variables on each call, so tests and
process startup code can adjust them with plain environment changes.

Environment Variables:
    SECRETS_DIR: Directory holding mounted secret files (default: "/run/secrets")
    AES_KEY_ENCODING: Encoding of the AES_KEY secret value: "base64" (default),
        "hex" or "raw"

Usage:
    from secretbox.config import get_key_encoding, get_secret_key_name

    name = get_secret_key_name()  # "AES_KEY"
    encoding = get_key_encoding()  # "base64" unless overridden
"""

import os

import structlog

log = structlog.get_logger(__name__)

SECRET_KEY_NAME = "AES_KEY"
DEFAULT_SECRETS_DIR = "/run/secrets"
DEFAULT_KEY_ENCODING = "base64"
KEY_ENCODINGS = ("base64", "hex", "raw")


def get_secret_key_name() -> str:
    """Get the identifier used to look up the encryption key.

    Returns:
        The fixed secret name "AES_KEY".
    """
    return SECRET_KEY_NAME


def get_secrets_dir() -> str:
    """Get the secrets mount directory from environment.

    Environment Variable:
        SECRETS_DIR: Path to mounted secret files (default: "/run/secrets")

    Returns:
        Directory path string.
    """
    return os.getenv("SECRETS_DIR", DEFAULT_SECRETS_DIR)


def get_key_encoding() -> str:
    """Get the encoding used for the key secret value.

    Environment Variable:
        AES_KEY_ENCODING: One of "base64", "hex", "raw" (default: "base64")

    Returns:
        Normalized encoding name.

    Note:
        Unknown values fall back to "base64" and log a warning.
    """
    encoding = os.getenv("AES_KEY_ENCODING", DEFAULT_KEY_ENCODING).strip().lower()
    if encoding not in KEY_ENCODINGS:
        log.warning(
            "invalid_key_encoding",
            value=encoding,
            using_default=DEFAULT_KEY_ENCODING,
        )
        return DEFAULT_KEY_ENCODING
    return encoding
