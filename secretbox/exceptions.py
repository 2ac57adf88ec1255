"""Shared exceptions for the secretbox package.

Every error raised by seal/open and key loading derives from SecretBoxError,
so callers can catch the whole family with a single except clause.
"""


class SecretBoxError(Exception):
    """Base class for all secretbox errors."""

    pass


class ConfigurationError(SecretBoxError):
    """Raised when the encryption key cannot be loaded or is invalid.

    This indicates a deployment misconfiguration (missing secret, wrong key
    length) and is not retryable without operator intervention.

    Attributes:
        secret_name: Name of the secret involved in the failure, if known.

    Example:
        >>> raise ConfigurationError("key is not 32 bytes", secret_name="AES_KEY")
        ConfigurationError: key is not 32 bytes (secret_name=AES_KEY)
    """

    def __init__(self, message: str, secret_name: str | None = None) -> None:
        """Initialize ConfigurationError with message and optional secret name.

        Args:
            message: Human-readable error description.
            secret_name: Optional secret identifier for debugging context.
        """
        self.secret_name = secret_name
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with secret context if available."""
        if self.secret_name:
            return f"{super().__str__()} (secret_name={self.secret_name})"
        return super().__str__()


class SecretLookupError(ConfigurationError):
    """Raised by a secret provider when a secret is missing or undecodable."""

    pass


class MalformedInputError(SecretBoxError):
    """Raised when a sealed message is too short to contain a nonce."""

    pass


class AuthenticationError(SecretBoxError):
    """Raised when a sealed message fails authentication.

    The message is deliberately generic: a wrong key, a tampered ciphertext
    and a corrupted nonce all look the same to the caller.
    """

    pass


class RandomnessFailureError(SecretBoxError):
    """Raised when the operating system random source fails during seal."""

    pass
