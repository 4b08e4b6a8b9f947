"""Custom exceptions for secret lookups.

Providers may raise these from ``resolve_secret``; the variable resolver
treats any raised exception exactly like a missing secret.

Example:
    ```python
    from api_collection_core.secrets.exceptions import SecretProviderError

    raise SecretProviderError("vault sealed", provider="vault")
    ```
"""


class SecretError(Exception):
    """Base exception for secret-related errors.

    All secret-specific exceptions inherit from this class,
    making it easy to catch any secret-related error.
    """

    pass


class SecretNotFoundError(SecretError):
    """Raised when a secret that must exist cannot be found.

    Attributes:
        name: The secret name that was looked up.
    """

    def __init__(self, message: str, name: str | None = None):
        """Initialize SecretNotFoundError.

        Args:
            message: Error message describing what secret is missing.
            name: Optional secret name for reference.
        """
        super().__init__(message)
        self.name = name


class SecretProviderError(SecretError):
    """Raised when a provider fails (unreadable file, backend error, ...).

    Attributes:
        provider: Name of the failing provider, if known.
    """

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider
