"""Secret lookup contract and providers.

Example:
    ```python
    from api_collection_core.secrets import EnvironmentSecretProvider

    provider = EnvironmentSecretProvider(prefix="MYAPP_")
    api_key = await provider.resolve_secret("api-key")
    ```
"""

from api_collection_core.secrets.exceptions import (
    SecretError,
    SecretNotFoundError,
    SecretProviderError,
)
from api_collection_core.secrets.providers import (
    EnvironmentSecretProvider,
    FileSecretProvider,
    SecretProvider,
    SecretProviderChain,
)

__all__ = [
    "EnvironmentSecretProvider",
    "FileSecretProvider",
    "SecretError",
    "SecretNotFoundError",
    "SecretProvider",
    "SecretProviderChain",
    "SecretProviderError",
]
