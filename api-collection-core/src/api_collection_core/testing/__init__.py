"""Testing utilities for code built on api-collection-core.

Provides in-memory stand-ins for the external collaborators the resolver
consumes: secret providers and the active-environment selection.

Example:
    ```python
    from api_collection_core.testing import InMemorySecretProvider, static_environment_lookup
    from api_collection_core.variables import VariableResolver

    resolver = VariableResolver(
        secret_provider=InMemorySecretProvider({"apiKey": "secret-123"}),
        active_environment=static_environment_lookup({"my-collection": "dev"}),
    )
    ```
"""

import asyncio
from collections.abc import Callable, Mapping

from api_collection_core.secrets.exceptions import SecretProviderError


class InMemorySecretProvider:
    """Serves secrets from a dict and records every lookup."""

    def __init__(self, secrets: Mapping[str, str] | None = None, *, delay: float = 0.0):
        self.secrets = dict(secrets or {})
        self.delay = delay
        self.lookups: list[str] = []

    async def resolve_secret(self, name: str) -> str | None:
        self.lookups.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.secrets.get(name)


class FailingSecretProvider:
    """Raises on every lookup, like an unreachable secret backend."""

    def __init__(self, message: str = "secret backend unavailable"):
        self.message = message
        self.lookups: list[str] = []

    async def resolve_secret(self, name: str) -> str | None:
        self.lookups.append(name)
        raise SecretProviderError(self.message, provider="failing")


def static_environment_lookup(selection: Mapping[str, str]) -> Callable[[str], str | None]:
    """Active-environment lookup backed by a fixed collection id → name map."""
    frozen = dict(selection)
    return frozen.get


__all__ = [
    "FailingSecretProvider",
    "InMemorySecretProvider",
    "static_environment_lookup",
]
