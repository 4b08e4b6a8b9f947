"""Secret providers backing ``secret: true`` environment variables.

The variable resolver only needs the narrow ``SecretProvider`` contract:
an awaitable ``resolve_secret(name)`` returning the secret or None, which
may also raise. This module ships the contract plus three providers:

- ``EnvironmentSecretProvider``: process environment, optionally seeded
  from a ``.env`` file (python-dotenv).
- ``FileSecretProvider``: one secret per file in a directory.
- ``SecretProviderChain``: routes ``"provider:name"`` lookups to a named
  provider and tries every provider in order for bare names.

Example:
    ```python
    from api_collection_core.secrets import (
        EnvironmentSecretProvider,
        FileSecretProvider,
        SecretProviderChain,
    )

    secrets = SecretProviderChain(
        {
            "env": EnvironmentSecretProvider(prefix="MYAPP_"),
            "files": FileSecretProvider("/run/secrets"),
        }
    )
    token = await secrets.resolve_secret("files:api-token")
    ```

Security Considerations:
    - Secret values are never logged (masked with ***)
    - Only source information is logged (env var name, file path, provider)
    - Thread-safe dotenv loading with lock
"""

import asyncio
import logging
import os
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from threading import Lock
from typing import Protocol, runtime_checkable

from dotenv import load_dotenv

from api_collection_core.secrets.exceptions import SecretNotFoundError, SecretProviderError

logger = logging.getLogger(__name__)


@runtime_checkable
class SecretProvider(Protocol):
    """Lookup contract consumed by the variable resolver."""

    async def resolve_secret(self, name: str) -> str | None:
        """Return the secret stored under ``name``, or None if absent."""
        ...


def _mask(value: str | None) -> str:
    return "None" if value is None else "***"


class EnvironmentSecretProvider:
    """Resolve secrets from environment variables.

    A secret named ``api-key`` is looked up as ``<prefix>api-key`` first,
    then as ``<PREFIX>API_KEY`` (non-alphanumerics replaced by ``_``).

    With ``load_dotenv`` the process environment is seeded from a .env
    file once, on the first lookup, without overriding variables that are
    already set.
    """

    def __init__(self, *, prefix: str = "", dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize the provider.

        Args:
            prefix: Prepended to every secret name before lookup.
            dotenv_path: Path to a .env file. If None, python-dotenv searches
                parent directories for one.
            load_dotenv: Whether to load the .env file into the process
                environment on first lookup (existing variables are never
                overridden).
        """
        self.prefix = prefix
        self.dotenv_path = dotenv_path
        self._seed_pending = load_dotenv
        self._seed_lock = Lock()

    def _environ(self) -> Mapping[str, str]:
        if self._seed_pending:
            with self._seed_lock:
                if self._seed_pending:
                    try:
                        found = load_dotenv(dotenv_path=self.dotenv_path, override=False)
                        logger.debug(f"Seeded environment for secret lookups (.env found: {found})")
                    except (OSError, UnicodeDecodeError) as e:
                        logger.warning(f"Failed to load .env file for secret lookups: {e}")
                    self._seed_pending = False
        return os.environ

    def candidate_names(self, name: str) -> list[str]:
        """Environment variable names tried for ``name``, in order."""
        exact = f"{self.prefix}{name}"
        normalized = re.sub(r"[^A-Za-z0-9_]", "_", exact).upper()
        return [exact] if normalized == exact else [exact, normalized]

    def resolve(self, name: str, *, required: bool = False) -> str | None:
        """Resolve a secret synchronously.

        Args:
            name: Secret name.
            required: If True, raise when the secret is not set.

        Returns:
            The secret value, or None when absent and not required.

        Raises:
            SecretNotFoundError: If ``required`` and no candidate is set.
        """
        environ = self._environ()
        for env_var_name in self.candidate_names(name):
            if env_var_name in environ:
                value = environ[env_var_name]
                logger.debug(f"Resolved secret '{name}' from environment variable '{env_var_name}': {_mask(value)}")
                return value

        if required:
            raise SecretNotFoundError(f"Required secret not found (checked env var: {self.prefix}{name})", name=name)
        return None

    async def resolve_secret(self, name: str) -> str | None:
        return self.resolve(name)


class FileSecretProvider:
    """Resolve secrets stored one per file, as in ``/run/secrets``.

    File contents are stripped of surrounding whitespace. A missing file
    means the secret is absent; any other read failure raises
    ``SecretProviderError``.
    """

    def __init__(self, directory: str | Path):
        """Initialize the provider.

        Args:
            directory: Directory holding the secret files. Supports ``~``
                and ``$VAR`` expansion.
        """
        self.directory = Path(os.path.expanduser(os.path.expandvars(str(directory))))

    def _path_for(self, name: str) -> Path:
        candidate = (self.directory / name).resolve()
        if self.directory.resolve() not in candidate.parents:
            raise SecretProviderError(f"Secret name escapes the secrets directory: {name!r}", provider="file")
        return candidate

    def read(self, name: str) -> str | None:
        """Read a secret synchronously.

        Raises:
            SecretProviderError: If the file exists but cannot be read, or
                the name points outside the directory.
        """
        path_obj = self._path_for(name)
        try:
            content = path_obj.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            logger.debug(f"Secret file not found: {path_obj}")
            return None
        except PermissionError:
            raise SecretProviderError(f"Permission denied reading secret file: {path_obj}", provider="file") from None
        except (OSError, UnicodeDecodeError) as e:
            raise SecretProviderError(f"Error reading secret file {path_obj}: {e}", provider="file") from e

        logger.debug(f"Resolved secret '{name}' from file: {path_obj} (***)")
        return content

    async def resolve_secret(self, name: str) -> str | None:
        return await asyncio.to_thread(self.read, name)


class SecretProviderChain:
    """Orchestrates several named providers.

    ``"provider:name"`` goes to that provider only (None if it is not
    registered). A bare name is tried against every provider in
    registration order; the first non-None value wins. A provider that
    raises is logged and skipped.
    """

    def __init__(self, providers: Mapping[str, SecretProvider] | Iterable[tuple[str, SecretProvider]]):
        items = providers.items() if isinstance(providers, Mapping) else providers
        self._providers: dict[str, SecretProvider] = dict(items)

    def provider_names(self) -> list[str]:
        return list(self._providers)

    async def resolve_secret(self, name: str) -> str | None:
        provider_name, sep, secret_name = name.partition(":")
        if sep and provider_name:
            provider = self._providers.get(provider_name)
            if provider is None:
                logger.debug(f"No secret provider named '{provider_name}' for secret '{secret_name}'")
                return None
            return await provider.resolve_secret(secret_name)

        for registered_name, provider in self._providers.items():
            try:
                value = await provider.resolve_secret(name)
            except Exception as e:
                logger.warning(f"Secret provider '{registered_name}' failed to resolve '{name}': {e}")
                continue
            if value is not None:
                return value
        return None
