"""Multi-source variable resolution.

Merges every variable source that applies to a request into one
``name → ResolvedVariable`` map, then resolves references between values.

Resolution order (lowest to highest priority):
1. Global variables (user/workspace scope)
2. Collection request variables
3. Folder defaults variables
4. The active environment:
   a. its ``.env`` file (python-dotenv)
   b. its own entries; ``secret: true`` entries via the secret provider
   c. variables inherited through ``extends`` (non-secret, absent names only)
5. Caller overrides

No stage raises: an unreadable file, a missing parent environment or a
failing secret provider simply contributes nothing.

Example:
    ```python
    from api_collection_core.secrets import EnvironmentSecretProvider
    from api_collection_core.variables import VariableResolver

    resolver = VariableResolver(
        secret_provider=EnvironmentSecretProvider(prefix="MYAPP_"),
        active_environment=selection.get,  # collection id -> environment name
    )
    resolved = await resolver.resolve(collection, folder_defaults)
    resolved["host"].value, resolved["host"].source
    ```
"""

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping

from api_collection_core.models.collection import Collection, Environment
from api_collection_core.models.request import RequestDefaults
from api_collection_core.models.variables import (
    ResolvedVariable,
    ResolvedVariableMap,
    SecretVariable,
    Variable,
    VariableSource,
    values_of,
)
from api_collection_core.secrets.providers import SecretProvider
from api_collection_core.variables.dotenv_files import load_dotenv_file
from api_collection_core.variables.interpolation import interpolate_all

logger = logging.getLogger(__name__)

ActiveEnvironmentLookup = Callable[[str], str | None]

DEFAULT_SECRET_TIMEOUT = 10.0


class VariableResolver:
    """Resolve the effective variables of a collection, folder and environment.

    The resolver holds only injected collaborators; each ``resolve`` call
    builds a fresh map, so one resolver can serve concurrent requests.

    Args:
        secret_provider: Looks up ``secret: true`` environment variables.
            Without one, secret variables stay unresolved.
        active_environment: Returns the selected environment name for a
            collection id. Used when ``resolve`` gets no explicit name.
        global_variables: User/workspace variables, lowest priority.
        secret_timeout: Seconds to wait for a single secret lookup.
    """

    def __init__(
        self,
        *,
        secret_provider: SecretProvider | None = None,
        active_environment: ActiveEnvironmentLookup | None = None,
        global_variables: Iterable[Variable] | None = None,
        secret_timeout: float = DEFAULT_SECRET_TIMEOUT,
    ) -> None:
        self.secret_provider = secret_provider
        self.active_environment = active_environment
        self.global_variables = tuple(global_variables or ())
        self.secret_timeout = secret_timeout

    async def resolve(
        self,
        collection: Collection,
        folder_defaults: RequestDefaults | None = None,
        environment: str | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> ResolvedVariableMap:
        """Resolve all variables visible to a request.

        Args:
            collection: The owning collection.
            folder_defaults: Defaults of the folder the request sits in.
            environment: Environment name to use instead of the active one.
            overrides: Caller-supplied values, applied above every source.

        Returns:
            A new map of name to value and source, with references between
            values interpolated.
        """
        resolved: ResolvedVariableMap = {}

        self._apply_variables(resolved, self.global_variables, VariableSource.GLOBAL)
        self._apply_variables(resolved, collection.request.variables, VariableSource.COLLECTION)
        if folder_defaults is not None:
            self._apply_variables(resolved, folder_defaults.variables, VariableSource.FOLDER)

        env_name = environment or self._active_environment_name(collection)
        if env_name:
            env = collection.find_environment(env_name)
            if env is None:
                logger.warning(f"Environment '{env_name}' not found in collection '{collection.id}'")
            else:
                await self._apply_environment(resolved, collection, env)

        for name, value in (overrides or {}).items():
            resolved[name] = ResolvedVariable(value=value, source=VariableSource.OVERRIDE)

        interpolate_all(resolved)
        logger.debug(f"Resolved {len(resolved)} variable(s) for collection '{collection.id}'")
        return resolved

    async def resolve_values(
        self,
        collection: Collection,
        folder_defaults: RequestDefaults | None = None,
        environment: str | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        """Like ``resolve`` but without provenance."""
        return values_of(await self.resolve(collection, folder_defaults, environment, overrides))

    def _active_environment_name(self, collection: Collection) -> str | None:
        if self.active_environment is None:
            return None
        return self.active_environment(collection.id)

    @staticmethod
    def _apply_variables(
        resolved: ResolvedVariableMap,
        variables: Iterable[Variable],
        source: VariableSource,
    ) -> None:
        for variable in variables:
            value = variable.resolve()
            if value is not None:
                resolved[variable.name] = ResolvedVariable(value=value, source=source)

    async def _apply_environment(self, resolved: ResolvedVariableMap, collection: Collection, env: Environment) -> None:
        if env.dotenv_file_path:
            dotenv_vars = await load_dotenv_file(collection.root_dir, env.dotenv_file_path)
            for name, value in dotenv_vars.items():
                resolved[name] = ResolvedVariable(value=value, source=VariableSource.DOTENV)

        for variable in env.variables:
            if isinstance(variable, SecretVariable):
                if variable.disabled or not variable.name:
                    continue
                secret = await self._lookup_secret(variable.name)
                if secret is not None:
                    resolved[variable.name] = ResolvedVariable(value=secret, source=VariableSource.SECRET)
            else:
                value = variable.resolve()
                if value is not None:
                    resolved[variable.name] = ResolvedVariable(value=value, source=VariableSource.ENVIRONMENT)

        if env.extends:
            self._apply_parent_environment(resolved, collection, env)

    @staticmethod
    def _apply_parent_environment(resolved: ResolvedVariableMap, collection: Collection, env: Environment) -> None:
        parent = collection.find_environment(env.extends)
        if parent is None:
            logger.warning(f"Environment '{env.name}' extends unknown environment '{env.extends}'")
            return

        # Secret variables are not inherited through extends
        for variable in parent.variables:
            if isinstance(variable, SecretVariable) or variable.name in resolved:
                continue
            value = variable.resolve()
            if value is not None:
                resolved[variable.name] = ResolvedVariable(value=value, source=VariableSource.ENVIRONMENT)

    async def _lookup_secret(self, name: str) -> str | None:
        if self.secret_provider is None:
            logger.debug(f"No secret provider configured; secret '{name}' left unresolved")
            return None

        try:
            value = await asyncio.wait_for(self.secret_provider.resolve_secret(name), timeout=self.secret_timeout)
        except TimeoutError:
            logger.warning(f"Secret lookup for '{name}' timed out after {self.secret_timeout}s")
            return None
        except Exception as e:
            logger.warning(f"Secret lookup for '{name}' failed: {e}")
            return None

        if value is None:
            logger.debug(f"Secret '{name}' not found by provider")
        else:
            logger.debug(f"Resolved secret '{name}': ***")
        return value
