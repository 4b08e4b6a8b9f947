"""Collections and their environments."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from api_collection_core.errors.exceptions import DocumentError
from api_collection_core.models.request import RequestDefaults
from api_collection_core.models.variables import SecretVariable, Variable, variable_from_dict


@dataclass(frozen=True)
class Environment:
    """A named, selectable bundle of variables scoped to a collection."""

    name: str
    variables: tuple[Variable | SecretVariable, ...] = ()
    dotenv_file_path: str | None = None
    extends: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Environment":
        if not data.get("name"):
            raise DocumentError(f"Environment without a name: {dict(data)!r}")
        return cls(
            name=str(data["name"]),
            variables=tuple(variable_from_dict(v) for v in data.get("variables") or []),
            dotenv_file_path=data.get("dotEnvFilePath"),
            extends=data.get("extends"),
        )


@dataclass(frozen=True)
class CollectionConfig:
    environments: tuple[Environment, ...] = ()
    force_auth_inherit: bool = False


@dataclass(frozen=True)
class Collection:
    """Top-level container: request defaults plus environments.

    Attributes:
        id: Stable identifier used by the active-environment lookup.
        root_dir: Directory the collection document lives in; relative
            dotenv paths are resolved against it.
    """

    id: str
    root_dir: Path = field(default_factory=Path.cwd)
    request: RequestDefaults = field(default_factory=RequestDefaults)
    config: CollectionConfig = field(default_factory=CollectionConfig)

    def find_environment(self, name: str | None) -> Environment | None:
        if not name:
            return None
        return next((env for env in self.config.environments if env.name == name), None)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, id: str, root_dir: str | Path) -> "Collection":
        """Build a collection from a parsed collection document.

        Args:
            data: The parsed document (``request`` and ``config`` blocks).
            id: Identifier for the collection.
            root_dir: Directory holding the document.
        """
        if not isinstance(data, Mapping):
            raise DocumentError(f"Collection document must be a mapping, got {type(data).__name__}")
        config = data.get("config") or {}
        return cls(
            id=id,
            root_dir=Path(root_dir),
            request=RequestDefaults.from_dict(data.get("request")),
            config=CollectionConfig(
                environments=tuple(Environment.from_dict(e) for e in config.get("environments") or []),
                force_auth_inherit=bool(config.get("forceAuthInherit", False)),
            ),
        )
