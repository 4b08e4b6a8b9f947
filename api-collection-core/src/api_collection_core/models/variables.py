"""Variable value types and resolved-variable maps.

A variable's value is a tagged union: a plain string, a ``TypedValue``
or a ``VariantList``. ``scalar_value`` is the one place that turns any of
them into the string used for interpolation.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from api_collection_core.errors.exceptions import DocumentError


@dataclass(frozen=True)
class TypedValue:
    """Value carrying a declared type (string, number, boolean, ...)."""

    type: str
    data: str


@dataclass(frozen=True)
class ValueVariant:
    """One selectable alternative of a variant list."""

    value: "VariableValue"
    selected: bool = False
    title: str | None = None


@dataclass(frozen=True)
class VariantList:
    """Ordered list of alternatives; the selected one (or the first) wins."""

    variants: tuple[ValueVariant, ...] = ()


VariableValue = str | TypedValue | VariantList


def scalar_value(value: VariableValue | None) -> str | None:
    """Resolve a variable value to the string used for interpolation.

    Args:
        value: A plain string, typed value or variant list.

    Returns:
        The scalar string, or None when the value is missing or an empty
        variant list.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, TypedValue):
        return value.data
    if isinstance(value, VariantList):
        if not value.variants:
            return None
        chosen = next((v for v in value.variants if v.selected), value.variants[0])
        return scalar_value(chosen.value)
    raise TypeError(f"Unsupported variable value: {type(value).__name__}")


def value_from_document(raw: Any) -> VariableValue | None:
    """Build a ``VariableValue`` from its persisted document form."""
    if raw is None or isinstance(raw, str):
        return raw
    if isinstance(raw, Mapping):
        if "data" not in raw or "type" not in raw:
            raise DocumentError(f"Typed variable value needs 'type' and 'data': {dict(raw)!r}")
        return TypedValue(type=str(raw["type"]), data=str(raw["data"]))
    if isinstance(raw, list):
        variants = []
        for item in raw:
            if not isinstance(item, Mapping):
                raise DocumentError(f"Variable variant must be a mapping, got {type(item).__name__}")
            variants.append(
                ValueVariant(
                    value=value_from_document(item.get("value")),
                    selected=bool(item.get("selected", False)),
                    title=item.get("title"),
                )
            )
        return VariantList(tuple(variants))
    # Scalars written without quotes in YAML (numbers, booleans)
    return str(raw)


@dataclass(frozen=True)
class Variable:
    """A named variable with a literal value."""

    name: str
    value: VariableValue | None = None
    disabled: bool = False

    def resolve(self) -> str | None:
        """Return the scalar value, or None when disabled or valueless."""
        if self.disabled:
            return None
        return scalar_value(self.value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Variable":
        if "name" not in data:
            raise DocumentError(f"Variable without a name: {dict(data)!r}")
        return cls(
            name=str(data["name"]),
            value=value_from_document(data.get("value")),
            disabled=bool(data.get("disabled", False)),
        )


@dataclass(frozen=True)
class SecretVariable:
    """A variable whose value is looked up from a secret provider by name."""

    name: str
    disabled: bool = False

    secret: bool = field(default=True, init=False)


def variable_from_dict(data: Mapping[str, Any]) -> Variable | SecretVariable:
    """Parse either a plain or a secret variable entry."""
    if not isinstance(data, Mapping):
        raise DocumentError(f"Variable entry must be a mapping, got {type(data).__name__}")
    if data.get("secret"):
        return SecretVariable(name=str(data.get("name") or ""), disabled=bool(data.get("disabled", False)))
    return Variable.from_dict(data)


class VariableSource(str, Enum):
    """Where a resolved variable's value came from."""

    GLOBAL = "global"
    COLLECTION = "collection"
    FOLDER = "folder"
    DOTENV = "dotenv"
    ENVIRONMENT = "environment"
    SECRET = "secret"
    OVERRIDE = "override"


@dataclass(frozen=True)
class ResolvedVariable:
    """A resolved value together with its provenance."""

    value: str
    source: VariableSource


ResolvedVariableMap = dict[str, ResolvedVariable]


def values_of(resolved: Mapping[str, ResolvedVariable]) -> dict[str, str]:
    """Strip provenance, leaving a plain name → value mapping."""
    return {name: entry.value for name, entry in resolved.items()}


def secret_values(resolved: Mapping[str, ResolvedVariable]) -> set[str]:
    """Collect the non-empty values that came from a secret provider."""
    return {entry.value for entry in resolved.values() if entry.source is VariableSource.SECRET and entry.value}
