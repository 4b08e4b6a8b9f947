"""Exceptions raised by api-collection-core."""

from api_collection_core.errors.exceptions import (
    CollectionCoreError,
    DocumentError,
    UnresolvedVariablesError,
)

__all__ = [
    "CollectionCoreError",
    "DocumentError",
    "UnresolvedVariablesError",
]
