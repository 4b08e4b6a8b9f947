"""Variable resolution, interpolation and unresolved-reference detection.

This module provides:
- Multi-source variable resolution (global → collection → folder →
  environment/.env/secrets → overrides)
- ``{{name}}`` interpolation, including a JSON-literal-aware variant
- Detection of placeholders that would stay unresolved

Example:
    ```python
    from api_collection_core.variables import VariableResolver, detect_unresolved, interpolate

    resolver = VariableResolver(active_environment=lambda collection_id: "dev")
    missing = await detect_unresolved(request, collection, resolver)
    if not missing:
        variables = await resolver.resolve_values(collection)
        url = interpolate(request.url, variables)
    ```
"""

from api_collection_core.variables.interpolation import (
    MAX_INTERPOLATION_PASSES,
    VARIABLE_PATTERN,
    find_references,
    interpolate,
    interpolate_all,
    interpolate_json,
)
from api_collection_core.variables.resolver import VariableResolver
from api_collection_core.variables.detection import (
    BUILTIN_VARIABLES,
    collect_references,
    detect_unresolved,
    find_unresolved,
    is_builtin_reference,
    unused_overrides,
)

__all__ = [
    "BUILTIN_VARIABLES",
    "MAX_INTERPOLATION_PASSES",
    "VARIABLE_PATTERN",
    "VariableResolver",
    "collect_references",
    "detect_unresolved",
    "find_references",
    "find_unresolved",
    "interpolate",
    "interpolate_all",
    "interpolate_json",
    "is_builtin_reference",
    "unused_overrides",
]
