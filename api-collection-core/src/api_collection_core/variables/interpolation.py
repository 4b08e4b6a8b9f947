"""``{{name}}`` placeholder substitution.

Three entry points:

- ``interpolate``: one pass over a template against a plain mapping.
- ``interpolate_all``: fixed-point pass over a resolved-variable map so
  values may reference each other (``a -> b -> c``) in any order.
- ``interpolate_json``: like ``interpolate`` but JSON-aware, so that
  ``"{{count}}"`` with ``count = "42"`` renders as the number ``42``.

Unknown placeholders are always left verbatim.

Example:
    ```python
    from api_collection_core.variables import interpolate, interpolate_json

    interpolate("https://{{host}}/users", {"host": "api.example.com"})
    # 'https://api.example.com/users'

    interpolate_json('{"n": "{{count}}"}', {"count": "42"})
    # '{"n": 42}'
    ```
"""

import json
import logging
import re
from collections.abc import Mapping

from api_collection_core.models.variables import ResolvedVariable, ResolvedVariableMap

logger = logging.getLogger(__name__)

# Names may contain word characters, '.', '-' and '$' (builtins, secret refs)
VARIABLE_NAME_CHARS = r"[\w.$-]+"
VARIABLE_PATTERN = re.compile(r"\{\{(\s*" + VARIABLE_NAME_CHARS + r"\s*)\}\}")

# A whole JSON string token holding exactly one placeholder: "{{name}}".
# Tokens followed by ':' are object keys and always stay strings.
_QUOTED_PLACEHOLDER = r'"\{\{\s*(' + VARIABLE_NAME_CHARS + r')\s*\}\}"(?!\s*:)'
_JSON_TOKEN_PATTERN = re.compile(_QUOTED_PLACEHOLDER + r"|\{\{\s*(" + VARIABLE_NAME_CHARS + r")\s*\}\}")

_JSON_NUMBER = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")

MAX_INTERPOLATION_PASSES = 10


def find_references(text: str | None) -> list[str]:
    """Return placeholder names in ``text`` in order of appearance."""
    if not text:
        return []
    return [match.group(1).strip() for match in VARIABLE_PATTERN.finditer(text)]


def interpolate(template: str, variables: Mapping[str, str]) -> str:
    """Substitute every known ``{{name}}`` in ``template`` once.

    Args:
        template: Text containing placeholders.
        variables: Name to value mapping.

    Returns:
        The substituted text; unknown placeholders are kept as written.
    """
    if not template:
        return template

    def replace(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        value = variables.get(name)
        return match.group(0) if value is None else value

    return VARIABLE_PATTERN.sub(replace, template)


def interpolate_all(resolved: ResolvedVariableMap) -> ResolvedVariableMap:
    """Resolve references between the values of a variable map, in place.

    Each pass substitutes, for every entry, the *current* value of every
    referenced entry except itself. Passes repeat until nothing changes or
    ``MAX_INTERPOLATION_PASSES`` is reached; circular references therefore
    settle with their placeholders intact instead of looping.

    Args:
        resolved: The map to update. Sources are preserved.

    Returns:
        The same map, for chaining.
    """
    for pass_number in range(1, MAX_INTERPOLATION_PASSES + 1):
        changed = False
        for key in list(resolved):
            entry = resolved[key]

            def replace(match: re.Match[str], own_key: str = key) -> str:
                ref = match.group(1).strip()
                if ref == own_key:
                    return match.group(0)
                target = resolved.get(ref)
                return match.group(0) if target is None else target.value

            new_value = VARIABLE_PATTERN.sub(replace, entry.value)
            if new_value != entry.value:
                resolved[key] = ResolvedVariable(value=new_value, source=entry.source)
                changed = True

        if not changed:
            logger.debug(f"Variable interpolation settled after {pass_number} pass(es)")
            return resolved

    logger.debug(f"Variable interpolation stopped at the {MAX_INTERPOLATION_PASSES}-pass cap")
    return resolved


def _json_literal(value: str) -> str | None:
    """Return ``value`` trimmed if it is a JSON number, boolean or null."""
    candidate = value.strip()
    if candidate in ("true", "false", "null") or _JSON_NUMBER.fullmatch(candidate):
        return candidate
    return None


def _json_escape(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)[1:-1]


def interpolate_json(template: str, variables: Mapping[str, str]) -> str:
    """Interpolate a JSON document template.

    A string token that consists of a single placeholder (``"{{name}}"``)
    whose value is a JSON number, ``true``, ``false`` or ``null`` is
    replaced, quotes included, by that bare literal. Object keys are never
    unquoted. Every other value is JSON-string-escaped before insertion.

    Args:
        template: JSON text with placeholders.
        variables: Name to value mapping.

    Returns:
        The interpolated JSON text.
    """
    if not template:
        return template

    def replace(match: re.Match[str]) -> str:
        quoted_name, bare_name = match.group(1), match.group(2)
        name = quoted_name if quoted_name is not None else bare_name
        value = variables.get(name)
        if value is None:
            return match.group(0)
        if quoted_name is not None:
            literal = _json_literal(value)
            if literal is not None:
                return literal
            return f'"{_json_escape(value)}"'
        return _json_escape(value)

    return _JSON_TOKEN_PATTERN.sub(replace, template)
