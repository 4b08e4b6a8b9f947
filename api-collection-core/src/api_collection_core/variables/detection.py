"""Detection of unresolved ``{{name}}`` references before a request is sent.

The detector reports names only; deciding whether to prompt, accept
overrides or abort is left to the caller.
"""

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from api_collection_core.auth.chain import select_effective_auth
from api_collection_core.models.collection import Collection
from api_collection_core.models.request import RequestBody, RequestDefaults, RequestTemplate
from api_collection_core.models.variables import ResolvedVariableMap
from api_collection_core.variables.interpolation import find_references
from api_collection_core.variables.resolver import VariableResolver

logger = logging.getLogger(__name__)

# Dynamic tokens filled in at send time, never by variable resolution
BUILTIN_VARIABLES: frozenset[str] = frozenset(["$guid", "$timestamp", "$randomInt"])
SECRET_REFERENCE_PREFIX = "$secret."


def is_builtin_reference(name: str) -> bool:
    """Whether ``name`` is a builtin dynamic token or a ``$secret.*`` reference."""
    return name in BUILTIN_VARIABLES or name.startswith(SECRET_REFERENCE_PREFIX)


def _string_leaves(value: Any) -> Iterable[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from _string_leaves(item)
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            yield from _string_leaves(item)
    elif dataclasses.is_dataclass(value):
        for field in dataclasses.fields(value):
            yield from _string_leaves(getattr(value, field.name))


def _body_strings(body: RequestBody) -> Iterable[str]:
    if body.is_raw and isinstance(body.data, str):
        yield body.data
    elif body.is_form:
        for entry in body.entries():
            if entry.disabled:
                continue
            yield entry.name
            yield from entry.values()


def collect_references(
    request: RequestTemplate,
    collection: Collection,
    folder_defaults: RequestDefaults | None = None,
) -> list[str]:
    """List every placeholder name a request would need, in first-seen order.

    Scans the URL, enabled headers and params (name and value), the
    selected body and every string inside the effective auth config.
    """
    texts: list[str] = [request.url]
    for header in request.headers:
        if not header.disabled:
            texts.extend((header.name, header.value))
    for param in request.params:
        if not param.disabled:
            texts.extend((param.name, param.value))

    body = request.selected_body()
    if body is not None:
        texts.extend(_body_strings(body))

    auth = select_effective_auth(request, folder_defaults, collection)
    if auth is not None:
        texts.extend(_string_leaves(auth))

    references: dict[str, None] = {}
    for text in texts:
        for name in find_references(text):
            references.setdefault(name, None)
    return list(references)


def find_unresolved(references: Iterable[str], resolved: ResolvedVariableMap) -> list[str]:
    """Names among ``references`` that cannot be fully resolved.

    A name is unresolved when it is missing from ``resolved`` or when a
    name reachable through its value's own placeholders is missing.
    References back into the chain (including a variable naming itself)
    are not reported.
    """
    unresolved: dict[str, None] = {}

    def walk(value: str, visited: set[str]) -> None:
        for ref in find_references(value):
            if ref in visited or is_builtin_reference(ref):
                continue
            target = resolved.get(ref)
            if target is None:
                unresolved.setdefault(ref, None)
                continue
            visited.add(ref)
            walk(target.value, visited)

    for name in references:
        if is_builtin_reference(name):
            continue
        entry = resolved.get(name)
        if entry is None:
            unresolved.setdefault(name, None)
        else:
            walk(entry.value, {name})

    return list(unresolved)


async def detect_unresolved(
    request: RequestTemplate,
    collection: Collection,
    resolver: VariableResolver,
    folder_defaults: RequestDefaults | None = None,
    environment: str | None = None,
    overrides: Mapping[str, str] | None = None,
) -> list[str]:
    """Report the placeholder names of ``request`` that would stay unresolved.

    Args:
        request: The request template.
        collection: The owning collection.
        resolver: Resolver used for the variable map.
        folder_defaults: Defaults of the enclosing folder, if any.
        environment: Environment name to use instead of the active one.
        overrides: Caller-supplied values counted as resolved.

    Returns:
        Deduplicated unresolved names, in first-seen order. Empty when the
        request references nothing.
    """
    references = collect_references(request, collection, folder_defaults)
    if not references:
        return []

    resolved = await resolver.resolve(collection, folder_defaults, environment, overrides)
    unresolved = find_unresolved(references, resolved)
    if unresolved:
        logger.debug(f"Unresolved variable(s) in request {request.method} {request.url}: {', '.join(unresolved)}")
    return unresolved


def unused_overrides(references: Iterable[str], overrides: Mapping[str, str] | None) -> list[str]:
    """Caller-supplied names that no placeholder in the request refers to."""
    referenced = set(references)
    return [name for name in overrides or {} if name not in referenced]
