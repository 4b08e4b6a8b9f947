"""Materialization of a request template into concrete request parts.

The result is what the network layer sends (``MaterializedRequest.to_httpx``)
or what a preview shows after redaction.
"""

import logging
import re
import secrets
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import quote

import httpx

from api_collection_core.auth.apply import apply_auth
from api_collection_core.auth.chain import select_effective_auth
from api_collection_core.models.auth import INHERIT, AuthConfig
from api_collection_core.models.collection import Collection
from api_collection_core.models.request import Header, RequestBody, RequestDefaults, RequestTemplate
from api_collection_core.variables.interpolation import interpolate, interpolate_json

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPES = {
    "json": "application/json",
    "text": "text/plain",
    "xml": "application/xml",
    "sparql": "application/sparql-query",
    "form-urlencoded": "application/x-www-form-urlencoded",
}


@dataclass
class MaterializedRequest:
    """A request with every placeholder substituted."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None

    def to_httpx(self) -> httpx.Request:
        """Build the ``httpx.Request`` handed to the transport layer."""
        content = self.body.encode("utf-8") if self.body is not None else None
        return httpx.Request(self.method, self.url, headers=self.headers, content=content)


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    lower = name.lower()
    return any(key.lower() == lower for key in headers)


def _merge_headers(layers: tuple[tuple[Header, ...], ...], variables: Mapping[str, str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for layer in layers:
        for header in layer:
            if not header.disabled:
                headers[interpolate(header.name, variables)] = interpolate(header.value, variables)
    return headers


def _build_url(request: RequestTemplate, variables: Mapping[str, str]) -> str:
    url = interpolate(request.url, variables)

    query_params = [p for p in request.params if p.type == "query"]
    if query_params:
        # The params list is authoritative; drop any query baked into the URL
        pairs = []
        for param in query_params:
            if param.disabled:
                continue
            value = interpolate(param.value, variables)
            if value == "":
                continue
            pairs.append((interpolate(param.name, variables), value))
        try:
            url = str(httpx.URL(url).copy_with(params=pairs))
        except httpx.InvalidURL as e:
            logger.warning(f"Could not apply query parameters to URL {url!r}: {e}")

    for param in request.params:
        if param.type == "path" and not param.disabled:
            name = interpolate(param.name, variables)
            if not name:
                continue
            value = quote(interpolate(param.value, variables), safe="")
            # ":user" must not match the start of ":userId"
            url = re.sub(rf":{re.escape(name)}(?![\w-])", lambda _: value, url, count=1)
    return url


def _build_body(body: RequestBody, headers: dict[str, str], variables: Mapping[str, str]) -> str | None:
    content_type = DEFAULT_CONTENT_TYPES.get(body.type)

    if body.is_raw and isinstance(body.data, str):
        if body.type == "json":
            rendered = interpolate_json(body.data, variables)
        else:
            rendered = interpolate(body.data, variables)
    elif body.type == "form-urlencoded":
        pairs = [
            (interpolate(entry.name, variables), interpolate(entry.values()[0] if entry.values() else "", variables))
            for entry in body.entries()
            if not entry.disabled
        ]
        rendered = str(httpx.QueryParams(pairs))
    elif body.type == "multipart-form":
        boundary = f"----FormBoundary{secrets.token_hex(12)}"
        content_type = f"multipart/form-data; boundary={boundary}"
        parts = []
        for entry in body.entries():
            # File parts need filesystem access and are left to the transport
            if entry.disabled or entry.type != "text":
                continue
            name = interpolate(entry.name, variables)
            value = interpolate(entry.values()[0] if entry.values() else "", variables)
            parts.append(f'--{boundary}\r\nContent-Disposition: form-data; name="{name}"\r\n\r\n{value}')
        parts.append(f"--{boundary}--\r\n")
        rendered = "\r\n".join(parts)
        headers["Content-Type"] = content_type
        return rendered
    else:
        logger.debug(f"Body type '{body.type}' is not materialized as text")
        return None

    if content_type and not _has_header(headers, "Content-Type"):
        headers["Content-Type"] = content_type
    return rendered


def materialize_request(
    request: RequestTemplate,
    variables: Mapping[str, str],
    *,
    collection: Collection | None = None,
    folder_defaults: RequestDefaults | None = None,
    auth: AuthConfig | None = None,
) -> MaterializedRequest:
    """Substitute ``variables`` into every part of ``request``.

    Headers are layered collection → folder → request. Query params replace
    any query string already in the URL; path params fill ``:name``
    segments. The body comes from the selected variant. Auth, unless given
    explicitly, is selected along the usual chain; without a collection
    only the request's own auth applies.

    Args:
        request: The request template.
        variables: Resolved name → value mapping (plus any overrides).
        collection: Owning collection, for default headers and auth.
        folder_defaults: Enclosing folder defaults.
        auth: Auth to apply instead of selecting one.

    Returns:
        The concrete request.
    """
    url = _build_url(request, variables)

    layers = (
        collection.request.headers if collection else (),
        folder_defaults.headers if folder_defaults else (),
        request.headers,
    )
    headers = _merge_headers(layers, variables)

    if auth is None:
        if collection is not None:
            auth = select_effective_auth(request, folder_defaults, collection)
        elif request.auth != INHERIT:
            auth = request.auth
    headers, url = apply_auth(auth, headers, url, variables)

    body = None
    selected = request.selected_body()
    if selected is not None:
        body = _build_body(selected, headers, variables)

    return MaterializedRequest(method=request.method.upper(), url=url, headers=headers, body=body)
