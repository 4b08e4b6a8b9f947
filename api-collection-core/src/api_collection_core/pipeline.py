"""Send and preview pipelines over the resolution components.

``RequestPipeline`` wires the stateless pieces together in the order a
caller needs them: resolve variables, select auth, detect unresolved
references, then either materialize the request for sending or render a
redacted preview.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from api_collection_core.auth.apply import credential_values
from api_collection_core.auth.chain import select_effective_auth
from api_collection_core.errors.exceptions import UnresolvedVariablesError
from api_collection_core.materialize import MaterializedRequest, materialize_request
from api_collection_core.models.auth import ApiKeyAuth
from api_collection_core.models.collection import Collection
from api_collection_core.models.request import RequestDefaults, RequestTemplate
from api_collection_core.models.variables import ResolvedVariableMap, secret_values, values_of
from api_collection_core.redaction import redact, redact_headers, redact_url
from api_collection_core.variables.detection import collect_references, find_unresolved, unused_overrides
from api_collection_core.variables.interpolation import interpolate
from api_collection_core.variables.resolver import VariableResolver

logger = logging.getLogger(__name__)

PREVIEW_BODY_LIMIT = 10_000


@dataclass
class PreparedRequest:
    """Outcome of the send pipeline, ready for the transport layer.

    Attributes:
        request: The materialized request. Placeholders listed in
            ``unresolved`` are still present in it verbatim.
        variables: The resolved variables used for materialization.
        unresolved: Names that could not be resolved.
        warnings: Human-readable notes (e.g. unused overrides).
    """

    request: MaterializedRequest
    variables: ResolvedVariableMap
    unresolved: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class RequestPreview:
    """A materialized request safe to display."""

    method: str
    url: str
    headers: dict[str, str]
    body: str | None = None
    unresolved: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        result: dict[str, object] = {"method": self.method, "url": self.url, "headers": self.headers}
        if self.body is not None:
            result["body"] = self.body
        if self.unresolved:
            result["unresolvedVariables"] = self.unresolved
        if self.warnings:
            result["warnings"] = self.warnings
        return result


class RequestPipeline:
    """Resolve, check and materialize requests.

    Args:
        resolver: The variable resolver to use for every request.

    Example:
        ```python
        pipeline = RequestPipeline(VariableResolver(secret_provider=provider))
        prepared = await pipeline.prepare(request, collection, strict=True)
        async with httpx.AsyncClient() as client:
            response = await client.send(prepared.request.to_httpx())
        ```
    """

    def __init__(self, resolver: VariableResolver):
        self.resolver = resolver

    async def prepare(
        self,
        request: RequestTemplate,
        collection: Collection,
        *,
        folder_defaults: RequestDefaults | None = None,
        environment: str | None = None,
        overrides: Mapping[str, str] | None = None,
        strict: bool = False,
    ) -> PreparedRequest:
        """Run the send pipeline.

        Args:
            request: The request template.
            collection: The owning collection.
            folder_defaults: Enclosing folder defaults.
            environment: Environment name to use instead of the active one.
            overrides: Caller-supplied values, highest priority.
            strict: Raise instead of returning when names stay unresolved.

        Returns:
            The prepared request with its unresolved names and warnings.

        Raises:
            UnresolvedVariablesError: If ``strict`` and any name is unresolved.
        """
        references = collect_references(request, collection, folder_defaults)
        warnings = self._override_warnings(references, overrides)

        resolved = await self.resolver.resolve(collection, folder_defaults, environment, overrides)
        unresolved = find_unresolved(references, resolved)
        if unresolved and strict:
            raise UnresolvedVariablesError(unresolved)

        materialized = materialize_request(
            request,
            values_of(resolved),
            collection=collection,
            folder_defaults=folder_defaults,
        )
        logger.debug(f"Prepared {materialized.method} request with {len(unresolved)} unresolved variable(s)")
        return PreparedRequest(request=materialized, variables=resolved, unresolved=unresolved, warnings=warnings)

    async def preview(
        self,
        request: RequestTemplate,
        collection: Collection,
        *,
        folder_defaults: RequestDefaults | None = None,
        environment: str | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> RequestPreview:
        """Run the preview pipeline: materialize, then redact for display.

        Secret-sourced values and the effective auth's credentials are
        masked wherever they appear. Credential headers, sensitive query
        parameters and the API-key field of the effective auth are redacted
        by name.
        """
        prepared = await self.prepare(
            request,
            collection,
            folder_defaults=folder_defaults,
            environment=environment,
            overrides=overrides,
        )
        materialized = prepared.request
        variables = values_of(prepared.variables)
        auth = select_effective_auth(request, folder_defaults, collection)
        secrets = secret_values(prepared.variables) | credential_values(auth, variables)

        header_names: set[str] = set()
        query_names: set[str] = set()
        if isinstance(auth, ApiKeyAuth):
            key = interpolate(auth.key, variables)
            if auth.placement == "query":
                query_names.add(key)
            else:
                header_names.add(key)

        body = None
        if materialized.body is not None:
            body = redact(materialized.body, secrets)
            if len(body) > PREVIEW_BODY_LIMIT:
                body = body[:PREVIEW_BODY_LIMIT] + "\n... (truncated)"

        return RequestPreview(
            method=materialized.method,
            url=redact_url(materialized.url, secrets, sensitive_names=query_names),
            headers=redact_headers(materialized.headers, secrets, sensitive_names=header_names),
            body=body,
            unresolved=prepared.unresolved,
            warnings=prepared.warnings,
        )

    @staticmethod
    def _override_warnings(references: list[str], overrides: Mapping[str, str] | None) -> list[str]:
        unused = unused_overrides(references, overrides)
        if not unused:
            return []
        names = ", ".join(f"{{{{{name}}}}}" for name in unused)
        return [f"Unused variables provided (no matching placeholder in the request template): {names}"]
