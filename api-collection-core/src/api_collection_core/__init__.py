"""API Collection Core - variable resolution and request materialization.

This library turns templated HTTP request definitions from an API
collection into concrete, sendable requests:
- Multi-source variable resolution (global, collection, folder,
  environment, .env files, secret providers)
- ``{{name}}`` interpolation with a JSON-literal-aware variant
- Auth inheritance along request → folder → collection
- Detection of unresolved placeholders before anything is sent
- Secret redaction for safe request previews

Example:
    ```python
    from api_collection_core import RequestPipeline, VariableResolver
    from api_collection_core.secrets import EnvironmentSecretProvider

    resolver = VariableResolver(
        secret_provider=EnvironmentSecretProvider(prefix="MYAPP_"),
        active_environment=selected_environments.get,
    )
    pipeline = RequestPipeline(resolver)

    preview = await pipeline.preview(request, collection)
    if not preview.unresolved:
        prepared = await pipeline.prepare(request, collection, strict=True)
        response = await httpx_client.send(prepared.request.to_httpx())
    ```
"""

from api_collection_core.auth import select_effective_auth
from api_collection_core.materialize import MaterializedRequest, materialize_request
from api_collection_core.pipeline import PreparedRequest, RequestPipeline, RequestPreview
from api_collection_core.variables import VariableResolver, detect_unresolved

__version__ = "0.1.0"

__all__ = [
    "MaterializedRequest",
    "PreparedRequest",
    "RequestPipeline",
    "RequestPreview",
    "VariableResolver",
    "__version__",
    "detect_unresolved",
    "materialize_request",
    "select_effective_auth",
]
