"""Turning an effective auth config into concrete request headers.

Only schemes that need no network round trip are materialized here:
``basic``, ``bearer`` and ``apikey``. OAuth2 tokens and challenge-based
schemes (digest, ntlm, ...) belong to the transport layer.
"""

import base64
import logging
from collections.abc import Mapping

import httpx

from api_collection_core.models.auth import ApiKeyAuth, AuthConfig, BasicAuth, BearerAuth
from api_collection_core.variables.interpolation import find_references, interpolate

logger = logging.getLogger(__name__)


def apply_auth(
    auth: AuthConfig | None,
    headers: dict[str, str],
    url: str,
    variables: Mapping[str, str],
) -> tuple[dict[str, str], str]:
    """Apply ``auth`` to a materialized request.

    Args:
        auth: The effective auth (see ``select_effective_auth``).
        headers: Headers built so far; a new dict is returned.
        url: The interpolated URL.
        variables: Values used to interpolate auth fields.

    Returns:
        The updated headers and URL.
    """
    headers = dict(headers)
    if auth is None:
        return headers, url

    if isinstance(auth, BasicAuth):
        user = interpolate(auth.username, variables)
        password = interpolate(auth.password, variables)
        credentials = base64.b64encode(f"{user}:{password}".encode()).decode("ascii")
        headers["Authorization"] = f"Basic {credentials}"
    elif isinstance(auth, BearerAuth):
        headers["Authorization"] = f"Bearer {interpolate(auth.token, variables)}"
    elif isinstance(auth, ApiKeyAuth):
        key = interpolate(auth.key, variables)
        value = interpolate(auth.value, variables)
        if not key:
            return headers, url
        if auth.placement == "query":
            url = str(httpx.URL(url).copy_merge_params({key: value}))
        else:
            headers[key] = value
    else:
        logger.debug(f"Auth type '{auth.type}' is applied by the transport layer")

    return headers, url


def credential_values(auth: AuthConfig | None, variables: Mapping[str, str]) -> set[str]:
    """Interpolated credentials ``apply_auth`` would send for ``auth``.

    Covers the basic password, the bearer token and the API-key value.
    Values still holding a placeholder are left out.
    """
    if isinstance(auth, BasicAuth):
        templates = (auth.password,)
    elif isinstance(auth, BearerAuth):
        templates = (auth.token,)
    elif isinstance(auth, ApiKeyAuth):
        templates = (auth.value,)
    else:
        return set()

    values = set()
    for template in templates:
        value = interpolate(template, variables)
        if value and not find_references(value):
            values.add(value)
    return values
