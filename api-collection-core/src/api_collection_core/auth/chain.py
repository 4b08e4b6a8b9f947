"""Effective-auth selection along the request → folder → collection chain.

Both functions here are pure: they only read their arguments.
"""

from api_collection_core.models.auth import (
    INHERIT,
    ApiKeyAuth,
    Auth,
    AuthConfig,
    BasicAuth,
    BearerAuth,
)
from api_collection_core.models.collection import Collection
from api_collection_core.models.request import RequestDefaults, RequestTemplate


def is_auth_complete(auth: AuthConfig) -> bool:
    """Whether an auth config carries enough data to authenticate.

    ``basic`` needs a username or password, ``bearer`` a token, ``apikey``
    a key. ``oauth2`` is always complete (its token is fetched at send
    time), as is every other type.
    """
    if isinstance(auth, BasicAuth):
        return bool(auth.username or auth.password)
    if isinstance(auth, BearerAuth):
        return bool(auth.token)
    if isinstance(auth, ApiKeyAuth):
        return bool(auth.key)
    return True


def _is_concrete(auth: Auth | None) -> bool:
    return auth is not None and auth != INHERIT


def select_effective_auth(
    request: RequestTemplate,
    folder_defaults: RequestDefaults | None,
    collection: Collection,
) -> AuthConfig | None:
    """Pick the auth that applies to ``request``.

    With ``force_auth_inherit`` set on the collection and a complete
    collection auth, that auth wins outright. Otherwise the first concrete
    auth of request, folder defaults and collection is used; ``inherit``
    and missing entries fall through.

    Args:
        request: The request template.
        folder_defaults: Defaults of the enclosing folder, if any.
        collection: The owning collection.

    Returns:
        The effective auth config, or None when no level defines one.
    """
    collection_auth = collection.request.auth
    if collection.config.force_auth_inherit and _is_concrete(collection_auth) and is_auth_complete(collection_auth):
        return collection_auth

    candidates = (request.auth, folder_defaults.auth if folder_defaults else None, collection_auth)
    for auth in candidates:
        if _is_concrete(auth):
            return auth
    return None
