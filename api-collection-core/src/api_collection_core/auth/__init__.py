"""Authentication chain selection and application.

This module provides:
- Effective-auth selection (request → folder → collection, with forced
  collection inheritance)
- The completeness predicate used by forced inheritance
- Materialization of basic, bearer and API-key auth into headers or query

Example:
    ```python
    from api_collection_core.auth import select_effective_auth

    auth = select_effective_auth(request, folder_defaults, collection)
    ```
"""

from api_collection_core.auth.apply import apply_auth, credential_values
from api_collection_core.auth.chain import is_auth_complete, select_effective_auth

__all__ = [
    "apply_auth",
    "credential_values",
    "is_auth_complete",
    "select_effective_auth",
]
