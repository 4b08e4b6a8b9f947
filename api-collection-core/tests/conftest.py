"""Pytest configuration and shared fixtures for api-collection-core tests."""

import pytest

from api_collection_core.models import (
    Collection,
    CollectionConfig,
    Environment,
    RequestDefaults,
    Variable,
)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear test-related environment variables before each test.

    This prevents test pollution when testing environment-backed secrets.
    """
    import os

    # Store keys that look like test-related env vars
    test_prefixes = ("TEST_", "API_", "SECRET_", "COLLECTION_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def make_collection(tmp_path):
    """Factory for collections rooted in a temporary directory."""

    def _make(
        variables: list[Variable] | None = None,
        environments: list[Environment] | None = None,
        auth=None,
        force_auth_inherit: bool = False,
        collection_id: str = "test-collection",
    ) -> Collection:
        return Collection(
            id=collection_id,
            root_dir=tmp_path,
            request=RequestDefaults(variables=tuple(variables or ()), auth=auth),
            config=CollectionConfig(
                environments=tuple(environments or ()),
                force_auth_inherit=force_auth_inherit,
            ),
        )

    return _make
