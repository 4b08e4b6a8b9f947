"""Tests for the send and preview pipelines."""

import httpx
import pytest

from api_collection_core import RequestPipeline, VariableResolver
from api_collection_core.errors import UnresolvedVariablesError
from api_collection_core.models import (
    INHERIT,
    ApiKeyAuth,
    BearerAuth,
    Environment,
    Header,
    RequestBody,
    RequestTemplate,
    SecretVariable,
    Variable,
    VariableSource,
)
from api_collection_core.pipeline import PREVIEW_BODY_LIMIT, RequestPreview
from api_collection_core.testing import InMemorySecretProvider, static_environment_lookup


@pytest.fixture
def secret_collection(make_collection):
    return make_collection(
        variables=[Variable("host", "api.example.com")],
        environments=[Environment("dev", variables=(SecretVariable("apiToken"),))],
        auth=BearerAuth("{{apiToken}}"),
    )


@pytest.fixture
def secret_pipeline():
    resolver = VariableResolver(
        secret_provider=InMemorySecretProvider({"apiToken": "s3cr3t-value"}),
        active_environment=static_environment_lookup({"test-collection": "dev"}),
    )
    return RequestPipeline(resolver)


class TestPrepare:
    """Test the send pipeline."""

    @pytest.mark.unit
    async def test_end_to_end(self, make_collection):
        collection = make_collection(variables=[Variable("host", "api.example.com")])
        pipeline = RequestPipeline(VariableResolver())

        prepared = await pipeline.prepare(RequestTemplate(url="https://{{host}}/users"), collection)

        assert prepared.request.url == "https://api.example.com/users"
        assert prepared.request.method == "GET"
        assert prepared.unresolved == []
        assert prepared.warnings == []
        assert prepared.variables["host"].source is VariableSource.COLLECTION

    @pytest.mark.unit
    async def test_unresolved_placeholders_stay_verbatim(self, make_collection):
        pipeline = RequestPipeline(VariableResolver())

        prepared = await pipeline.prepare(
            RequestTemplate(url="https://x", headers=(Header("X-Id", "{{missing}}"),)), make_collection()
        )

        assert prepared.unresolved == ["missing"]
        assert prepared.request.headers["X-Id"] == "{{missing}}"

    @pytest.mark.unit
    async def test_strict_raises(self, make_collection):
        pipeline = RequestPipeline(VariableResolver())

        with pytest.raises(UnresolvedVariablesError) as exc_info:
            await pipeline.prepare(RequestTemplate(url="https://{{host}}/{{path}}"), make_collection(), strict=True)

        assert exc_info.value.names == ["host", "path"]
        assert "{{host}}" in str(exc_info.value)

    @pytest.mark.unit
    async def test_overrides_fill_placeholders(self, make_collection):
        pipeline = RequestPipeline(VariableResolver())

        prepared = await pipeline.prepare(
            RequestTemplate(url="https://{{host}}/users"), make_collection(), overrides={"host": "override.example.com"}
        )

        assert prepared.request.url == "https://override.example.com/users"
        assert prepared.variables["host"].source is VariableSource.OVERRIDE

    @pytest.mark.unit
    async def test_unused_override_warning(self, make_collection):
        pipeline = RequestPipeline(VariableResolver())

        prepared = await pipeline.prepare(
            RequestTemplate(url="https://{{host}}"), make_collection(), overrides={"host": "h", "typo": "x"}
        )

        assert prepared.warnings == [
            "Unused variables provided (no matching placeholder in the request template): {{typo}}"
        ]

    @pytest.mark.unit
    async def test_secret_reaches_the_wire(self, secret_collection, secret_pipeline):
        prepared = await secret_pipeline.prepare(RequestTemplate(url="https://{{host}}/items"), secret_collection)

        assert prepared.request.headers["Authorization"] == "Bearer s3cr3t-value"

    @pytest.mark.unit
    async def test_send_through_httpx(self, make_collection):
        collection = make_collection(variables=[Variable("host", "api.example.com")])
        pipeline = RequestPipeline(VariableResolver())
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"ok": True})

        prepared = await pipeline.prepare(
            RequestTemplate(url="https://{{host}}/items", method="POST", body=RequestBody("json", '{"n": 1}')),
            collection,
        )
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            response = await client.send(prepared.request.to_httpx())

        assert response.status_code == 201
        assert str(seen[0].url) == "https://api.example.com/items"
        assert seen[0].headers["Content-Type"] == "application/json"
        assert seen[0].content == b'{"n": 1}'


class TestPreview:
    """Test the redacted preview pipeline."""

    @pytest.mark.unit
    async def test_secrets_are_redacted(self, secret_collection, secret_pipeline):
        request = RequestTemplate(
            url="https://{{host}}/items?token={{apiToken}}",
            method="POST",
            headers=(Header("X-Echo", "{{apiToken}}"),),
            body=RequestBody("json", '{"auth": "{{apiToken}}"}'),
        )

        preview = await secret_pipeline.preview(request, secret_collection)

        assert preview.url == "https://api.example.com/items?token=%5Bredacted%5D"
        assert preview.headers["Authorization"] == "Bearer [redacted]"
        assert preview.headers["X-Echo"] == "[secret]"
        assert preview.body == '{"auth": "[secret]"}'
        assert "s3cr3t-value" not in str(preview.to_dict())

    @pytest.mark.unit
    async def test_apikey_header_with_neutral_name_is_redacted(self, make_collection):
        collection = make_collection(
            variables=[Variable("host", "api.example.com"), Variable("subKey", "live-key-123")],
            auth=ApiKeyAuth(key="Ocp-Apim-Subscription-Key", value="{{subKey}}"),
        )
        pipeline = RequestPipeline(VariableResolver())
        request = RequestTemplate(url="https://{{host}}/x", auth=INHERIT)

        preview = await pipeline.preview(request, collection)
        prepared = await pipeline.prepare(request, collection)

        assert preview.headers == {"Ocp-Apim-Subscription-Key": "[redacted]"}
        assert "live-key-123" not in str(preview.to_dict())
        assert prepared.request.headers["Ocp-Apim-Subscription-Key"] == "live-key-123"

    @pytest.mark.unit
    async def test_apikey_query_with_neutral_name_is_redacted(self, make_collection):
        collection = make_collection(variables=[Variable("host", "api.example.com")])
        pipeline = RequestPipeline(VariableResolver())
        request = RequestTemplate(
            url="https://{{host}}/x",
            auth=ApiKeyAuth(key="code", value="abc123", placement="query"),
        )

        preview = await pipeline.preview(request, collection)

        assert preview.url == "https://api.example.com/x?code=%5Bredacted%5D"
        assert "abc123" not in str(preview.to_dict())

    @pytest.mark.unit
    async def test_auth_credential_echoed_elsewhere_is_masked(self, make_collection):
        collection = make_collection(variables=[Variable("token", "tok-987")], auth=BearerAuth("{{token}}"))
        pipeline = RequestPipeline(VariableResolver())
        request = RequestTemplate(
            url="https://x/echo",
            method="POST",
            headers=(Header("X-Echo", "{{token}}"),),
            body=RequestBody("text", "token={{token}}"),
        )

        preview = await pipeline.preview(request, collection)

        assert preview.headers["Authorization"] == "Bearer [redacted]"
        assert preview.headers["X-Echo"] == "[secret]"
        assert preview.body == "token=[secret]"

    @pytest.mark.unit
    async def test_long_body_is_truncated(self, make_collection):
        pipeline = RequestPipeline(VariableResolver())
        request = RequestTemplate(url="https://x", body=RequestBody("text", "a" * (PREVIEW_BODY_LIMIT + 5)))

        preview = await pipeline.preview(request, make_collection())

        assert preview.body == "a" * PREVIEW_BODY_LIMIT + "\n... (truncated)"

    @pytest.mark.unit
    async def test_reports_unresolved_and_warnings(self, make_collection):
        pipeline = RequestPipeline(VariableResolver())

        preview = await pipeline.preview(
            RequestTemplate(url="https://{{host}}"), make_collection(), overrides={"unused": "1"}
        )

        assert preview.unresolved == ["host"]
        assert len(preview.warnings) == 1


class TestRequestPreview:
    """Test the preview's dict form."""

    @pytest.mark.unit
    def test_to_dict_minimal(self):
        preview = RequestPreview(method="GET", url="https://x", headers={})

        assert preview.to_dict() == {"method": "GET", "url": "https://x", "headers": {}}

    @pytest.mark.unit
    def test_to_dict_full(self):
        preview = RequestPreview(
            method="POST",
            url="https://x",
            headers={"A": "1"},
            body="{}",
            unresolved=["host"],
            warnings=["note"],
        )

        assert preview.to_dict() == {
            "method": "POST",
            "url": "https://x",
            "headers": {"A": "1"},
            "body": "{}",
            "unresolvedVariables": ["host"],
            "warnings": ["note"],
        }
