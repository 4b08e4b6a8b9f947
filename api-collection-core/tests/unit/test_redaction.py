"""Tests for preview redaction."""

import pytest

from api_collection_core.redaction import (
    REDACTED_TOKEN,
    SECRET_TOKEN,
    is_sensitive_header_name,
    is_sensitive_query_name,
    redact,
    redact_headers,
    redact_url,
)


class TestRedact:
    """Test secret substring masking."""

    @pytest.mark.unit
    def test_masks_every_occurrence(self):
        assert redact("abc123 and abc123", {"abc123"}) == f"{SECRET_TOKEN} and {SECRET_TOKEN}"

    @pytest.mark.unit
    def test_longest_secret_masked_whole(self):
        assert redact("abcdef abc", {"abc", "abcdef"}) == f"{SECRET_TOKEN} {SECRET_TOKEN}"

    @pytest.mark.unit
    def test_empty_secret_ignored(self):
        assert redact("plain text", {""}) == "plain text"

    @pytest.mark.unit
    def test_no_secrets(self):
        assert redact("plain text", []) == "plain text"


class TestSensitiveNames:
    """Test the name heuristics."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["X-Api-Key", "apikey", "X-Auth-Token", "Cookie", "set-cookie", "X-Client-Secret"])
    def test_sensitive_headers(self, name):
        assert is_sensitive_header_name(name)

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["Accept", "Content-Type", "X-Request-Id"])
    def test_plain_headers(self, name):
        assert not is_sensitive_header_name(name)

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["api_key", "API_KEY", "access_token", "password", "client_secret", "auth"])
    def test_sensitive_query_params(self, name):
        assert is_sensitive_query_name(name)

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["page", "limit", "q"])
    def test_plain_query_params(self, name):
        assert not is_sensitive_query_name(name)


class TestRedactHeaders:
    """Test header redaction."""

    @pytest.mark.unit
    def test_authorization_keeps_scheme(self):
        assert redact_headers({"Authorization": "Bearer abc123"}, {"abc123"}) == {"Authorization": "Bearer [redacted]"}

    @pytest.mark.unit
    def test_authorization_without_known_secret(self):
        assert redact_headers({"authorization": "Basic dXNlcjpwYXNz"}, set()) == {"authorization": "Basic [redacted]"}

    @pytest.mark.unit
    def test_authorization_without_scheme(self):
        assert redact_headers({"Authorization": "abc123"}, set()) == {"Authorization": REDACTED_TOKEN}

    @pytest.mark.unit
    def test_sensitive_names_fully_redacted(self):
        headers = {"X-Api-Key": "k-1", "Cookie": "session=1"}

        assert redact_headers(headers, set()) == {"X-Api-Key": REDACTED_TOKEN, "Cookie": REDACTED_TOKEN}

    @pytest.mark.unit
    def test_other_headers_get_secret_masking(self):
        headers = {"Accept": "application/json", "X-Trace": "abc123-suffix"}

        assert redact_headers(headers, {"abc123"}) == {"Accept": "application/json", "X-Trace": "[secret]-suffix"}

    @pytest.mark.unit
    def test_extra_sensitive_names_case_insensitive(self):
        headers = {"Ocp-Apim-Subscription-Key": "live-key", "Accept": "*/*"}

        result = redact_headers(headers, set(), sensitive_names={"ocp-apim-subscription-key"})

        assert result == {"Ocp-Apim-Subscription-Key": REDACTED_TOKEN, "Accept": "*/*"}


class TestRedactUrl:
    """Test URL redaction."""

    @pytest.mark.unit
    def test_sensitive_query_param_always_redacted(self):
        result = redact_url("https://api.example.com/items?api_key=xyz", set())

        assert result == "https://api.example.com/items?api_key=%5Bredacted%5D"

    @pytest.mark.unit
    def test_secret_in_plain_param_is_masked(self):
        result = redact_url("https://x/i?q=abc123&page=1", {"abc123"})

        assert result == "https://x/i?q=%5Bsecret%5D&page=1"

    @pytest.mark.unit
    def test_secret_in_path_is_masked(self):
        assert redact_url("https://x/abc123/items", {"abc123"}) == "https://x/[secret]/items"

    @pytest.mark.unit
    def test_url_without_query_untouched(self):
        assert redact_url("https://api.example.com/users", set()) == "https://api.example.com/users"

    @pytest.mark.unit
    def test_relative_url_gets_substring_masking_only(self):
        assert redact_url("not a url?token=abc123", {"abc123"}) == "not a url?token=[secret]"

    @pytest.mark.unit
    def test_unparseable_url_gets_substring_masking_only(self):
        result = redact_url("http://[not-ipv6]/path?token=abc123", {"abc123"})

        assert result == "http://[not-ipv6]/path?token=[secret]"

    @pytest.mark.unit
    def test_extra_sensitive_query_names(self):
        result = redact_url("https://x/i?code=abc&page=1", set(), sensitive_names={"code"})

        assert result == "https://x/i?code=%5Bredacted%5D&page=1"
