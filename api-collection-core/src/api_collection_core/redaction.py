"""Masking of secrets in materialized requests for safe previews.

Two mechanisms combine:
- Known secret values (typically those resolved from a secret provider)
  are replaced wherever they appear by ``SECRET_TOKEN``.
- Fields whose *name* looks sensitive (``Authorization``, ``X-Api-Key``,
  ``?token=``...) are replaced wholesale by ``REDACTED_TOKEN``.

Example:
    ```python
    from api_collection_core.redaction import redact_headers, redact_url

    redact_headers({"Authorization": "Bearer abc123"}, {"abc123"})
    # {'Authorization': 'Bearer [redacted]'}

    redact_url("https://api.example.com/items?api_key=xyz", set())
    # 'https://api.example.com/items?api_key=%5Bredacted%5D'
    ```
"""

import logging
import re
from collections.abc import Iterable, Mapping

import httpx

logger = logging.getLogger(__name__)

SECRET_TOKEN = "[secret]"
REDACTED_TOKEN = "[redacted]"

CREDENTIAL_HEADERS = frozenset(["authorization", "proxy-authorization"])
_SENSITIVE_HEADER_EXACT = frozenset(["cookie", "set-cookie"])
_SENSITIVE_HEADER_PARTS = ("api-key", "apikey", "token", "secret", "auth")
_SENSITIVE_QUERY_PARTS = ("token", "apikey", "api_key", "secret", "password", "auth", "key")

_AUTH_SCHEME = re.compile(r"^([A-Za-z]+)\s+")


def is_sensitive_header_name(name: str) -> bool:
    lower = name.strip().lower()
    return lower in _SENSITIVE_HEADER_EXACT or any(part in lower for part in _SENSITIVE_HEADER_PARTS)


def is_sensitive_query_name(name: str) -> bool:
    lower = name.lower()
    return any(part in lower for part in _SENSITIVE_QUERY_PARTS)


def redact(text: str, secret_values: Iterable[str]) -> str:
    """Replace every occurrence of each non-empty secret with ``SECRET_TOKEN``."""
    masked = text
    # Longest first so a secret containing another is masked whole
    for secret in sorted((s for s in secret_values if s), key=len, reverse=True):
        masked = masked.replace(secret, SECRET_TOKEN)
    return masked


def redact_headers(
    headers: Mapping[str, str],
    secret_values: Iterable[str],
    *,
    sensitive_names: Iterable[str] = (),
) -> dict[str, str]:
    """Redact a header mapping for display.

    ``Authorization``/``Proxy-Authorization`` keep their scheme word only.
    Sensitive-looking names, and any listed in ``sensitive_names``
    (case-insensitive), are fully redacted. The remaining values get secret
    substring masking.
    """
    secrets = set(secret_values)
    extra = {name.strip().lower() for name in sensitive_names}
    redacted: dict[str, str] = {}
    for name, value in headers.items():
        lower = name.strip().lower()
        if lower in CREDENTIAL_HEADERS:
            scheme = _AUTH_SCHEME.match(value)
            redacted[name] = f"{scheme.group(1)} {REDACTED_TOKEN}" if scheme else REDACTED_TOKEN
        elif lower in extra or is_sensitive_header_name(lower):
            redacted[name] = REDACTED_TOKEN
        else:
            redacted[name] = redact(value, secrets)
    return redacted


def redact_url(url: str, secret_values: Iterable[str], *, sensitive_names: Iterable[str] = ()) -> str:
    """Redact a URL for display.

    Secret values are masked throughout, then every query parameter with a
    sensitive-looking name, or a name listed in ``sensitive_names``, is
    fully redacted. If the URL cannot be parsed only the substring masking
    applies.
    """
    secrets = set(secret_values)
    extra = set(sensitive_names)
    masked = redact(url, secrets)

    try:
        parsed = httpx.URL(masked)
    except httpx.InvalidURL as e:
        logger.debug(f"URL redaction skipped query parameters, URL did not parse: {e}")
        return masked
    if not parsed.scheme or not parsed.query:
        return masked

    params = [
        (name, REDACTED_TOKEN if name in extra or is_sensitive_query_name(name) else redact(value, secrets))
        for name, value in parsed.params.multi_items()
    ]
    return str(parsed.copy_with(params=params))
