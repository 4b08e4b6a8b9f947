"""Authentication configuration types.

Auth is a tagged union. The ``INHERIT`` sentinel means "use an ancestor's
auth" and is a plain string so it compares equal to the persisted form.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

from api_collection_core.errors.exceptions import DocumentError

INHERIT: Literal["inherit"] = "inherit"


@dataclass(frozen=True)
class NoAuth:
    type: ClassVar[str] = "none"


@dataclass(frozen=True)
class BasicAuth:
    type: ClassVar[str] = "basic"

    username: str = ""
    password: str = ""


@dataclass(frozen=True)
class BearerAuth:
    type: ClassVar[str] = "bearer"

    token: str = ""


@dataclass(frozen=True)
class ApiKeyAuth:
    type: ClassVar[str] = "apikey"

    key: str = ""
    value: str = ""
    placement: Literal["header", "query"] = "header"


@dataclass(frozen=True)
class OAuth2Auth:
    """OAuth2 settings; opaque here, the token is fetched by an external flow."""

    type: ClassVar[str] = "oauth2"

    flow: str | None = None
    settings: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GenericAuth:
    """Any other scheme (digest, ntlm, wsse, awsv4, ...) kept as raw fields."""

    type: str
    fields: Mapping[str, Any] = field(default_factory=dict)


AuthConfig = NoAuth | BasicAuth | BearerAuth | ApiKeyAuth | OAuth2Auth | GenericAuth
Auth = AuthConfig | Literal["inherit"]


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def auth_from_dict(data: Any) -> Auth | None:
    """Parse the persisted form of an auth block.

    Args:
        data: ``"inherit"``, a mapping with a ``type`` key, or None.

    Returns:
        The typed auth object, ``INHERIT`` or None.

    Raises:
        DocumentError: If the block is neither a mapping nor ``"inherit"``,
            or has no ``type``.
    """
    if data is None:
        return None
    if data == INHERIT:
        return INHERIT
    if not isinstance(data, Mapping):
        raise DocumentError(f"Auth must be 'inherit' or a mapping, got {data!r}")

    auth_type = data.get("type")
    if not auth_type:
        raise DocumentError(f"Auth block without a type: {dict(data)!r}")

    if auth_type == "none":
        return NoAuth()
    if auth_type == "basic":
        return BasicAuth(username=_text(data, "username"), password=_text(data, "password"))
    if auth_type == "bearer":
        return BearerAuth(token=_text(data, "token"))
    if auth_type == "apikey":
        placement = "query" if data.get("placement") == "query" else "header"
        return ApiKeyAuth(key=_text(data, "key"), value=_text(data, "value"), placement=placement)
    if auth_type == "oauth2":
        settings = {k: v for k, v in data.items() if k not in ("type", "flow")}
        return OAuth2Auth(flow=data.get("flow"), settings=settings)
    return GenericAuth(type=str(auth_type), fields={k: v for k, v in data.items() if k != "type"})
