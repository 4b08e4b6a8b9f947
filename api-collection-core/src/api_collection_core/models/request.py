"""Templated HTTP request definitions."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from api_collection_core.errors.exceptions import DocumentError
from api_collection_core.models.auth import Auth, auth_from_dict
from api_collection_core.models.variables import Variable


@dataclass(frozen=True)
class Header:
    name: str
    value: str = ""
    disabled: bool = False


def headers_from_list(raw: list[Mapping[str, Any]] | None) -> tuple[Header, ...]:
    return tuple(
        Header(name=str(h["name"]), value=str(h.get("value", "")), disabled=bool(h.get("disabled", False)))
        for h in raw or []
    )


@dataclass(frozen=True)
class Param:
    name: str
    value: str = ""
    type: Literal["query", "path"] = "query"
    disabled: bool = False


@dataclass(frozen=True)
class FormEntry:
    """An entry of a form-urlencoded or multipart-form body."""

    name: str
    value: str | tuple[str, ...] = ""
    type: str = "text"
    disabled: bool = False

    def values(self) -> tuple[str, ...]:
        if isinstance(self.value, str):
            return (self.value,)
        return self.value


RAW_BODY_TYPES = frozenset(["json", "text", "xml", "sparql"])
FORM_BODY_TYPES = frozenset(["form-urlencoded", "multipart-form"])


@dataclass(frozen=True)
class RequestBody:
    """A single body: raw text for raw types, form entries for form types.

    ``file`` bodies keep their file variants untouched in ``data``.
    """

    type: str
    data: str | tuple[FormEntry, ...] | tuple[Any, ...] = ""

    @property
    def is_raw(self) -> bool:
        return self.type in RAW_BODY_TYPES

    @property
    def is_form(self) -> bool:
        return self.type in FORM_BODY_TYPES

    def entries(self) -> tuple[FormEntry, ...]:
        if self.is_form and not isinstance(self.data, str):
            return tuple(e for e in self.data if isinstance(e, FormEntry))
        return ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RequestBody":
        body_type = data.get("type")
        if not body_type:
            raise DocumentError(f"Request body without a type: {dict(data)!r}")
        raw = data.get("data")
        if body_type in RAW_BODY_TYPES:
            return cls(type=body_type, data="" if raw is None else str(raw))
        if body_type in FORM_BODY_TYPES:
            entries = []
            for item in raw or []:
                value = item.get("value", "")
                entries.append(
                    FormEntry(
                        name=str(item.get("name", "")),
                        value=tuple(str(v) for v in value) if isinstance(value, list) else str(value),
                        type=str(item.get("type", "text")),
                        disabled=bool(item.get("disabled", False)),
                    )
                )
            return cls(type=body_type, data=tuple(entries))
        return cls(type=body_type, data=tuple(raw or ()))


@dataclass(frozen=True)
class BodyVariant:
    body: RequestBody
    selected: bool = False
    title: str | None = None


@dataclass(frozen=True)
class RequestTemplate:
    """A request definition whose strings may contain ``{{name}}`` placeholders."""

    url: str = ""
    method: str = "GET"
    headers: tuple[Header, ...] = ()
    params: tuple[Param, ...] = ()
    body: RequestBody | tuple[BodyVariant, ...] | None = None
    auth: Auth | None = None

    def selected_body(self) -> RequestBody | None:
        """Return the body in effect: the selected variant, else the first."""
        if self.body is None or isinstance(self.body, RequestBody):
            return self.body
        if not self.body:
            return None
        chosen = next((v for v in self.body if v.selected), self.body[0])
        return chosen.body

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RequestTemplate":
        """Build a template from the ``http`` block of a request document.

        A ``runtime.auth`` entry in the enclosing document may be passed in
        as ``auth`` on the same mapping.
        """
        raw_body = data.get("body")
        body: RequestBody | tuple[BodyVariant, ...] | None
        if raw_body is None:
            body = None
        elif isinstance(raw_body, list):
            body = tuple(
                BodyVariant(
                    body=RequestBody.from_dict(v["body"]),
                    selected=bool(v.get("selected", False)),
                    title=v.get("title"),
                )
                for v in raw_body
                if v.get("body")
            )
        else:
            body = RequestBody.from_dict(raw_body)

        return cls(
            url=str(data.get("url") or ""),
            method=str(data.get("method") or "GET").upper(),
            headers=headers_from_list(data.get("headers")),
            params=tuple(
                Param(
                    name=str(p["name"]),
                    value=str(p.get("value", "")),
                    type="path" if p.get("type") == "path" else "query",
                    disabled=bool(p.get("disabled", False)),
                )
                for p in data.get("params") or []
            ),
            body=body,
            auth=auth_from_dict(data.get("auth")),
        )


@dataclass(frozen=True)
class RequestDefaults:
    """Variables, headers and auth inherited by requests below a folder or collection."""

    variables: tuple[Variable, ...] = ()
    auth: Auth | None = None
    headers: tuple[Header, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "RequestDefaults":
        if not data:
            return cls()
        return cls(
            variables=tuple(Variable.from_dict(v) for v in data.get("variables") or []),
            auth=auth_from_dict(data.get("auth")),
            headers=headers_from_list(data.get("headers")),
        )
