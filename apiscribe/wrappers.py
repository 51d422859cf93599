"""Request/response wrapper types.

Handlers annotate inputs and outputs with these generics so each one
contributes the right piece of an operation:

    Json[T]          JSON request body (input) / 200 JSON response (output)
    CreatedJson[T]   201 JSON response
    AcceptedJson[T]  202 JSON response
    NoContent        204 response without content
    Form[T]          form-encoded request body
    Query[T], Path[T], Header[T], Cookie[T]
                     one parameter per field of the model T

At runtime the response wrappers hold the payload and ``dump()`` it into
the ``(body, status)`` tuple a Flask view returns.
"""
from __future__ import annotations
from http import HTTPStatus
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import TypeAdapter

from .component import ApiComponent, component_for, json_response
from .models import MediaType, Parameter, RequestBody, Response
from .openapi_parts.constants import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE
from .openapi_parts.helpers import status_key

T = TypeVar("T")


class BodyComponent(ApiComponent):
    """Pass-through to the wrapped type's schema, adding body/response semantics."""

    def __init__(self, inner: Any, status: Any = HTTPStatus.OK, content_type: Optional[str] = JSON_CONTENT_TYPE, as_body: bool = True):
        self.inner = component_for(inner)
        self.status = status
        self.content_type = content_type
        self.as_body = as_body

    def schema(self):
        return self.inner.schema()

    def children(self):
        return self.inner.children()

    def request_body(self):
        if not self.as_body or self.content_type is None:
            return None
        return RequestBody(content={self.content_type: MediaType(schema=self.schema_or_ref())})

    def responses(self, status_override=None):
        if self.content_type != JSON_CONTENT_TYPE:
            return None
        return json_response(status_override or self.status, self.schema_or_ref())


class NoContentComponent(ApiComponent):
    def responses(self, status_override=None):
        return {status_key(status_override or HTTPStatus.NO_CONTENT): Response()}


class ParametersComponent(ApiComponent):
    """Spreads the fields of a model into parameters at one location.

    The model itself is not registered as a component; only the types its
    fields refer to are.
    """

    def __init__(self, inner: Any, location: str):
        self.inner = component_for(inner)
        self.location = location

    def children(self):
        return self.inner.children()

    def parameters(self) -> List[Parameter]:
        own = self.inner.schema()
        if own is None:
            return []
        _, schema = own
        required = set(schema.get("required", ()))
        params = []
        for name, prop in schema.get("properties", {}).items():
            prop = dict(prop)
            description = prop.pop("description", None)
            deprecated = bool(prop.pop("deprecated", False))
            params.append(Parameter(
                name=name,
                location=self.location,
                required=self.location == "path" or name in required,
                schema=prop,
                description=description,
                deprecated=deprecated,
            ))
        return params


class _Payload(Generic[T]):
    status: HTTPStatus = HTTPStatus.OK

    def __init__(self, value: T):
        self.value = value

    def dump(self) -> Tuple[Any, int]:
        """Serialize the payload to JSON-compatible data paired with the status code."""
        data = TypeAdapter(type(self.value)).dump_python(self.value, mode="json")
        return data, int(self.status)


class Json(_Payload[T]):
    @classmethod
    def __api_component__(cls, inner: Any = Any) -> ApiComponent:
        return BodyComponent(inner, status=cls.status)


class CreatedJson(_Payload[T]):
    status = HTTPStatus.CREATED

    @classmethod
    def __api_component__(cls, inner: Any = Any) -> ApiComponent:
        return BodyComponent(inner, status=cls.status, as_body=False)


class AcceptedJson(_Payload[T]):
    status = HTTPStatus.ACCEPTED

    @classmethod
    def __api_component__(cls, inner: Any = Any) -> ApiComponent:
        return BodyComponent(inner, status=cls.status, as_body=False)


class NoContent:
    """Empty 204 response."""

    status = HTTPStatus.NO_CONTENT

    def dump(self) -> Tuple[str, int]:
        return "", int(self.status)

    @classmethod
    def __api_component__(cls) -> ApiComponent:
        return NoContentComponent()


class Form(Generic[T]):
    @classmethod
    def __api_component__(cls, inner: Any = Any) -> ApiComponent:
        return BodyComponent(inner, content_type=FORM_CONTENT_TYPE)


class Query(Generic[T]):
    @classmethod
    def __api_component__(cls, inner: Any = Any) -> ApiComponent:
        return ParametersComponent(inner, "query")


class Path(Generic[T]):
    @classmethod
    def __api_component__(cls, inner: Any = Any) -> ApiComponent:
        return ParametersComponent(inner, "path")


class Header(Generic[T]):
    @classmethod
    def __api_component__(cls, inner: Any = Any) -> ApiComponent:
        return ParametersComponent(inner, "header")


class Cookie(Generic[T]):
    @classmethod
    def __api_component__(cls, inner: Any = Any) -> ApiComponent:
        return ParametersComponent(inner, "cookie")


def response_map(tp: Any, status_override: Any = None) -> Dict[str, Dict[str, Any]]:
    """JSON projection of the responses *tp* contributes; handy for inspection."""
    responses = component_for(tp).responses(status_override) or {}
    return {status: r.to_dict() for status, r in responses.items()}


__all__ = [
    "BodyComponent",
    "NoContentComponent",
    "ParametersComponent",
    "Json",
    "CreatedJson",
    "AcceptedJson",
    "NoContent",
    "Form",
    "Query",
    "Path",
    "Header",
    "Cookie",
    "response_map",
]
