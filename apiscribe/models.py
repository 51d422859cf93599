"""OpenAPI 3.0 object model.

Frozen dataclasses for the pieces of a document, each with a ``to_dict``
projection to the OAS JSON structure. Optional fields that are unset are
left out of the projection, so an empty response renders as ``{}``.

Schemas themselves stay plain JSON-compatible dicts; only the references
between them are typed.
"""
from __future__ import annotations
import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .openapi_parts.helpers import schema_ref

Schema = Dict[str, Any]


@dataclass(frozen=True)
class Reference:
    """Named pointer to a schema held in ``components.schemas``."""

    name: str

    @property
    def ref(self) -> str:
        return schema_ref(self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {"$ref": self.ref}


ReferenceOr = Union[Reference, Schema]


def schema_to_dict(value: ReferenceOr) -> Dict[str, Any]:
    if isinstance(value, Reference):
        return value.to_dict()
    return copy.deepcopy(dict(value))


@dataclass(frozen=True)
class MediaType:
    schema: Optional[ReferenceOr] = None
    example: Any = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.schema is not None:
            out["schema"] = schema_to_dict(self.schema)
        if self.example is not None:
            out["example"] = copy.deepcopy(self.example)
        return out


def _content_to_dict(content: Mapping[str, MediaType]) -> Dict[str, Any]:
    return {ct: media.to_dict() for ct, media in content.items()}


@dataclass(frozen=True)
class Response:
    description: Optional[str] = None
    content: Mapping[str, MediaType] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.description is not None:
            out["description"] = self.description
        if self.content:
            out["content"] = _content_to_dict(self.content)
        return out


@dataclass(frozen=True)
class RequestBody:
    content: Mapping[str, MediaType] = field(default_factory=dict)
    required: bool = True
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.description is not None:
            out["description"] = self.description
        out["content"] = _content_to_dict(self.content)
        if self.required:
            out["required"] = True
        return out


@dataclass(frozen=True)
class Parameter:
    name: str
    location: str
    required: bool = False
    schema: Optional[ReferenceOr] = None
    description: Optional[str] = None
    deprecated: bool = False

    @property
    def key(self) -> Tuple[str, str]:
        return self.name, self.location

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "in": self.location}
        if self.description is not None:
            out["description"] = self.description
        if self.required:
            out["required"] = True
        if self.deprecated:
            out["deprecated"] = True
        if self.schema is not None:
            out["schema"] = schema_to_dict(self.schema)
        return out


@dataclass(frozen=True)
class SecurityScheme:
    type: str
    description: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
    scheme: Optional[str] = None
    bearer_format: Optional[str] = None
    flows: Optional[Mapping[str, Any]] = None
    open_id_connect_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type}
        for key, value in (
            ("description", self.description),
            ("name", self.name),
            ("in", self.location),
            ("scheme", self.scheme),
            ("bearerFormat", self.bearer_format),
            ("flows", copy.deepcopy(dict(self.flows)) if self.flows is not None else None),
            ("openIdConnectUrl", self.open_id_connect_url),
        ):
            if value is not None:
                out[key] = value
        return out


@dataclass(frozen=True)
class SecurityRequirement:
    name: str
    scopes: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {self.name: list(self.scopes)}


@dataclass(frozen=True)
class Operation:
    tags: Tuple[str, ...] = ()
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = None
    deprecated: bool = False
    parameters: Tuple[Parameter, ...] = ()
    request_body: Optional[RequestBody] = None
    responses: Mapping[str, Response] = field(default_factory=dict)
    security: Tuple[SecurityRequirement, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.tags:
            out["tags"] = list(self.tags)
        if self.summary is not None:
            out["summary"] = self.summary
        if self.description is not None:
            out["description"] = self.description
        if self.operation_id is not None:
            out["operationId"] = self.operation_id
        if self.parameters:
            out["parameters"] = [p.to_dict() for p in self.parameters]
        if self.request_body is not None:
            out["requestBody"] = self.request_body.to_dict()
        out["responses"] = {status: r.to_dict() for status, r in self.responses.items()}
        if self.deprecated:
            out["deprecated"] = True
        if self.security:
            out["security"] = [s.to_dict() for s in self.security]
        return out


@dataclass(frozen=True)
class PathItem:
    operations: Mapping[str, Operation] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {method: op.to_dict() for method, op in self.operations.items()}


@dataclass(frozen=True)
class Info:
    title: str
    version: str
    description: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact: Optional[Mapping[str, str]] = None
    license: Optional[Mapping[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"title": self.title}
        if self.description is not None:
            out["description"] = self.description
        if self.terms_of_service is not None:
            out["termsOfService"] = self.terms_of_service
        if self.contact is not None:
            out["contact"] = dict(self.contact)
        if self.license is not None:
            out["license"] = dict(self.license)
        out["version"] = self.version
        return out


@dataclass(frozen=True)
class Server:
    url: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"url": self.url}
        if self.description is not None:
            out["description"] = self.description
        return out


@dataclass(frozen=True)
class Tag:
    name: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        if self.description is not None:
            out["description"] = self.description
        return out


@dataclass(frozen=True)
class Document:
    """Finished, read-only OpenAPI document.

    Produced only by the assembler. Its mappings are read-only views over
    private copies, so nothing reachable from a Document can change the
    builder that produced it (or the other way round).
    """

    openapi: str
    info: Info
    paths: Mapping[str, PathItem]
    schemas: Mapping[str, Mapping[str, Any]]
    security_schemes: Mapping[str, SecurityScheme]
    security: Tuple[SecurityRequirement, ...] = ()
    servers: Tuple[Server, ...] = ()
    tags: Tuple[Tag, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "openapi": self.openapi,
            "info": self.info.to_dict(),
            "paths": {path: item.to_dict() for path, item in self.paths.items()},
            "components": {
                "schemas": {name: _thaw(schema) for name, schema in self.schemas.items()},
                "securitySchemes": {name: s.to_dict() for name, s in self.security_schemes.items()},
            },
            "security": [s.to_dict() for s in self.security],
            "servers": [s.to_dict() for s in self.servers],
        }
        if self.tags:
            out["tags"] = [t.to_dict() for t in self.tags]
        return out


def freeze(value: Any) -> Any:
    """Deep-copy a JSON-compatible tree into read-only mappings and tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


__all__ = [
    "Schema",
    "Reference",
    "ReferenceOr",
    "schema_to_dict",
    "MediaType",
    "Response",
    "RequestBody",
    "Parameter",
    "SecurityScheme",
    "SecurityRequirement",
    "Operation",
    "PathItem",
    "Info",
    "Server",
    "Tag",
    "Document",
    "freeze",
]
