"""Component Contribution Protocol.

Any type that appears in an operation (a request body, a query model, a
response payload, an auth marker) contributes its piece of the document
through an :class:`ApiComponent`. Components are pure structural views of
a type: they never look at the registry and never remember what they have
already produced, so walking a self-referential type is bounded by the
caller (see :mod:`apiscribe.registry`), not here.

Dispatch from a Python type to its component goes through
:func:`component_for`:

    1. factories registered with :func:`register_component`
    2. an ``__api_component__(*type_args)`` hook on the type (or on the
       origin of a parameterized generic, e.g. ``CreatedJson[Pet]``)
    3. :class:`TypeComponent`, backed by pydantic, for everything else
"""
from __future__ import annotations
import dataclasses
import enum
import typing
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from pydantic import BaseModel

from .models import MediaType, Parameter, Reference, ReferenceOr, RequestBody, Response, SecurityRequirement, SecurityScheme
from .openapi_parts.constants import JSON_CONTENT_TYPE
from .openapi_parts.helpers import status_key
from .schema import is_schema_type, to_schema

NamedSchema = Tuple[str, Dict[str, Any]]


class ApiComponent:
    """Capability through which a type contributes to an OpenAPI document.

    Every method has an empty default so components only override what
    they actually contribute.
    """

    def schema(self) -> Optional[Tuple[Optional[str], Dict[str, Any]]]:
        """This type's own schema as ``(name, schema)``.

        ``name`` is None for anonymous types, which are always inlined.
        Returns None when the type emits no schema at all.
        """
        return None

    def children(self) -> List["ApiComponent"]:
        """Components of the types directly contained in this one."""
        return []

    def child_schemas(self) -> List[NamedSchema]:
        return collect_child_schemas(self)

    def request_body(self) -> Optional[RequestBody]:
        return None

    def parameters(self) -> List[Parameter]:
        return []

    def responses(self, status_override: Any = None) -> Optional[Dict[str, Response]]:
        return None

    def error_responses(self) -> List[Tuple[str, Response]]:
        """Declared error responses in declaration order, duplicates included."""
        return []

    def security_requirement(self) -> Optional[SecurityRequirement]:
        return None

    def securities(self) -> Dict[str, SecurityScheme]:
        return {}

    def schema_or_ref(self) -> Optional[ReferenceOr]:
        """What a media type or parameter should embed for this type."""
        own = self.schema()
        if own is None:
            return None
        name, schema = own
        if name is not None:
            return Reference(name)
        return schema


def collect_child_schemas(component: ApiComponent) -> List[NamedSchema]:
    """Flatten every named schema reachable from *component*'s children.

    Each name is listed once, in discovery order; a type that reaches itself
    through a cycle appears in its own list.
    """
    seen: Set[str] = set()
    out: List[NamedSchema] = []

    def walk(c: ApiComponent) -> None:
        for child in c.children():
            own = child.schema()
            if own is not None and own[0] is not None:
                name, schema = own
                if name in seen:
                    continue
                seen.add(name)
                out.append((name, schema))
            walk(child)

    walk(component)
    return out


def json_response(status: Any, schema: Optional[ReferenceOr], description: Optional[str] = None) -> Dict[str, Response]:
    content = {JSON_CONTENT_TYPE: MediaType(schema=schema)} if schema is not None else {}
    return {status_key(status): Response(description=description, content=content)}


def contained_types(tp: Any) -> List[Any]:
    """Types structurally contained in *tp*: generic arguments or declared fields."""
    origin = typing.get_origin(tp)
    if origin is typing.Literal:
        return []
    if origin is typing.Annotated:
        return [typing.get_args(tp)[0]]
    if origin is not None:
        return [a for a in typing.get_args(tp) if a is not Ellipsis and not isinstance(a, (list, str, int))]
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        return [f.annotation for f in tp.model_fields.values() if f.annotation is not None]
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        hints = typing.get_type_hints(tp)
        return [hints[f.name] for f in dataclasses.fields(tp) if f.name in hints]
    if isinstance(tp, type) and issubclass(tp, enum.Enum):
        return []
    if is_schema_type(tp) and hasattr(tp, "__annotations__"):
        return list(typing.get_type_hints(tp).values())
    return []


class TypeComponent(ApiComponent):
    """Default component for plain types, backed by pydantic's JSON schema.

    As an input a named type is a JSON request body; as an output any type
    is a 200 JSON response.
    """

    def __init__(self, tp: Any):
        self.tp = tp

    def __repr__(self) -> str:
        return f"TypeComponent({self.tp!r})"

    def schema(self):
        return to_schema(self.tp)

    def children(self):
        return [component_for(t) for t in contained_types(self.tp)]

    def request_body(self):
        name, _ = to_schema(self.tp)
        if name is None:
            return None
        return RequestBody(content={JSON_CONTENT_TYPE: MediaType(schema=Reference(name))})

    def responses(self, status_override=None):
        return json_response(status_override or 200, self.schema_or_ref())


class EmptyComponent(ApiComponent):
    """Contributes nothing; stands in for ``None`` annotations."""


_FACTORIES: Dict[Any, Callable[..., ApiComponent]] = {}


def register_component(tp: Any, factory: Callable[..., ApiComponent]) -> None:
    """Route *tp* (or a generic origin such as ``dict``) to *factory*.

    The factory receives the type arguments of a parameterized use, or
    nothing for a bare type.
    """
    _FACTORIES[tp] = factory


def unregister_component(tp: Any) -> None:
    _FACTORIES.pop(tp, None)


def _lookup_factory(key: Any) -> Optional[Callable[..., ApiComponent]]:
    try:
        return _FACTORIES.get(key)
    except TypeError:
        return None


def component_for(tp: Any) -> ApiComponent:
    if isinstance(tp, ApiComponent):
        return tp
    if tp is None or tp is type(None):
        return EmptyComponent()

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    factory = _lookup_factory(tp)
    if factory is not None:
        return factory()
    if origin is not None:
        factory = _lookup_factory(origin)
        if factory is not None:
            return factory(*args)

    hook_owner = origin if isinstance(origin, type) else tp
    hook = getattr(hook_owner, "__api_component__", None) if isinstance(hook_owner, type) else None
    if hook is not None:
        return hook(*args) if origin is not None else hook()
    return TypeComponent(tp)


__all__ = [
    "ApiComponent",
    "TypeComponent",
    "EmptyComponent",
    "collect_child_schemas",
    "contained_types",
    "json_response",
    "register_component",
    "unregister_component",
    "component_for",
]
