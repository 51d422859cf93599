"""Decorators attaching OpenAPI metadata to handlers and error types.

Usage examples:

@api_error_component(ErrorStatus(404), ErrorStatus(405, "Invalid input"), ErrorStatus(409))
class PetError(Exception):
    ...

@api_operation(tag='pet', inputs=[Json[Pet]], errors=PetError, error_codes=[405])
def add_pet() -> CreatedJson[Pet]:
    '''Add a new pet to the store

    Longer text becomes the operation description.
    '''

Parameters of api_operation:
  tag / tags: operation tags (tag is appended to tags).
  summary / description: default to the handler docstring (first line / rest).
  operation_id: explicit operationId; generated from method and path when absent.
  inputs: types asked for parameters, request body and security; handler
    parameters annotated with such types are picked up as well.
  output: success type; defaults to the return annotation.
  errors: type decorated with api_error_component.
  error_codes: document only these of the error type's statuses.
  status_code: override the success status.
  parameters: extra explicit Parameter objects.
  security: extra security scheme names required by the operation.
  skip: leave the handler out of the document.
  methods: document only these methods when one view serves several;
    HEAD and OPTIONS are documented only when listed here or defined on a
    view class.

Neither decorator wraps the function; metadata is stored on it as an
attribute and read back by describe().
"""
from __future__ import annotations
import inspect
import typing
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .component import ApiComponent, EmptyComponent, TypeComponent, component_for
from .errors import ConfigurationError
from .models import MediaType, Parameter, Response
from .openapi_parts.constants import JSON_CONTENT_TYPE
from .openapi_parts.helpers import reason_phrase, status_key
from .operation import OperationDescriptor
from .schema import is_schema_type, to_schema
from .validation import validate_method

OPERATION_ATTR = "__api_operation__"

_UNSET: Any = object()


@dataclass(frozen=True)
class ErrorStatus:
    code: int
    description: Optional[str] = None


@dataclass(frozen=True)
class OperationDeclaration:
    tags: Tuple[str, ...] = ()
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = None
    deprecated: bool = False
    inputs: Tuple[Any, ...] = ()
    output: Any = _UNSET
    errors: Any = None
    error_codes: Optional[Tuple[Any, ...]] = None
    status_code: Optional[int] = None
    parameters: Tuple[Parameter, ...] = ()
    security: Tuple[str, ...] = ()
    skip: bool = False
    # methods of a multi-method view this declaration documents; None documents all
    methods: Optional[Tuple[str, ...]] = None


class ErrorComponent(ApiComponent):
    """One response per declared error status.

    When the error type is itself a documented type (a pydantic model, a
    dataclass) every error response carries it as a JSON body.
    """

    def __init__(self, tp: Any, statuses: Iterable[ErrorStatus]):
        self.tp = tp
        self.statuses = tuple(statuses)
        self.body = is_schema_type(tp)

    def schema(self):
        return to_schema(self.tp) if self.body else None

    def children(self):
        return TypeComponent(self.tp).children() if self.body else []

    def error_responses(self):
        content = {}
        if self.body:
            content = {JSON_CONTENT_TYPE: MediaType(schema=self.schema_or_ref())}
        out = []
        for status in self.statuses:
            description = status.description or reason_phrase(status.code)
            out.append((status_key(status.code), Response(description=description, content=content)))
        return out


def api_error_component(*statuses: Any):
    """Class decorator declaring the error statuses a type can produce.

    Each status is an ErrorStatus, a bare int, or a (code, description) tuple.
    """
    normalized: List[ErrorStatus] = []
    for status in statuses:
        if isinstance(status, ErrorStatus):
            normalized.append(status)
        elif isinstance(status, tuple):
            normalized.append(ErrorStatus(int(status[0]), status[1] if len(status) > 1 else None))
        elif isinstance(status, (int, HTTPStatus)):
            normalized.append(ErrorStatus(int(status)))
        else:
            raise ConfigurationError(f"unsupported error status declaration {status!r}")
    if not normalized:
        raise ConfigurationError("api_error_component needs at least one status")

    def outer(cls):
        def __api_component__(owner) -> ApiComponent:
            return ErrorComponent(owner, normalized)

        cls.__api_component__ = classmethod(__api_component__)
        return cls
    return outer


def api_operation(
    *,
    tag: Optional[str] = None,
    tags: Iterable[str] = (),
    summary: Optional[str] = None,
    description: Optional[str] = None,
    operation_id: Optional[str] = None,
    deprecated: bool = False,
    inputs: Iterable[Any] = (),
    output: Any = _UNSET,
    errors: Any = None,
    error_code: Optional[int] = None,
    error_codes: Optional[Iterable[Any]] = None,
    status_code: Optional[int] = None,
    parameters: Iterable[Parameter] = (),
    security: Iterable[str] = (),
    skip: bool = False,
    methods: Optional[Iterable[str]] = None,
):
    all_tags = tuple(tags) + ((tag,) if tag else ())
    codes = tuple(error_codes) if error_codes is not None else None
    if error_code is not None:
        codes = (codes or ()) + (error_code,)
    declaration = OperationDeclaration(
        tags=all_tags,
        summary=summary,
        description=description,
        operation_id=operation_id,
        deprecated=deprecated,
        inputs=tuple(inputs),
        output=output,
        errors=errors,
        error_codes=codes,
        status_code=status_code,
        parameters=tuple(parameters),
        security=tuple(security),
        skip=skip,
        methods=tuple(validate_method(m) for m in methods) if methods is not None else None,
    )

    def outer(fn):
        setattr(fn, OPERATION_ATTR, declaration)
        return fn
    return outer


def declaration_of(fn: Callable) -> Optional[OperationDeclaration]:
    return getattr(fn, OPERATION_ATTR, None)


def _docstring_parts(fn: Callable) -> Tuple[Optional[str], Optional[str]]:
    doc = inspect.getdoc(fn)
    if not doc:
        return None, None
    first, _, rest = doc.partition("\n")
    rest = rest.strip()
    return first.strip() or None, rest or None


def _contributes(component: ApiComponent) -> bool:
    return bool(
        component.parameters()
        or component.request_body() is not None
        or component.security_requirement() is not None
    )


def describe(fn: Callable) -> OperationDescriptor:
    """Turn a decorated handler into an OperationDescriptor."""
    declaration = declaration_of(fn) or OperationDeclaration()
    try:
        hints = typing.get_type_hints(fn, include_extras=True)
    except Exception as e:  # NameError for unresolved forward refs, TypeError for bad annotations
        raise ConfigurationError(f"cannot resolve type hints of {fn.__qualname__}: {e}") from e

    inputs: List[Any] = list(declaration.inputs)
    for pname, hint in hints.items():
        if pname == "return" or hint in inputs:
            continue
        component = component_for(hint)
        if not isinstance(component, EmptyComponent) and _contributes(component):
            inputs.append(hint)

    output = declaration.output
    if output is _UNSET:
        output = hints.get("return")
    if output is type(None):
        output = None

    summary, description = declaration.summary, declaration.description
    if summary is None and description is None:
        summary, description = _docstring_parts(fn)
    elif summary is None:
        summary, _ = _docstring_parts(fn)

    return OperationDescriptor(
        tags=declaration.tags,
        summary=summary,
        description=description,
        operation_id=declaration.operation_id,
        deprecated=declaration.deprecated,
        inputs=tuple(inputs),
        output=output,
        errors=declaration.errors,
        error_codes=declaration.error_codes,
        status_code=declaration.status_code,
        parameters=declaration.parameters,
        security=declaration.security,
    )


__all__ = [
    "OPERATION_ATTR",
    "ErrorStatus",
    "OperationDeclaration",
    "ErrorComponent",
    "api_error_component",
    "api_operation",
    "declaration_of",
    "describe",
]
