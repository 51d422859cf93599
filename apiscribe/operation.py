"""Operation Descriptor construction.

An :class:`OperationDescriptor` is what a route declares about itself:
explicit metadata plus the Python types of its inputs, its success output
and its error type. :func:`build_operation` asks each of those types for
its contribution, resolves their schemas into the registry and folds the
result into one immutable :class:`~apiscribe.models.Operation`.
"""
from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Tuple, Union

from .component import component_for
from .errors import (
    ConfigurationError,
    DuplicateParameter,
    DuplicateRequestBody,
    DuplicateResponseStatus,
    SecuritySchemeConflict,
    UndeclaredErrorStatus,
)
from .models import Operation, Parameter, RequestBody, Response, SecurityRequirement, SecurityScheme
from .openapi_parts.helpers import status_key
from .registry import SchemaRegistry


@dataclass(frozen=True)
class OperationDescriptor:
    tags: Tuple[str, ...] = ()
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = None
    deprecated: bool = False
    inputs: Tuple[Any, ...] = ()
    output: Any = None
    errors: Any = None
    # subset of the error type's statuses to document; None documents all
    error_codes: Optional[Tuple[Any, ...]] = None
    status_code: Optional[int] = None
    parameters: Tuple[Parameter, ...] = ()
    security: Tuple[Union[str, SecurityRequirement], ...] = ()


def _requirement(value: Union[str, SecurityRequirement]) -> SecurityRequirement:
    if isinstance(value, SecurityRequirement):
        return value
    return SecurityRequirement(value)


def build_operation(
    descriptor: OperationDescriptor,
    registry: SchemaRegistry,
    label: str = '',
) -> Tuple[Operation, Dict[str, SecurityScheme]]:
    """Build one operation, returning it with the security schemes its inputs declare.

    Raises a :class:`~apiscribe.errors.ConfigurationError` subclass when the
    declared pieces do not fit together; the registry may then hold entries
    from the partial walk, so callers roll it back.
    """
    parameters: Dict[Tuple[str, str], Parameter] = {}
    body: Optional[RequestBody] = None
    security: List[SecurityRequirement] = []
    schemes: Dict[str, SecurityScheme] = {}

    def add_parameter(param: Parameter) -> None:
        if param.key in parameters:
            raise DuplicateParameter(f"parameter '{param.name}' in {param.location} declared twice on {label}")
        parameters[param.key] = param

    def add_security(req: SecurityRequirement) -> None:
        if req not in security:
            security.append(req)

    for tp in descriptor.inputs:
        component = component_for(tp)
        registry.resolve_component(component)
        for param in component.parameters():
            add_parameter(param)
        request_body = component.request_body()
        if request_body is not None:
            if body is not None:
                raise DuplicateRequestBody(f"more than one request body declared on {label}")
            body = request_body
        requirement = component.security_requirement()
        if requirement is not None:
            add_security(requirement)
        for name, scheme in component.securities().items():
            if schemes.get(name, scheme) != scheme:
                raise SecuritySchemeConflict(name)
            schemes[name] = scheme

    for param in descriptor.parameters:
        add_parameter(param)
    for value in descriptor.security:
        add_security(_requirement(value))

    responses: Dict[str, Response] = {}

    def add_response(status: str, response: Response) -> None:
        if status in responses:
            raise DuplicateResponseStatus(status, label)
        responses[status] = response

    if descriptor.output is not None:
        component = component_for(descriptor.output)
        registry.resolve_component(component)
        for status, response in (component.responses(descriptor.status_code) or {}).items():
            add_response(status, response)

    if descriptor.errors is not None:
        component = component_for(descriptor.errors)
        declared = component.error_responses()
        if not declared:
            raise ConfigurationError(f"{descriptor.errors!r} is not an api_error_component (on {label})")
        registry.resolve_component(component)
        seen = set()
        for status, _ in declared:
            if status in seen:
                raise DuplicateResponseStatus(status, label)
            seen.add(status)
        wanted = None
        if descriptor.error_codes is not None:
            wanted = [status_key(code) for code in descriptor.error_codes]
            missing = [code for code in wanted if code not in seen]
            if missing:
                raise UndeclaredErrorStatus(
                    f"error status {', '.join(missing)} selected on {label} but not declared by {descriptor.errors!r}"
                )
        for status, response in declared:
            if wanted is None or status in wanted:
                add_response(status, response)

    operation = Operation(
        tags=tuple(descriptor.tags),
        summary=descriptor.summary,
        description=descriptor.description,
        operation_id=descriptor.operation_id,
        deprecated=descriptor.deprecated,
        parameters=tuple(parameters.values()),
        request_body=body,
        responses=MappingProxyType(responses),
        security=tuple(security),
    )
    return operation, schemes


__all__ = ["OperationDescriptor", "build_operation"]
