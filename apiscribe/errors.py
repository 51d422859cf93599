"""apiscribe exception hierarchy.

Every error raised while assembling a document inherits from
:class:`ApiscribeError`. Errors caused by user-supplied metadata also
inherit from :class:`ConfigurationError`; they abort document generation
and are never silently resolved.
"""
from __future__ import annotations
from typing import Any, Dict


class ApiscribeError(Exception):
    """Base exception for all apiscribe errors."""


class ConfigurationError(ApiscribeError):
    """Raised when a contribution is rejected because its metadata is inconsistent."""


class SchemaNameConflict(ConfigurationError):
    """Raised when two different schema shapes are contributed under one name."""

    def __init__(self, name: str, existing: Dict[str, Any], incoming: Dict[str, Any]):
        self.name = name
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"schema name conflict for '{name}': existing={existing!r} incoming={incoming!r}"
        )


class DuplicateResponseStatus(ConfigurationError):
    """Raised when one operation declares the same response status twice."""

    def __init__(self, status: str, operation: str = ''):
        self.status = status
        self.operation = operation
        where = f" on {operation}" if operation else ''
        super().__init__(f"response status {status} declared more than once{where}")


class UnresolvedReference(ApiscribeError):
    """Raised when a finished document references a schema absent from components.

    This is an internal invariant violation, not a user error.
    """

    def __init__(self, name: str, location: str = ''):
        self.name = name
        self.location = location
        where = f" (at {location})" if location else ''
        super().__init__(f"unresolved schema reference '{name}'{where}")


class SecuritySchemeConflict(ConfigurationError):
    """Raised when a security scheme name is declared with two different definitions."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"security scheme '{name}' declared twice with different definitions")


class UnknownSecurityScheme(ConfigurationError):
    """Raised when a security requirement names an undeclared scheme."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"security requirement references undeclared scheme '{name}'")


class InvalidComponentName(ConfigurationError):
    """Raised when a component name is not usable inside a JSON pointer."""


class InvalidHttpMethod(ConfigurationError):
    """Raised when an operation is registered under an unknown HTTP method."""


class InvalidPath(ConfigurationError):
    """Raised when a route path is malformed."""


class DuplicateOperation(ConfigurationError):
    """Raised when the same path and method are registered twice."""


class DuplicateOperationId(ConfigurationError):
    """Raised when two operations share an explicit operationId."""


class DuplicateParameter(ConfigurationError):
    """Raised when an operation declares the same (name, location) parameter twice."""


class DuplicateRequestBody(ConfigurationError):
    """Raised when more than one handler input contributes a request body."""


class UndeclaredErrorStatus(ConfigurationError):
    """Raised when an operation selects an error status its error type does not declare."""


__all__ = [
    "ApiscribeError",
    "ConfigurationError",
    "SchemaNameConflict",
    "DuplicateResponseStatus",
    "UnresolvedReference",
    "SecuritySchemeConflict",
    "UnknownSecurityScheme",
    "InvalidComponentName",
    "InvalidHttpMethod",
    "InvalidPath",
    "DuplicateOperation",
    "DuplicateOperationId",
    "DuplicateParameter",
    "DuplicateRequestBody",
    "UndeclaredErrorStatus",
]
