"""Security scheme components.

Usage::

    @api_security(bearer_jwt())
    class BearerAuth:
        ...

    @api_operation(inputs=[BearerAuth])
    def me(): ...

Any operation taking ``BearerAuth`` as an input then requires the
``bearer_auth`` scheme, and the scheme is declared in
``components.securitySchemes``. The name defaults to the snake_case form
of the class name.
"""
from __future__ import annotations
from typing import Any, Iterable, Mapping, Optional

from .component import ApiComponent
from .errors import ConfigurationError
from .models import SecurityRequirement, SecurityScheme
from .openapi_parts.constants import SECURITY_SCHEME_TYPES
from .openapi_parts.helpers import snake_case


class SecurityComponent(ApiComponent):
    def __init__(self, name: str, scheme: SecurityScheme, scopes: Iterable[str] = ()):
        self.name = name
        self.scheme = scheme
        self.scopes = tuple(scopes)

    def security_requirement(self):
        return SecurityRequirement(self.name, self.scopes)

    def securities(self):
        return {self.name: self.scheme}


def api_security(scheme: SecurityScheme, *, name: Optional[str] = None, scopes: Iterable[str] = ()):
    """Class decorator marking a type as an auth scheme."""
    if scheme.type not in SECURITY_SCHEME_TYPES:
        raise ConfigurationError(f"unknown security scheme type '{scheme.type}'")
    scopes = tuple(scopes)

    def outer(cls):
        scheme_name = name or snake_case(cls.__name__)

        def __api_component__(owner) -> ApiComponent:
            return SecurityComponent(scheme_name, scheme, scopes)

        cls.__api_component__ = classmethod(__api_component__)
        return cls
    return outer


def bearer_jwt(description: Optional[str] = None) -> SecurityScheme:
    return SecurityScheme(type="http", scheme="bearer", bearer_format="JWT", description=description)


def http_basic(description: Optional[str] = None) -> SecurityScheme:
    return SecurityScheme(type="http", scheme="basic", description=description)


def api_key(name: str, location: str = "header", description: Optional[str] = None) -> SecurityScheme:
    if location not in ("query", "header", "cookie"):
        raise ConfigurationError(f"api key location must be query, header or cookie, got '{location}'")
    return SecurityScheme(type="apiKey", name=name, location=location, description=description)


def oauth2(flows: Mapping[str, Any], description: Optional[str] = None) -> SecurityScheme:
    return SecurityScheme(type="oauth2", flows=dict(flows), description=description)


__all__ = [
    "SecurityComponent",
    "api_security",
    "bearer_jwt",
    "http_basic",
    "api_key",
    "oauth2",
]
