"""Centralized constants for OpenAPI document assembly.

Tests depend on deterministic ordering and content; extend these tables
rather than scattering literals across modules.
"""
from typing import Any, Dict, Tuple

OPENAPI_VERSION = "3.0.3"

# Local JSON pointer prefix for schema components
SCHEMA_REF_PREFIX = "#/components/schemas/"

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Order follows the OAS PathItem field order
HTTP_METHODS: Tuple[str, ...] = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Methods a framework adds implicitly; documented only when a view defines them
IMPLICIT_METHODS: Tuple[str, ...] = ("head", "options")

# Methods whose requests carry no body worth documenting
BODYLESS_METHODS: Tuple[str, ...] = ("get", "head", "delete", "options", "trace")

PARAMETER_LOCATIONS: Tuple[str, ...] = ("query", "header", "path", "cookie")

# OAS 3.0 components map keys
COMPONENT_NAME_PATTERN = r"^[a-zA-Z0-9\.\-_]+$"

SECURITY_SCHEME_TYPES: Tuple[str, ...] = ("apiKey", "http", "oauth2", "openIdConnect")

# Flask converter name -> inline parameter schema
CONVERTER_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "int": {"type": "integer"},
    "float": {"type": "number"},
    "uuid": {"type": "string", "format": "uuid"},
    "path": {"type": "string"},
    "string": {"type": "string"},
    "any": {"type": "string"},
}

DOCS_HTML = (
    "<!DOCTYPE html><html><head><title>{title}</title>"
    "<link rel=\"stylesheet\" href=\"https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.css\" />"
    "</head><body><redoc spec-url='{spec_url}'></redoc>"
    "<script src='https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.js'></script>"
    "</body></html>"
)

__all__ = [
    "OPENAPI_VERSION",
    "SCHEMA_REF_PREFIX",
    "JSON_CONTENT_TYPE",
    "FORM_CONTENT_TYPE",
    "HTTP_METHODS",
    "IMPLICIT_METHODS",
    "BODYLESS_METHODS",
    "PARAMETER_LOCATIONS",
    "COMPONENT_NAME_PATTERN",
    "SECURITY_SCHEME_TYPES",
    "CONVERTER_SCHEMAS",
    "DOCS_HTML",
]
