"""Reusable validation helpers for registration-time metadata.

Each helper returns the normalized value (to enable inline usage) or raises
the matching ConfigurationError subclass naming the offending value.
"""
from __future__ import annotations
import re

from .errors import InvalidComponentName, InvalidHttpMethod, InvalidPath
from .openapi_parts.constants import COMPONENT_NAME_PATTERN, HTTP_METHODS

_NAME_RE = re.compile(COMPONENT_NAME_PATTERN)
_TEMPLATE_RE = re.compile(r"\{([^{}/]+)\}")


def validate_method(method: str) -> str:
    normalized = (method or '').lower()
    if normalized not in HTTP_METHODS:
        raise InvalidHttpMethod(f"unsupported HTTP method '{method}'")
    return normalized


def validate_path(path: str) -> str:
    """Validate an OpenAPI path template such as ``/pets/{pet_id}``."""
    if not path or not path.startswith('/'):
        raise InvalidPath(f"path '{path}' must start with '/'")
    stripped = _TEMPLATE_RE.sub('', path)
    if any(ch in stripped for ch in '{}<>'):
        raise InvalidPath(f"path '{path}' has an unbalanced or framework-specific placeholder")
    return path


def path_parameters(path: str) -> list:
    return _TEMPLATE_RE.findall(path)


def validate_component_name(name: str, kind: str = 'component') -> str:
    if not name or not _NAME_RE.match(name):
        raise InvalidComponentName(f"{kind} name '{name}' must match {COMPONENT_NAME_PATTERN}")
    return name


__all__ = ['validate_method', 'validate_path', 'path_parameters', 'validate_component_name']
