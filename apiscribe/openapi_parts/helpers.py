"""Helper functions for OpenAPI document assembly.

These are deliberately tiny and side-effect free so the assembler and the
component layer can share them without changing output ordering.
"""
import re
from http import HTTPStatus
from typing import Any, Iterator, Optional, Tuple

from .constants import SCHEMA_REF_PREFIX


def schema_ref(name: str) -> str:
    return f"{SCHEMA_REF_PREFIX}{name}"


def ref_name(ref: str) -> Optional[str]:
    """Return the component name of a local schema pointer, or None for any other pointer."""
    if ref.startswith(SCHEMA_REF_PREFIX):
        return ref[len(SCHEMA_REF_PREFIX):]
    return None


def status_key(status: Any) -> str:
    """Normalize a status code (int, HTTPStatus or str) to its response map key."""
    if isinstance(status, HTTPStatus):
        return str(status.value)
    return str(status)


def reason_phrase(status: Any) -> Optional[str]:
    try:
        return HTTPStatus(int(status)).phrase
    except ValueError:
        return None


def snake_case(name: str) -> str:
    """SomeApiKey -> some_api_key."""
    s = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s).lower()


def operation_id_for(method: str, path: str) -> str:
    rid = path.strip("/").replace("/", "_").replace("{", "").replace("}", "").replace("-", "_")
    return f"{method}_{rid}" if rid else f"{method}_root"


def iter_refs(node: Any, location: str = "#") -> Iterator[Tuple[str, str]]:
    """Yield (ref, location) for every ``$ref`` found in a JSON-compatible tree."""
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            yield ref, location
        for key, value in node.items():
            if key == "$ref":
                continue
            yield from iter_refs(value, f"{location}/{key}")
    elif isinstance(node, (list, tuple)):
        for idx, value in enumerate(node):
            yield from iter_refs(value, f"{location}/{idx}")


__all__ = [
    "schema_ref",
    "ref_name",
    "status_key",
    "reason_phrase",
    "snake_case",
    "operation_id_for",
    "iter_refs",
]
