"""Python type -> OpenAPI 3.0 schema.

pydantic produces JSON Schema (draft 2020-12) for any type it can
validate; :func:`to_oas` folds the draft-specific keywords back into their
OAS 3.0 spellings. A type is *named* when pydantic emits it as a
definition of its own (models, dataclasses, enums); such types become
``components.schemas`` entries under pydantic's definition key, which is
also the key every other schema uses when it points at them.
"""
from __future__ import annotations
import copy
import dataclasses
import enum
import functools
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, TypeAdapter

from .openapi_parts.constants import SCHEMA_REF_PREFIX
from .openapi_parts.helpers import ref_name

REF_TEMPLATE = SCHEMA_REF_PREFIX + "{model}"

# Keys whose values are instance data, not subschemas
_DATA_KEYS = frozenset({"enum", "const", "default", "example", "examples", "required"})
# Keys whose values map arbitrary names to subschemas
_MAP_KEYS = frozenset({"properties", "patternProperties", "$defs", "definitions"})


def _is_null(schema: Any) -> bool:
    return isinstance(schema, dict) and schema.get("type") == "null" and len(schema) == 1


def to_oas(node: Any) -> Any:
    """Convert a JSON Schema tree to its OAS 3.0 form.

    Handles the shapes pydantic emits: ``$defs`` are dropped, nullable
    unions become ``nullable: true``, ``const`` becomes a one-item enum,
    numeric exclusive bounds become booleans, tuple ``prefixItems`` become
    ``items`` and ``$ref`` siblings are moved under ``allOf``.
    """
    if isinstance(node, list):
        return [to_oas(v) for v in node]
    if not isinstance(node, dict):
        return node

    out: Dict[str, Any] = {}
    for key, value in node.items():
        if key in ("$defs", "definitions"):
            continue
        if key in _DATA_KEYS:
            out[key] = copy.deepcopy(value)
        elif key in _MAP_KEYS and isinstance(value, dict):
            out[key] = {name: to_oas(sub) for name, sub in value.items()}
        else:
            out[key] = to_oas(value)

    if "const" in out:
        out.setdefault("enum", [out.pop("const")])
    if "examples" in out:
        examples = out.pop("examples")
        if isinstance(examples, list) and examples:
            out.setdefault("example", examples[0])
        elif isinstance(examples, dict) and examples:
            out.setdefault("example", next(iter(examples.values())))

    for exclusive, bound in (("exclusiveMinimum", "minimum"), ("exclusiveMaximum", "maximum")):
        value = out.get(exclusive)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            out[bound] = value
            out[exclusive] = True

    for key in ("anyOf", "oneOf"):
        variants = out.get(key)
        if not isinstance(variants, list) or not any(_is_null(v) for v in variants):
            continue
        rest = [v for v in variants if not _is_null(v)]
        del out[key]
        if len(rest) == 1:
            only = rest[0]
            if "$ref" in only:
                out["allOf"] = [only]
            else:
                out = {**only, **out}
        elif rest:
            out[key] = rest
        out["nullable"] = True

    if out.get("type") == "null":
        del out["type"]
        out["nullable"] = True

    if "prefixItems" in out:
        prefix = out.pop("prefixItems")
        if "items" not in out and prefix:
            if all(p == prefix[0] for p in prefix):
                out["items"] = prefix[0]
            else:
                out["items"] = {"anyOf": prefix}

    if "$ref" in out and len(out) > 1:
        ref = out.pop("$ref")
        out = {"allOf": [{"$ref": ref}], **out}
    return out


@functools.lru_cache(maxsize=None)
def _cached_schema(tp: Any) -> Tuple[Optional[str], Dict[str, Any]]:
    return _build_schema(tp)


def _build_schema(tp: Any) -> Tuple[Optional[str], Dict[str, Any]]:
    # Wrapping in List makes pydantic emit the type as an items schema, so a
    # named type always shows up as a $ref plus its definition, recursive or not.
    raw = TypeAdapter(List[tp]).json_schema(ref_template=REF_TEMPLATE)
    defs = raw.get("$defs", {})
    items = raw.get("items", {})
    ref = items.get("$ref") if isinstance(items, dict) and len(items) == 1 else None
    name = ref_name(ref) if ref else None
    if name is not None and name in defs:
        return name, to_oas(defs[name])
    return None, to_oas(items)


def to_schema(tp: Any) -> Tuple[Optional[str], Dict[str, Any]]:
    """Return ``(name, schema)`` for *tp*; ``name`` is None for inline types.

    The returned schema is a fresh copy; callers may keep or mutate it.
    """
    try:
        hash(tp)
    except TypeError:
        # unhashable annotation metadata
        name, schema = _build_schema(tp)
    else:
        name, schema = _cached_schema(tp)
    return name, copy.deepcopy(schema)


def is_schema_type(tp: Any) -> bool:
    """True for classes pydantic documents as standalone definitions."""
    if not isinstance(tp, type):
        return False
    if issubclass(tp, BaseModel) or issubclass(tp, enum.Enum):
        return True
    if dataclasses.is_dataclass(tp):
        return True
    # TypedDict classes carry these markers instead of a common base
    return hasattr(tp, "__required_keys__") and hasattr(tp, "__total__")


__all__ = ["REF_TEMPLATE", "to_oas", "to_schema", "is_schema_type"]
