"""Document assembler.

Folds the registered operations and the current registry snapshot into
one immutable :class:`~apiscribe.models.Document`:

- operations keep registration order (paths, then methods within a path)
- components.schemas keep first-discovery order
- operationIds are generated for operations that do not declare one; a
  generated id that is already taken gets a numeric suffix (`get_a_b_2`)
- top-level tags: declared tags first, then undeclared ones by first use

Every ``$ref`` and every security requirement is checked against the
components before the document is returned.
"""
from __future__ import annotations
import logging
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Set, Tuple

from .errors import DuplicateOperationId, UnknownSecurityScheme, UnresolvedReference
from .models import Document, Info, Operation, PathItem, SecurityRequirement, SecurityScheme, Server, Tag, freeze
from .openapi_parts.constants import OPENAPI_VERSION
from .openapi_parts.helpers import iter_refs, operation_id_for, ref_name
from .registry import SchemaRegistry

logger = logging.getLogger(__name__)

__all__ = ["finalize"]


def _check_refs(schemas: Mapping[str, Any], tree: Any, location: str) -> None:
    for ref, where in iter_refs(tree, location):
        name = ref_name(ref)
        if name is not None and name not in schemas:
            raise UnresolvedReference(name, where)


def _unique_id(base: str, taken: Set[str]) -> str:
    candidate, n = base, 2
    while candidate in taken:
        candidate = f"{base}_{n}"
        n += 1
    taken.add(candidate)
    return candidate


def finalize(
    paths: Mapping[str, Mapping[str, Operation]],
    registry: SchemaRegistry,
    security_schemes: Mapping[str, SecurityScheme],
    info: Info,
    servers: Iterable[Server] = (),
    security: Iterable[SecurityRequirement] = (),
    tags: Iterable[Tag] = (),
) -> Document:
    schemas = registry.snapshot()

    # Explicit operationIds are reserved first; generated ones never reuse them
    explicit: Dict[str, Tuple[str, str]] = {}
    for path, ops in paths.items():
        for method, op in ops.items():
            if op.operation_id is None:
                continue
            if op.operation_id in explicit:
                other_path, other_method = explicit[op.operation_id]
                raise DuplicateOperationId(
                    f"operationId '{op.operation_id}' used by {other_method.upper()} {other_path} and {method.upper()} {path}"
                )
            explicit[op.operation_id] = (path, method)
    taken: Set[str] = set(explicit)

    # Add operationIds & collect tags in first-use order
    used_tags: Dict[str, None] = {}
    path_items: Dict[str, PathItem] = {}
    for path, ops in paths.items():
        methods: Dict[str, Operation] = {}
        for method, op in ops.items():
            if op.operation_id is None:
                op = replace(op, operation_id=_unique_id(operation_id_for(method, path), taken))
            for t in op.tags:
                used_tags.setdefault(t, None)
            methods[method] = op
        path_items[path] = PathItem(MappingProxyType(methods))

    declared_tags: List[Tag] = list(tags)
    declared_names = {t.name for t in declared_tags}
    tag_list = declared_tags + [Tag(name) for name in used_tags if name not in declared_names]

    top_security = tuple(security)

    # Schemas may only point at each other; operations may only point at schemas
    for name, schema in schemas.items():
        _check_refs(schemas, schema, f"#/components/schemas/{name}")
    for path, item in path_items.items():
        _check_refs(schemas, item.to_dict(), f"#/paths/{path}")

    for requirement in top_security:
        if requirement.name not in security_schemes:
            raise UnknownSecurityScheme(requirement.name)
    for item in path_items.values():
        for op in item.operations.values():
            for requirement in op.security:
                if requirement.name not in security_schemes:
                    raise UnknownSecurityScheme(requirement.name)

    document = Document(
        openapi=OPENAPI_VERSION,
        info=info,
        paths=MappingProxyType(path_items),
        schemas=freeze(schemas),
        security_schemes=MappingProxyType(dict(security_schemes)),
        security=top_security,
        servers=tuple(servers),
        tags=tuple(tag_list),
    )
    logger.info("document finalized: %d paths, %d schemas", len(path_items), len(schemas))
    return document
