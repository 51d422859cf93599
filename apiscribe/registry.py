"""Schema Registry and Reference Resolver.

The registry is the only place schema components live while a document is
being built. :meth:`SchemaRegistry.resolve` decides, per contributed
schema, whether to inline it or to store it and hand back a reference:

- anonymous schemas are inlined and never stored;
- a known name with an equal shape returns a reference to the stored entry;
- a known name with a different shape raises :class:`SchemaNameConflict`;
- an unknown name is stored, then every child is resolved before the
  reference is returned.

A name is marked in progress while its children are being resolved, so a
type that reaches itself (directly or through other types) gets a
reference back instead of another walk.
"""
from __future__ import annotations
import copy
import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from .component import ApiComponent
from .errors import SchemaNameConflict
from .models import Reference, ReferenceOr
from .validation import validate_component_name

logger = logging.getLogger(__name__)


class SchemaRegistry:
    def __init__(self) -> None:
        self._schemas: Dict[str, Dict[str, Any]] = {}
        self._in_progress: Set[str] = set()

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def names(self) -> List[str]:
        return list(self._schemas)

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        schema = self._schemas.get(name)
        return copy.deepcopy(schema) if schema is not None else None

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Deep copy of every entry, in first-discovery order."""
        return copy.deepcopy(self._schemas)

    def reference(self, name: str) -> Reference:
        if name not in self._schemas:
            raise KeyError(name)
        return Reference(name)

    def resolve(self, name: Optional[str], schema: Dict[str, Any], children: Iterable[ApiComponent] = ()) -> ReferenceOr:
        if name is None:
            for child in children:
                self.resolve_component(child)
            return copy.deepcopy(schema)

        existing = self._schemas.get(name)
        if existing is not None:
            if existing != schema:
                raise SchemaNameConflict(name, copy.deepcopy(existing), copy.deepcopy(schema))
            if name in self._in_progress:
                logger.debug("schema %s re-entered while in progress; returning reference", name)
            return Reference(name)

        validate_component_name(name, "schema component")

        self._schemas[name] = copy.deepcopy(schema)
        logger.debug("schema %s registered", name)
        self._in_progress.add(name)
        try:
            for child in children:
                self.resolve_component(child)
        finally:
            self._in_progress.discard(name)
        return Reference(name)

    def resolve_component(self, component: ApiComponent) -> Optional[ReferenceOr]:
        """Resolve *component* and everything it contains.

        Children are produced lazily, only when the component's own schema
        is inserted for the first time.
        """
        own = component.schema()
        lazy_children = (child for child in component.children())
        if own is None:
            for child in lazy_children:
                self.resolve_component(child)
            return None
        name, schema = own
        return self.resolve(name, schema, lazy_children)

    def checkpoint(self) -> int:
        return len(self._schemas)

    def rollback(self, mark: int) -> None:
        """Drop every entry inserted after *mark* (entries are never mutated, only added)."""
        for name in list(self._schemas)[mark:]:
            del self._schemas[name]
        self._in_progress.clear()


__all__ = ["SchemaRegistry"]
