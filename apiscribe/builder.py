"""Document Builder: the registration-phase boundary.

``DocumentBuilder`` is the only mutable object in the engine. Routes are
registered into it once, at startup; :meth:`DocumentBuilder.finalize`
then produces an immutable :class:`~apiscribe.models.Document` and
:func:`serialize` turns that into the served bytes.
"""
from __future__ import annotations
import json
import logging
from typing import Dict, Iterable, List, Optional, Union

from . import assembler
from .errors import DuplicateOperation, DuplicateOperationId, SecuritySchemeConflict
from .models import Document, Info, Operation, SecurityRequirement, SecurityScheme, Server, Tag
from .operation import OperationDescriptor, build_operation
from .registry import SchemaRegistry
from .validation import validate_component_name, validate_method, validate_path

logger = logging.getLogger(__name__)


def _requirement(value: Union[str, SecurityRequirement]) -> SecurityRequirement:
    return value if isinstance(value, SecurityRequirement) else SecurityRequirement(value)


class DocumentBuilder:
    def __init__(
        self,
        info: Info,
        *,
        servers: Iterable[Union[str, Server]] = (),
        security: Iterable[Union[str, SecurityRequirement]] = (),
        tags: Iterable[Tag] = (),
    ):
        self.info = info
        self.servers: List[Server] = [s if isinstance(s, Server) else Server(s) for s in servers]
        self.security: List[SecurityRequirement] = [_requirement(s) for s in security]
        self.tags: List[Tag] = list(tags)
        self.registry = SchemaRegistry()
        self._paths: Dict[str, Dict[str, Operation]] = {}
        self._security_schemes: Dict[str, SecurityScheme] = {}
        self._operation_ids: Dict[str, str] = {}

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "DocumentBuilder":
        kwargs.setdefault("servers", settings.server_list())
        return cls(settings.info(), **kwargs)

    @property
    def security_schemes(self) -> Dict[str, SecurityScheme]:
        return dict(self._security_schemes)

    def operation(self, path: str, method: str) -> Optional[Operation]:
        return self._paths.get(path, {}).get(method.lower())

    def register_operation(self, path: str, method: str, descriptor: OperationDescriptor) -> Operation:
        """Build and store the operation for ``method path``.

        On any error nothing registered by this call survives: the schema
        registry and the security schemes are restored before the error
        propagates.
        """
        method = validate_method(method)
        path = validate_path(path)
        label = f"{method.upper()} {path}"
        if method in self._paths.get(path, {}):
            raise DuplicateOperation(f"operation {label} registered twice")
        op_id = descriptor.operation_id
        if op_id is not None and op_id in self._operation_ids:
            raise DuplicateOperationId(f"operationId '{op_id}' used by {self._operation_ids[op_id]} and {label}")

        mark = self.registry.checkpoint()
        schemes_before = dict(self._security_schemes)
        try:
            operation, schemes = build_operation(descriptor, self.registry, label)
            for name, scheme in schemes.items():
                self.contribute_security_scheme(name, scheme)
        except Exception:
            self.registry.rollback(mark)
            self._security_schemes = schemes_before
            raise

        self._paths.setdefault(path, {})[method] = operation
        if op_id is not None:
            self._operation_ids[op_id] = label
        logger.debug("registered operation %s", label)
        return operation

    def contribute_security_scheme(self, name: str, scheme: SecurityScheme) -> None:
        validate_component_name(name, "security scheme")
        existing = self._security_schemes.get(name)
        if existing is not None:
            if existing != scheme:
                raise SecuritySchemeConflict(name)
            return
        self._security_schemes[name] = scheme

    def finalize(self) -> Document:
        return assembler.finalize(
            self._paths,
            self.registry,
            self._security_schemes,
            self.info,
            servers=self.servers,
            security=self.security,
            tags=self.tags,
        )


def serialize(document: Document, indent: Optional[int] = None) -> bytes:
    """Serialize a document to UTF-8 JSON, preserving assembly order."""
    return json.dumps(document.to_dict(), indent=indent, ensure_ascii=False).encode("utf-8")


__all__ = ["DocumentBuilder", "serialize"]
