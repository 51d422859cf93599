"""Flask integration.

Usage::

    app = Flask(__name__)
    app.register_blueprint(pets_bp, url_prefix='/pets')
    ApiDoc(app).build(app)      # after every route is registered

``build`` walks the app's url map once, registers every view decorated
with ``@api_operation``, finalizes the document and adds two routes: the
JSON document (``/openapi.json``) and a Redoc page (``/docs``).

A function routed for several methods is documented once per method. An
explicit ``operation_id`` then gets a ``_<method>`` suffix, and inputs that
only contribute a request body are dropped from GET, HEAD, DELETE, OPTIONS
and TRACE. ``@api_operation(methods=[...])`` limits which methods are
documented.
"""
from __future__ import annotations
import re
from dataclasses import replace
from typing import Any, Callable, Iterable, List, Optional, Tuple

from flask import Flask, Response

from .builder import DocumentBuilder, serialize
from .component import component_for
from .config import Settings, load_settings
from .decorators import declaration_of, describe
from .models import Document, Info, Parameter, Tag
from .openapi_parts.constants import BODYLESS_METHODS, CONVERTER_SCHEMAS, DOCS_HTML, HTTP_METHODS, IMPLICIT_METHODS
from .operation import OperationDescriptor

EXTENSION_KEY = 'apiscribe'

_RULE_VAR_RE = re.compile(
    r"<(?:(?P<converter>[a-zA-Z_][a-zA-Z0-9_]*)(?:\((?P<args>.*?)\))?:)?(?P<variable>[a-zA-Z_][a-zA-Z0-9_]*)>"
)


def flask_rule_to_path(rule: str) -> Tuple[str, List[Parameter]]:
    """'/items/<int:item_id>' -> ('/items/{item_id}', [item_id path parameter])."""
    params: List[Parameter] = []

    def sub(match: re.Match) -> str:
        converter = match.group('converter') or 'default'
        variable = match.group('variable')
        schema = dict(CONVERTER_SCHEMAS.get(converter, {"type": "string"}))
        params.append(Parameter(name=variable, location='path', required=True, schema=schema))
        return '{' + variable + '}'

    return _RULE_VAR_RE.sub(sub, rule), params


def _body_only(tp) -> bool:
    component = component_for(tp)
    return (
        component.request_body() is not None
        and not component.parameters()
        and component.security_requirement() is None
    )


def _for_method(descriptor: OperationDescriptor, method: str) -> OperationDescriptor:
    """Narrow a descriptor shared by several methods of one view to *method*."""
    changes = {}
    if descriptor.operation_id is not None:
        changes['operation_id'] = f'{descriptor.operation_id}_{method}'
    if method in BODYLESS_METHODS:
        changes['inputs'] = tuple(tp for tp in descriptor.inputs if not _body_only(tp))
    return replace(descriptor, **changes) if changes else descriptor


def _declared_path_names(descriptor) -> set:
    names = {p.name for p in descriptor.parameters if p.location == 'path'}
    for tp in descriptor.inputs:
        names.update(p.name for p in component_for(tp).parameters() if p.location == 'path')
    return names


class ApiDoc:
    def __init__(
        self,
        app: Optional[Flask] = None,
        *,
        info: Optional[Info] = None,
        security: Iterable[Any] = (),
        tags: Iterable[Tag] = (),
        settings: Optional[Settings] = None,
    ):
        self.info = info
        self.security = tuple(security)
        self.tags = tuple(tags)
        self.settings = settings
        self.document: Optional[Document] = None
        self._payload: Optional[bytes] = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        if self.settings is None:
            self.settings = load_settings(app.config)
        app.extensions[EXTENSION_KEY] = self

    def _handlers(self, app: Flask, endpoint: str, methods: Iterable[str]) -> List[Tuple[str, Callable]]:
        view = app.view_functions.get(endpoint)
        if view is None:
            return []
        view_class = getattr(view, 'view_class', None)
        out = []
        for method in HTTP_METHODS:
            if method not in methods:
                continue
            if view_class is not None:
                handler = getattr(view_class, method, None)
                if handler is None:
                    if method in IMPLICIT_METHODS:
                        continue
                    handler = getattr(view_class, 'dispatch_request', None)
            else:
                handler = view
                declaration = declaration_of(view)
                if method in IMPLICIT_METHODS and (declaration is None or method not in (declaration.methods or ())):
                    continue
            if handler is not None:
                out.append((method, handler))
        return out

    def build(self, app: Flask) -> Document:
        """Register every documented view, finalize and serve the document.

        Configuration errors propagate so a misdeclared route fails app startup.
        """
        if self.settings is None:
            self.init_app(app)
        settings = self.settings
        builder = DocumentBuilder.from_settings(settings, security=self.security, tags=self.tags)
        if self.info is not None:
            builder.info = self.info

        for rule in app.url_map.iter_rules():
            if rule.endpoint == 'static' or rule.endpoint.startswith(f'{EXTENSION_KEY}_'):
                continue
            methods = {m.lower() for m in (rule.methods or ())}
            path, converter_params = flask_rule_to_path(rule.rule)
            documented = []
            for method, handler in self._handlers(app, rule.endpoint, methods):
                declaration = declaration_of(handler)
                if declaration is None:
                    app.logger.warning('route %s %s has no @api_operation metadata; not documented', method.upper(), rule.rule)
                    continue
                if declaration.skip:
                    continue
                if declaration.methods is not None and method not in declaration.methods:
                    continue
                documented.append((method, handler))
            for method, handler in documented:
                descriptor = describe(handler)
                if sum(1 for _, other in documented if other is handler) > 1:
                    descriptor = _for_method(descriptor, method)
                declared = _declared_path_names(descriptor)
                missing = tuple(p for p in converter_params if p.name not in declared)
                if missing:
                    descriptor = replace(descriptor, parameters=missing + tuple(descriptor.parameters))
                builder.register_operation(path, method, descriptor)

        self.document = builder.finalize()
        self._payload = serialize(self.document, indent=settings.json_indent)
        app.logger.info('OpenAPI document ready at %s (%d paths)', settings.spec_path, len(self.document.paths))

        app.add_url_rule(settings.spec_path, f'{EXTENSION_KEY}_spec', self._serve_spec)
        if settings.docs_path:
            app.add_url_rule(settings.docs_path, f'{EXTENSION_KEY}_docs', self._serve_docs)
        return self.document

    def _serve_spec(self):
        return Response(self._payload, mimetype='application/json')

    def _serve_docs(self):
        # Lightweight HTML referencing Redoc CDN (no local install) for quick browsing
        title = self.document.info.title if self.document is not None else 'API Docs'
        return DOCS_HTML.format(title=title, spec_url=self.settings.spec_path)


__all__ = ['ApiDoc', 'flask_rule_to_path', 'EXTENSION_KEY']
