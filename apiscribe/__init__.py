"""apiscribe: assemble OpenAPI 3.0 documents from typed route declarations."""
from .builder import DocumentBuilder, serialize
from .component import ApiComponent, TypeComponent, component_for, register_component, unregister_component
from .config import Settings, load_settings
from .decorators import ErrorStatus, api_error_component, api_operation, describe
from .errors import (
    ApiscribeError,
    ConfigurationError,
    DuplicateResponseStatus,
    SchemaNameConflict,
    SecuritySchemeConflict,
    UnresolvedReference,
)
from .flask_ext import ApiDoc
from .models import Document, Info, Parameter, Reference, Server, Tag
from .operation import OperationDescriptor
from .registry import SchemaRegistry
from .security import api_key, api_security, bearer_jwt, http_basic, oauth2
from .wrappers import AcceptedJson, Cookie, CreatedJson, Form, Header, Json, NoContent, Path, Query

__version__ = '0.1.0'

__all__ = [
    'DocumentBuilder',
    'serialize',
    'ApiComponent',
    'TypeComponent',
    'component_for',
    'register_component',
    'unregister_component',
    'Settings',
    'load_settings',
    'ErrorStatus',
    'api_error_component',
    'api_operation',
    'describe',
    'ApiscribeError',
    'ConfigurationError',
    'DuplicateResponseStatus',
    'SchemaNameConflict',
    'SecuritySchemeConflict',
    'UnresolvedReference',
    'ApiDoc',
    'Document',
    'Info',
    'Parameter',
    'Reference',
    'Server',
    'Tag',
    'OperationDescriptor',
    'SchemaRegistry',
    'api_key',
    'api_security',
    'bearer_jwt',
    'http_basic',
    'oauth2',
    'AcceptedJson',
    'Cookie',
    'CreatedJson',
    'Form',
    'Header',
    'Json',
    'NoContent',
    'Path',
    'Query',
]
