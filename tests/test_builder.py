import json
from typing import List
import pytest
from pydantic import BaseModel
from apiscribe import DocumentBuilder, Info, serialize
from apiscribe.component import ApiComponent, json_response
from apiscribe.errors import (
    DuplicateOperation,
    DuplicateOperationId,
    InvalidHttpMethod,
    InvalidPath,
    SchemaNameConflict,
    SecuritySchemeConflict,
)
from apiscribe.models import SecurityScheme, Tag
from apiscribe.operation import OperationDescriptor
from apiscribe.security import api_security, bearer_jwt, http_basic
from apiscribe.wrappers import CreatedJson, Json, NoContent


class Test(BaseModel):
    __test__ = False
    test: str


class Item(BaseModel):
    name: str


class Node(BaseModel):
    label: str
    next: List['Node'] = []


Node.model_rebuild()


@api_security(bearer_jwt())
class Bearer:
    pass


def _register_sample(builder):
    builder.register_operation('/test', 'POST', OperationDescriptor(inputs=(Json[Test],), output=CreatedJson[Test]))
    builder.register_operation('/items', 'get', OperationDescriptor(tags=('items',), output=Json[List[Item]]))
    builder.register_operation('/nodes/{node_id}', 'put', OperationDescriptor(inputs=(Json[Node], Bearer), output=NoContent))


def test_post_test_scenario(builder):
    builder.register_operation('/test', 'post', OperationDescriptor(inputs=(Json[Test],), output=CreatedJson[Test]))
    doc = builder.finalize().to_dict()
    assert list(doc['components']['schemas']) == ['Test']
    op = doc['paths']['/test']['post']
    ref = {'$ref': '#/components/schemas/Test'}
    assert op['responses']['201']['content']['application/json']['schema'] == ref
    assert op['requestBody']['content']['application/json']['schema'] == ref


def test_serialized_document_shape(builder):
    _register_sample(builder)
    data = json.loads(serialize(builder.finalize()))
    assert list(data) == ['openapi', 'info', 'paths', 'components', 'security', 'servers', 'tags']
    assert data['openapi'] == '3.0.3'
    assert data['info'] == {'title': 'Test API', 'version': '1.0.0'}
    assert list(data['paths']) == ['/test', '/items', '/nodes/{node_id}']
    assert data['components']['securitySchemes'] == {
        'bearer': {'type': 'http', 'scheme': 'bearer', 'bearerFormat': 'JWT'}
    }
    assert data['paths']['/nodes/{node_id}']['put']['security'] == [{'bearer': []}]


def test_serialization_is_deterministic():
    blobs = []
    for _ in range(2):
        b = DocumentBuilder(Info(title='Test API', version='1.0.0'))
        _register_sample(b)
        blobs.append(serialize(b.finalize()))
    assert blobs[0] == blobs[1]


def test_serialize_indent_and_utf8(builder):
    builder.info = Info(title='Café API', version='1')
    payload = serialize(builder.finalize(), indent=2)
    assert isinstance(payload, bytes)
    assert 'Café'.encode('utf-8') in payload
    assert b'\n  "info"' in payload


def test_duplicate_operation_rejected(builder):
    builder.register_operation('/items', 'get', OperationDescriptor(output=NoContent))
    with pytest.raises(DuplicateOperation):
        builder.register_operation('/items', 'GET', OperationDescriptor(output=NoContent))


def test_duplicate_operation_id_rejected(builder):
    builder.register_operation('/a', 'get', OperationDescriptor(operation_id='listThings', output=NoContent))
    with pytest.raises(DuplicateOperationId):
        builder.register_operation('/b', 'get', OperationDescriptor(operation_id='listThings', output=NoContent))


@pytest.mark.parametrize('method', ['fetch', '', 'connect'])
def test_invalid_method_rejected(builder, method):
    with pytest.raises(InvalidHttpMethod):
        builder.register_operation('/a', method, OperationDescriptor())


@pytest.mark.parametrize('path', ['items', '/items/<int:id>', '/items/{id'])
def test_invalid_path_rejected(builder, path):
    with pytest.raises(InvalidPath):
        builder.register_operation(path, 'get', OperationDescriptor())


def test_failed_registration_rolls_back(builder):
    builder.register_operation('/items', 'get', OperationDescriptor(output=Json[Item]))
    before = builder.registry.snapshot()

    class ClashingItem(ApiComponent):
        def schema(self):
            return 'Item', {'type': 'string'}

        def responses(self, status_override=None):
            return json_response(200, self.schema_or_ref())

    # Node registers fine, then the output clashes with the stored 'Item'
    descriptor = OperationDescriptor(inputs=(Json[Node], Bearer), output=ClashingItem())
    with pytest.raises(SchemaNameConflict):
        builder.register_operation('/nodes', 'post', descriptor)
    assert builder.registry.snapshot() == before
    assert builder.security_schemes == {}
    assert builder.operation('/nodes', 'post') is None


def test_security_scheme_contribution_is_idempotent(builder):
    builder.contribute_security_scheme('basic', http_basic())
    builder.contribute_security_scheme('basic', http_basic())
    assert builder.security_schemes == {'basic': SecurityScheme(type='http', scheme='basic')}


def test_security_scheme_conflict_names_the_scheme(builder):
    builder.contribute_security_scheme('auth', http_basic())
    with pytest.raises(SecuritySchemeConflict) as exc:
        builder.contribute_security_scheme('auth', bearer_jwt())
    assert exc.value.name == 'auth'
    assert 'auth' in str(exc.value)


def test_document_is_immutable(builder):
    _register_sample(builder)
    doc = builder.finalize()
    with pytest.raises(TypeError):
        doc.schemas['Extra'] = {}
    with pytest.raises(TypeError):
        doc.paths['/x'] = None
    with pytest.raises(AttributeError):
        doc.openapi = '3.1.0'


def test_document_is_independent_of_builder(builder):
    builder.register_operation('/test', 'post', OperationDescriptor(inputs=(Json[Test],)))
    doc = builder.finalize()
    builder.register_operation('/items', 'get', OperationDescriptor(output=Json[Item]))
    assert list(doc.paths) == ['/test']
    assert list(doc.schemas) == ['Test']


def test_finalize_twice_returns_equal_documents(builder):
    _register_sample(builder)
    first = builder.finalize()
    second = builder.finalize()
    assert first is not second
    assert serialize(first) == serialize(second)


def test_top_level_security_and_servers():
    b = DocumentBuilder(Info(title='T', version='1'), servers=['https://api.example.com'], security=['basic'], tags=[Tag('items', 'Item ops')])
    b.contribute_security_scheme('basic', http_basic())
    data = b.finalize().to_dict()
    assert data['servers'] == [{'url': 'https://api.example.com'}]
    assert data['security'] == [{'basic': []}]
    assert data['tags'] == [{'name': 'items', 'description': 'Item ops'}]
