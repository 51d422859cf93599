from http import HTTPStatus
from typing import List, Optional
from pydantic import BaseModel, Field
from apiscribe.component import component_for
from apiscribe.registry import SchemaRegistry
from apiscribe.wrappers import (
    AcceptedJson,
    Cookie,
    CreatedJson,
    Form,
    Header,
    Json,
    NoContent,
    Path,
    Query,
    response_map,
)


class Thing(BaseModel):
    name: str


class Filters(BaseModel):
    q: str = Field(description='Free text search')
    page: int = 1
    legacy: Optional[str] = Field(None, deprecated=True)


class ItemPath(BaseModel):
    item_id: int


THING_REF = {'$ref': '#/components/schemas/Thing'}


def test_no_content_maps_to_bare_204():
    assert response_map(NoContent) == {'204': {}}


def test_created_maps_to_201_with_schema_ref():
    assert response_map(CreatedJson[Thing]) == {
        '201': {'content': {'application/json': {'schema': THING_REF}}}
    }


def test_accepted_maps_to_202_with_schema_ref():
    assert response_map(AcceptedJson[Thing]) == {
        '202': {'content': {'application/json': {'schema': THING_REF}}}
    }


def test_json_output_is_200_and_input_is_request_body():
    assert response_map(Json[Thing]) == {'200': {'content': {'application/json': {'schema': THING_REF}}}}
    body = component_for(Json[Thing]).request_body().to_dict()
    assert body['content'] == {'application/json': {'schema': THING_REF}}


def test_anonymous_payload_is_inline():
    out = response_map(Json[List[Thing]])
    assert out['200']['content']['application/json']['schema'] == {'type': 'array', 'items': THING_REF}


def test_status_override_applies_to_wrappers():
    assert list(response_map(CreatedJson[Thing], 200)) == ['200']
    assert list(response_map(NoContent, HTTPStatus.RESET_CONTENT)) == ['205']


def test_created_and_accepted_are_not_request_bodies():
    assert component_for(CreatedJson[Thing]).request_body() is None
    assert component_for(AcceptedJson[Thing]).request_body() is None


def test_form_is_urlencoded_body_and_no_response():
    comp = component_for(Form[Thing])
    assert list(comp.request_body().content) == ['application/x-www-form-urlencoded']
    assert comp.responses() is None


def test_query_spreads_model_fields_into_parameters():
    params = [p.to_dict() for p in component_for(Query[Filters]).parameters()]
    assert [p['name'] for p in params] == ['q', 'page', 'legacy']
    assert params[0]['in'] == 'query'
    assert params[0]['required'] is True
    assert params[0]['description'] == 'Free text search'
    assert 'description' not in params[0]['schema']
    assert 'required' not in params[1]
    assert params[1]['schema']['type'] == 'integer'
    assert params[2]['deprecated'] is True


def test_parameter_locations():
    assert {p.location for p in component_for(Header[Filters]).parameters()} == {'header'}
    assert {p.location for p in component_for(Cookie[Filters]).parameters()} == {'cookie'}
    (param,) = component_for(Path[ItemPath]).parameters()
    assert param.location == 'path'
    assert param.required is True


def test_parameter_model_itself_is_not_registered():
    reg = SchemaRegistry()
    reg.resolve_component(component_for(Query[Filters]))
    assert 'Filters' not in reg


def test_payload_dump_returns_body_and_status():
    assert CreatedJson(Thing(name='a')).dump() == ({'name': 'a'}, 201)
    assert Json([1, 2]).dump() == ([1, 2], 200)
    assert AcceptedJson(Thing(name='b')).dump() == ({'name': 'b'}, 202)
    assert NoContent().dump() == ('', 204)
