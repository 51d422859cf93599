from typing import Dict, List, Optional
import pytest
from pydantic import BaseModel
from apiscribe.component import (
    ApiComponent,
    EmptyComponent,
    TypeComponent,
    component_for,
    contained_types,
    register_component,
    unregister_component,
)
from apiscribe.models import Reference


class Tag(BaseModel):
    label: str


class Article(BaseModel):
    title: str
    tags: List[Tag] = []
    meta: Optional[Dict[str, str]] = None


class Money:
    """Opaque type documented through a registered factory."""


class MoneyComponent(ApiComponent):
    def schema(self):
        return 'Money', {'type': 'string', 'pattern': r'^\d+\.\d{2}$'}


def test_default_component_for_model():
    comp = component_for(Article)
    assert isinstance(comp, TypeComponent)
    assert comp.schema()[0] == 'Article'
    assert comp.schema_or_ref() == Reference('Article')


def test_none_contributes_nothing():
    assert isinstance(component_for(None), EmptyComponent)
    assert isinstance(component_for(type(None)), EmptyComponent)
    comp = component_for(None)
    assert comp.schema() is None
    assert comp.responses() is None
    assert comp.parameters() == []


def test_named_type_is_json_request_body():
    body = component_for(Article).request_body().to_dict()
    assert body == {
        'content': {'application/json': {'schema': {'$ref': '#/components/schemas/Article'}}},
        'required': True,
    }


def test_anonymous_type_is_not_a_request_body():
    assert component_for(int).request_body() is None


def test_any_type_is_a_200_json_response():
    responses = component_for(List[Tag]).responses()
    assert list(responses) == ['200']
    assert responses['200'].to_dict() == {
        'content': {'application/json': {'schema': {'type': 'array', 'items': {'$ref': '#/components/schemas/Tag'}}}}
    }


def test_response_status_override():
    responses = component_for(Tag).responses(201)
    assert list(responses) == ['201']


def test_contained_types_of_model_and_generic():
    assert contained_types(Article) == [str, List[Tag], Optional[Dict[str, str]]]
    assert contained_types(List[Tag]) == [Tag]
    assert contained_types(Dict[str, Tag]) == [str, Tag]
    assert contained_types(int) == []


def test_child_schemas_lists_named_descendants_once():
    names = [name for name, _ in component_for(Article).child_schemas()]
    assert names == ['Tag']


def test_registered_factory_wins_over_default():
    register_component(Money, MoneyComponent)
    try:
        comp = component_for(Money)
        assert isinstance(comp, MoneyComponent)
        assert comp.schema_or_ref() == Reference('Money')
    finally:
        unregister_component(Money)
    assert isinstance(component_for(Money), TypeComponent)


def test_registered_factory_for_generic_origin_receives_args():
    seen = []

    def factory(*args):
        seen.append(args)
        return EmptyComponent()

    register_component(dict, factory)
    try:
        component_for(Dict[str, int])
    finally:
        unregister_component(dict)
    assert seen == [(str, int)]


def test_hook_on_class_is_used():
    class Hooked:
        @classmethod
        def __api_component__(cls):
            return MoneyComponent()

    assert isinstance(component_for(Hooked), MoneyComponent)


def test_component_instance_passes_through():
    comp = MoneyComponent()
    assert component_for(comp) is comp


def test_unsupported_type_fails_loudly():
    class Opaque:
        pass

    with pytest.raises(Exception):
        component_for(Opaque).schema()
