import pytest

from plinth.errors import InvalidTypeError
from plinth.node_type import COMPUTED, NodeType


def factory(type, context, *args, **kwargs):
    return [context["build_strategy"], type.name, *args, kwargs]


@pytest.mark.parametrize(
    "compatible_types, expected",
    [
        ((), {"type"}),
        ("foo", {"type", "foo"}),
        (["foo", "bar"], {"type", "foo", "bar"}),
        (["type", "foo"], {"type", "foo"}),
    ],
)
def test_compatible_types_include_the_type_itself(compatible_types, expected):
    node_type = NodeType("type", compatible_types=compatible_types, factory=factory)

    assert node_type.compatible_types == frozenset(expected)


@pytest.mark.parametrize(
    "auto_references, expected",
    [
        ((), {}),
        ("foo", {"foo": "foo"}),
        (["foo", "bar"], {"foo": "foo", "bar": "bar"}),
        ({"post": "post", "user": "commenter"}, {"post": "post", "user": "commenter"}),
    ],
)
def test_auto_references_are_normalised_to_a_mapping(auto_references, expected):
    node_type = NodeType("type", auto_references=auto_references, factory=factory)

    assert dict(node_type.auto_references) == expected


def test_auto_references_keep_declaration_order():
    node_type = NodeType("type", auto_references={"b": "x", "a": "y"}, factory=factory)

    assert list(node_type.auto_references) == ["b", "a"]


@pytest.mark.parametrize(
    "name, compatible_types, auto_references, type_factory",
    [
        (42, (), (), factory),
        ("type", [1], (), factory),
        ("type", 1, (), factory),
        ("type", {"foo": "bar"}, (), factory),
        ("type", (), 1, factory),
        ("type", (), {1: "bar"}, factory),
        ("type", (), {"foo": 2}, factory),
        ("type", (), [3], factory),
        ("type", (), (), None),
        ("type", (), (), "not callable"),
    ],
)
def test_validates_arguments(name, compatible_types, auto_references, type_factory):
    with pytest.raises(InvalidTypeError):
        NodeType(name, compatible_types, auto_references, type_factory)


def test_is_immutable():
    node_type = NodeType("type", factory=factory)

    with pytest.raises(AttributeError):
        node_type.name = "other"
    with pytest.raises(TypeError):
        node_type.auto_references["foo"] = "bar"


def test_types_with_same_definition_are_equal():
    assert NodeType("type", "foo", "bar", factory) == NodeType("type", ["foo"], ["bar"], factory)
    assert NodeType("type", factory=factory) != NodeType("other", factory=factory)
    assert NodeType("type", factory=factory) != NodeType("type", factory=lambda *_: None)


def test_create_object_calls_the_factory():
    node_type = NodeType("type", factory=factory)

    created = node_type.create_object({"build_strategy": "build"}, 12, "34", foo="bar")

    assert created == ["build", "type", 12, "34", {"foo": "bar"}]


def test_computed_returns_its_argument():
    value = object()

    assert COMPUTED.create_object(None, value) is value
