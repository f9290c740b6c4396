import pytest

from plinth.blueprint import Blueprint
from plinth.dsl import BlueprintBuilder
from plinth.errors import BlueprintSyntaxError, DuplicateNodeError, UnknownTypeError
from plinth.node import RESULT_NAME
from plinth.node_type import COMPUTED, NodeType
from plinth.refs import Ref
from plinth.registry import TypeRegistry


def factory(type, context, *args, **kwargs):
    return [type.name, *args, kwargs]


@pytest.fixture
def registry() -> TypeRegistry:
    registry = TypeRegistry()
    registry.register(NodeType("user", factory=factory))
    registry.register(NodeType("blog", auto_references={"user": "author"}, factory=factory))
    registry.register(NodeType("post", auto_references="blog", factory=factory))
    registry.register(
        NodeType("comment", auto_references={"post": "post", "user": "commenter"}, factory=factory)
    )
    return registry


@pytest.fixture
def builder(registry) -> BlueprintBuilder:
    return BlueprintBuilder(registry)


def nodes_of(builder):
    return list(builder.blueprint.nodes.values())


def test_declare_adds_an_anonymous_node(builder, registry):
    user = builder.declare("user")

    [node] = nodes_of(builder)
    assert user == Ref(node.name)
    assert node.is_anonymous
    assert node.type is registry["user"]
    assert node.ancestors == ()
    assert node.args == []
    assert node.kwargs == {}


def test_declare_with_arguments_and_name(builder):
    builder.declare("user", 123)
    builder.declare("user", foo=456)
    assert builder.declare("user", name="named") == Ref("named")

    assert [(n.args, n.kwargs) for n in nodes_of(builder)] == [
        ([123], {}),
        ([], {"foo": 456}),
        ([], {}),
    ]


def test_declare_accepts_a_type(builder):
    ad_hoc = NodeType("ad_hoc", factory=factory)

    builder.declare(ad_hoc, name="thing")

    assert builder.blueprint.node("thing").type is ad_hoc


def test_declare_unknown_type_raises(builder):
    with pytest.raises(UnknownTypeError):
        builder.declare("unknown")


def test_declare_duplicate_name_raises(builder):
    builder.declare("user", name="john")

    with pytest.raises(DuplicateNodeError):
        builder.declare("user", name="john")


def test_nested_declarations_record_ancestors(builder):
    with builder.node("user", 1):
        with builder.node("user", 2):
            builder.declare("user", 3)
            builder.declare("user", 4)

    first, second, third, fourth = nodes_of(builder)
    assert first.ancestors == ()
    assert second.ancestors == (first,)
    assert third.ancestors == (second, first)
    assert fourth.ancestors == (second, first)


def test_node_scope_yields_reference(builder):
    with builder.node("user", 1) as user1:
        user2 = builder.declare("user", 2, user=user1)
        builder.declare("user", 3, user=user2)

    first, second, third = nodes_of(builder)
    assert second.kwargs == {"user": first.to_ref()}
    assert third.kwargs == {"user": second.to_ref()}


def test_scope_is_restored_after_errors(builder):
    with pytest.raises(UnknownTypeError):
        with builder.node("user"):
            builder.declare("unknown")

    assert builder.current is None
    builder.declare("user", name="top")
    assert builder.blueprint.node("top").ancestors == ()


def test_computed_node(builder):
    assert builder.computed("foo", 123) == Ref("foo")

    [node] = nodes_of(builder)
    assert node.type is COMPUTED
    assert node.args == [123]


def test_let_names_an_anonymous_node(builder):
    builder.declare("user", "A")
    builder.let("author", builder.declare("user", "B"))

    objects = builder.blueprint.instantiate()

    assert objects["author"] == ["user", "B", {}]
    assert builder.blueprint.resolve_node("author").args == ["B"]


def test_let_requires_a_name(builder):
    with pytest.raises(BlueprintSyntaxError):
        builder.let(None, 1)


def test_on_adds_arguments_to_existing_nodes(builder):
    builder.declare("blog", name="blog")
    builder.let("alias", Ref("blog"))

    with builder.on("blog", "premium"):
        builder.args(title="Who-ha")
    with builder.on(Ref("alias"), rating=5) as blog:
        assert blog == Ref("blog")

    node = builder.blueprint.node("blog")
    assert node.args == ["premium"]
    assert node.kwargs == {"title": "Who-ha", "rating": 5}


def test_on_enters_the_scope_of_the_node(builder):
    with builder.node("blog", name="blog"):
        builder.declare("post", name="first")

    with builder.on("first"):
        builder.declare("comment", name="comment")

    assert [a.name for a in builder.blueprint.node("comment").ancestors] == ["first", "blog"]


def test_on_unknown_node_raises(builder):
    with pytest.raises(BlueprintSyntaxError, match="Unknown node: nope"):
        with builder.on("nope"):
            pass


def test_args_at_top_level_raises(builder):
    with pytest.raises(BlueprintSyntaxError, match="top level"):
        builder.args(1)


def test_args_to_computed_nodes_raises(builder):
    builder.computed("value", 123)

    with pytest.raises(BlueprintSyntaxError, match="computed node value"):
        with builder.on("value"):
            pass


def test_result_is_not_overwritten(builder):
    builder.result(123)
    builder.result(456)

    assert builder.blueprint.node(RESULT_NAME).args == [123]


def test_ext_is_available(registry):
    builder = BlueprintBuilder(registry, ext="FOO")
    builder.declare("user", name=builder.ext)

    assert "FOO" in builder.blueprint


def test_extends_an_existing_blueprint(registry):
    base = Blueprint()
    BlueprintBuilder(registry, base).declare("user", name="first")
    BlueprintBuilder(registry, base).declare("user", name="second")

    assert list(base.nodes) == ["first", "second"]


def test_ref_shorthand_is_available(builder):
    builder.declare("user", name="john")
    builder.computed("greeting", builder.ref(lambda john: f"hi {john[0]}"))

    assert builder.blueprint.instantiate()["greeting"] == "hi user"
