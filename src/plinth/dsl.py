"""Builder for describing blueprints declaratively.

Nodes declared inside the scope of another node get that node as their
closest ancestor, which drives auto-referencing:

    >>> builder = BlueprintBuilder(registry)
    >>> with builder.node("blog", title="Daily log") as blog:
    ...     builder.declare("article", title="Article 1")
    ...     with builder.node("article", title="Article 2"):
    ...         builder.declare("comment", name="John")
    ...     builder.let("pinned", builder.declare("article", title="Article 3"))
    >>> builder.result(blog)
    >>> objects = builder.blueprint.instantiate()

This creates a blog with three articles, the second of which has one comment.
``objects["pinned"]`` is the third article.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Union

from plinth.blueprint import Blueprint
from plinth.errors import BlueprintSyntaxError
from plinth.node import Node
from plinth.node_type import COMPUTED, NodeType
from plinth.refs import Ref, ref
from plinth.registry import TypeRegistry

__all__ = ["BlueprintBuilder"]

NodeTarget = Union[str, Ref]


class BlueprintBuilder:
    """Adds nodes to a blueprint, tracking the node currently being configured.

    Args:
        registry: Types available to :meth:`declare`, looked up by name.
        blueprint: The blueprint to extend; a new one is created if omitted.
        ext: An arbitrary object made available to the declaring code as :attr:`ext`.
    """

    ref = staticmethod(ref)

    def __init__(
        self,
        registry: TypeRegistry,
        blueprint: Optional[Blueprint] = None,
        ext: Any = None,
    ):
        self.registry = registry
        self.blueprint = blueprint if blueprint is not None else Blueprint()
        self._ext = ext
        self._ancestors: list[Node] = []

    @property
    def ext(self) -> Any:
        return self._ext

    @property
    def current(self) -> Optional[Node]:
        """The node whose scope is entered, if any."""
        return self._ancestors[0] if self._ancestors else None

    def declare(
        self, type_name: Union[str, NodeType], *args: Any, name: Optional[str] = None, **kwargs: Any
    ) -> Ref:
        """Add an object node of a registered type in the current scope.

        Args:
            type_name: Name of a registered type, or the type itself.
            name: Node name; an anonymous name is generated if omitted.

        Returns:
            A reference to the added node.
        """
        node_type = type_name if isinstance(type_name, NodeType) else self.registry.get(type_name)
        node = self.blueprint.add_node(
            Node(name, node_type, ancestors=self._ancestors, args=args, kwargs=kwargs)
        )
        return node.to_ref()

    @contextmanager
    def node(
        self, type_name: Union[str, NodeType], *args: Any, name: Optional[str] = None, **kwargs: Any
    ) -> Iterator[Ref]:
        """Declare a node and enter its scope. See :meth:`declare`."""
        node_ref = self.declare(type_name, *args, name=name, **kwargs)
        with self.on(node_ref) as entered:
            yield entered

    @contextmanager
    def on(self, target: NodeTarget, *args: Any, **kwargs: Any) -> Iterator[Ref]:
        """Enter the scope of an existing node, optionally adding arguments to it.

        Aliases are followed, so ``on("pinned")`` enters the node ``pinned``
        refers to.

        Raises:
            BlueprintSyntaxError: If the node does not exist or is a computed node.
        """
        node_name = target.name if isinstance(target, Ref) else target
        node = self.blueprint.resolve_node(node_name)
        if node is None:
            raise BlueprintSyntaxError(f"Unknown node: {node_name}")

        stashed_ancestors = self._ancestors
        self._ancestors = [node, *node.ancestors]
        try:
            yield self.args(*args, **kwargs)
        finally:
            self._ancestors = stashed_ancestors

    def args(self, *args: Any, **kwargs: Any) -> Ref:
        """Add arguments to the current node.

        Example:
            >>> with builder.on("blog"):
            ...     builder.args("premium", title="Who-ha")
            >>> # is equivalent to
            >>> with builder.on("blog", "premium", title="Who-ha"):
            ...     pass
        """
        current = self.current
        if current is None:
            raise BlueprintSyntaxError("Cannot add arguments at top level")
        if current.type is COMPUTED:
            raise BlueprintSyntaxError(f"Cannot add arguments to computed node {current.name}")

        current.args.extend(args)
        current.kwargs.update(kwargs)
        return current.to_ref()

    def computed(self, name: Optional[str], value: Any) -> Ref:
        """Add a node whose object is ``value``, after resolving references in it."""
        node = self.blueprint.add_node(Node.computed(name, value, ancestors=self._ancestors))
        return node.to_ref()

    def let(self, name: str, value: Any) -> Ref:
        """Give a name to ``value``, typically a reference to an anonymous node.

        Example:
            >>> builder.declare("user", "A")
            >>> builder.let("author", builder.declare("user", "B"))
            >>> builder.blueprint.instantiate()["author"]  # the user "B"
        """
        if not isinstance(name, str):
            raise BlueprintSyntaxError(f"let needs a str name, got {name!r}")
        return self.computed(name, value)

    def result(self, value: Any) -> None:
        """Define the representative result of the blueprint, unless already defined."""
        self.blueprint.define_result(value)
