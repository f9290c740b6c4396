"""Blueprints: ordered sets of nodes describing how to create a set of objects.

A blueprint is usually built with :func:`plinth.builders.blueprint`, but nodes
may also be added directly:

    >>> bp = Blueprint()
    >>> author = bp.add_node("author", author_type)
    >>> bp.add_node("blog", blog_type, ancestors=[author], kwargs={"title": "Daily log"})
    >>> objects = bp.instantiate()
    >>> objects["blog"].author is objects["author"]
    True
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Optional, Union

from plinth.errors import DuplicateNodeError
from plinth.instantiator import Instantiator
from plinth.node import RESULT_NAME, Node
from plinth.node_type import NodeType

__all__ = ["Blueprint"]

logger = logging.getLogger(__name__)


class Blueprint:
    """An insertion-ordered collection of uniquely named nodes.

    Insertion order is also the order in which top-level creation is attempted
    by :meth:`instantiate`.
    """

    def __init__(self):
        self.nodes: dict[str, Node] = {}

    def add_node(
        self,
        node_or_name: Union[Node, str, None],
        type: Optional[NodeType] = None,
        ancestors: Sequence[Node] = (),
        args: Sequence[Any] = (),
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> Node:
        """Add a node, either given directly or built from the remaining arguments.

        Returns:
            The added node.

        Raises:
            DuplicateNodeError: If a node with the same name already exists.
        """
        if isinstance(node_or_name, Node):
            node = node_or_name
        else:
            node = Node(node_or_name, type, ancestors=ancestors, args=args, kwargs=kwargs)

        if node.name in self.nodes:
            raise DuplicateNodeError(node.name)

        self.nodes[node.name] = node
        return node

    def node(self, name: str) -> Optional[Node]:
        return self.nodes.get(name)

    def resolve_node(self, name: str) -> Optional[Node]:
        """Find a node by name, following aliases to the node they stand for."""
        seen = set()
        node = self.node(name)
        while node is not None and node.alias_ref is not None and node.name not in seen:
            seen.add(node.name)
            node = self.node(node.alias_ref.name)
        return node

    def define_result(self, value: Any, overwrite: bool = False) -> Optional[Node]:
        """Define the representative result of this blueprint.

        Args:
            value: The result, usually a reference to one of the nodes.
            overwrite: Replace an existing result instead of keeping it.

        Returns:
            The result node, or None if a result was already defined and kept.
        """
        if RESULT_NAME in self.nodes:
            if not overwrite:
                return None
            del self.nodes[RESULT_NAME]
        return self.add_node(Node.computed(RESULT_NAME, value))

    def duplicate(self) -> "Blueprint":
        """Copy the blueprint so that adding to either copy does not affect the other.

        Argument lists are copied shallowly; ancestors of the copied nodes point
        to the copied nodes.
        """
        result = Blueprint()
        for node in self.nodes.values():
            result.add_node(Node(node.name, node.type, args=node.args, kwargs=node.kwargs))

        for node in self.nodes.values():
            # ancestors outside this blueprint are kept as they are
            result.nodes[node.name].ancestors = tuple(
                result.nodes[a.name] if self.nodes.get(a.name) is a else a
                for a in node.ancestors
            )
        return result

    __copy__ = duplicate

    def instantiate(self, context: Any = None) -> dict[str, Any]:
        """Create the set of objects described by this blueprint.

        Args:
            context: Passed unchanged to every factory.

        Returns:
            Mapping from node name to created object.
        """
        logger.debug("Instantiating blueprint with %d nodes", len(self.nodes))
        return Instantiator(self, context).instantiate_objects()

    def __contains__(self, name: str) -> bool:
        return name in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    def __repr__(self):
        return f"Blueprint({list(self.nodes)!r})"
