"""
Module for creating the objects described by a blueprint.

Nodes are created depth first in the order they were added to the blueprint.
Whenever the arguments of a node refer to another node, that node is created
on demand, so no separate topological sort is required. Each node is created
at most once per instantiation; a node that is reached again while its own
arguments are still being resolved indicates a reference cycle.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from plinth.errors import CircularReferenceError, UnknownReferenceError
from plinth.node import Node
from plinth.resolver import Resolver

if TYPE_CHECKING:
    from plinth.blueprint import Blueprint

__all__ = ["Instantiator", "DEFAULT_RECURSION_LIMIT"]

logger = logging.getLogger(__name__)

DEFAULT_RECURSION_LIMIT = 5
"""How deep references are looked for inside nested argument containers."""


class Instantiator:
    """Create every object of a :class:`~plinth.blueprint.Blueprint`.

    An instantiator holds the state of one instantiation and should not be
    reused; independent instantiators share nothing and may run concurrently.

    Args:
        blueprint: The blueprint to instantiate. It is not modified.
        context: Passed unchanged to every factory.
        recursion_limit: See :class:`~plinth.resolver.Resolver`.
    """

    def __init__(
        self,
        blueprint: "Blueprint",
        context: Any = None,
        recursion_limit: Optional[int] = DEFAULT_RECURSION_LIMIT,
    ):
        self._blueprint = blueprint
        self._context = context
        self._resolver = Resolver(self._lookup, recursion_limit=recursion_limit)

        self.objects: dict[str, Any] = {}
        self._creating: set[str] = set()

    def instantiate_objects(self) -> dict[str, Any]:
        """Create all objects.

        Returns:
            Mapping from node name to created object.

        Raises:
            UnknownReferenceError: If a reference names a node that does not exist.
            CircularReferenceError: If nodes refer to each other in a cycle.
            Exception: Whatever a factory raises, unchanged.
        """
        for node in self._blueprint.nodes.values():
            self._ensure_object_created(node)
        return self.objects

    def _ensure_object_created(self, node: Node) -> Any:
        if node.name in self.objects:
            return self.objects[node.name]
        if node.name in self._creating:
            raise CircularReferenceError(node.name, node.type.name)

        self._creating.add(node.name)
        logger.debug("Creating %s", node.type_annotated_name)
        try:
            obj = self._create_object(node)
        finally:
            self._creating.discard(node.name)

        self.objects[node.name] = obj
        logger.debug("Created %s", node.type_annotated_name)
        return obj

    def _create_object(self, node: Node) -> Any:
        alias = node.alias_ref
        if alias is not None:
            logger.debug("Resolving alias %s to %s", node.name, alias.name)
            return self._lookup(alias.name)

        args = list(self._resolver.resolve(node.args))
        kwargs = dict(self._resolver.resolve(node.kwargs))
        for attribute, ancestor in node.auto_referenced_ancestors().items():
            kwargs[attribute] = self._ensure_object_created(ancestor)
        return node.type.create_object(self._context, *args, **kwargs)

    def _lookup(self, name: str) -> Any:
        node = self._blueprint.node(name)
        if node is None:
            raise UnknownReferenceError(name)
        return self._ensure_object_created(node)
