"""Nodes: the planned objects that make up a blueprint."""

import logging
import secrets
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from plinth.node_type import COMPUTED, NodeType
from plinth.refs import Ref

__all__ = ["Node", "ANONYMOUS_NAME_PREFIX", "RESULT_NAME"]

logger = logging.getLogger(__name__)

ANONYMOUS_NAME_PREFIX = "_anon_"
"""Name prefix given to nodes declared without a name."""

RESULT_NAME = "_result_"
"""Name of the node holding the representative result of a blueprint."""


class Node:
    """A single object to be created.

    Only ``args`` and ``kwargs`` may change after creation; the builder appends
    to them when a node is re-entered.

    Attributes:
        name: Unique name of the node within its blueprint.
        type: The :class:`NodeType` of the object.
        ancestors: Nodes this node was declared inside of, closest first.
            This is lexical nesting, not inheritance.
        args: Positional arguments for the factory, possibly containing references.
        kwargs: Keyword arguments for the factory, possibly containing references.
    """

    def __init__(
        self,
        name: Optional[str],
        type: NodeType,
        ancestors: Sequence["Node"] = (),
        args: Sequence[Any] = (),
        kwargs: Optional[Mapping[str, Any]] = None,
    ):
        if name is not None and not isinstance(name, str):
            raise TypeError(f"Node name must be a str, got {name!r}")
        if not isinstance(type, NodeType):
            raise TypeError(f"Node type must be a NodeType, got {type!r}")
        if not isinstance(ancestors, Sequence) or not all(isinstance(a, Node) for a in ancestors):
            raise TypeError("ancestors must be a sequence of Nodes")
        if not isinstance(args, Sequence) or isinstance(args, (str, bytes)):
            raise TypeError(f"args must be a sequence, got {args!r}")
        if kwargs is not None and not isinstance(kwargs, Mapping):
            raise TypeError(f"kwargs must be a mapping, got {kwargs!r}")

        self.name = name or f"{ANONYMOUS_NAME_PREFIX}{secrets.token_hex(6)}"
        self.type = type
        self.ancestors = tuple(ancestors)
        self.args = list(args)
        self.kwargs = dict(kwargs or {})

    @staticmethod
    def computed(name: Optional[str], value: Any, ancestors: Sequence["Node"] = ()) -> "Node":
        """Create a node whose object is ``value`` itself, once resolved."""
        return Node(name, COMPUTED, ancestors=ancestors, args=[value])

    @property
    def parent(self) -> Optional["Node"]:
        return self.ancestors[0] if self.ancestors else None

    @property
    def is_anonymous(self) -> bool:
        return self.name.startswith(ANONYMOUS_NAME_PREFIX)

    @property
    def is_result(self) -> bool:
        return self.name == RESULT_NAME

    @property
    def alias_ref(self) -> Optional[Ref]:
        """The reference this node stands for, if it is a pure alias to another node."""
        if self.type is COMPUTED and len(self.args) == 1 and not self.kwargs:
            if isinstance(self.args[0], Ref):
                return self.args[0]
        return None

    @property
    def type_annotated_name(self) -> str:
        """Used in logs and error messages."""
        return f"{self.name}({self.type.name})"

    def to_ref(self) -> Ref:
        return Ref(self.name)

    def auto_referenced_ancestors(self) -> dict[str, "Node"]:
        """Find the ancestors to be passed to the factory by auto-reference.

        For every ``(compatible type, attribute)`` pair of the node's type whose
        attribute is not given explicitly in ``kwargs``, the closest ancestor
        compatible with that type is selected. When several pairs target the
        same attribute, the one matching the closest ancestor wins; at equal
        closeness, the pair declared first wins.

        Returns:
            Mapping from attribute name to the ancestor node to pass under it.
        """
        candidates: dict[str, tuple[int, Node]] = {}

        for compatible_type, attribute in self.type.auto_references.items():
            if attribute in self.kwargs:
                continue

            match = next(
                (
                    (distance, ancestor)
                    for distance, ancestor in enumerate(self.ancestors)
                    if compatible_type in ancestor.type.compatible_types
                ),
                None,
            )
            if match is None:
                continue
            if attribute not in candidates or match[0] < candidates[attribute][0]:
                candidates[attribute] = match

        selected = {attribute: ancestor for attribute, (_, ancestor) in candidates.items()}
        if selected:
            logger.debug(
                "Auto-referencing %s from %s",
                self.type_annotated_name,
                {a: n.type_annotated_name for a, n in selected.items()},
            )
        return selected

    def __repr__(self):
        return (
            f"Node({self.name!r}, {self.type!r}, "
            f"ancestors={[a.name for a in self.ancestors]!r}, "
            f"args={self.args!r}, kwargs={self.kwargs!r})"
        )
