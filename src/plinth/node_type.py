"""Types of the objects described by a blueprint."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, FrozenSet, Optional, Union

from plinth.errors import InvalidTypeError

__all__ = ["NodeType", "Factory", "COMPUTED"]

Factory = Callable[..., Any]
"""Creates the actual object: ``factory(type, context, *args, **kwargs)``."""


@dataclass(frozen=True, init=False, eq=False, repr=False)
class NodeType:
    """Describes how objects of one kind are created and what they refer to.

    Attributes:
        name: The name of the type.
        compatible_types: Type names this type satisfies when nested nodes
            look for an ancestor to refer to. Always contains ``name``.
        auto_references: Mapping from a compatible type name to the keyword
            argument under which the nearest ancestor of that type is passed
            to the factory, unless the argument is given explicitly.
        factory: Called as ``factory(type, context, *args, **kwargs)`` to
            create the object.

    Example:
        >>> make = lambda type, context, *args, **kwargs: (type.name, args, kwargs)
        >>> blog = NodeType("blog", auto_references="author", factory=make)
        >>> blog.auto_references
        mappingproxy({'author': 'author'})
        >>> comment = NodeType("comment", auto_references={"post": "post", "user": "commenter"}, factory=make)
    """

    name: str
    compatible_types: FrozenSet[str]
    auto_references: Mapping[str, str]
    factory: Factory

    def __init__(
        self,
        name: str,
        compatible_types: Union[str, Iterable[str]] = (),
        auto_references: Union[str, Iterable[str], Mapping[str, str]] = (),
        factory: Optional[Factory] = None,
    ):
        if not isinstance(name, str):
            raise InvalidTypeError(f"Type name must be a str, got {name!r}")
        if factory is None or not callable(factory):
            raise InvalidTypeError(f"Type {name} needs a callable factory, got {factory!r}")

        object.__setattr__(self, "name", name)
        object.__setattr__(
            self, "compatible_types", frozenset([name, *_compatible_types(compatible_types)])
        )
        object.__setattr__(
            self, "auto_references", MappingProxyType(_auto_references(auto_references))
        )
        object.__setattr__(self, "factory", factory)

    def __eq__(self, other):
        if not isinstance(other, NodeType):
            return NotImplemented
        return (
            self.name == other.name
            and self.compatible_types == other.compatible_types
            and dict(self.auto_references) == dict(other.auto_references)
            and self.factory == other.factory
        )

    def __hash__(self):
        return hash((self.name, self.compatible_types))

    def __repr__(self):
        return f"NodeType({self.name!r})"

    def create_object(self, context: Any, *args: Any, **kwargs: Any) -> Any:
        return self.factory(self, context, *args, **kwargs)


def _compatible_types(compatible_types) -> list[str]:
    if isinstance(compatible_types, str):
        return [compatible_types]
    if isinstance(compatible_types, Iterable) and not isinstance(compatible_types, Mapping):
        compatible_types = list(compatible_types)
        if all(isinstance(t, str) for t in compatible_types):
            return compatible_types
    raise InvalidTypeError(f"compatible_types must be a str or strs, got {compatible_types!r}")


def _auto_references(auto_references) -> dict[str, str]:
    if isinstance(auto_references, str):
        auto_references = [auto_references]
    if isinstance(auto_references, Mapping):
        auto_references = dict(auto_references)
    elif isinstance(auto_references, Iterable):
        auto_references = {r: r for r in auto_references}
    else:
        raise InvalidTypeError(
            f"auto_references must be a str, strs or a mapping, got {auto_references!r}"
        )

    if not all(isinstance(k, str) and isinstance(v, str) for k, v in auto_references.items()):
        raise InvalidTypeError(
            f"auto_references must contain str keys and values, got {auto_references!r}"
        )
    return auto_references


def _return_computed_value(_type: NodeType, _context: Any, value: Any) -> Any:
    return value


COMPUTED = NodeType("_computed", factory=_return_computed_value)
"""The type of nodes holding a value computed from other nodes, including aliases."""
