"""Registration of the node types available to the blueprint builder."""

import dataclasses
import inspect
import logging
import sys
import types
from collections.abc import Iterable, Mapping
from typing import Annotated, Any, Callable, Optional, Union, get_args, get_origin, get_type_hints

from plinth.errors import DuplicateTypeError, InvalidTypeError, UnknownTypeError
from plinth.node_type import COMPUTED, Factory, NodeType

__all__ = ["TypeRegistry", "inferred_name"]

logger = logging.getLogger(__name__)

_UNION_TYPES = (Union, types.UnionType)


def inferred_name(target: Any) -> str:
    """Derive a type name from a class or factory function, removing 'make_' prefix if present.

    Example:
        >>> inferred_name(Blog)         # Returns "Blog"
        >>> inferred_name(make_blog)    # Returns "blog"
        >>> inferred_name(comment)      # Returns "comment"
    """
    if inspect.isclass(target):
        return target.__name__

    if target.__name__.startswith("make_"):
        return target.__name__[5:]
    else:
        return target.__name__


class TypeRegistry:
    """Registry of node types, looked up by name when nodes are declared.

    Registries are plain values owned by the caller: nothing is registered
    globally, so registries can be composed or discarded freely.

    Example:
        >>> registry = TypeRegistry()
        >>>
        >>> @registry.factory(auto_references="blog")
        ... def make_post(type, context, *args, **kwargs):
        ...     return Post(*args, **kwargs)
        >>>
        >>> @registry.provides()
        ... @dataclass
        ... class Comment:
        ...     post: Post
        ...     body: str = ""
    """

    def __init__(self):
        self._types: dict[str, NodeType] = {}

    def register(self, node_type: NodeType) -> NodeType:
        """Register a type explicitly.

        Registering a type equal to the one already registered under its name
        does nothing.

        Raises:
            DuplicateTypeError: If a different type is registered under the same name.
            InvalidTypeError: If the name is reserved for computed nodes.
        """
        if not isinstance(node_type, NodeType):
            raise InvalidTypeError(f"{node_type!r} is not a NodeType")
        if node_type.name == COMPUTED.name:
            raise InvalidTypeError(f"Type name '{node_type.name}' is reserved")

        existing = self._types.get(node_type.name)
        if existing is not None:
            if existing != node_type:
                raise DuplicateTypeError(f"Duplicate type definition: {node_type.name}")
            logger.debug("Type %s is already registered", node_type.name)
            return existing

        self._types[node_type.name] = node_type
        return node_type

    def get(self, name: str) -> NodeType:
        try:
            return self._types[name]
        except KeyError:
            raise UnknownTypeError(f"Unknown type: {name}") from None

    __getitem__ = get

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def registered_types(self) -> list[NodeType]:
        return list(self._types.values())

    def factory(
        self,
        name: Optional[str] = None,
        compatible_types: Union[str, Iterable[str]] = (),
        auto_references: Union[str, Iterable[str], Mapping[str, str]] = (),
    ) -> Callable:
        """Decorator to register a function as the factory of a type.

        The decorated function is called as ``func(type, context, *args, **kwargs)``.

        Args:
            name: Optional type name; defaults to the function name with
                'make_' prefix removed.
            compatible_types: See :class:`~plinth.node_type.NodeType`.
            auto_references: See :class:`~plinth.node_type.NodeType`.
        """

        def decorator(func: Factory) -> Factory:
            if not callable(func):
                raise InvalidTypeError(f"{func!r} is not callable")
            self.register(
                NodeType(name or inferred_name(func), compatible_types, auto_references, func)
            )
            return func

        return decorator

    def provides(self, name: Optional[str] = None) -> Callable:
        """Decorator to register a class as a type. See :meth:`register_class`.

        Example:
            @registry.provides()
            class Post:
                def __init__(self, blog: Blog, title: str = ""):
                    ...
        """

        def decorator(cls: type) -> type:
            self.register_class(cls, name)
            return cls

        return decorator

    def register_class(self, cls: type, name: Optional[str] = None) -> NodeType:
        """Register a class as a type whose objects are created by calling the class.

        The class satisfies its own name and the names of its base classes as
        compatible types, so a node of a subclass can be auto-referenced by
        nested nodes expecting the base class. Constructor parameters annotated
        with a class become auto-references to that class, keyed by the bare
        class name; if several parameters refer to the same class, the first
        one is used. Builtin and standard library classes such as ``str``,
        ``datetime`` or ``Path`` are plain values and never auto-referenced.
        """
        if not inspect.isclass(cls):
            raise InvalidTypeError(f"{cls} is not a class")

        return self.register(
            NodeType(
                name or inferred_name(cls),
                compatible_types=_class_hierarchy(cls),
                auto_references=_get_auto_references(cls),
                factory=_ClassFactory(cls),
            )
        )


def _class_hierarchy(cls: type) -> list[str]:
    return [c.__name__ for c in cls.__mro__ if c is not object]


def _get_auto_references(cls: type) -> dict[str, str]:
    """Map referenced class names to constructor parameter names.

    Example:
        >>> @dataclass
        ... class Comment:
        ...     post: Post
        ...     author: Optional[User]
        ...     body: str
        >>> _get_auto_references(Comment)
        {'Post': 'post', 'User': 'author'}
    """
    hints = _constructor_hints(cls)
    if not hints:
        return {}

    parameters = inspect.signature(cls).parameters

    auto_references: dict[str, str] = {}
    for parameter_name in parameters:
        referenced = _referenced_class(hints.get(parameter_name))
        if referenced is not None:
            auto_references.setdefault(referenced.__name__, parameter_name)
    return auto_references


def _constructor_hints(cls: type) -> dict[str, Any]:
    if dataclasses.is_dataclass(cls):
        return get_type_hints(cls, include_extras=True)
    if cls.__init__ is object.__init__:
        return {}
    return get_type_hints(cls.__init__, include_extras=True)


def _referenced_class(annotation) -> Optional[type]:
    if annotation is None:
        return None
    if get_origin(annotation) is Annotated:
        return _referenced_class(get_args(annotation)[0])
    if get_origin(annotation) in _UNION_TYPES:
        return next(
            (c for c in map(_referenced_class, get_args(annotation)) if c is not None), None
        )
    if inspect.isclass(annotation) and not _is_standard_library_class(annotation):
        return annotation
    return None


def _is_standard_library_class(cls: type) -> bool:
    return cls.__module__.partition(".")[0] in sys.stdlib_module_names


@dataclasses.dataclass(frozen=True)
class _ClassFactory:
    """Factory creating objects by calling a class, equal for equal classes."""

    cls: type

    def __call__(self, _type: NodeType, _context: Any, *args: Any, **kwargs: Any) -> Any:
        return self.cls(*args, **kwargs)
