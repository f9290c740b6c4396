"""Recursive replacement of references embedded in arbitrary data.

Example:
    >>> some_data = [12, Ref("foo"), {"foobar": Deferred(lambda foo, bar: foo + bar)}]
    >>> mapping = {"foo": "hello", "bar": "world"}
    >>> Resolver(mapping.__getitem__).resolve(some_data)
    [12, 'hello', {'foobar': 'helloworld'}]
"""

import copy
from typing import Any, Callable, Optional

from plinth.refs import Deferred, Ref

__all__ = ["Resolver"]


class Resolver:
    """Traverse data and replace every :class:`Ref` and :class:`Deferred` with its value.

    Lists, tuples, sets and dicts (keys as well as values) are traversed
    recursively and rebuilt as new containers of the same class, so the
    traversed data itself is never modified. Anything else is returned
    unchanged; wrap it in a :class:`Deferred` if references inside it must be
    resolved.

    Args:
        lookup: Called with a node name, returns the object for that name.
            The returned object is used as-is and is not resolved again.
        recursion_limit: How many levels of containers are traversed. Once
            the depth exceeds the limit, values are returned unresolved.
            ``None`` means unlimited.

    Raises:
        ValueError: If ``recursion_limit`` is negative.

    Example:
        >>> resolver = Resolver({"foo": 1}.__getitem__, recursion_limit=1)
        >>> resolver.resolve([Ref("foo"), [Ref("foo")]])
        [1, [Ref(name='foo')]]
    """

    def __init__(self, lookup: Callable[[str], Any], recursion_limit: Optional[int] = None):
        if recursion_limit is not None and recursion_limit < 0:
            raise ValueError(f"Recursion limit must not be negative, got {recursion_limit}")
        self._lookup = lookup
        self._recursion_limit = recursion_limit

    def resolve(self, value: Any, depth: int = 0) -> Any:
        if self._recursion_limit is not None and self._recursion_limit < depth:
            return value

        depth += 1
        if isinstance(value, Ref):
            return self._lookup(value.name)
        if isinstance(value, Deferred):
            return value(*(self._lookup(r.name) for r in value.refs))
        if isinstance(value, dict):
            items = {self.resolve(k, depth): self.resolve(v, depth) for k, v in value.items()}
            return items if type(value) is dict else _refilled(value, items)
        if isinstance(value, list):
            items = [self.resolve(item, depth) for item in value]
            return items if type(value) is list else _refilled(value, items)
        if isinstance(value, tuple):
            items = [self.resolve(item, depth) for item in value]
            return type(value)(*items) if _is_namedtuple(value) else type(value)(items)
        if isinstance(value, (set, frozenset)):
            return type(value)(self.resolve(item, depth) for item in value)
        return value


def _is_namedtuple(value: tuple) -> bool:
    return hasattr(value, "_fields")


def _refilled(container, items):
    """Shallow copy of a dict or list subclass instance holding ``items`` instead."""
    result = copy.copy(container)
    result.clear()
    if isinstance(result, dict):
        result.update(items)
    else:
        result.extend(items)
    return result
