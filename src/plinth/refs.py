"""References to nodes that are resolved at instantiation time.

A :class:`Ref` names another node of the same blueprint. A :class:`Deferred`
wraps a function whose parameter names are references; the function is called
with the resolved objects once they are available.

Example:
    >>> ref("foo")
    Ref(name='foo')
    >>> ref(lambda foo, bar: foo + bar).refs
    (Ref(name='foo'), Ref(name='bar'))
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from plinth.errors import InvalidDeferredError

__all__ = ["Ref", "Deferred", "ref"]

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class Ref:
    """A symbolic pointer to the node called ``name``."""

    name: str

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise TypeError(f"Reference name must be a str, got {self.name!r}")


@dataclass(frozen=True)
class Deferred:
    """A computation over the objects created for a fixed list of nodes.

    Attributes:
        body: The function to call. Each of its parameters names a node.
        refs: References derived from the parameters of ``body``, in order.
    """

    body: Callable[..., Any]
    refs: tuple[Ref, ...] = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "refs", _refs_from_parameters(self.body))

    def __call__(self, *values: Any) -> Any:
        return self.body(*values)


def _refs_from_parameters(body: Callable[..., Any]) -> tuple[Ref, ...]:
    if not callable(body):
        raise InvalidDeferredError(f"{body!r} is not callable")
    try:
        parameters = inspect.signature(body).parameters.values()
    except (TypeError, ValueError) as e:
        raise InvalidDeferredError(f"Cannot inspect the signature of {body!r}") from e

    unsupported = [p.name for p in parameters if p.kind not in _POSITIONAL_KINDS]
    if unsupported:
        raise InvalidDeferredError(
            f"Deferred function must take only fixed positional arguments, "
            f"but {unsupported} are not"
        )
    return tuple(Ref(p.name) for p in parameters)


def ref(target: Optional[Union[str, Callable[..., Any]]] = None) -> Union[Ref, Deferred]:
    """Shorthand for creating references.

    ``ref("foo")`` returns ``Ref("foo")``, while ``ref(func)`` returns a
    :class:`Deferred` over ``func``. The latter form also works as a decorator.

    Example:
        >>> ref("blog")
        Ref(name='blog')
        >>> @ref
        ... def title(blog, author):
        ...     return f"{blog.title} by {author.name}"
    """
    if target is None:
        raise TypeError("ref() needs either a node name or a function")
    if isinstance(target, str):
        return Ref(target)
    return Deferred(target)
