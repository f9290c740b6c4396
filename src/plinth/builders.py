"""High level entry points for building and instantiating blueprints."""

from typing import Any, Callable, Optional

from plinth.blueprint import Blueprint
from plinth.dsl import BlueprintBuilder
from plinth.node import RESULT_NAME
from plinth.registry import TypeRegistry

__all__ = ["blueprint", "instantiate", "result_of"]


def blueprint(
    registry: TypeRegistry,
    body: Optional[Callable[[BlueprintBuilder], Any]] = None,
    *,
    base: Optional[Blueprint] = None,
    ext: Any = None,
) -> Blueprint:
    """Build a new :class:`Blueprint`, or extend an existing one.

    Args:
        registry: The types available to the declaring code.
        body: Called with a :class:`BlueprintBuilder`. A value it returns
            becomes the result of the blueprint unless one is already defined.
        base: A blueprint to extend in place instead of creating a new one.
            Use :meth:`Blueprint.duplicate` first to keep the original intact.
        ext: An external object available to ``body`` as ``builder.ext``.

    Returns:
        The built or extended blueprint.

    Example:
        >>> def blog_with_articles(bp):
        ...     with bp.node("blog") as blog:
        ...         bp.declare("article", title="Article 1")
        ...         bp.declare("article", title="Article 2")
        ...     return blog
        >>>
        >>> objects = instantiate(blueprint(registry, blog_with_articles))
        >>> result_of(objects)  # the blog
    """
    builder = BlueprintBuilder(registry, base, ext)
    if body is not None:
        result = body(builder)
        if result is not None:
            builder.result(result)
    return builder.blueprint


def instantiate(blueprint: Blueprint, context: Any = None) -> dict[str, Any]:
    """Create the objects of ``blueprint``, passing ``context`` to every factory.

    Raises:
        BlueprintError: If references are missing or circular.
    """
    return blueprint.instantiate(context)


def result_of(objects: dict[str, Any]) -> Any:
    """Return the result object of an instantiated blueprint.

    Raises:
        KeyError: If the blueprint did not define a result.
    """
    return objects[RESULT_NAME]
