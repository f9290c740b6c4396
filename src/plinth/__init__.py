"""Plinth: declarative blueprints for creating sets of related objects.

Plinth describes a set of objects to be created (nodes), their constructor
arguments, how they are nested and how they refer to each other, without
saying in which order they must be created. Instantiating the blueprint
resolves every reference, creating referenced objects on demand, and hands
each node to a pluggable factory exactly once.

Key Features:
    - References to nodes declared later, resolved lazily
    - Deferred computations over the objects of other nodes
    - Auto-referencing of the nearest compatible enclosing node
    - Cycle detection before any object in the cycle is created
    - Explicit, caller-owned type registries; no global state

Basic Usage:
    >>> from plinth.registry import TypeRegistry
    >>> from plinth.builders import blueprint, instantiate
    >>>
    >>> registry = TypeRegistry()
    >>> registry.register_class(Blog)
    >>> registry.register_class(Article)   # Article(blog: Blog, title: str)
    >>>
    >>> def plan(bp):
    ...     with bp.node("Blog", name="blog"):
    ...         bp.declare("Article", title="Hello")
    >>>
    >>> objects = instantiate(blueprint(registry, plan))
    >>> objects["blog"]

The framework consists of several core modules:
    - refs: References and deferred computations
    - resolver: Replacement of references embedded in data
    - node_type: Node types and the computed type
    - node: Nodes and auto-reference selection
    - blueprint: Blueprints, the ordered sets of nodes
    - instantiator: Creation of objects from blueprints
    - registry: Type registration
    - dsl: The blueprint builder
    - builders: High-level entry points
    - errors: Framework-specific exceptions
"""
