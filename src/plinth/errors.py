__all__ = [
    "BlueprintError",
    "DuplicateNodeError",
    "UnknownReferenceError",
    "CircularReferenceError",
    "InvalidTypeError",
    "InvalidDeferredError",
    "DuplicateTypeError",
    "UnknownTypeError",
    "BlueprintSyntaxError",
]


class BlueprintError(Exception):
    """Base class for all errors raised while building or instantiating a blueprint."""

    pass


class DuplicateNodeError(BlueprintError, ValueError):
    """Raised when a node is added under a name that the blueprint already holds."""

    def __init__(self, name: str):
        super().__init__(f"Duplicate node: {name}")
        self.name = name


class UnknownReferenceError(BlueprintError, KeyError):
    """Raised when a reference names a node that is not defined in the blueprint."""

    def __init__(self, name: str):
        super().__init__(f"Missing definition: {name}")
        self.name = name

    def __str__(self):
        return self.args[0]


class CircularReferenceError(BlueprintError):
    """Raised when a node transitively depends on its own creation."""

    def __init__(self, name: str, type_name: str):
        super().__init__(f"Circular references detected around {name}({type_name})")
        self.name = name
        self.type_name = type_name


class InvalidTypeError(BlueprintError, TypeError):
    """Raised when a node type is declared with malformed arguments."""

    pass


class InvalidDeferredError(BlueprintError, TypeError):
    """Raised when a deferred computation is built from an unsupported callable."""

    pass


class DuplicateTypeError(BlueprintError, ValueError):
    """Raised when a different type is registered under an existing type name."""

    pass


class UnknownTypeError(BlueprintError, KeyError):
    """Raised when a type name is not present in a registry."""

    def __str__(self):
        return self.args[0] if self.args else ""


class BlueprintSyntaxError(BlueprintError):
    """Raised when the blueprint builder is used in a way that cannot describe a node."""

    pass
