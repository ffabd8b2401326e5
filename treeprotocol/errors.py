"""Exception hierarchy for treeprotocol.

Every error raised by the library derives from TreeProtocolError so callers
can catch protocol failures as a group. Builder-specific errors raised by
concrete builders propagate unchanged through the construction helpers and
the walker.
"""


class TreeProtocolError(Exception):
    """Base class for all treeprotocol errors."""
    pass


class ConfigurationError(TreeProtocolError):
    """Raised when a configuration object fails validation."""
    pass


class ConstructionError(TreeProtocolError):
    """Raised when a builder rejects a construction call."""
    pass


class UnknownKindError(ConstructionError):
    """Raised when a builder does not recognize a node kind."""

    def __init__(self, kind, known=None):
        self.kind = kind
        self.known = tuple(known) if known is not None else None
        message = f"Unknown node kind: {kind!r}"
        if self.known:
            message += f". Known kinds: {', '.join(map(repr, self.known))}"
        super().__init__(message)


class InitargsError(ConstructionError):
    """Raised when initargs do not fit the shape a kind requires."""
    pass


class CardinalityError(ConstructionError):
    """Raised when a relation receives more right nodes than it permits."""
    pass


class DuplicateKeyError(CardinalityError):
    """Raised when a keyed relation receives a key value twice."""

    def __init__(self, relation, key, value):
        self.relation = relation
        self.key = key
        self.value = value
        super().__init__(
            f"Duplicate {key}={value!r} for keyed relation {relation!r}"
        )


class KindMismatchError(ConstructionError):
    """Raised when finish is called with a kind other than the node's."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Cannot finish node of kind {actual!r} as {expected!r}"
        )


class NodeFinishedError(ConstructionError):
    """Raised when a builder refuses to relate from a finished node."""
    pass


class RelationSpecError(ConstructionError):
    """Raised when a relation spec does not match its cardinality."""
    pass


class NoActiveBuilderError(TreeProtocolError):
    """Raised when current_builder() is used outside a builder session."""
    pass


class IntrospectionError(TreeProtocolError):
    """Raised when a builder cannot answer an introspection query."""
    pass


class WalkError(TreeProtocolError):
    """Base class for errors raised by the walker itself."""
    pass


class WalkDepthError(WalkError):
    """Raised when a walk descends deeper than WalkConfig.max_depth."""

    def __init__(self, max_depth):
        self.max_depth = max_depth
        super().__init__(f"Walk exceeded max_depth={max_depth}")


class PeekResultError(WalkError):
    """Raised when a peek function returns a value of unknown shape."""
    pass
