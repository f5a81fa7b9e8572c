"""
Error kinds raised by the composition tree engine.

Every error is recoverable: callers (the host bridge, the HTTP surface)
turn them into human-readable diagnostics instead of crashing.
"""


class CompositionError(Exception):
    """Base class for all composition tree errors."""


class ParseError(CompositionError):
    """Malformed JSON, IR structure or setting value."""


class ConfigError(CompositionError):
    """Unrecognized generator/node kind or IR setting key."""


class PathNotFound(CompositionError):
    """A path index does not exist among a node's children."""


class NotComposed(CompositionError):
    """A path tried to descend through a leaf node."""


class IndexOutOfRange(CompositionError):
    """Insert/delete index is invalid for the addressed child list."""


class SchemeMismatchError(CompositionError):
    """A composition scheme cannot be applied to the given child outputs."""


class LeafMutationError(CompositionError):
    """A structural operation was attempted on a leaf node."""


class StaleHandleError(CompositionError):
    """A tree handle was released or never issued."""
