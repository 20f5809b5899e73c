"""Defines the errors raised by the B-tree index."""


class BTreeError(Exception):
    """Base class for every error raised by this package."""


class InvalidConfiguration(BTreeError, ValueError):
    """The tree was constructed with an unusable minimum degree."""


class EmptyTreeError(BTreeError, LookupError):
    """An operation that needs at least one key was called on an empty tree."""


class InvariantViolation(BTreeError, AssertionError):
    """A structural check found a node that breaks the B-tree shape."""
