"""
Exception hierarchy for skeletal graph operations.
"""


class SkeletalGraphError(Exception):
    """Base class for all errors raised by skeletalgraph."""
    pass


class DomainError(SkeletalGraphError, ValueError):
    """A precondition of an operation was violated by the caller."""
    pass


class NoPathError(DomainError):
    """An operation needed a path between vertices that are not connected."""
    pass


class InvariantBreachError(SkeletalGraphError, RuntimeError):
    """The graph reached a state that should be unreachable."""
    pass


class StaleDescriptorError(SkeletalGraphError, KeyError):
    """A vertex or edge descriptor does not refer to a live entity."""
    pass
