"""Exception hierarchy for unions."""


class UnionsError(Exception):
    """Base exception for all unions errors."""


class VariantLookupError(UnionsError, ValueError):
    """A value does not correspond to any variant of an ADT."""


class NonExhaustiveMatchError(UnionsError, TypeError):
    """
    A match did not handle the value it was given.

    Raised when the cases passed to ``ADT.match`` do not name every variant
    exactly once, or when a value falls through every arm of a match.
    """
