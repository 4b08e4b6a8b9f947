"""Structured exceptions for collection resolution.

Resolution itself degrades silently (a missing source contributes
nothing); these are raised only for malformed inputs and for callers
that ask for strict behavior.
"""


class CollectionCoreError(Exception):
    """Base exception for api-collection-core errors."""

    pass


class DocumentError(CollectionCoreError, ValueError):
    """A collection, environment or request document has the wrong shape."""

    pass


class UnresolvedVariablesError(CollectionCoreError):
    """Raised by a strict pipeline when placeholders remain unresolved.

    Attributes:
        names: The unresolved variable names, in first-seen order.
    """

    def __init__(self, names: list[str], message: str | None = None):
        self.names = list(names)
        if message is None:
            placeholders = ", ".join(f"{{{{{name}}}}}" for name in self.names)
            message = f"Unresolved placeholders: {placeholders}"
        super().__init__(message)
