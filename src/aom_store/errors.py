"""
Custom exception classes for the aom_store package.

Hard errors signal a producer that broke the snapshot protocol. They are
raised synchronously from the call that discovered the problem and are
never retried inside the store.
"""


class AomStoreError(Exception):
    """Base exception for all aom_store errors."""

    pass


class DuplicateIdentityError(AomStoreError):
    """Raised when register() is called with a key that is already registered.

    The store is left exactly as it was before the call.

    Attributes:
        key: The duplicated node key
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message naming the duplicated key."""
        return (
            f"Duplicated element in register: '{self.key}'\n\n"
            "Use update() to merge a new snapshot of an element that is already registered."
        )


class InvariantViolation(AomStoreError):
    """Raised when a snapshot changes the variant of a registered node.

    A key must always refer to either a container node or a text node.
    State of the affected subtree is undefined after this error; recover
    with a full unregister() followed by register().

    Attributes:
        key: The node key
        expected: Variant of the registered node ("node" or "text")
        actual: Variant found in the incoming snapshot
    """

    def __init__(self, key: str, expected: str, actual: str) -> None:
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message describing the variant mismatch."""
        return (
            f"Invariant violation for '{self.key}': "
            f"registered as {self.expected}, snapshot has {self.actual}"
        )


class SnapshotFormatError(AomStoreError):
    """Raised when a snapshot document cannot be turned into an element tree.

    Attributes:
        errors: List of specific problems found (optional)
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)
