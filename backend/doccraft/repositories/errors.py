"""Errors raised by repositories beyond plain lookups (which use LookupError)."""


class RecordInUseError(Exception):
    """A row cannot be deleted while other rows still depend on it."""

    def __init__(self, message: str, *, dependents: int = 0) -> None:
        super().__init__(message)
        self.dependents = dependents
