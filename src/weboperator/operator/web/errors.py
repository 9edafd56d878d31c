from typing import Optional


class StoreError(Exception):
    """A state store operation failed."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class NotFoundError(StoreError):
    """The requested object does not exist."""


class AlreadyExistsError(StoreError):
    """A create lost the race against another creator of the same object."""


class OwnershipError(StoreError):
    """An owner reference could not be attached to a dependent."""
