"""Error kinds raised by the task engine and persistence gateways."""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for review tracker errors."""


class ValidationError(ReviewError):
    """A required field is missing or a value is outside its allowed set."""


class NotFoundError(ReviewError):
    """An operation referenced a game, task or member id absent from the store."""


class PersistenceError(ReviewError):
    """Reading or writing a collection failed.

    Raised inside gateways and by ``load``; ``save`` converts it to ``False``.
    """

    def __init__(self, message: str, *, collection: str | None = None):
        super().__init__(message)
        self.collection = collection
