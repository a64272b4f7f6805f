"""
Exception types for the lot event-sourcing kernel.
"""

from typing import Optional


class ValidationError(ValueError):
    """
    Raised when an event or a query bound is malformed.

    Rejects the whole append: nothing is written when this is raised.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidTransitionError(Exception):
    """Raised when a reducer has no handler for an event kind."""
    pass


class EventStoreError(Exception):
    """Raised when event store operations fail."""
    pass
