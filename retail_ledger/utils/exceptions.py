"""
Error taxonomy for the ledger core.

Every error here is recoverable: the message is meant to be shown to the
user verbatim and the workflow that raised it returns to an editable state.
"""

from __future__ import annotations


class DomainError(Exception):
    """Domain-level error suitable for surfacing to the UI."""
    pass


class ValidationError(DomainError):
    """
    A required field is missing or a value is out of range
    (MRP, discount, quantity, malformed backup data).
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class PersistenceError(DomainError):
    """The store rejected a write or did not answer within the timeout."""
    pass
