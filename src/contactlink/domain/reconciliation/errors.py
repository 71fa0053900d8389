"""Reconciliation failures.

Every error is scoped to one request. Only :class:`ReconciliationConflictError`
is transient; the rest signal data that must not be reconciled blindly.
"""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for reconciliation failures."""


class ReconciliationConflictError(ReconciliationError):
    """A concurrent request changed the implicated identity groups.

    Safe to retry from the top: reconciliation converges to the same final
    state no matter how often a request is replayed.
    """


class InvariantViolationError(ReconciliationError):
    """Stored records or a requested merge break the identity-group invariants."""


class ContactNotFoundError(ReconciliationError):
    """No live contact exists for the requested id."""

    def __init__(self, contact_id: int) -> None:
        super().__init__(f"Contact {contact_id} not found")
        self.contact_id = contact_id
