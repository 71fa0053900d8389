"""Reconciliation core for stitching contact records into identity groups.

Layered flow for one request:
1) match stored contacts sharing an email or phone with the request
2) resolve the implicated group roots and pick the surviving one
3) merge the other groups into it
4) record a new email/phone pairing as a member when needed
5) consolidate the group into one deterministic view
"""

from __future__ import annotations

from .consolidate import consolidate
from .contracts import (
    ConsolidatedContact,
    IdentifyRequest,
    IntegrityAnomaly,
    MergeResult,
    ReconciliationResult,
    Resolution,
    ResolutionKind,
)
from .engine import ContactReconciler, UnitOfWorkFactory
from .errors import (
    ContactNotFoundError,
    InvariantViolationError,
    ReconciliationConflictError,
    ReconciliationError,
)
from .match import match_contacts
from .merge import merge_groups
from .resolve import implicated_root_ids, resolve_identity

__all__ = [
    "ConsolidatedContact",
    "ContactNotFoundError",
    "ContactReconciler",
    "IdentifyRequest",
    "IntegrityAnomaly",
    "InvariantViolationError",
    "MergeResult",
    "ReconciliationConflictError",
    "ReconciliationError",
    "ReconciliationResult",
    "Resolution",
    "ResolutionKind",
    "UnitOfWorkFactory",
    "consolidate",
    "implicated_root_ids",
    "match_contacts",
    "merge_groups",
    "resolve_identity",
]
