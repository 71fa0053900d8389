"""Shared reconciliation contract components.

Values flowing between the stages of one reconciliation request:
request -> matches -> ``Resolution`` -> ``MergeResult`` -> ``ConsolidatedContact``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contactlink.domain.model import Contact


@dataclass(slots=True, frozen=True, kw_only=True)
class IdentifyRequest:
    """Already-validated identifiers to reconcile. At least one should be set."""

    email: str | None = None
    phone: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.email is None and self.phone is None

    @property
    def is_complete(self) -> bool:
        return self.email is not None and self.phone is not None


@dataclass(slots=True, frozen=True, kw_only=True)
class ConsolidatedContact:
    """Consolidated view of one identity group."""

    primary_id: int
    emails: tuple[str, ...] = ()
    phones: tuple[str, ...] = ()
    member_ids: tuple[int, ...] = ()


class ResolutionKind(StrEnum):
    """How the matched records relate to existing identity groups."""

    NO_MATCH = "no_match"
    SINGLE = "single"
    MERGE = "merge"
    ANOMALY = "anomaly"


@dataclass(slots=True, frozen=True, kw_only=True)
class IntegrityAnomaly:
    """Matched records from which no group root could be derived."""

    contact_ids: tuple[int, ...]
    fallback_root_id: int
    message: str


@dataclass(slots=True, frozen=True, kw_only=True)
class Resolution:
    """Decision produced by the identity resolver.

    ``root`` is ``None`` only for ``NO_MATCH``. ``losers`` is non-empty only
    for ``MERGE`` and is ordered oldest first.
    """

    kind: ResolutionKind
    root: Contact | None = None
    losers: tuple[Contact, ...] = ()
    create_member: bool = False
    anomaly: IntegrityAnomaly | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class MergeResult:
    """Outcome of folding one or more groups into a surviving root."""

    survivor_id: int
    demoted_ids: tuple[int, ...]
    reparented: int = 0


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconciliationResult:
    """Everything one reconciliation request produced."""

    contact: ConsolidatedContact
    kind: ResolutionKind
    created: Contact | None = None
    merge: MergeResult | None = None
    anomaly: IntegrityAnomaly | None = None
