"""Orchestrator for the reconciliation subsystem.

One request runs inside one unit of work:
match -> resolve -> (merge) -> (create) -> consolidate -> commit.
Any exception before the commit rolls the whole request back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contactlink.domain.model import Contact, utcnow

from .consolidate import consolidate
from .contracts import ReconciliationResult, ResolutionKind
from .errors import ContactNotFoundError, InvariantViolationError
from .match import match_contacts
from .merge import merge_groups
from .resolve import resolve_identity

if TYPE_CHECKING:
    from datetime import datetime

    from contactlink.domain.ports import ContactRepository, ContactUnitOfWork

    from .contracts import ConsolidatedContact, IdentifyRequest, MergeResult, Resolution

type UnitOfWorkFactory = Callable[[], ContactUnitOfWork]

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ContactReconciler:
    """Run reconciliation requests against a contact store."""

    unit_of_work: UnitOfWorkFactory
    clock: Callable[[], datetime] = utcnow

    def identify(self, request: IdentifyRequest) -> ReconciliationResult:
        """Reconcile ``request`` and return the consolidated identity group."""

        if request.is_empty:
            raise ValueError("At least one of email or phone is required")

        with self.unit_of_work() as uow:
            contacts = uow.repositories.contacts
            now = self.clock()

            matches = match_contacts(contacts, email=request.email, phone=request.phone)
            resolution = resolve_identity(contacts, request, matches)
            root, merge, created = self._apply(contacts, request, resolution, now)

            if root.id is None:
                raise InvariantViolationError("Group root must be persisted before consolidation")
            consolidated = consolidate(contacts, root.id)
            uow.commit()

        return ReconciliationResult(
            contact=consolidated,
            kind=resolution.kind,
            created=created,
            merge=merge,
            anomaly=resolution.anomaly,
        )

    def lookup(self, contact_id: int) -> ConsolidatedContact:
        """Return the consolidated group of any live contact, root or member."""

        with self.unit_of_work() as uow:
            contacts = uow.repositories.contacts
            found = contacts.get_many([contact_id])
            if not found:
                raise ContactNotFoundError(contact_id)
            root_id = found[0].root_id
            if root_id is None:
                raise InvariantViolationError(f"Contact {contact_id} has no derivable root")
            log.debug("Looking up group %s for contact %s", root_id, contact_id)
            try:
                return consolidate(contacts, root_id)
            except ContactNotFoundError as exc:
                raise InvariantViolationError(
                    f"Contact {contact_id} belongs to group {root_id}, which has no live root"
                ) from exc

    def _apply(
        self,
        contacts: ContactRepository,
        request: IdentifyRequest,
        resolution: Resolution,
        now: datetime,
    ) -> tuple[Contact, MergeResult | None, Contact | None]:
        if resolution.kind is ResolutionKind.NO_MATCH:
            new_root = Contact.new_root(email=request.email, phone=request.phone, at=now)
            contacts.add(new_root)
            log.info("Created root contact %s", new_root.id)
            return new_root, None, new_root

        root = resolution.root
        if root is None:
            raise InvariantViolationError(f"{resolution.kind} resolution carries no group root")
        merge: MergeResult | None = None
        if resolution.losers:
            merge = merge_groups(contacts, root, resolution.losers, at=now)

        created: Contact | None = None
        if resolution.create_member:
            created = Contact.new_member(
                email=request.email,
                phone=request.phone,
                root=root,
                at=now,
            )
            contacts.add(created)
            log.info("Created member contact %s under root %s", created.id, root.id)
        return root, merge, created
