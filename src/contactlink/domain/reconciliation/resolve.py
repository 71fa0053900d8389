"""Identity resolution.

Responsibilities of this stage:
- derive the group roots implicated by the matched contacts
- load and lock those roots
- pick the surviving root when several groups must be merged
- decide whether the request introduces a new email/phone pairing

Out of scope for this stage:
- any mutation (see ``merge`` and ``engine``)
- commit/flush
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .contracts import IntegrityAnomaly, Resolution, ResolutionKind
from .errors import InvariantViolationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contactlink.domain.model import Contact
    from contactlink.domain.ports import ContactRepository

    from .contracts import IdentifyRequest

log = logging.getLogger(__name__)


def resolve_identity(
    contacts: ContactRepository,
    request: IdentifyRequest,
    matches: Sequence[Contact],
) -> Resolution:
    """Classify ``matches`` as no match, one group, several groups, or an anomaly.

    ``matches`` must be ordered oldest first, as returned by the matcher.
    """

    if not matches:
        return Resolution(kind=ResolutionKind.NO_MATCH)

    root_ids = implicated_root_ids(matches)
    if not root_ids:
        return _anomaly_resolution(matches)

    roots = _load_roots(contacts, root_ids, matches)
    survivor, *losers = sorted(roots, key=lambda contact: contact.sort_key)
    create_member = request.is_complete and not any(
        match.has_pair(request.email, request.phone) for match in matches
    )
    return Resolution(
        kind=ResolutionKind.MERGE if losers else ResolutionKind.SINGLE,
        root=survivor,
        losers=tuple(losers),
        create_member=create_member,
    )


def implicated_root_ids(matches: Sequence[Contact]) -> list[int]:
    """Distinct group root ids referenced by ``matches``, in first-seen order."""

    seen: dict[int, None] = {}
    for match in matches:
        root_id = match.root_id
        if root_id is not None:
            seen.setdefault(root_id)
    return list(seen)


def _load_roots(
    contacts: ContactRepository,
    root_ids: list[int],
    matches: Sequence[Contact],
) -> list[Contact]:
    loaded = {contact.id: contact for contact in contacts.get_many(root_ids, for_update=True)}
    roots: list[Contact] = []
    for root_id in root_ids:
        root = loaded.get(root_id)
        if root is None:
            raise InvariantViolationError(
                f"Contact {root_id} is referenced as a group root but does not exist"
            )
        if not root.is_root:
            # races surface as backend serialization failures, so this is stored data
            members = [match.id for match in matches if match.root_id == root_id]
            raise InvariantViolationError(
                f"Contact(s) {members} point at parent {root_id}, which is not a group root"
            )
        roots.append(root)
    return roots


def _anomaly_resolution(matches: Sequence[Contact]) -> Resolution:
    fallback = matches[0]
    if fallback.id is None:
        raise InvariantViolationError("Matched contacts must be persisted")
    contact_ids = tuple(match.id for match in matches if match.id is not None)
    message = (
        f"No group root derivable from matched contacts {list(contact_ids)}; "
        f"using oldest match {fallback.id} as root for this request"
    )
    log.error("Data integrity anomaly: %s", message)
    return Resolution(
        kind=ResolutionKind.ANOMALY,
        root=fallback,
        anomaly=IntegrityAnomaly(
            contact_ids=contact_ids,
            fallback_root_id=fallback.id,
            message=message,
        ),
    )
