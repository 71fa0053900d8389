"""Merge executor: fold losing group roots into the surviving root.

All linkage changes made during a merge go through this module, so the
one-level-deep group shape is checked in one place. Atomicity comes from the
caller's unit of work; nothing here commits.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .contracts import MergeResult
from .errors import InvariantViolationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from contactlink.domain.model import Contact
    from contactlink.domain.ports import ContactRepository

log = logging.getLogger(__name__)


def merge_groups(
    contacts: ContactRepository,
    survivor: Contact,
    losers: Sequence[Contact],
    *,
    at: datetime,
) -> MergeResult:
    """Demote every root in ``losers`` under ``survivor`` and re-parent their members.

    The whole batch is validated before the first write.
    """

    survivor_id, loser_ids = _validate(survivor, losers)
    demoted: list[int] = []
    reparented = 0
    for loser, loser_id in zip(losers, loser_ids, strict=True):
        loser.demote_to(survivor, at=at)
        moved = contacts.reparent_members(
            from_root_id=loser_id,
            to_root_id=survivor_id,
            at=at,
        )
        demoted.append(loser_id)
        reparented += moved
        log.info(
            "Merged group %s into %s (%d member(s) re-parented)",
            loser_id,
            survivor_id,
            moved,
        )
    return MergeResult(
        survivor_id=survivor_id,
        demoted_ids=tuple(demoted),
        reparented=reparented,
    )


def _validate(survivor: Contact, losers: Sequence[Contact]) -> tuple[int, list[int]]:
    if survivor.id is None or not survivor.is_root:
        raise InvariantViolationError(f"Merge survivor {survivor.id} is not a stored root")
    if not losers:
        raise InvariantViolationError("Merge requires at least one losing root")
    seen: list[int] = []
    for loser in losers:
        if loser.id is None or not loser.is_root:
            raise InvariantViolationError(f"Merge loser {loser.id} is not a stored root")
        if loser.id == survivor.id:
            raise InvariantViolationError(f"Contact {loser.id} cannot be merged into itself")
        if loser.id in seen:
            raise InvariantViolationError(f"Contact {loser.id} listed twice in one merge")
        if loser.sort_key < survivor.sort_key:
            raise InvariantViolationError(
                f"Merge survivor {survivor.id} is newer than losing root {loser.id}"
            )
        seen.append(loser.id)
    return survivor.id, seen
