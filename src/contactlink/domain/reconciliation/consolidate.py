"""Consolidator: build the deterministic view of one identity group."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .contracts import ConsolidatedContact
from .errors import ContactNotFoundError

if TYPE_CHECKING:
    from contactlink.domain.ports import ContactRepository


def consolidate(contacts: ContactRepository, root_id: int) -> ConsolidatedContact:
    """Collect emails, phones and member ids of the group rooted at ``root_id``.

    The root's values come first, then members' values by creation order.
    Repeated values keep their first position.
    """

    group = sorted(contacts.find_group(root_id), key=lambda contact: contact.sort_key)
    root = next((contact for contact in group if contact.id == root_id), None)
    if root is None:
        raise ContactNotFoundError(root_id)
    members = [contact for contact in group if contact.id != root_id]

    # dicts as insertion-ordered sets
    emails: dict[str, None] = {}
    phones: dict[str, None] = {}
    for contact in (root, *members):
        if contact.email is not None:
            emails.setdefault(contact.email)
        if contact.phone is not None:
            phones.setdefault(contact.phone)

    return ConsolidatedContact(
        primary_id=root_id,
        emails=tuple(emails),
        phones=tuple(phones),
        member_ids=tuple(member.id for member in members if member.id is not None),
    )
