"""Matcher: fetch every stored contact sharing an identifier with the request."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contactlink.domain.model import Contact
    from contactlink.domain.ports import ContactRepository

log = logging.getLogger(__name__)


def match_contacts(
    contacts: ContactRepository,
    *,
    email: str | None,
    phone: str | None,
) -> list[Contact]:
    """Return live contacts whose email or phone equals the given values, oldest first.

    Calling this with neither identifier is a no-op that returns an empty list.
    """

    if email is None and phone is None:
        return []
    matches = sorted(
        contacts.find_by_identifiers(email=email, phone=phone),
        key=lambda contact: contact.sort_key,
    )
    log.debug("Matched %d contact(s) for email=%r phone=%r", len(matches), email, phone)
    return matches
