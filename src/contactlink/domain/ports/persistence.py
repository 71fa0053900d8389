"""Ports for persisting identity records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from contactlink.domain.model import Contact

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ContactRepository(Repository[Contact], Protocol):
    """Persistence contract for contacts.

    Reads ignore soft-deleted records and return contacts ordered by
    ``created_at`` with ``id`` as tie-break. ``add`` must assign ``id``
    before returning.
    """

    def find_by_identifiers(self, *, email: str | None, phone: str | None) -> list[Contact]:
        """Contacts whose email equals ``email`` or whose phone equals ``phone``."""
        ...

    def get_many(self, ids: Iterable[int], *, for_update: bool = False) -> list[Contact]:
        """Contacts by id; ``for_update`` locks them against concurrent writers."""
        ...

    def find_group(self, root_id: int) -> list[Contact]:
        """The contact ``root_id`` plus every contact whose parent is ``root_id``."""
        ...

    def reparent_members(self, *, from_root_id: int, to_root_id: int, at: datetime) -> int:
        """Point every record whose parent is ``from_root_id`` at ``to_root_id``."""
        ...
