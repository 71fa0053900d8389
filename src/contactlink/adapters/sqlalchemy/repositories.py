"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import or_, select, update

from contactlink.adapters.sqlalchemy.mappings import contact_table
from contactlink.domain.model import Contact

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.orm import Session


class SqlAlchemyContactRepository:
    """Contact store over one session.

    Reads used to make merge decisions take row locks (``FOR UPDATE``) on
    backends that support them; SQLite ignores the clause and relies on the
    database-wide write lock taken when the transaction begins.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Contact) -> None:
        self.session.add(entity)
        # ids are needed right away to link members and build responses
        self.session.flush()

    def find_by_identifiers(self, *, email: str | None, phone: str | None) -> list[Contact]:
        criteria: list[ColumnElement[bool]] = []
        if email is not None:
            criteria.append(contact_table.c.email == email)
        if phone is not None:
            criteria.append(contact_table.c.phone == phone)
        if not criteria:
            return []
        stmt = self._live().where(or_(*criteria)).with_for_update()
        return list(self.session.execute(stmt).scalars())

    def get_many(self, ids: Iterable[int], *, for_update: bool = False) -> list[Contact]:
        wanted = sorted(set(ids))
        if not wanted:
            return []
        stmt = self._live().where(contact_table.c.id.in_(wanted))
        if for_update:
            # lock in id order so overlapping requests queue instead of deadlocking
            stmt = stmt.order_by(None).order_by(contact_table.c.id).with_for_update()
        return list(self.session.execute(stmt).scalars())

    def find_group(self, root_id: int) -> list[Contact]:
        stmt = self._live().where(
            or_(contact_table.c.id == root_id, contact_table.c.parent_id == root_id)
        )
        return list(self.session.execute(stmt).scalars())

    def reparent_members(self, *, from_root_id: int, to_root_id: int, at: datetime) -> int:
        self.session.flush()
        moved_ids = list(
            self.session.execute(
                select(contact_table.c.id)
                .where(contact_table.c.parent_id == from_root_id)
                .with_for_update()
            ).scalars()
        )
        if not moved_ids:
            return 0
        stmt = (
            update(Contact)
            .where(contact_table.c.id.in_(moved_ids))
            .values(parent_id=to_root_id, updated_at=at)
            .execution_options(synchronize_session="evaluate")
        )
        self.session.execute(stmt)
        return len(moved_ids)

    @staticmethod
    def _live() -> Select[tuple[Contact]]:
        return (
            select(Contact)
            .where(contact_table.c.deleted_at.is_(None))
            .order_by(contact_table.c.created_at, contact_table.c.id)
        )


if TYPE_CHECKING:
    from contactlink.domain.ports.persistence import ContactRepository

    _session_stub = cast("Session", object())
    _repo_check: ContactRepository = SqlAlchemyContactRepository(_session_stub)
