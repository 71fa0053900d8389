"""Identity records.

A contact is one sighting of a person through an email, a phone number or
both. Contacts form identity groups exactly one level deep: a root record and
the member records whose ``parent_id`` points at it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from contactlink.domain.model.enums import LinkRole


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class Contact:
    """A single identity record.

    ``role`` and ``parent_id`` always agree: roots have no parent, members
    always have one. Only :meth:`demote_to` and :meth:`reparent` change the
    linkage after creation.
    """

    email: str | None = None
    phone: str | None = None
    parent_id: int | None = None
    role: LinkRole = LinkRole.ROOT
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    # assigned by the store on insert
    id: int | None = None

    def __post_init__(self) -> None:
        if (self.role is LinkRole.ROOT) != (self.parent_id is None):
            raise ValueError("root contacts have no parent; members require one")
        if self.updated_at is None:
            self.updated_at = self.created_at

    @classmethod
    def new_root(cls, *, email: str | None, phone: str | None, at: datetime) -> Contact:
        return cls(email=email, phone=phone, role=LinkRole.ROOT, created_at=at)

    @classmethod
    def new_member(
        cls,
        *,
        email: str | None,
        phone: str | None,
        root: Contact,
        at: datetime,
    ) -> Contact:
        if not root.is_root or root.id is None:
            raise ValueError("members can only be attached to a stored root contact")
        return cls(
            email=email,
            phone=phone,
            parent_id=root.id,
            role=LinkRole.MEMBER,
            created_at=at,
        )

    @property
    def is_root(self) -> bool:
        return self.role is LinkRole.ROOT and self.parent_id is None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def root_id(self) -> int | None:
        """Id of the group root this record belongs to, ``None`` if inconsistent."""
        if self.role is LinkRole.ROOT:
            return self.id if self.parent_id is None else None
        return self.parent_id

    @property
    def sort_key(self) -> tuple[datetime, int]:
        # unsaved records sort last among equal timestamps
        return (self.created_at, self.id if self.id is not None else 2**63)

    def has_pair(self, email: str | None, phone: str | None) -> bool:
        return self.email == email and self.phone == phone

    def demote_to(self, root: Contact, *, at: datetime) -> None:
        """Turn this root into a member of ``root``."""
        if not self.is_root:
            raise ValueError(f"contact {self.id} is not a root")
        if not root.is_root or root.id is None:
            raise ValueError("contacts can only be demoted under a stored root")
        if root is self or root.id == self.id:
            raise ValueError("a contact cannot be demoted under itself")
        self.role = LinkRole.MEMBER
        self.parent_id = root.id
        self.updated_at = at

    def reparent(self, root_id: int, *, at: datetime) -> None:
        """Move this member to another root."""
        if self.role is not LinkRole.MEMBER:
            raise ValueError(f"contact {self.id} is not a member")
        if root_id == self.id:
            raise ValueError("a contact cannot be its own parent")
        self.parent_id = root_id
        self.updated_at = at
