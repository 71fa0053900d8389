"""SQLAlchemy mapping metadata for the contactlink domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers
from sqlalchemy.orm.exc import UnmappedClassError

from contactlink.domain.model import Contact, LinkRole

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

contact_table = Table(
    "contact",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String, nullable=True),
    Column("phone", String, nullable=True),
    Column("parent_id", Integer, ForeignKey("contact.id"), nullable=True),
    Column(
        "role",
        Enum(
            LinkRole,
            native_enum=False,
            length=16,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
    ),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column("deleted_at", UTCDateTime(), nullable=True),
    CheckConstraint(
        "(role = 'root' AND parent_id IS NULL) OR (role = 'member' AND parent_id IS NOT NULL)",
        name="role_matches_parent",
    ),
    CheckConstraint(
        "email IS NOT NULL OR phone IS NOT NULL",
        name="has_identifier",
    ),
    Index("ix_contact_email", "email"),
    Index("ix_contact_phone", "phone"),
    Index("ix_contact_parent_id", "parent_id"),
    # ids are never reused, even after the highest row is removed
    sqlite_autoincrement=True,
)


def start_mappers() -> orm.registry:
    """Map domain classes imperatively; safe to call more than once."""

    try:
        orm.class_mapper(Contact)
    except UnmappedClassError:
        pass
    else:
        return mapper_registry

    log.debug("Configuring SQLAlchemy mappers")
    mapper_registry.map_imperatively(Contact, contact_table)
    configure_mappers()
    return mapper_registry
