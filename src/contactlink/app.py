"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from contactlink.adapters.sqlalchemy.migrations import upgrade_head
from contactlink.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContactUnitOfWork,
    is_started,
    startup,
)
from contactlink.config import get_reconciliation_config
from contactlink.domain.reconciliation import ContactReconciler, ReconciliationConflictError

if TYPE_CHECKING:
    from contactlink.config import ReconciliationConfig
    from contactlink.domain.reconciliation import (
        ConsolidatedContact,
        IdentifyRequest,
        ReconciliationResult,
        UnitOfWorkFactory,
    )


log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyContactUnitOfWork


def identify_contact(
    request: IdentifyRequest,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
) -> ReconciliationResult:
    """Reconcile one identify request, retrying when a concurrent request wins a race."""

    reconciler = ContactReconciler(
        unit_of_work=unit_of_work_factory or _default_unit_of_work_factory()
    )
    max_attempts = (config or get_reconciliation_config()).max_attempts

    attempt = 1
    while True:
        try:
            result = reconciler.identify(request)
        except ReconciliationConflictError:
            if attempt >= max_attempts:
                log.exception("Giving up after %d conflicting attempt(s)", attempt)
                raise
            log.warning(
                "Reconciliation conflict on attempt %d/%d; retrying", attempt, max_attempts
            )
            attempt += 1
            continue

        if result.anomaly is not None:
            log.warning("Reconciled with data integrity anomaly: %s", result.anomaly.message)
        log.info(
            "Identified contact group %s (%s, created=%s)",
            result.contact.primary_id,
            result.kind,
            result.created.id if result.created is not None else None,
        )
        return result


def lookup_contact(
    contact_id: int,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ConsolidatedContact:
    """Return the consolidated identity group containing ``contact_id``."""

    reconciler = ContactReconciler(
        unit_of_work=unit_of_work_factory or _default_unit_of_work_factory()
    )
    return reconciler.lookup(contact_id)


def migrate_database(*, database_uri: str | None = None) -> None:
    """Upgrade the configured database to the latest schema revision."""

    log.info("Upgrading database schema")
    upgrade_head(database_uri=database_uri)
