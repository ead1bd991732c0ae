# services/reconciler.py
"""
Status reconciliation - keeps a tenant's cached ledger fields in step with
the payment log.

compute_dues_and_reconcile() is the one entry point callers use for dues:

1. Fetch the tenant and the tenant's completed payments
2. Compute dues (pure)
3. If the caller may reconcile, overwrite the cached totals and status

The write is last-writer-wins with no concurrency check. Two reconciliations
of the same tenant read the same log and produce the same values, so a race
only causes a redundant write. A failed write does not fail the request: the
freshly computed dues are still returned and the cache catches up on the
next successful call.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from models.tenant import PAYMENT_STATUS_OVERDUE, PAYMENT_STATUS_UP_TO_DATE
from services.dues_service import DuesSnapshot, compute_dues
from services.errors import DuesUnavailableError
from services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DuesResult:
     """What a dues request returns to the API layer."""
     tenant_id: int
     dues: DuesSnapshot
     payment_status: str
     reconciled: bool

     @property
     def months_stayed(self) -> int:
          return self.dues.months_stayed


def derive_payment_status(snapshot: DuesSnapshot) -> str:
     """'overdue' while anything remains outstanding, else 'up-to-date'."""
     if snapshot.total_remaining > 0:
          return PAYMENT_STATUS_OVERDUE
     return PAYMENT_STATUS_UP_TO_DATE


def reconcile(store: LedgerStore, tenant, snapshot: DuesSnapshot, now: Optional[datetime] = None) -> str:
     """
     Persist paid totals and derived status onto the tenant.

     Returns the status written. Store errors propagate to the caller.
     """
     if now is None:
          now = datetime.utcnow()
     status = derive_payment_status(snapshot)
     store.write_tenant_snapshot(tenant.id, snapshot.totals, status, now)
     logger.info(
          "Reconciled tenant %s: status=%s remaining=%s",
          tenant.id, status, snapshot.total_remaining,
     )
     return status


def compute_dues_and_reconcile(
     store: LedgerStore,
     tenant_id: int,
     as_of: Optional[date] = None,
     should_reconcile: bool = True,
) -> DuesResult:
     """
     Compute a tenant's dues from the payment log and optionally refresh the
     cached snapshot.

     should_reconcile is decided by the caller: True when the tenant views
     their own dues or an owner explicitly checks them, False for read-only
     secondary views.

     Raises:
          TenantNotFoundError: tenant_id does not exist.
          DuesUnavailableError: the tenant or the payment log could not be read.
     """
     if as_of is None:
          as_of = date.today()

     try:
          tenant = store.fetch_tenant(tenant_id)
          payments = store.fetch_completed_payments(tenant_id)
     except SQLAlchemyError as exc:
          logger.error("Ledger store unavailable for tenant %s: %s", tenant_id, exc)
          raise DuesUnavailableError("Dues temporarily unavailable") from exc

     snapshot = compute_dues(tenant, payments, as_of)
     status = derive_payment_status(snapshot)

     if not should_reconcile:
          return DuesResult(tenant_id=tenant_id, dues=snapshot, payment_status=status, reconciled=False)

     try:
          reconcile(store, tenant, snapshot)
     except SQLAlchemyError:
          # Rollback expires the tenant; nothing below may touch it
          store.db.rollback()
          logger.exception("Snapshot write failed for tenant %s; returning computed dues", tenant_id)
          return DuesResult(tenant_id=tenant_id, dues=snapshot, payment_status=status, reconciled=False)

     return DuesResult(tenant_id=tenant_id, dues=snapshot, payment_status=status, reconciled=True)


def reconcile_property_tenants(
     store: LedgerStore,
     property_ids: Iterable[int],
     as_of: Optional[date] = None,
) -> List[DuesResult]:
     """
     Reconcile every tenant on the given properties.

     Each tenant is independent; a failed write for one tenant does not stop
     the others.
     """
     property_ids = list(property_ids)
     try:
          tenant_ids = [tenant.id for tenant in store.fetch_tenants_for_properties(property_ids)]
     except SQLAlchemyError as exc:
          logger.error("Ledger store unavailable for properties %s: %s", property_ids, exc)
          raise DuesUnavailableError("Dues temporarily unavailable") from exc

     # Ids up front: a rolled-back write expires every loaded tenant
     results = [compute_dues_and_reconcile(store, tenant_id, as_of=as_of) for tenant_id in tenant_ids]
     logger.info("Batch reconciliation finished for %d tenants", len(results))
     return results
