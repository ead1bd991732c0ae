# services/ledger_store.py
"""
Ledger store - the persistence seam used by the dues engine.

Wraps a SQLAlchemy session with the narrow set of operations the ledger
needs:

- tenant lookup and cached-snapshot write-back
- the append-only payment log (record, complete, fail, list)

Payments are never edited once completed or failed. Completing a payment is
idempotent for the same transaction reference.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from models import Payment, PaymentCategory, PaymentStatus, Property, Tenant
from services.dues_service import PaymentTotals
from services.errors import PaymentNotFoundError, PaymentStateError, TenantNotFoundError

logger = logging.getLogger(__name__)


class LedgerStore:
     """Data access for tenants and their payment log."""

     def __init__(self, db: Session):
          self.db = db

     # ------------------------------------------------------------------
     # Tenants
     # ------------------------------------------------------------------

     def fetch_tenant(self, tenant_id: int) -> Tenant:
          tenant = self.db.query(Tenant).filter(Tenant.id == tenant_id).first()
          if tenant is None:
               raise TenantNotFoundError(tenant_id)
          return tenant

     def fetch_tenants_for_properties(self, property_ids: Iterable[int]) -> List[Tenant]:
          ids = list(property_ids)
          if not ids:
               return []
          return (
               self.db.query(Tenant)
               .filter(Tenant.property_id.in_(ids))
               .order_by(Tenant.id)
               .all()
          )

     def fetch_owner_property_ids(self, owner_id: int) -> List[int]:
          rows = self.db.query(Property.id).filter(Property.owner_id == owner_id).all()
          return [row[0] for row in rows]

     def write_tenant_snapshot(
          self,
          tenant_id: int,
          totals: PaymentTotals,
          payment_status: str,
          updated_at: datetime,
     ) -> Tenant:
          """
          Overwrite the cached ledger fields of a tenant (last writer wins).
          """
          tenant = self.fetch_tenant(tenant_id)
          tenant.total_rent_paid = totals.rent_paid
          tenant.total_utility_paid = totals.utility_paid
          tenant.total_deposit_paid = totals.deposit_paid
          tenant.payment_status = payment_status
          tenant.updated_at = updated_at
          self.db.commit()
          return tenant

     def delete_tenant(self, tenant_id: int) -> None:
          """Delete a tenant together with its payments."""
          tenant = self.fetch_tenant(tenant_id)
          self.db.delete(tenant)
          self.db.commit()
          logger.info("Deleted tenant %s and its payments", tenant_id)

     # ------------------------------------------------------------------
     # Payment log
     # ------------------------------------------------------------------

     def fetch_payment(self, payment_id: int) -> Payment:
          payment = self.db.query(Payment).filter(Payment.id == payment_id).first()
          if payment is None:
               raise PaymentNotFoundError(payment_id)
          return payment

     def fetch_completed_payments(self, tenant_id: int) -> List[Payment]:
          return (
               self.db.query(Payment)
               .filter(
                    Payment.tenant_id == tenant_id,
                    Payment.status == PaymentStatus.COMPLETED,
               )
               .order_by(Payment.payment_date)
               .all()
          )

     def fetch_completed_payments_for_properties(self, property_ids: Iterable[int]) -> List[Payment]:
          ids = list(property_ids)
          if not ids:
               return []
          return (
               self.db.query(Payment)
               .filter(
                    Payment.property_id.in_(ids),
                    Payment.status == PaymentStatus.COMPLETED,
               )
               .order_by(Payment.payment_date)
               .all()
          )

     def list_payments(
          self,
          tenant_ids: Optional[Iterable[int]] = None,
          status: Optional[PaymentStatus] = None,
          page: int = 1,
          page_size: int = 50,
     ) -> Tuple[List[Payment], int]:
          """
          Paginated payment listing, newest first.

          tenant_ids=None means no tenant restriction.
          """
          query = self.db.query(Payment)
          if tenant_ids is not None:
               ids = list(tenant_ids)
               if not ids:
                    return [], 0
               query = query.filter(Payment.tenant_id.in_(ids))
          if status is not None:
               query = query.filter(Payment.status == status)

          total = query.count()
          offset = (page - 1) * page_size
          payments = (
               query.order_by(Payment.payment_date.desc(), Payment.id.desc())
               .offset(offset)
               .limit(page_size)
               .all()
          )
          return payments, total

     def _check_transaction_id(self, transaction_id: Optional[str], payment_id: Optional[int] = None) -> None:
          if not transaction_id:
               return
          existing = self.db.query(Payment).filter(Payment.transaction_id == transaction_id).first()
          if existing is not None and existing.id != payment_id:
               raise PaymentStateError(f"Transaction reference {transaction_id} is already recorded")

     def record_payment(
          self,
          tenant_id: int,
          category: PaymentCategory,
          amount: Decimal,
          status: PaymentStatus = PaymentStatus.PENDING,
          payment_date: Optional[datetime] = None,
          transaction_id: Optional[str] = None,
          phone_number: Optional[str] = None,
     ) -> Payment:
          """
          Append a payment to the log.

          New payments are PENDING unless recorded as already COMPLETED
          (manual entries). The property is taken from the tenant.

          Raises:
               TenantNotFoundError: tenant_id does not exist.
               PaymentStateError: non-positive amount, FAILED initial status
                    or a transaction reference that is already recorded.
          """
          if amount is None or Decimal(str(amount)) <= 0:
               raise PaymentStateError("Payment amount must be positive")
          if status == PaymentStatus.FAILED:
               raise PaymentStateError("Payments cannot be recorded as failed")

          tenant = self.fetch_tenant(tenant_id)
          self._check_transaction_id(transaction_id)

          payment = Payment(
               tenant_id=tenant.id,
               property_id=tenant.property_id,
               category=PaymentCategory(category),
               amount=Decimal(str(amount)),
               status=PaymentStatus(status),
               payment_date=payment_date or datetime.utcnow(),
               transaction_id=transaction_id,
               phone_number=phone_number,
          )
          self.db.add(payment)
          self.db.commit()
          self.db.refresh(payment)
          logger.info(
               "Recorded %s %s payment %s for tenant %s",
               payment.status.value, payment.category.value, payment.id, tenant.id,
          )
          return payment

     def complete_payment(
          self,
          payment_id: int,
          transaction_id: Optional[str] = None,
          completed_at: Optional[datetime] = None,
     ) -> Tuple[Payment, bool]:
          """
          Move a PENDING payment to COMPLETED.

          Returns (payment, changed). Confirming an already completed payment
          with the same (or no) transaction reference is a no-op and returns
          changed=False.

          Raises:
               PaymentNotFoundError: unknown payment id.
               PaymentStateError: payment failed, completed under a different
                    reference, or the reference belongs to another payment.
          """
          payment = self.fetch_payment(payment_id)

          if payment.status == PaymentStatus.COMPLETED:
               if transaction_id and payment.transaction_id and transaction_id != payment.transaction_id:
                    logger.warning(
                         "Payment %s already completed as %s, got %s",
                         payment.id, payment.transaction_id, transaction_id,
                    )
                    raise PaymentStateError(f"Payment {payment.id} is already completed")
               return payment, False

          if payment.status == PaymentStatus.FAILED:
               logger.warning("Rejected completion of failed payment %s", payment.id)
               raise PaymentStateError(f"Payment {payment.id} has failed and cannot be completed")

          self._check_transaction_id(transaction_id, payment.id)
          payment.mark_as_completed(transaction_id)
          if completed_at is not None:
               payment.payment_date = completed_at
          self.db.commit()
          self.db.refresh(payment)
          logger.info("Payment %s completed for tenant %s", payment.id, payment.tenant_id)
          return payment, True

     def fail_payment(self, payment_id: int) -> Payment:
          """
          Move a PENDING payment to FAILED.

          Raises:
               PaymentNotFoundError: unknown payment id.
               PaymentStateError: payment is already completed.
          """
          payment = self.fetch_payment(payment_id)
          if payment.status == PaymentStatus.FAILED:
               return payment
          if payment.status == PaymentStatus.COMPLETED:
               logger.warning("Rejected failure of completed payment %s", payment.id)
               raise PaymentStateError(f"Payment {payment.id} is already completed")

          payment.mark_as_failed()
          self.db.commit()
          self.db.refresh(payment)
          logger.info("Payment %s failed for tenant %s", payment.id, payment.tenant_id)
          return payment
