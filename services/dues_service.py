# services/dues_service.py
"""
Dues aggregation - what a tenant has paid and what remains outstanding.

Liability comes from the lease (monthly rent times months accrued, plus the
deposit). Payments come from the completed entries of the payment log. All
due amounts are clamped at zero.

Utility liability is not modelled: utility_due is always 0, yet utility
payments still reduce total_remaining because every completed payment is
credited toward the aggregate balance.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from models.payment import PaymentCategory, PaymentStatus
from services.lease_accrual import DateLike, months_accrued

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _amount(value) -> Decimal:
     """Coalesce a nullable numeric column to Decimal."""
     if value is None:
          return ZERO
     if isinstance(value, Decimal):
          return value
     return Decimal(str(value))


@dataclass(frozen=True)
class PaymentTotals:
     """Completed payments summed per category."""
     rent_paid: Decimal = ZERO
     utility_paid: Decimal = ZERO
     deposit_paid: Decimal = ZERO

     @property
     def total_paid(self) -> Decimal:
          return self.rent_paid + self.utility_paid + self.deposit_paid


@dataclass(frozen=True)
class DuesSnapshot:
     """
     Outstanding balances for one tenant as of a given day.

     Transient: returned to callers and partially persisted onto the tenant
     by the reconciler, never stored as its own record.
     """
     rent_due: Decimal
     utility_due: Decimal
     deposit_due: Decimal
     total_remaining: Decimal
     months_stayed: int
     rent_paid: Decimal = ZERO
     utility_paid: Decimal = ZERO
     deposit_paid: Decimal = ZERO

     @property
     def totals(self) -> PaymentTotals:
          return PaymentTotals(
               rent_paid=self.rent_paid,
               utility_paid=self.utility_paid,
               deposit_paid=self.deposit_paid,
          )


def aggregate_payments(payments: Iterable, tenant_id) -> PaymentTotals:
     """
     Sum completed payments for tenant_id by category.

     Pending and failed payments, and payments of other tenants, are ignored.
     """
     rent = utility = deposit = ZERO
     for payment in payments:
          if payment.tenant_id != tenant_id:
               continue
          if payment.status != PaymentStatus.COMPLETED:
               continue
          amount = _amount(payment.amount)
          if payment.category == PaymentCategory.RENT:
               rent += amount
          elif payment.category == PaymentCategory.UTILITY:
               utility += amount
          elif payment.category == PaymentCategory.DEPOSIT:
               deposit += amount
     return PaymentTotals(rent_paid=rent, utility_paid=utility, deposit_paid=deposit)


def dues_from_totals(tenant, totals: PaymentTotals, as_of: DateLike) -> DuesSnapshot:
     """Apply the lease liability of tenant to already-summed payment totals."""
     months_stayed = months_accrued(tenant.lease_start_date, as_of)
     rent_liability = _amount(tenant.monthly_rent) * months_stayed
     deposit_liability = _amount(tenant.deposit_amount)

     rent_due = max(ZERO, rent_liability - totals.rent_paid)
     deposit_due = max(ZERO, deposit_liability - totals.deposit_paid)
     total_remaining = max(ZERO, (rent_liability + deposit_liability) - totals.total_paid)

     return DuesSnapshot(
          rent_due=rent_due,
          utility_due=ZERO,
          deposit_due=deposit_due,
          total_remaining=total_remaining,
          months_stayed=months_stayed,
          rent_paid=totals.rent_paid,
          utility_paid=totals.utility_paid,
          deposit_paid=totals.deposit_paid,
     )


def compute_dues(tenant, payments: Iterable, as_of: Optional[DateLike] = None) -> DuesSnapshot:
     """
     Compute a tenant's dues from the payment log.

     Read-only: the tenant is not modified. Missing monthly_rent or
     deposit_amount count as 0.
     """
     if as_of is None:
          as_of = date.today()
     totals = aggregate_payments(payments, tenant.id)
     snapshot = dues_from_totals(tenant, totals, as_of)
     logger.debug(
          "Computed dues for tenant %s: months=%d paid=%s remaining=%s",
          tenant.id, snapshot.months_stayed, totals.total_paid, snapshot.total_remaining,
     )
     return snapshot


def compute_dues_from_snapshot(tenant, as_of: Optional[DateLike] = None) -> DuesSnapshot:
     """
     Compute dues from the tenant's cached paid totals instead of the log.

     For secondary views that must not reconcile. The result is only as
     fresh as the tenant's last reconciliation.
     """
     if as_of is None:
          as_of = date.today()
     cached = tenant.ledger_snapshot
     totals = PaymentTotals(
          rent_paid=cached.total_rent_paid,
          utility_paid=cached.total_utility_paid,
          deposit_paid=cached.total_deposit_paid,
     )
     return dues_from_totals(tenant, totals, as_of)
