# services/owner_overview.py
"""
Owner dashboard aggregates.

Tenant dues on the overview come from each tenant's cached paid totals and
never write, so they are only as fresh as the last reconciliation. Owners
who need fresh numbers trigger a batch check-dues first. Collection totals
(this month's rent, all payments) read the payment log directly.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from models.payment import PaymentCategory, PaymentStatus
from services.analytics import MonthlyBucket, project_monthly
from services.dues_service import DuesSnapshot, compute_dues_from_snapshot
from services.lease_accrual import to_date
from services.ledger_store import LedgerStore
from services.reconciler import derive_payment_status


@dataclass(frozen=True)
class TenantDuesRow:
     """
     One tenant on the owner overview.

     payment_status is derived from dues as of the overview date, so a cached
     'up-to-date' from last month shows as 'overdue' once new rent accrues.
     cached_status is the label written by the tenant's last reconciliation.
     """
     tenant_id: int
     tenant_name: str
     property_id: int
     payment_status: str
     cached_status: str
     last_reconciled_at: Optional[datetime]
     dues: DuesSnapshot


@dataclass
class OwnerOverview:
     active_properties: int = 0
     total_tenants: int = 0
     occupied_units: int = 0
     overdue_tenants: int = 0
     total_overdue_amount: Decimal = Decimal("0")
     total_monthly_rent: Decimal = Decimal("0")
     total_payments: Decimal = Decimal("0")
     tenants: List[TenantDuesRow] = field(default_factory=list)


def _sum_completed(payments, as_of: date) -> Tuple[Decimal, Decimal]:
     """(completed rent in the month of as_of, every completed payment)."""
     monthly_rent = Decimal("0")
     total = Decimal("0")
     for payment in payments:
          if payment.status != PaymentStatus.COMPLETED:
               continue
          amount = Decimal(str(payment.amount))
          total += amount
          paid_on = to_date(payment.payment_date)
          if (
               payment.category == PaymentCategory.RENT
               and paid_on is not None
               and (paid_on.year, paid_on.month) == (as_of.year, as_of.month)
          ):
               monthly_rent += amount
     return monthly_rent, total


def owner_dues_overview(store: LedgerStore, owner_id: int, as_of: Optional[date] = None) -> OwnerOverview:
     """
     Summarise outstanding dues and collections across an owner's tenants.

     Only tenants with an active lease on as_of count toward the overdue
     figures. Collection totals read the payment log directly.
     """
     if as_of is None:
          as_of = date.today()

     property_ids = store.fetch_owner_property_ids(owner_id)
     tenants = store.fetch_tenants_for_properties(property_ids)
     monthly_rent, total_payments = _sum_completed(
          store.fetch_completed_payments_for_properties(property_ids), as_of
     )

     overview = OwnerOverview(
          active_properties=len(property_ids),
          total_tenants=len(tenants),
          total_monthly_rent=monthly_rent,
          total_payments=total_payments,
     )
     for tenant in tenants:
          if not tenant.is_lease_active(as_of):
               continue
          overview.occupied_units += 1
          cached = tenant.ledger_snapshot
          dues = compute_dues_from_snapshot(tenant, as_of)
          overview.tenants.append(TenantDuesRow(
               tenant_id=tenant.id,
               tenant_name=tenant.name,
               property_id=tenant.property_id,
               payment_status=derive_payment_status(dues),
               cached_status=cached.payment_status,
               last_reconciled_at=cached.updated_at,
               dues=dues,
          ))
          if dues.total_remaining > 0:
               overview.overdue_tenants += 1
               overview.total_overdue_amount += dues.total_remaining
     return overview


def owner_monthly_chart(
     store: LedgerStore,
     owner_id: int,
     months_back: int,
     as_of: Optional[date] = None,
) -> List[MonthlyBucket]:
     """Monthly buckets over every completed payment on the owner's properties."""
     property_ids = store.fetch_owner_property_ids(owner_id)
     payments = store.fetch_completed_payments_for_properties(property_ids)
     return project_monthly(payments, months_back, as_of)
