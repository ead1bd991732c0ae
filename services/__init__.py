# services/__init__.py
from .lease_accrual import months_accrued
from .dues_service import (
     DuesSnapshot,
     PaymentTotals,
     aggregate_payments,
     compute_dues,
     compute_dues_from_snapshot,
)
from .ledger_store import LedgerStore
from .reconciler import (
     DuesResult,
     derive_payment_status,
     reconcile,
     compute_dues_and_reconcile,
     reconcile_property_tenants,
)
from .analytics import MonthlyBucket, project_monthly, payment_breakdown
from .owner_overview import OwnerOverview, owner_dues_overview, owner_monthly_chart
from .errors import (
     LedgerError,
     TenantNotFoundError,
     PaymentNotFoundError,
     PaymentStateError,
     DuesUnavailableError,
)

__all__ = [
     "months_accrued",
     "DuesSnapshot",
     "PaymentTotals",
     "aggregate_payments",
     "compute_dues",
     "compute_dues_from_snapshot",
     "LedgerStore",
     "DuesResult",
     "derive_payment_status",
     "reconcile",
     "compute_dues_and_reconcile",
     "reconcile_property_tenants",
     "MonthlyBucket",
     "project_monthly",
     "payment_breakdown",
     "OwnerOverview",
     "owner_dues_overview",
     "owner_monthly_chart",
     "LedgerError",
     "TenantNotFoundError",
     "PaymentNotFoundError",
     "PaymentStateError",
     "DuesUnavailableError",
]
