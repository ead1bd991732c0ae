# routers/owners.py
"""
Property owner dashboard routes: dues overview, batch dues check, charts.

The overview reads cached tenant snapshots only. POST /check-dues refreshes
them for every tenant on the owner's properties.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from config import OWNER_CHART_MONTHS
from database import get_session
from dependencies import verify_token
from models import UserRole
from routers.tenants import build_dues_response
from schemas.dues import (
     BatchCheckResponse,
     DuesResponse,
     MonthlyBucketResponse,
     OwnerChartResponse,
     OwnerOverviewResponse,
     TenantDuesRowResponse,
)
from services.errors import DuesUnavailableError
from services.ledger_store import LedgerStore
from services.owner_overview import owner_dues_overview, owner_monthly_chart
from services.reconciler import reconcile_property_tenants

router = APIRouter(prefix="/api/owners", tags=["owners"])


def _require_owner(token: dict) -> int:
     if token.get("role") != UserRole.PROPERTY_OWNER:
          raise HTTPException(
               status_code=status.HTTP_403_FORBIDDEN,
               detail="Only property owners can view this dashboard"
          )
     return token["id"]


@router.get(
     "/me/overview",
     response_model=OwnerOverviewResponse,
     summary="Owner dues overview"
)
def get_owner_overview(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Overdue tenant count and total overdue amount across the owner's
     tenants with an active lease, from cached snapshots.
     """
     owner_id = _require_owner(token)
     overview = owner_dues_overview(LedgerStore(db), owner_id)
     return OwnerOverviewResponse(
          active_properties=overview.active_properties,
          total_tenants=overview.total_tenants,
          occupied_units=overview.occupied_units,
          overdue_tenants=overview.overdue_tenants,
          total_overdue_amount=overview.total_overdue_amount,
          total_monthly_rent=overview.total_monthly_rent,
          total_payments=overview.total_payments,
          tenants=[
               TenantDuesRowResponse(
                    tenant_id=row.tenant_id,
                    tenant_name=row.tenant_name,
                    property_id=row.property_id,
                    payment_status=row.payment_status,
                    cached_status=row.cached_status,
                    last_reconciled_at=row.last_reconciled_at,
                    dues=DuesResponse(
                         rent_due=row.dues.rent_due,
                         utility_due=row.dues.utility_due,
                         deposit_due=row.dues.deposit_due,
                         total_remaining=row.dues.total_remaining,
                    ),
               )
               for row in overview.tenants
          ],
     )


@router.post(
     "/me/check-dues",
     response_model=BatchCheckResponse,
     summary="Recompute dues for all owner tenants"
)
def check_owner_dues(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Reconcile every tenant on the owner's properties against the payment log.
     """
     owner_id = _require_owner(token)
     store = LedgerStore(db)
     try:
          results = reconcile_property_tenants(store, store.fetch_owner_property_ids(owner_id))
     except DuesUnavailableError:
          raise HTTPException(
               status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
               detail="Dues temporarily unavailable"
          )
     responses = [build_dues_response(result) for result in results]
     return BatchCheckResponse(
          checked=len(responses),
          overdue=sum(1 for r in responses if r.dues.total_remaining > 0),
          results=responses,
     )


@router.get(
     "/me/charts",
     response_model=OwnerChartResponse,
     summary="Owner monthly payment chart"
)
def get_owner_charts(
     months_back: int = Query(OWNER_CHART_MONTHS, ge=1, le=36, description="Number of months to include"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """Rent, utility and deposit totals per month across the owner's properties."""
     owner_id = _require_owner(token)
     monthly = owner_monthly_chart(LedgerStore(db), owner_id, months_back)
     return OwnerChartResponse(
          monthly_payments=[MonthlyBucketResponse.model_validate(bucket) for bucket in monthly],
     )
