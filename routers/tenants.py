# routers/tenants.py
"""
Tenant ledger API routes.

Role-based access:
- Tenant: own record only; viewing own dues refreshes the cached snapshot
- Property owner: tenants on their properties; reads never write
- Admin: all tenants; reads never write
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from config import ANALYTICS_MONTHS_BACK
from database import get_session
from dependencies import (
     is_own_tenant_record,
     require_manager_role,
     require_tenant_access,
     verify_token,
)
from schemas.dues import (
     BreakdownItem,
     DuesResponse,
     MonthlyBucketResponse,
     TenantAnalyticsResponse,
     TenantDuesResponse,
)
from schemas.tenant import TenantResponse
from services.analytics import payment_breakdown, project_monthly
from services.errors import DuesUnavailableError, TenantNotFoundError
from services.ledger_store import LedgerStore
from services.reconciler import DuesResult, compute_dues_and_reconcile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tenants", tags=["tenants"])


def build_dues_response(result: DuesResult) -> TenantDuesResponse:
     dues = result.dues
     return TenantDuesResponse(
          tenant_id=result.tenant_id,
          dues=DuesResponse(
               rent_due=dues.rent_due,
               utility_due=dues.utility_due,
               deposit_due=dues.deposit_due,
               total_remaining=dues.total_remaining,
          ),
          months_stayed=result.months_stayed,
          payment_status=result.payment_status,
          reconciled=result.reconciled,
     )


def run_dues(store: LedgerStore, tenant_id: int, should_reconcile: bool) -> TenantDuesResponse:
     """Compute dues and map domain errors to HTTP errors."""
     try:
          result = compute_dues_and_reconcile(store, tenant_id, should_reconcile=should_reconcile)
     except TenantNotFoundError as exc:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
     except DuesUnavailableError:
          raise HTTPException(
               status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
               detail="Dues temporarily unavailable"
          )
     return build_dues_response(result)


@router.get(
     "/{tenant_id}",
     response_model=TenantResponse,
     summary="Get tenant profile"
)
def get_tenant(
     tenant_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Tenant profile including the cached ledger snapshot.

     The snapshot is as of the tenant's last reconciliation (updated_at).
     """
     require_tenant_access(db, token, tenant_id)
     try:
          tenant = LedgerStore(db).fetch_tenant(tenant_id)
     except TenantNotFoundError as exc:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
     return TenantResponse.model_validate(tenant)


@router.delete(
     "/{tenant_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete tenant"
)
def delete_tenant(
     tenant_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Delete a tenant. All of the tenant's payments are deleted with it.
     """
     require_manager_role(token)
     require_tenant_access(db, token, tenant_id)
     try:
          LedgerStore(db).delete_tenant(tenant_id)
     except TenantNotFoundError as exc:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
     return None


@router.get(
     "/{tenant_id}/dues",
     response_model=TenantDuesResponse,
     summary="Get tenant dues"
)
def get_tenant_dues(
     tenant_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Outstanding rent, deposit and total dues computed from the payment log.

     Only the tenant viewing their own dues refreshes the cached snapshot;
     owner and admin views are read-only.
     """
     require_tenant_access(db, token, tenant_id)
     should_reconcile = is_own_tenant_record(db, token, tenant_id)
     return run_dues(LedgerStore(db), tenant_id, should_reconcile)


@router.post(
     "/{tenant_id}/check-dues",
     response_model=TenantDuesResponse,
     summary="Recompute and store tenant dues"
)
def check_tenant_dues(
     tenant_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Explicit dues check by an owner or admin. Refreshes the cached snapshot.
     """
     require_manager_role(token)
     require_tenant_access(db, token, tenant_id)
     return run_dues(LedgerStore(db), tenant_id, should_reconcile=True)


@router.get(
     "/{tenant_id}/analytics",
     response_model=TenantAnalyticsResponse,
     summary="Monthly payment analytics"
)
def get_tenant_analytics(
     tenant_id: int,
     months_back: int = Query(ANALYTICS_MONTHS_BACK, ge=1, le=36, description="Number of months to include"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Completed payments bucketed per calendar month plus a category
     breakdown. For charts only.
     """
     require_tenant_access(db, token, tenant_id)
     store = LedgerStore(db)
     try:
          store.fetch_tenant(tenant_id)
     except TenantNotFoundError as exc:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))

     payments = store.fetch_completed_payments(tenant_id)
     monthly = project_monthly(payments, months_back)
     return TenantAnalyticsResponse(
          tenant_id=tenant_id,
          monthly_payments=[MonthlyBucketResponse.model_validate(bucket) for bucket in monthly],
          payment_breakdown=[BreakdownItem(**item) for item in payment_breakdown(payments)],
     )
