# routers/payments.py
"""
Payment log API.

POST /api/payments                  record an initiated (pending) payment
POST /api/payments/manual           owner records a completed cash/bank payment
POST /api/payments/{id}/confirm     gateway confirmation: pending -> completed (owner/admin)
POST /api/payments/{id}/fail        gateway failure: pending -> failed (owner/admin)
GET  /api/payments                  paginated listing

The STK push itself happens in the gateway; this API only records outcomes.
Any change that completes a payment refreshes the tenant's cached snapshot.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import (
     get_accessible_tenant_ids,
     require_manager_role,
     require_tenant_access,
     verify_token,
)
from models import PaymentCategory, PaymentStatus
from schemas.payment import (
     ManualPaymentCreate,
     PaymentConfirmRequest,
     PaymentCreate,
     PaymentListResponse,
     PaymentResponse,
     PaymentStatusEnum,
)
from services.errors import DuesUnavailableError, PaymentNotFoundError, PaymentStateError, TenantNotFoundError
from services.ledger_store import LedgerStore
from services.reconciler import compute_dues_and_reconcile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payments", tags=["payments"])


def _refresh_snapshot(store: LedgerStore, tenant_id: int) -> None:
     """Reconcile after a completed payment; dues outages do not fail the payment call."""
     try:
          compute_dues_and_reconcile(store, tenant_id, should_reconcile=True)
     except DuesUnavailableError:
          logger.warning("Snapshot refresh skipped for tenant %s: dues unavailable", tenant_id)


def _load_payment(store: LedgerStore, payment_id: int, db: Session, token: dict):
     try:
          payment = store.fetch_payment(payment_id)
     except PaymentNotFoundError as exc:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
     require_tenant_access(db, token, payment.tenant_id)
     return payment


@router.post(
     "",
     response_model=PaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record an initiated payment"
)
def create_payment(
     body: PaymentCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     """
     Record a payment the tenant has just initiated. It stays pending until
     the gateway confirms or fails it.
     """
     require_tenant_access(db, token, body.tenant_id)
     store = LedgerStore(db)
     try:
          payment = store.record_payment(
               tenant_id=body.tenant_id,
               category=PaymentCategory(body.category.value),
               amount=body.amount,
               phone_number=body.phone_number,
          )
     except TenantNotFoundError as exc:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
     except PaymentStateError as exc:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
     return PaymentResponse.model_validate(payment)


@router.post(
     "/manual",
     response_model=PaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a manual payment"
)
def create_manual_payment(
     body: ManualPaymentCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     """
     Owner or admin records a payment received outside the gateway. The
     payment is stored as completed and the tenant is reconciled.
     """
     require_manager_role(token)
     require_tenant_access(db, token, body.tenant_id)
     store = LedgerStore(db)
     try:
          payment = store.record_payment(
               tenant_id=body.tenant_id,
               category=PaymentCategory(body.category.value),
               amount=body.amount,
               status=PaymentStatus.COMPLETED,
               payment_date=body.payment_date,
               transaction_id=body.reference,
          )
     except TenantNotFoundError as exc:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
     except PaymentStateError as exc:
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

     _refresh_snapshot(store, payment.tenant_id)
     return PaymentResponse.model_validate(payment)


@router.post(
     "/{payment_id}/confirm",
     response_model=PaymentResponse,
     summary="Confirm a pending payment"
)
def confirm_payment(
     payment_id: int,
     body: PaymentConfirmRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     """
     Mark a pending payment completed with the gateway's transaction id.

     Gateway callbacks arrive with owner or admin credentials; a tenant cannot
     complete their own payment.

     Repeating the confirmation with the same transaction id returns the
     payment unchanged.
     """
     require_manager_role(token)
     store = LedgerStore(db)
     _load_payment(store, payment_id, db, token)
     try:
          payment, changed = store.complete_payment(
               payment_id,
               transaction_id=body.transaction_id,
               completed_at=body.completed_at,
          )
     except PaymentStateError as exc:
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

     if changed:
          _refresh_snapshot(store, payment.tenant_id)
     return PaymentResponse.model_validate(payment)


@router.post(
     "/{payment_id}/fail",
     response_model=PaymentResponse,
     summary="Mark a pending payment failed"
)
def fail_payment(
     payment_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     """Mark a pending payment failed. Owners and admins only, like confirmation."""
     require_manager_role(token)
     store = LedgerStore(db)
     _load_payment(store, payment_id, db, token)
     try:
          payment = store.fail_payment(payment_id)
     except PaymentStateError as exc:
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
     return PaymentResponse.model_validate(payment)


@router.get(
     "",
     response_model=PaymentListResponse,
     summary="List payments"
)
def list_payments(
     tenant_id: Optional[int] = Query(None, description="Filter by tenant ID"),
     status_filter: Optional[PaymentStatusEnum] = Query(None, alias="status", description="Filter by status"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     """
     Paginated payments visible to the caller, newest first.
     """
     allowed = get_accessible_tenant_ids(db, token)
     if tenant_id is not None:
          if allowed is not None and tenant_id not in allowed:
               return PaymentListResponse(payments=[], total=0, page=page, page_size=page_size)
          allowed = {tenant_id}

     payments, total = LedgerStore(db).list_payments(
          tenant_ids=allowed,
          status=PaymentStatus(status_filter.value) if status_filter else None,
          page=page,
          page_size=page_size,
     )
     return PaymentListResponse(
          payments=[PaymentResponse.model_validate(p) for p in payments],
          total=total,
          page=page,
          page_size=page_size,
     )
