# schemas/dues.py
"""
Pydantic schemas for dues, analytics and owner overview responses.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class DuesResponse(BaseModel):
     """Outstanding balances for a tenant."""
     rent_due: Decimal = Field(..., ge=0)
     utility_due: Decimal = Field(..., ge=0)
     deposit_due: Decimal = Field(..., ge=0)
     total_remaining: Decimal = Field(..., ge=0)

     model_config = ConfigDict(from_attributes=True)


class TenantDuesResponse(BaseModel):
     """Response for GET /api/tenants/{tenant_id}/dues."""
     tenant_id: int
     dues: DuesResponse
     months_stayed: int = Field(..., ge=0)
     payment_status: str
     reconciled: bool = Field(..., description="Whether the cached snapshot was refreshed by this call")

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "tenant_id": 1,
                    "dues": {
                         "rent_due": 10000.00,
                         "utility_due": 0,
                         "deposit_due": 0,
                         "total_remaining": 10000.00,
                    },
                    "months_stayed": 3,
                    "payment_status": "overdue",
                    "reconciled": True,
               }
          }
     )


class MonthlyBucketResponse(BaseModel):
     month: str
     rent: Decimal
     utility: Decimal
     deposit: Decimal
     total: Decimal
     paid: bool

     model_config = ConfigDict(from_attributes=True)


class BreakdownItem(BaseModel):
     name: str
     value: Decimal


class TenantAnalyticsResponse(BaseModel):
     """Response for GET /api/tenants/{tenant_id}/analytics."""
     tenant_id: int
     monthly_payments: List[MonthlyBucketResponse]
     payment_breakdown: List[BreakdownItem]


class OwnerChartResponse(BaseModel):
     monthly_payments: List[MonthlyBucketResponse]


class TenantDuesRowResponse(BaseModel):
     tenant_id: int
     tenant_name: str
     property_id: int
     payment_status: str = Field(..., description="Derived from the dues shown on this row")
     cached_status: str = Field(..., description="Label written by the last reconciliation")
     last_reconciled_at: Optional[datetime] = None
     dues: DuesResponse

     model_config = ConfigDict(from_attributes=True)


class OwnerOverviewResponse(BaseModel):
     """Owner dashboard: dues from cached tenant snapshots, collections from the payment log."""
     active_properties: int
     total_tenants: int
     occupied_units: int
     overdue_tenants: int
     total_overdue_amount: Decimal
     total_monthly_rent: Decimal = Field(..., description="Completed rent payments this calendar month")
     total_payments: Decimal = Field(..., description="All completed payments on the owner's properties")
     tenants: List[TenantDuesRowResponse]

     model_config = ConfigDict(from_attributes=True)


class BatchCheckResponse(BaseModel):
     checked: int
     overdue: int
     results: List[TenantDuesResponse]
