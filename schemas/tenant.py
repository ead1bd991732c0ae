# schemas/tenant.py
"""
Pydantic schemas for tenant responses.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class TenantResponse(BaseModel):
     """
     Tenant profile with the cached ledger snapshot.

     The total_*_paid and payment_status fields are a cache as of updated_at;
     a tenant never reconciled reports 'unknown'.
     """
     id: int
     name: str
     email: Optional[str] = None
     phone: Optional[str] = None
     property_id: int
     house_number: Optional[str] = None
     lease_start_date: Optional[date] = None
     lease_end_date: Optional[date] = None
     monthly_rent: Optional[Decimal] = None
     deposit_amount: Optional[Decimal] = None
     total_rent_paid: Decimal = Field(default=Decimal("0"))
     total_utility_paid: Decimal = Field(default=Decimal("0"))
     total_deposit_paid: Decimal = Field(default=Decimal("0"))
     payment_status: str = "unknown"
     updated_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
