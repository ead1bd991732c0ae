# schemas/payment.py
"""
Pydantic schemas for the payment API.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class PaymentCategoryEnum(str, Enum):
     """Payment category options."""
     RENT = "Rent"
     UTILITY = "Utility"
     DEPOSIT = "Deposit"


class PaymentStatusEnum(str, Enum):
     """Payment status options."""
     PENDING = "pending"
     COMPLETED = "completed"
     FAILED = "failed"


class PaymentCreate(BaseModel):
     """Request body for POST /api/payments (initiated, pending gateway confirmation)."""
     tenant_id: int = Field(..., gt=0, description="Paying tenant")
     category: PaymentCategoryEnum = Field(..., description="Rent, Utility or Deposit")
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Amount paid")
     phone_number: Optional[str] = Field(None, max_length=50, description="Mobile-money number")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "tenant_id": 1,
                    "category": "Rent",
                    "amount": 10000.00,
                    "phone_number": "254712345678",
               }
          }
     )


class ManualPaymentCreate(BaseModel):
     """Request body for POST /api/payments/manual (owner-recorded, already completed)."""
     tenant_id: int = Field(..., gt=0)
     category: PaymentCategoryEnum
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     reference: str = Field(..., min_length=1, max_length=100, description="Receipt or transaction reference")
     payment_date: Optional[datetime] = Field(None, description="Defaults to now")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "tenant_id": 1,
                    "category": "Deposit",
                    "amount": 5000.00,
                    "reference": "CASH-2024-0001",
                    "payment_date": "2024-03-05T10:00:00",
               }
          }
     )


class PaymentConfirmRequest(BaseModel):
     """Request body for POST /api/payments/{payment_id}/confirm."""
     transaction_id: str = Field(
          ...,
          min_length=1,
          max_length=100,
          description="Gateway transaction reference",
     )
     completed_at: Optional[datetime] = None


class PaymentResponse(BaseModel):
     id: int
     tenant_id: int
     property_id: int
     category: PaymentCategoryEnum
     amount: Decimal
     status: PaymentStatusEnum
     payment_date: datetime
     transaction_id: Optional[str] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class PaymentListResponse(BaseModel):
     """Schema for paginated payment list response."""
     payments: List[PaymentResponse]
     total: int
     page: int = 1
     page_size: int = 50
