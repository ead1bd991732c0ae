# models/tenant.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


PAYMENT_STATUS_UP_TO_DATE = "up-to-date"
PAYMENT_STATUS_OVERDUE = "overdue"
PAYMENT_STATUS_UNKNOWN = "unknown"


@dataclass(frozen=True)
class TenantLedgerSnapshot:
     """
     Cached ledger totals stored on a tenant row.

     This is a cache of what the payment log said at updated_at. It is only
     guaranteed fresh right after a reconciliation and must never be treated
     as the source of truth.
     """
     total_rent_paid: Decimal
     total_utility_paid: Decimal
     total_deposit_paid: Decimal
     payment_status: str
     updated_at: Optional[datetime]

     @property
     def total_paid(self) -> Decimal:
          return self.total_rent_paid + self.total_utility_paid + self.total_deposit_paid


class Tenant(TimestampMixin, Base):
     """
     Tenant model - one leased occupancy of a unit on a property.
     """
     __tablename__ = "tenants"
     __table_args__ = (
          # One tenant record per login; tenants without a login are unconstrained
          Index(
               "uq_tenants_user_id", "user_id", unique=True,
               mssql_where=text("user_id IS NOT NULL"),
               sqlite_where=text("user_id IS NOT NULL"),
          ),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)

     # Personal info
     name = Column(String(200), nullable=False)
     email = Column(String(255), nullable=True)
     phone = Column(String(50), nullable=True)
     house_number = Column(String(50), nullable=True)

     # Lease terms
     lease_start_date = Column(Date, nullable=True)  # NULL = lease not started
     lease_end_date = Column(Date, nullable=True)
     monthly_rent = Column(Numeric(12, 2), nullable=True)
     deposit_amount = Column(Numeric(12, 2), nullable=True)

     # Cached ledger snapshot (written only by the reconciler)
     total_rent_paid = Column(Numeric(12, 2), default=0, nullable=False)
     total_utility_paid = Column(Numeric(12, 2), default=0, nullable=False)
     total_deposit_paid = Column(Numeric(12, 2), default=0, nullable=False)
     payment_status = Column(String(20), default=PAYMENT_STATUS_UNKNOWN, nullable=False)
     updated_at = Column(DateTime, nullable=True)

     # Relationships
     rental_property = relationship("Property", back_populates="tenants")
     payments = relationship(
          "Payment",
          back_populates="tenant",
          cascade="all, delete-orphan",
     )

     def __repr__(self):
          return f"<Tenant(id={self.id}, name='{self.name}', status='{self.payment_status}')>"

     @property
     def ledger_snapshot(self) -> TenantLedgerSnapshot:
          """The cached totals as last written by reconciliation."""
          return TenantLedgerSnapshot(
               total_rent_paid=Decimal(self.total_rent_paid or 0),
               total_utility_paid=Decimal(self.total_utility_paid or 0),
               total_deposit_paid=Decimal(self.total_deposit_paid or 0),
               payment_status=self.payment_status or PAYMENT_STATUS_UNKNOWN,
               updated_at=self.updated_at,
          )

     def is_lease_active(self, on_date) -> bool:
          """True if both lease dates are set and on_date falls inside them."""
          if self.lease_start_date is None or self.lease_end_date is None:
               return False
          return self.lease_start_date <= on_date <= self.lease_end_date
