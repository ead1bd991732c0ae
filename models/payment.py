# models/payment.py
"""
Payment model - one financial event in the append-only payment log.

Payments are created PENDING when initiated (or COMPLETED directly for manual
records), move once to COMPLETED or FAILED, and are immutable afterwards.
Only COMPLETED payments count toward dues and analytics.
"""
import enum

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, Index, func, text
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class PaymentCategory(str, enum.Enum):
     """What a payment is for."""
     RENT = "Rent"
     UTILITY = "Utility"
     DEPOSIT = "Deposit"


class PaymentStatus(str, enum.Enum):
     """Lifecycle state of a payment."""
     PENDING = "pending"
     COMPLETED = "completed"
     FAILED = "failed"


def _enum_values(enum_cls):
     return [member.value for member in enum_cls]


class Payment(TimestampMixin, Base):
     """
     Payment record. Amounts are positive; the category decides which
     ledger bucket the amount is credited to.
     """
     __tablename__ = "payments"
     __table_args__ = (
          # Pending payments have no reference yet
          Index(
               "uq_payments_transaction_id", "transaction_id", unique=True,
               mssql_where=text("transaction_id IS NOT NULL"),
               sqlite_where=text("transaction_id IS NOT NULL"),
          ),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Foreign keys
     tenant_id = Column(
          Integer,
          ForeignKey("tenants.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)

     # Payment details
     category = Column(
          Enum(PaymentCategory, name="payment_category", values_callable=_enum_values, create_constraint=True),
          nullable=False,
          index=True
     )
     amount = Column(Numeric(12, 2), nullable=False)
     status = Column(
          Enum(PaymentStatus, name="payment_status", values_callable=_enum_values, create_constraint=True),
          default=PaymentStatus.PENDING,
          nullable=False,
          index=True
     )
     payment_date = Column(DateTime, server_default=func.now(), nullable=False, index=True)
     transaction_id = Column(String(100), nullable=True)  # gateway or manual reference
     phone_number = Column(String(50), nullable=True)

     # Relationships
     tenant = relationship("Tenant", back_populates="payments")

     def __repr__(self):
          return (
               f"<Payment(id={self.id}, tenant_id={self.tenant_id}, category='{self.category.value}', "
               f"amount={self.amount}, status='{self.status.value}')>"
          )

     @property
     def is_completed(self) -> bool:
          return self.status == PaymentStatus.COMPLETED

     @property
     def is_terminal(self) -> bool:
          """Completed and failed payments never change again."""
          return self.status in (PaymentStatus.COMPLETED, PaymentStatus.FAILED)

     def mark_as_completed(self, transaction_id: str = None) -> None:
          """Mark the payment as completed."""
          self.status = PaymentStatus.COMPLETED
          if transaction_id:
               self.transaction_id = transaction_id

     def mark_as_failed(self) -> None:
          """Mark the payment as failed."""
          self.status = PaymentStatus.FAILED
