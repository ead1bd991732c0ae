# models/__init__.py
from .base import Base
from .user import User, UserRole
from .property import Property
from .tenant import Tenant, TenantLedgerSnapshot
from .payment import Payment, PaymentCategory, PaymentStatus

__all__ = [
     "Base",
     "User",
     "UserRole",
     "Property",
     "Tenant",
     "TenantLedgerSnapshot",
     "Payment",
     "PaymentCategory",
     "PaymentStatus",
]
