# services/errors.py
"""
Domain errors raised by the ledger services.

Routers translate these into HTTP responses; services never build
HTTPException themselves.
"""


class LedgerError(Exception):
     """Base class for ledger and dues errors."""


class TenantNotFoundError(LedgerError, LookupError):
     """Tenant id does not resolve to a record."""

     def __init__(self, tenant_id):
          super().__init__(f"Tenant with ID {tenant_id} not found")
          self.tenant_id = tenant_id


class PaymentNotFoundError(LedgerError, LookupError):
     """Payment id does not resolve to a record."""

     def __init__(self, payment_id):
          super().__init__(f"Payment with ID {payment_id} not found")
          self.payment_id = payment_id


class PaymentStateError(LedgerError, ValueError):
     """Illegal payment transition or duplicate transaction reference."""


class DuesUnavailableError(LedgerError):
     """The payment log could not be read, so dues cannot be computed."""
