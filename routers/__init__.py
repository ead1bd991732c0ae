# routers/__init__.py
from . import tenants, owners, payments

__all__ = ["tenants", "owners", "payments"]
