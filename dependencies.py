# dependencies.py
"""
Shared FastAPI dependencies: bearer-token auth and role-based access checks.

Tokens are issued upstream; their payload carries the user "id" and "role"
(admin, propertyOwner or tenant).
"""
from typing import Optional, Set

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from config import JWT_ALGORITHM, JWT_SECRET
from models import Property, Tenant, UserRole


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
     except JWTError:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")
     if not payload.get("id") or not payload.get("role"):
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")
     return payload


def create_access_token(user_id: int, role: str) -> str:
     """Mint a token for a user; used by scripts and tests."""
     return jwt.encode({"id": user_id, "role": role}, JWT_SECRET, algorithm=JWT_ALGORITHM)


# ---------------------------------------------------------------------------
# Role-based access control helpers
# ---------------------------------------------------------------------------

def get_tenant_id_for_user(db: Session, user_id: int) -> Optional[int]:
     """Get tenant id for a user (role=tenant). Returns None if user is not a tenant."""
     tenant = db.query(Tenant).filter(Tenant.user_id == user_id).first()
     return tenant.id if tenant else None


def get_accessible_tenant_ids(db: Session, token: dict) -> Optional[Set[int]]:
     """
     Get set of tenant ids the current user can access.
     - Admin: None (meaning all tenants)
     - Tenant: {own tenant id}
     - Property owner: tenants on this owner's properties
     """
     role = token.get("role")
     user_id = token.get("id")
     if not user_id:
          return set()

     if role == UserRole.ADMIN:
          return None  # None = all tenants

     if role == UserRole.TENANT:
          tenant_id = get_tenant_id_for_user(db, user_id)
          return {tenant_id} if tenant_id is not None else set()

     if role == UserRole.PROPERTY_OWNER:
          rows = (
               db.query(Tenant.id)
               .join(Property, Tenant.property_id == Property.id)
               .filter(Property.owner_id == user_id)
               .all()
          )
          return {row[0] for row in rows}

     return set()


def can_access_tenant(db: Session, token: dict, tenant_id: int) -> bool:
     allowed = get_accessible_tenant_ids(db, token)
     if allowed is None:
          return True  # Admin: all
     return tenant_id in allowed


def is_own_tenant_record(db: Session, token: dict, tenant_id: int) -> bool:
     """True when the caller is the tenant themself (not an owner or admin viewing them)."""
     if token.get("role") != UserRole.TENANT:
          return False
     return get_tenant_id_for_user(db, token.get("id")) == tenant_id


def require_tenant_access(db: Session, token: dict, tenant_id: int) -> None:
     if not can_access_tenant(db, token, tenant_id):
          raise HTTPException(
               status_code=status.HTTP_403_FORBIDDEN,
               detail="You do not have permission to view this tenant"
          )


def require_manager_role(token: dict) -> None:
     """Owners and admins only."""
     if token.get("role") not in (UserRole.ADMIN, UserRole.PROPERTY_OWNER):
          raise HTTPException(
               status_code=status.HTTP_403_FORBIDDEN,
               detail="Only property owners and admins can perform this action"
          )
