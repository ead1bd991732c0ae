# models/user.py
import enum

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class UserRole(str, enum.Enum):
     """Roles carried in the access token."""
     ADMIN = "admin"
     PROPERTY_OWNER = "propertyOwner"
     TENANT = "tenant"


class User(TimestampMixin, Base):
     """
     User model - login accounts for admins, property owners and tenants.
     Authentication itself happens upstream; this table backs role lookups.
     """
     __tablename__ = "users"

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), unique=True, nullable=False, index=True)
     name = Column(String(200), nullable=False)
     role = Column(String(50), nullable=False)  # admin, propertyOwner, tenant

     # Relationships
     properties = relationship("Property", back_populates="owner")

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
