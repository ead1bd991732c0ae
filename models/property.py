# models/property.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Property(TimestampMixin, Base):
     """
     Property model - a rental building owned by a property owner.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(255), nullable=False)
     address = Column(String(500), nullable=True)
     owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     status = Column(String(50), default="active", nullable=False)

     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     owner = relationship("User", back_populates="properties")
     tenants = relationship("Tenant", back_populates="rental_property")

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.name}')>"
