# models/base.py
from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Every model declares its own __tablename__.
     """


class TimestampMixin:
     """Adds a server-populated created_at column."""

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
