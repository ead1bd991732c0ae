# services/lease_accrual.py
"""
Lease accrual: how many months of rent a tenant owes for.

Rent is due at the start of occupancy, so the month in progress counts.
Month differences use calendar-month arithmetic (month boundaries crossed),
never elapsed days / 30.
"""
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str, None]


def to_date(value: DateLike) -> Optional[date]:
     """
     Truncate a date-like value to a calendar date.

     Accepts date, datetime and ISO-8601 strings. Returns None for missing or
     unparseable input.
     """
     if value is None:
          return None
     if isinstance(value, datetime):
          return value.date()
     if isinstance(value, date):
          return value
     if isinstance(value, str):
          text = value.strip()
          if not text:
               return None
          try:
               return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
          except ValueError:
               return None
     return None


def calendar_month_diff(start: date, end: date) -> int:
     """Number of month boundaries between start and end (negative if end < start)."""
     return (end.year - start.year) * 12 + (end.month - start.month)


def months_accrued(lease_start_date: DateLike, as_of: DateLike) -> int:
     """
     Months of rent liability between lease start and as_of, inclusive of
     the current month.

     A missing or malformed lease start means the lease has not started and
     yields 0. A lease starting after as_of also yields 0.
     """
     start = to_date(lease_start_date)
     end = to_date(as_of)
     if start is None or end is None:
          return 0
     if start > end:
          return 0
     return calendar_month_diff(start, end) + 1
