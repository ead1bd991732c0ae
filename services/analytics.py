# services/analytics.py
"""
Payment analytics for dashboard charts.

Everything here is a lossy, read-only view of the payment log: categories
collapse into one total and a partially paid month looks the same as a fully
paid one. Never feed these numbers back into dues computation.
"""
import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from models.payment import PaymentCategory, PaymentStatus
from services.lease_accrual import DateLike, to_date

ZERO = Decimal("0")


@dataclass(frozen=True)
class MonthlyBucket:
     month: str
     rent: Decimal
     utility: Decimal
     deposit: Decimal
     total: Decimal
     paid: bool


def _shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
     index = year * 12 + (month - 1) + offset
     return index // 12, index % 12 + 1


def month_keys(months_back: int, as_of: date) -> List[Tuple[int, int]]:
     """The last months_back (year, month) pairs ending with as_of, oldest first."""
     return [_shift_month(as_of.year, as_of.month, -i) for i in range(months_back - 1, -1, -1)]


def _completed(payments: Iterable):
     for payment in payments:
          if payment.status == PaymentStatus.COMPLETED:
               yield payment


def project_monthly(
     payments: Iterable,
     months_back: int,
     as_of: Optional[DateLike] = None,
) -> List[MonthlyBucket]:
     """
     Bucket completed payments by calendar month of their payment date.

     Returns exactly months_back buckets, oldest to newest, ending with the
     month of as_of. Months without payments are zero-filled.
     """
     if months_back <= 0:
          return []
     end = to_date(as_of) or date.today()

     sums: Dict[Tuple[int, int], Dict[str, Decimal]] = defaultdict(
          lambda: {"rent": ZERO, "utility": ZERO, "deposit": ZERO}
     )
     for payment in _completed(payments):
          paid_on = to_date(payment.payment_date)
          if paid_on is None:
               continue
          bucket = sums[(paid_on.year, paid_on.month)]
          amount = Decimal(str(payment.amount))
          if payment.category == PaymentCategory.RENT:
               bucket["rent"] += amount
          elif payment.category == PaymentCategory.UTILITY:
               bucket["utility"] += amount
          elif payment.category == PaymentCategory.DEPOSIT:
               bucket["deposit"] += amount

     projection = []
     for year, month in month_keys(months_back, end):
          data = sums.get((year, month), {"rent": ZERO, "utility": ZERO, "deposit": ZERO})
          total = data["rent"] + data["utility"] + data["deposit"]
          projection.append(MonthlyBucket(
               month=calendar.month_abbr[month],
               rent=data["rent"],
               utility=data["utility"],
               deposit=data["deposit"],
               total=total,
               paid=total > 0,
          ))
     return projection


def payment_breakdown(payments: Iterable) -> List[dict]:
     """Completed totals per category, in Rent / Utility / Deposit order."""
     totals = {category: ZERO for category in PaymentCategory}
     for payment in _completed(payments):
          totals[PaymentCategory(payment.category)] += Decimal(str(payment.amount))
     return [{"name": category.value, "value": totals[category]} for category in PaymentCategory]
