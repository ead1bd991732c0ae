# schemas/__init__.py
from .dues import (
     DuesResponse,
     TenantDuesResponse,
     MonthlyBucketResponse,
     TenantAnalyticsResponse,
     OwnerChartResponse,
     OwnerOverviewResponse,
     BatchCheckResponse,
)
from .payment import (
     PaymentCreate,
     ManualPaymentCreate,
     PaymentConfirmRequest,
     PaymentResponse,
     PaymentListResponse,
)
from .tenant import TenantResponse

__all__ = [
     "DuesResponse",
     "TenantDuesResponse",
     "MonthlyBucketResponse",
     "TenantAnalyticsResponse",
     "OwnerChartResponse",
     "OwnerOverviewResponse",
     "BatchCheckResponse",
     "PaymentCreate",
     "ManualPaymentCreate",
     "PaymentConfirmRequest",
     "PaymentResponse",
     "PaymentListResponse",
     "TenantResponse",
]
