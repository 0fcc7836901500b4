"""
Client package: the dashboard's data layer over the HTTP API.
"""
from app.client.api_client import (
    ApiClientError,
    ConnectivityFailure,
    ServerError,
    MeterApiClient,
)
from app.client.reference_cache import ReferenceDataCache, ReferenceResult
from app.client.charts import (
    ChartDataPoint,
    ChartLoadResult,
    ChartAdapter,
    ChartLoader,
    CHART_ADAPTERS,
)
from app.client.dashboard import DashboardPager, describe_load_error

__all__ = [
    "ApiClientError",
    "ConnectivityFailure",
    "ServerError",
    "MeterApiClient",
    "ReferenceDataCache",
    "ReferenceResult",
    "ChartDataPoint",
    "ChartLoadResult",
    "ChartAdapter",
    "ChartLoader",
    "CHART_ADAPTERS",
    "DashboardPager",
    "describe_load_error",
]
