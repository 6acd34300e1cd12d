"""
服务层模块 - 提供业务逻辑实现
"""

from .chart_data_service import ChartDataService, ChartFetchRequest
from .chart_sync_service import ChartSyncService, FetchOutcome

__all__ = [
    "ChartDataService",
    "ChartFetchRequest",
    "ChartSyncService",
    "FetchOutcome",
]
