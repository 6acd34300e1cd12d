"""
服务依赖注入模块
"""
from typing import Annotated
from fastapi import Depends, HTTPException, Request
from app.clients import GoogleSheetsClient
from app.core.config import settings
from app.services.cache import (
    BlobStore,
    FileBlobStore,
    MemoryBlobStore,
    RedisService,
    ResultCache,
)
from app.services.chart_data_service import ChartDataService
from app.services.chart_sync_service import ChartSyncService
from app.services.sheets import BatchRequestBuilder, SheetService


# 全局服务实例
_blob_store = None
_result_cache = None
_request_builder = None


def get_sheets_client(request: Request) -> GoogleSheetsClient:
    """获取全局 Google Sheets client"""
    client = getattr(request.app.state, "sheets_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Google Sheets 客户端未配置")
    return client


def get_blob_store() -> BlobStore:
    """按配置创建存储后端"""
    global _blob_store
    if _blob_store is None:
        backend = settings.cache.backend
        if backend == "file":
            _blob_store = FileBlobStore(settings.cache.file_dir)
        elif backend == "memory":
            _blob_store = MemoryBlobStore()
        else:
            _blob_store = RedisService()
    return _blob_store


def get_result_cache(
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> ResultCache:
    """获取结果缓存"""
    global _result_cache
    if _result_cache is None:
        _result_cache = ResultCache(store, key_prefix=settings.cache.key_prefix)
    return _result_cache


def get_request_builder() -> BatchRequestBuilder:
    """获取批量请求构建器"""
    global _request_builder
    if _request_builder is None:
        _request_builder = BatchRequestBuilder(
            badge_column=settings.chart.badge_column,
            default_start_row=settings.chart.default_start_row,
            default_end_row=settings.chart.default_end_row,
        )
    return _request_builder


def get_sheet_service(
    sheets_client: Annotated[GoogleSheetsClient, Depends(get_sheets_client)],
) -> SheetService:
    """获取 Sheet 服务"""
    return SheetService(sheets_client, timeout_seconds=settings.google.timeout_seconds)


def get_chart_data_service(
    sheet_service: Annotated[SheetService, Depends(get_sheet_service)],
    request_builder: Annotated[BatchRequestBuilder, Depends(get_request_builder)],
) -> ChartDataService:
    """获取图表取数服务"""
    return ChartDataService(
        sheet_service=sheet_service,
        request_builder=request_builder,
        row_domain_source=settings.chart.row_domain_source,
    )


def get_chart_sync_service(
    chart_data_service: Annotated[ChartDataService, Depends(get_chart_data_service)],
    result_cache: Annotated[ResultCache, Depends(get_result_cache)],
) -> ChartSyncService:
    """获取图表同步服务"""
    return ChartSyncService(chart_data_service=chart_data_service, result_cache=result_cache)


def get_chart_reader(
    result_cache: Annotated[ResultCache, Depends(get_result_cache)],
) -> ChartSyncService:
    """只读缓存的同步服务，不依赖表格客户端"""
    return ChartSyncService(chart_data_service=None, result_cache=result_cache)


async def close_services() -> None:
    """关闭需要释放连接的全局服务"""
    global _blob_store, _result_cache
    if isinstance(_blob_store, RedisService):
        await _blob_store.close()
    _blob_store = None
    _result_cache = None


# 类型别名，方便在端点中使用
ChartSyncServiceDep = Annotated[ChartSyncService, Depends(get_chart_sync_service)]
ChartReaderDep = Annotated[ChartSyncService, Depends(get_chart_reader)]
