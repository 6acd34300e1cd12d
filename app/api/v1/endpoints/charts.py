"""
图表区块数据 API 端点
"""
from typing import Any, Dict, List, NoReturn

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from app.services.base import (
    CacheEntryNotFoundError,
    CacheError,
    InvalidRangeRequestError,
    ProviderFetchError,
)
from app.services.chart_data_service import ChartFetchRequest
from app.services.chart_view import build_chart_view
from app.services.dependencies import ChartReaderDep, ChartSyncServiceDep

router = APIRouter()

BLOCK_ID_PATTERN = r"^[A-Za-z0-9_-]{1,128}$"
NO_CACHE_MESSAGE = "暂无缓存数据，请先在编辑器中获取数据"


class ChartFetchBody(BaseModel):
    """取数 / 刷新请求体"""
    model_config = ConfigDict(populate_by_name=True)

    spreadsheet_id: str = Field(..., alias="spreadsheetId", min_length=1, description="Google 表格 ID")
    block_id: str = Field(..., alias="blockId", pattern=BLOCK_ID_PATTERN, description="图表区块 ID")
    label_range: str = Field(..., alias="labelRange", min_length=1, description="标签列范围，如 A2:A13")
    stat_range: str = Field(..., alias="statRange", min_length=1, description="数值列范围，如 O2:O13")
    overlay_ranges: List[str] = Field(default_factory=list, alias="overlayRanges", description="叠加列范围")

    def to_request(self) -> ChartFetchRequest:
        return ChartFetchRequest(
            spreadsheet_id=self.spreadsheet_id,
            label_range=self.label_range,
            stat_range=self.stat_range,
            overlay_ranges=list(self.overlay_ranges),
        )


class ChartFetchResponse(BaseModel):
    """取数响应"""
    success: bool
    cached: bool
    data: Dict[str, Any]
    message: str = ""


def _raise_http(e: Exception) -> NoReturn:
    if isinstance(e, InvalidRangeRequestError):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ProviderFetchError):
        # 数据源的具体错误只写日志，不返回给前端
        raise HTTPException(status_code=502, detail="获取 Google 表格数据失败")
    if isinstance(e, CacheEntryNotFoundError):
        raise HTTPException(status_code=404, detail=NO_CACHE_MESSAGE)
    if isinstance(e, CacheError):
        raise HTTPException(status_code=500, detail="缓存服务不可用")
    raise HTTPException(status_code=500, detail=f"处理失败: {str(e)}")


@router.post("/fetch-data", response_model=ChartFetchResponse, summary="获取图表数据（优先使用缓存）")
async def fetch_chart_data(
    body: ChartFetchBody,
    sync_service: ChartSyncServiceDep = None,
) -> ChartFetchResponse:
    try:
        outcome = await sync_service.get_or_fetch(body.block_id, body.to_request())
    except Exception as e:
        _raise_http(e)
    return ChartFetchResponse(
        success=True,
        cached=outcome.cached,
        data=outcome.data.to_dict(),
        message="使用缓存数据" if outcome.cached else "数据已保存",
    )


@router.post("/refresh", response_model=ChartFetchResponse, summary="重新获取图表数据并覆盖缓存")
async def refresh_chart_data(
    body: ChartFetchBody,
    sync_service: ChartSyncServiceDep = None,
) -> ChartFetchResponse:
    try:
        outcome = await sync_service.force_refresh(body.block_id, body.to_request())
    except Exception as e:
        _raise_http(e)
    return ChartFetchResponse(
        success=True,
        cached=False,
        data=outcome.data.to_dict(),
        message="数据已刷新",
    )


@router.get("/cached", summary="读取缓存的图表数据")
async def get_cached_chart_data(
    block_id: str = Query(..., alias="blockId", pattern=BLOCK_ID_PATTERN, description="图表区块 ID"),
    reader: ChartReaderDep = None,
) -> Dict[str, Any]:
    try:
        result = await reader.read_cached(block_id)
    except Exception as e:
        _raise_http(e)
    return result.to_dict()


@router.get("/view", summary="读取缓存并整理为图表序列")
async def get_chart_view(
    block_id: str = Query(..., alias="blockId", pattern=BLOCK_ID_PATTERN, description="图表区块 ID"),
    reader: ChartReaderDep = None,
) -> Dict[str, Any]:
    try:
        result = await reader.read_cached(block_id)
    except Exception as e:
        _raise_http(e)
    return build_chart_view(result).to_dict()
