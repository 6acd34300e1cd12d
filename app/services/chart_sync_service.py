"""
图表区块同步服务：决定走缓存还是重新取数。

- get_or_fetch：有缓存直接返回，否则取数并写缓存
- force_refresh：总是取数，成功后覆盖缓存；失败时旧缓存保持不变
- read_cached：只读缓存，不触发取数
"""
from dataclasses import dataclass
from typing import Optional

from app.services.base import BaseService, CacheEntryNotFoundError
from app.services.cache import ResultCache
from app.services.chart_data_service import ChartDataService, ChartFetchRequest
from app.services.sheets import NormalizedFetchResult


@dataclass
class FetchOutcome:
    data: NormalizedFetchResult
    cached: bool


class ChartSyncService(BaseService):
    """图表数据获取/缓存协调"""

    def __init__(
        self,
        chart_data_service: Optional[ChartDataService],
        result_cache: ResultCache,
    ) -> None:
        super().__init__("ChartSyncService")
        self.chart_data_service = chart_data_service
        self.cache = result_cache

    async def get_or_fetch(self, block_id: str, request: ChartFetchRequest) -> FetchOutcome:
        """缓存存在且可解析时直接返回，否则取数并写入缓存"""
        cached = await self.cache.load(block_id)
        if cached is not None:
            self.log_info(f"使用缓存数据: block={block_id}")
            self.increment_metric("cache_hits")
            return FetchOutcome(data=cached, cached=True)

        self.increment_metric("cache_misses")
        return await self._fetch_and_store(block_id, request)

    async def force_refresh(self, block_id: str, request: ChartFetchRequest) -> FetchOutcome:
        """忽略缓存重新取数"""
        self.log_info(f"强制刷新: block={block_id}")
        return await self._fetch_and_store(block_id, request)

    async def read_cached(self, block_id: str) -> NormalizedFetchResult:
        """
        只读缓存

        Raises:
            CacheEntryNotFoundError: 该区块还没有可用的缓存
        """
        cached = await self.cache.load(block_id)
        if cached is None:
            raise CacheEntryNotFoundError(
                f"区块 {block_id} 暂无缓存数据",
                code="CACHE_NOT_FOUND",
                details={"block_id": block_id},
            )
        return cached

    async def _fetch_and_store(self, block_id: str, request: ChartFetchRequest) -> FetchOutcome:
        if self.chart_data_service is None:
            raise RuntimeError("ChartSyncService 未配置取数服务，只能读取缓存")
        # 取数失败时异常直接上抛，不会写缓存
        result = await self.chart_data_service.fetch(request)
        await self.cache.save(block_id, result)
        return FetchOutcome(data=result, cached=False)
