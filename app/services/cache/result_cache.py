"""
图表取数结果缓存 - 以区块 ID 为键保存最近一次成功的 NormalizedFetchResult
"""
import json
from typing import Optional

from app.services.base import BaseService
from app.services.sheets import NormalizedFetchResult
from .keys import CacheKeys
from .store import BlobStore


class ResultCache(BaseService):
    """结果缓存：无 TTL，存在即有效"""

    def __init__(self, store: BlobStore, key_prefix: Optional[str] = None):
        super().__init__("ResultCache")
        self.store = store
        self.key_prefix = key_prefix

    def key_for(self, block_id: str) -> str:
        return CacheKeys.chart_data_key(block_id, prefix=self.key_prefix)

    async def load(self, block_id: str) -> Optional[NormalizedFetchResult]:
        """
        读取缓存

        Returns:
            NormalizedFetchResult；不存在或数据损坏时返回 None
        """
        key = self.key_for(block_id)
        raw = await self.store.get(key)
        if raw is None:
            self.log_debug(f"缓存未命中: {key}")
            return None

        try:
            result = NormalizedFetchResult.from_dict(json.loads(raw))
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            # 损坏的条目保留原样，等待下一次成功取数覆盖
            self.log_warning(f"缓存数据解析失败，视为不存在: {key} ({e})")
            self.increment_metric("corrupt_entries")
            return None

        self.log_debug(f"缓存命中: {key}")
        return result

    async def save(self, block_id: str, result: NormalizedFetchResult) -> None:
        """整值覆盖写入"""
        key = self.key_for(block_id)
        data = json.dumps(result.to_dict(), ensure_ascii=False)
        await self.store.put(key, data)
        self.log_info(f"缓存已写入: {key}, rows={result.row_count}")
