"""
Redis 缓存服务
"""
from typing import Optional
import asyncio
import redis.asyncio as redis
from app.services.base import BaseService, CacheError
from app.core.config import settings


class RedisService(BaseService):
    """Redis 缓存服务封装，按整值读写字符串"""

    def __init__(self, redis_url: Optional[str] = None):
        """
        初始化 Redis 服务

        Args:
            redis_url: Redis 连接 URL，不提供则从配置读取
        """
        super().__init__("RedisService")
        self.redis_url = redis_url or settings.redis.dsn
        self.redis_client: Optional[redis.Redis] = None
        self._lock = asyncio.Lock()

    async def _ensure_connected(self) -> redis.Redis:
        """确保 Redis 连接"""
        if self.redis_client is None:
            async with self._lock:
                if self.redis_client is None:
                    try:
                        self.redis_client = redis.from_url(
                            self.redis_url,
                            encoding="utf-8",
                            decode_responses=True
                        )
                        # 测试连接
                        await self.redis_client.ping()
                        self.log_info(f"Redis 连接成功: {self.redis_url}")
                    except Exception as e:
                        self.redis_client = None
                        self.log_error(f"Redis 连接失败: {e}", error=e)
                        raise CacheError(
                            f"无法连接到 Redis: {str(e)}",
                            code="REDIS_CONNECTION_ERROR"
                        )
        return self.redis_client

    async def get(self, key: str) -> Optional[str]:
        """
        获取缓存值

        Args:
            key: 缓存键

        Returns:
            原始字符串，不存在返回 None
        """
        try:
            client = await self._ensure_connected()
            data = await client.get(key)
        except CacheError:
            raise
        except Exception as e:
            self.log_error(f"获取缓存失败: {key}", error=e)
            raise CacheError(
                f"获取缓存失败: {str(e)}",
                code="CACHE_GET_ERROR",
                details={"key": key}
            )

        if data is None:
            self.log_debug(f"缓存未命中: {key}")
        else:
            self.log_debug(f"缓存命中: {key}")
        return data

    async def put(self, key: str, data: str) -> None:
        """
        写入缓存（SET 整值覆盖，不设置过期时间）

        Args:
            key: 缓存键
            data: 序列化后的字符串
        """
        try:
            client = await self._ensure_connected()
            await client.set(key, data)
        except CacheError:
            raise
        except Exception as e:
            self.log_error(f"设置缓存失败: {key}", error=e)
            raise CacheError(
                f"设置缓存失败: {str(e)}",
                code="CACHE_SET_ERROR",
                details={"key": key}
            )
        self.log_debug(f"缓存设置成功: {key}")

    async def close(self) -> None:
        """关闭 Redis 连接"""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
            self.log_info("Redis 连接已关闭")
