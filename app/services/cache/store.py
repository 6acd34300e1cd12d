"""
键值存储接口与内存实现
"""
from typing import Dict, Optional, Protocol

from app.services.base import BaseService


class BlobStore(Protocol):
    """整值读写的键值存储；put 必须是原子的整值覆盖"""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def put(self, key: str, data: str) -> None:
        ...


class MemoryBlobStore(BaseService):
    """进程内存储，适合本地开发与测试"""

    def __init__(self) -> None:
        super().__init__("MemoryBlobStore")
        self._store: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    async def put(self, key: str, data: str) -> None:
        self._store[key] = data
