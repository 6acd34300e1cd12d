"""
缓存模块 - 提供 Redis / 文件 / 内存存储与结果缓存
"""

from .redis_service import RedisService
from .file_store import FileBlobStore
from .store import BlobStore, MemoryBlobStore
from .keys import CacheKeys
from .result_cache import ResultCache

__all__ = [
    "RedisService",
    "FileBlobStore",
    "BlobStore",
    "MemoryBlobStore",
    "CacheKeys",
    "ResultCache",
]
