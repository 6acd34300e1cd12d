"""
文件缓存 - 每个键一个 JSON 文件，先写临时文件再 rename
"""
import asyncio
import os
import re
import tempfile
from typing import Optional

from app.services.base import BaseService, CacheError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileBlobStore(BaseService):
    """本地目录存储"""

    def __init__(self, cache_dir: str):
        """
        Args:
            cache_dir: 缓存目录，不存在时自动创建
        """
        super().__init__("FileBlobStore")
        self.cache_dir = cache_dir
        os.makedirs(self.cache_dir, exist_ok=True)

    def _safe_key(self, key: str) -> str:
        return _UNSAFE_CHARS.sub("_", key)

    def _path(self, key: str) -> str:
        return os.path.join(self.cache_dir, f"{self._safe_key(key)}.json")

    async def get(self, key: str) -> Optional[str]:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self._read, key)

    async def put(self, key: str, data: str) -> None:
        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, self._write, key, data)

    def _read(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            self.log_debug(f"缓存文件不存在: {path}")
            return None
        except OSError as e:
            self.log_error(f"读取缓存文件失败: {path}", error=e)
            raise CacheError(
                f"读取缓存文件失败: {e}",
                code="CACHE_GET_ERROR",
                details={"key": key},
            ) from e

    def _write(self, key: str, data: str) -> None:
        path = self._path(key)
        fd, tmp_path = tempfile.mkstemp(dir=self.cache_dir, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            # 同目录内 rename 为原子操作，读者不会看到写了一半的文件
            os.replace(tmp_path, path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            self.log_error(f"写入缓存文件失败: {path}", error=e)
            raise CacheError(
                f"写入缓存文件失败: {e}",
                code="CACHE_SET_ERROR",
                details={"key": key},
            ) from e
        self.log_debug(f"缓存文件已写入: {path}")
