"""
表格数据源服务 - 包装同步的批量读取调用，统一超时与错误分类
"""
import asyncio
from typing import Any, List, Protocol, Sequence, Tuple

from app.services.base import BaseService, ProviderFetchError
from .models import EchoedRange


class SheetDataProvider(Protocol):
    """批量读取数据源：返回 (回显范围, 二维数组) 的有序列表"""

    def batch_get_values(
        self, spreadsheet_id: str, ranges: Sequence[str]
    ) -> List[Tuple[str, List[List[Any]]]]:
        ...


class SheetService(BaseService):
    """表格数据源服务，负责一次批量读取"""

    def __init__(self, provider: SheetDataProvider, timeout_seconds: float = 10):
        """
        初始化 Sheet 服务

        Args:
            provider: 数据源实例（如 GoogleSheetsClient）
            timeout_seconds: 单次批量读取超时时间
        """
        super().__init__("SheetService")
        self.provider = provider
        self.timeout_seconds = timeout_seconds

    async def batch_get(self, spreadsheet_id: str, ranges: Sequence[str]) -> List[EchoedRange]:
        """
        批量读取多个范围

        Args:
            spreadsheet_id: 表格 ID
            ranges: 范围字符串列表

        Returns:
            数据源回显的范围列表（保持返回顺序）

        Raises:
            ProviderFetchError: 调用失败或超时
        """
        self.log_info(f"批量读取表格数据: id={spreadsheet_id}, ranges={len(ranges)}")

        # 使用 asyncio 在异步上下文中调用同步方法
        loop = asyncio.get_event_loop()

        try:
            pairs = await asyncio.wait_for(
                loop.run_in_executor(
                    None,
                    self.provider.batch_get_values,
                    spreadsheet_id,
                    list(ranges),
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            self.log_error(f"批量读取超时: id={spreadsheet_id}, timeout={self.timeout_seconds}s", error=e)
            raise ProviderFetchError(
                "表格数据读取超时",
                code="PROVIDER_TIMEOUT",
                details={"spreadsheet_id": spreadsheet_id, "timeout": self.timeout_seconds},
            ) from e
        except Exception as e:
            self._handle_api_error(e, spreadsheet_id)

        try:
            echoed = [EchoedRange.from_pair(pair) for pair in pairs or []]
        except (TypeError, ValueError) as e:
            self.log_error(f"数据源返回结构无法识别: id={spreadsheet_id}", error=e)
            raise ProviderFetchError(
                "表格数据源返回结构无法识别",
                code="PROVIDER_BAD_RESPONSE",
                details={"spreadsheet_id": spreadsheet_id},
            ) from e

        self.record_metric("ranges_returned", len(echoed))
        self.record_metric("rows_fetched", sum(len(e.values) for e in echoed))
        return echoed

    def _handle_api_error(self, error: Exception, spreadsheet_id: str) -> None:
        """处理数据源错误"""
        error_msg = str(error)
        error_code = "PROVIDER_FETCH_ERROR"
        upstream_code = getattr(error, "code", None)

        self.log_error(f"表格数据源错误: {error_code} - {error_msg}", error=error)

        raise ProviderFetchError(
            f"表格数据读取失败: {error_msg}",
            code=error_code,
            details={
                "spreadsheet_id": spreadsheet_id,
                "error_msg": error_msg,
                "upstream_code": upstream_code,
            },
        ) from error
