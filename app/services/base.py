"""
基础服务类 - 提供通用功能如日志、错误处理、度量等
"""
import logging
from abc import ABC
from typing import Any, Dict, Optional


class BaseService(ABC):
    """所有服务的基类"""

    def __init__(self, service_name: str = None):
        """
        初始化基础服务

        Args:
            service_name: 服务名称，用于日志标识
        """
        self.service_name = service_name or self.__class__.__name__
        self.logger = logging.getLogger(f"app.services.{self.service_name}")
        self._metrics: Dict[str, Any] = {}

    def log_info(self, message: str, **kwargs) -> None:
        """记录信息日志"""
        self.logger.info(message, extra=kwargs)

    def log_error(self, message: str, error: Optional[Exception] = None, **kwargs) -> None:
        """记录错误日志"""
        self.logger.error(message, exc_info=error, extra=kwargs)

    def log_debug(self, message: str, **kwargs) -> None:
        """记录调试日志"""
        self.logger.debug(message, extra=kwargs)

    def log_warning(self, message: str, **kwargs) -> None:
        """记录警告日志"""
        self.logger.warning(message, extra=kwargs)

    def record_metric(self, metric_name: str, value: Any) -> None:
        """
        记录度量指标

        Args:
            metric_name: 指标名称
            value: 指标值
        """
        self._metrics[metric_name] = value

    def increment_metric(self, metric_name: str, amount: int = 1) -> None:
        """累加计数类指标"""
        self._metrics[metric_name] = self._metrics.get(metric_name, 0) + amount

    def get_metrics(self) -> Dict[str, Any]:
        """获取所有度量指标"""
        return self._metrics.copy()


class ServiceException(Exception):
    """服务层异常基类"""

    def __init__(self, message: str, code: str = None, details: Dict[str, Any] = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class InvalidRangeRequestError(ServiceException):
    """范围配置错误（缺失或无法组装批量请求）"""
    pass


class ProviderFetchError(ServiceException):
    """表格数据源批量读取失败（网络、鉴权、配额、超时）"""
    pass


class CacheError(ServiceException):
    """缓存操作异常"""
    pass


class CacheEntryNotFoundError(ServiceException):
    """缓存中不存在该区块的数据"""
    pass
