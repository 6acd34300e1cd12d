"""
表格取数相关数据模型
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class RangeRole(str, Enum):
    """批量请求中范围的语义角色"""
    LABEL = "label"
    STAT = "stat"
    BADGE = "badge"
    OVERLAY = "overlay"
    HEADER = "header"


@dataclass(frozen=True)
class RangeAddress:
    """单列范围地址，如 'Sheet1'!C2:C13"""
    column: str  # 起始列字母（大写）
    start_row: int  # 起始行（1-based）
    end_row: int  # 结束行（1-based）
    end_column: str  # 结束列字母（单列时与 column 相同）
    sheet_qualifier: Optional[str] = None  # Sheet 名称（已去引号）

    @property
    def is_single_cell(self) -> bool:
        return self.column == self.end_column and self.start_row == self.end_row

    @property
    def geometry(self) -> Tuple[str, int, int]:
        """(起始列, 起始行, 结束行)，用于宽化范围的兜底匹配"""
        return self.column, self.start_row, self.end_row


@dataclass(frozen=True)
class RangeParseResult:
    """范围解析结果：成功时携带 address，失败时携带 error"""
    raw: str
    address: Optional[RangeAddress] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.address is not None

    def rows_or(self, default_start: int, default_end: int) -> Tuple[int, int]:
        """解析成功返回实际行区间，否则返回调用方给定的默认窗口"""
        if self.address is None:
            return default_start, default_end
        return self.address.start_row, self.address.end_row

    def column_or(self, default: Optional[str] = None) -> Optional[str]:
        if self.address is None:
            return default
        return self.address.column

    def sheet_or(self, default: Optional[str] = None) -> Optional[str]:
        if self.address is None or self.address.sheet_qualifier is None:
            return default
        return self.address.sheet_qualifier


@dataclass(frozen=True)
class RoleTaggedRange:
    """带角色标签的请求范围"""
    role: RangeRole
    range: str  # 实际发送给数据源的范围字符串
    address: Optional[RangeAddress] = None
    index: Optional[int] = None  # overlay 序号；header 对应的 overlay 序号（徽标表头为 None）


@dataclass
class EchoedRange:
    """数据源回显的一个范围及其二维数组"""
    range: str
    values: List[List[Any]] = field(default_factory=list)

    @classmethod
    def from_pair(cls, pair: Tuple[str, Optional[List[List[Any]]]]) -> 'EchoedRange':
        label, values = pair
        return cls(range=label or "", values=values or [])


@dataclass
class OverlayColumn:
    """叠加列：表头 + 与行域对齐的值"""
    range: str  # 原始请求范围
    column: Optional[str]  # 列字母，范围无法解析时为 None
    header: str
    values: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "range": self.range,
            "column": self.column,
            "header": self.header,
            "values": list(self.values),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OverlayColumn':
        if not isinstance(data, dict):
            raise ValueError("overlay 必须为对象")
        values = data.get("values")
        if not isinstance(values, list):
            raise ValueError("overlay.values 必须为列表")
        column = data.get("column")
        return cls(
            range=str(data.get("range", "")),
            column=str(column) if column is not None else None,
            header=str(data.get("header", "")),
            values=[str(v) for v in values],
        )


@dataclass
class NormalizedFetchResult:
    """
    归一化的取数结果。

    labels / stats / badges 以及每个 overlay 的 values 长度一致，
    前端按下标把 tooltip、徽标与柱子一一对应。
    """
    labels: List[str] = field(default_factory=list)
    stats: List[str] = field(default_factory=list)  # 原始字符串，单位在渲染层剥离
    badges: List[str] = field(default_factory=list)  # 空字符串表示无徽标
    overlays: List[OverlayColumn] = field(default_factory=list)
    badge_header: str = ""

    @property
    def row_count(self) -> int:
        return len(self.labels)

    def is_aligned(self) -> bool:
        n = len(self.labels)
        if len(self.stats) != n or len(self.badges) != n:
            return False
        return all(len(o.values) == n for o in self.overlays)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "labels": list(self.labels),
            "stats": list(self.stats),
            "badges": list(self.badges),
            "badgeHeader": self.badge_header,
            "overlays": [o.to_dict() for o in self.overlays],
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'NormalizedFetchResult':
        """
        从缓存中的字典恢复实例

        Raises:
            ValueError: 结构不完整或各列长度不一致
        """
        if not isinstance(data, dict):
            raise ValueError("缓存数据必须为 JSON 对象")
        lists = {}
        for key in ("labels", "stats", "badges", "overlays"):
            val = data.get(key)
            if not isinstance(val, list):
                raise ValueError(f"字段 {key} 缺失或不是列表")
            lists[key] = val

        result = cls(
            labels=[str(v) for v in lists["labels"]],
            stats=[str(v) for v in lists["stats"]],
            badges=[str(v) for v in lists["badges"]],
            overlays=[OverlayColumn.from_dict(o) for o in lists["overlays"]],
            badge_header=str(data.get("badgeHeader", "") or ""),
        )
        if not result.is_aligned():
            raise ValueError("各列长度不一致")
        return result
