"""
范围对账 - 把数据源回显的范围映射回请求时的逻辑范围

数据源会改写范围字符串：补上 sheet 名、加引号、把整表请求展开成
具体矩形、把单列请求加宽到最后一个有数据的列等。这里按以下顺序匹配：

1. 精确后缀匹配：回显范围在 '!' 之后的部分与请求一致（忽略大小写），
   请求带 sheet 名时两边 sheet 名也要一致（同样忽略大小写）；
   请求本身是整表名时，匹配该 sheet 上的回显范围
2. 几何兜底（仅 overlay）：起始列、起始行、结束行一致，结束列可以不同

都匹配不上时返回空矩阵并记录日志，下游会把该列当作全空处理。
"""
from typing import Any, List, Optional, Sequence, Tuple

from app.services.base import BaseService
from .models import EchoedRange, RangeRole, RoleTaggedRange
from .ranges import parse_range, split_sheet_qualifier, unquote_sheet_name


def _sheets_compatible(requested: Optional[str], echoed: Optional[str]) -> bool:
    if requested is None or echoed is None:
        return True
    return requested.casefold() == echoed.casefold()


class RangeReconciler(BaseService):
    """范围对账器，按回显顺序遍历，先匹配者优先"""

    def __init__(self, echoed: Sequence[EchoedRange]):
        super().__init__("RangeReconciler")
        self.echoed: List[EchoedRange] = list(echoed)
        # 预先拆分 sheet 名与单元格部分
        self._split: List[Tuple[Optional[str], str]] = [
            split_sheet_qualifier(e.range) for e in self.echoed
        ]
        self.misses: List[str] = []

    def resolve(self, requested: str, allow_geometry_fallback: bool = False) -> List[List[Any]]:
        """
        查找请求范围对应的二维数组

        Args:
            requested: 请求时发送的范围字符串
            allow_geometry_fallback: 是否允许按几何位置兜底匹配（overlay 专用）

        Returns:
            二维数组；未匹配时为空列表
        """
        idx = self._match_suffix(requested)
        if idx is None and allow_geometry_fallback:
            idx = self._match_geometry(requested)
            if idx is not None:
                self.log_debug(
                    f"范围 {requested!r} 通过几何兜底匹配到 {self.echoed[idx].range!r}"
                )
                self.increment_metric("geometry_matches")

        if idx is None:
            self.log_warning(f"数据源未返回范围: {requested!r}")
            self.misses.append(requested)
            self.record_metric("misses", len(self.misses))
            return []

        return self.echoed[idx].values

    def resolve_tagged(self, tagged: RoleTaggedRange) -> List[List[Any]]:
        """按角色决定是否启用几何兜底"""
        return self.resolve(
            tagged.range,
            allow_geometry_fallback=tagged.role is RangeRole.OVERLAY,
        )

    def _match_suffix(self, requested: str) -> Optional[int]:
        req_sheet, req_body = split_sheet_qualifier(requested)
        req_key = req_body.upper()
        for i, (sheet, body) in enumerate(self._split):
            if body.upper() == req_key and _sheets_compatible(req_sheet, sheet):
                return i

        # 整表请求：请求只有 sheet 名，数据源回显为具体矩形。
        # Sheet1、Q1 之类的名字也能按单元格解析，所以不看解析结果
        if req_sheet is None and req_body:
            req_name = unquote_sheet_name(req_body).casefold()
            for i, (sheet, _) in enumerate(self._split):
                if sheet is not None and sheet.casefold() == req_name:
                    return i
        return None

    def _match_geometry(self, requested: str) -> Optional[int]:
        req = parse_range(requested)
        if not req.ok:
            return None
        for i, echoed in enumerate(self.echoed):
            got = parse_range(echoed.range)
            if not got.ok:
                continue
            if got.address.geometry != req.address.geometry:
                continue
            if _sheets_compatible(req.address.sheet_qualifier, got.address.sheet_qualifier):
                return i
        return None
