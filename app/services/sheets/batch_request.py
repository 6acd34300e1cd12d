"""
批量请求构建 - 把 label / stat / overlay 范围以及派生的表头、徽标范围
合并成一次 batchGet 所需的范围列表
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from app.services.base import BaseService, InvalidRangeRequestError
from .models import RangeRole, RoleTaggedRange
from .ranges import format_range, parse_range

HEADER_ROW = 1


@dataclass
class BatchRequest:
    """一次批量读取的完整描述"""
    label: RoleTaggedRange
    stat: RoleTaggedRange
    badge: RoleTaggedRange
    badge_header: RoleTaggedRange
    overlays: List[RoleTaggedRange] = field(default_factory=list)
    # 与 overlays 一一对应；列无法解析时为 None
    overlay_headers: List[Optional[RoleTaggedRange]] = field(default_factory=list)
    ranges: List[str] = field(default_factory=list)

    def tagged(self) -> List[RoleTaggedRange]:
        """按请求顺序返回全部带角色的范围"""
        items = [self.label, self.stat, self.badge, *self.overlays]
        items.extend(h for h in self.overlay_headers if h is not None)
        items.append(self.badge_header)
        return items


def dedupe_ranges(ranges: Iterable[str]) -> List[str]:
    """去重并保持首次出现的顺序"""
    seen = set()
    out: List[str] = []
    for r in ranges:
        if r in seen:
            continue
        seen.add(r)
        out.append(r)
    return out


class BatchRequestBuilder(BaseService):
    """批量请求构建器"""

    def __init__(
        self,
        badge_column: str,
        default_start_row: int = 2,
        default_end_row: int = 13,
    ):
        """
        Args:
            badge_column: 徽标所在列字母
            default_start_row: 锚定范围无法解析时使用的起始行
            default_end_row: 锚定范围无法解析时使用的结束行
        """
        super().__init__("BatchRequestBuilder")
        if not badge_column or not badge_column.isalpha():
            raise InvalidRangeRequestError(
                f"无效的徽标列: {badge_column!r}",
                code="INVALID_BADGE_COLUMN",
            )
        self.badge_column = badge_column.upper()
        self.default_start_row = default_start_row
        self.default_end_row = default_end_row

    def build(
        self,
        label_range: str,
        stat_range: str,
        overlay_ranges: Sequence[str] = (),
    ) -> BatchRequest:
        """
        构建批量请求

        Args:
            label_range: 标签列范围
            stat_range: 数值列范围
            overlay_ranges: 叠加列范围（有序）

        Returns:
            BatchRequest

        Raises:
            InvalidRangeRequestError: label/stat 缺失，或组装结果遗漏了某个范围
        """
        label_str = self._require(label_range, "label")
        stat_str = self._require(stat_range, "stat")

        overlay_strs: List[str] = []
        for r in overlay_ranges or ():
            value = (r or "").strip()
            if not value:
                self.log_warning("忽略空的 overlay 范围")
                continue
            overlay_strs.append(value)

        label_parsed = parse_range(label_str)
        label = RoleTaggedRange(RangeRole.LABEL, label_str, label_parsed.address)
        stat = RoleTaggedRange(RangeRole.STAT, stat_str, parse_range(stat_str).address)

        overlays: List[RoleTaggedRange] = []
        overlay_headers: List[Optional[RoleTaggedRange]] = []
        for i, r in enumerate(overlay_strs):
            parsed = parse_range(r)
            overlays.append(RoleTaggedRange(RangeRole.OVERLAY, r, parsed.address, index=i))
            if parsed.ok:
                header_str = format_range(
                    parsed.address.column, HEADER_ROW,
                    sheet_qualifier=parsed.address.sheet_qualifier,
                )
                overlay_headers.append(
                    RoleTaggedRange(RangeRole.HEADER, header_str, parse_range(header_str).address, index=i)
                )
            else:
                self.log_warning(f"overlay 范围无法解析，跳过表头: {r!r}")
                overlay_headers.append(None)

        # 徽标行区间跟随第一个 overlay，没有 overlay 时跟随 label
        anchor = parse_range(overlay_strs[0]) if overlay_strs else label_parsed
        start_row, end_row = anchor.rows_or(self.default_start_row, self.default_end_row)
        sheet = anchor.sheet_or(None)

        badge_str = format_range(self.badge_column, start_row, end_row, sheet_qualifier=sheet)
        badge = RoleTaggedRange(RangeRole.BADGE, badge_str, parse_range(badge_str).address)
        badge_header_str = format_range(self.badge_column, HEADER_ROW, sheet_qualifier=sheet)
        badge_header = RoleTaggedRange(
            RangeRole.HEADER, badge_header_str, parse_range(badge_header_str).address
        )

        request = BatchRequest(
            label=label,
            stat=stat,
            badge=badge,
            badge_header=badge_header,
            overlays=overlays,
            overlay_headers=overlay_headers,
        )
        request.ranges = dedupe_ranges(t.range for t in request.tagged())
        self._verify_coverage(request)

        self.record_metric("ranges_requested", len(request.ranges))
        self.log_debug(f"批量请求范围: {request.ranges}")
        return request

    def _require(self, value: Optional[str], role: str) -> str:
        text = (value or "").strip()
        if not text:
            raise InvalidRangeRequestError(
                f"缺少 {role} 范围",
                code="MISSING_RANGE",
                details={"role": role},
            )
        return text

    def _verify_coverage(self, request: BatchRequest) -> None:
        present = set(request.ranges)
        missing = [t.range for t in request.tagged() if t.range not in present]
        if missing:
            raise InvalidRangeRequestError(
                "批量请求遗漏了部分范围",
                code="RANGE_DROPPED",
                details={"missing": missing},
            )
