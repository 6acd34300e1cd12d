"""
图表取数服务：一次批量读取 label / stat / badge / overlay 及其表头，
对账回显范围后按行域对齐为 NormalizedFetchResult。
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from app.services.base import BaseService, InvalidRangeRequestError
from app.services.sheets import (
    BatchRequestBuilder,
    NormalizedFetchResult,
    OverlayColumn,
    RangeReconciler,
    RoleTaggedRange,
    SheetService,
    fit_to_length,
    flatten_column,
    flatten_column_preserve_length,
)

ROW_DOMAIN_LABELS = "labels"
ROW_DOMAIN_FIRST_OVERLAY = "first_overlay"


@dataclass
class ChartFetchRequest:
    """一个图表区块的取数参数"""
    spreadsheet_id: str
    label_range: str
    stat_range: str
    overlay_ranges: List[str] = field(default_factory=list)


class ChartDataService(BaseService):
    """批量取数与归一化"""

    def __init__(
        self,
        sheet_service: SheetService,
        request_builder: BatchRequestBuilder,
        row_domain_source: str = ROW_DOMAIN_LABELS,
    ) -> None:
        super().__init__("ChartDataService")
        if row_domain_source not in (ROW_DOMAIN_LABELS, ROW_DOMAIN_FIRST_OVERLAY):
            raise ValueError(f"未知的行域基准: {row_domain_source!r}")
        self.sheet_service = sheet_service
        self.request_builder = request_builder
        self.row_domain_source = row_domain_source

    async def fetch(self, request: ChartFetchRequest) -> NormalizedFetchResult:
        return await self.fetch_and_normalize(
            request.spreadsheet_id,
            request.label_range,
            request.stat_range,
            request.overlay_ranges,
        )

    async def fetch_and_normalize(
        self,
        spreadsheet_id: str,
        label_range: str,
        stat_range: str,
        overlay_ranges: Sequence[str] = (),
    ) -> NormalizedFetchResult:
        """
        读取并归一化图表数据

        - 组装批量请求（含派生的表头、徽标范围）
        - 仅调用一次数据源
        - 对账每个请求范围，行数由 row_domain_source 决定
        - 徽标按行号对齐，其余列截断或补齐到行数

        Raises:
            InvalidRangeRequestError: 缺少表格 ID 或范围
            ProviderFetchError: 数据源调用失败
        """
        if not (spreadsheet_id or "").strip():
            raise InvalidRangeRequestError("缺少表格 ID", code="MISSING_SPREADSHEET_ID")
        spreadsheet_id = spreadsheet_id.strip()

        batch = self.request_builder.build(label_range, stat_range, overlay_ranges)
        echoed = await self.sheet_service.batch_get(spreadsheet_id, batch.ranges)
        reconciler = RangeReconciler(echoed)

        labels = flatten_column(reconciler.resolve_tagged(batch.label))
        stats = flatten_column(reconciler.resolve_tagged(batch.stat))
        overlay_values = [
            flatten_column(reconciler.resolve_tagged(o)) for o in batch.overlays
        ]

        row_count = self._row_count(labels, overlay_values)
        badges = flatten_column_preserve_length(
            reconciler.resolve_tagged(batch.badge), row_count
        )

        overlays: List[OverlayColumn] = []
        for tagged, header_tagged, values in zip(batch.overlays, batch.overlay_headers, overlay_values):
            column = tagged.address.column if tagged.address else None
            overlays.append(OverlayColumn(
                range=tagged.range,
                column=column,
                header=self._resolve_header(reconciler, header_tagged, column),
                values=self._fit("overlay " + tagged.range, values, row_count),
            ))

        result = NormalizedFetchResult(
            labels=self._fit("label", labels, row_count),
            stats=self._fit("stat", stats, row_count),
            badges=badges,
            overlays=overlays,
            badge_header=self._resolve_header(
                reconciler, batch.badge_header, self.request_builder.badge_column
            ),
        )

        self.record_metric("rows", row_count)
        self.record_metric("reconcile_misses", len(reconciler.misses))
        self.log_info(
            f"取数完成: id={spreadsheet_id}, rows={row_count}, overlays={len(overlays)}, "
            f"misses={len(reconciler.misses)}"
        )
        return result

    def _row_count(self, labels: List[str], overlay_values: List[List[str]]) -> int:
        if self.row_domain_source == ROW_DOMAIN_FIRST_OVERLAY and overlay_values:
            return len(overlay_values[0])
        return len(labels)

    def _fit(self, name: str, values: List[str], row_count: int) -> List[str]:
        if len(values) != row_count:
            self.log_warning(f"{name} 列长度 {len(values)} 与行数 {row_count} 不一致，已对齐")
        return fit_to_length(values, row_count)

    @staticmethod
    def _resolve_header(
        reconciler: RangeReconciler,
        header: Optional[RoleTaggedRange],
        column: Optional[str],
    ) -> str:
        """表头单元格为空时退回列字母"""
        fallback = column or ""
        if header is None:
            return fallback
        matrix: List[List[Any]] = reconciler.resolve_tagged(header)
        cells = flatten_column(matrix)
        text = cells[0].strip() if cells else ""
        return text or fallback
