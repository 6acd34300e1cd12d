"""
图表视图数据 - 把归一化结果整理成前端直接可用的序列
"""
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

from app.services.sheets import NormalizedFetchResult

TOOLTIP_SEPARATOR = " • "
_NON_NUMERIC = re.compile(r"[^\d.\-]")


@dataclass
class ChartView:
    labels: List[str] = field(default_factory=list)
    values: List[float] = field(default_factory=list)
    tooltips: List[str] = field(default_factory=list)  # 每行一条，由各 overlay 拼接
    badges: List[str] = field(default_factory=list)
    badge_header: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "labels": self.labels,
            "values": self.values,
            "tooltips": self.tooltips,
            "badges": self.badges,
            "badgeHeader": self.badge_header,
        }


def parse_stat(raw: Any) -> float:
    """去掉 $、%、逗号等符号后解析数值，失败时为 0"""
    text = _NON_NUMERIC.sub("", "" if raw is None else str(raw))
    try:
        num = float(text)
    except ValueError:
        return 0.0
    return num if math.isfinite(num) else 0.0


def build_chart_view(result: NormalizedFetchResult) -> ChartView:
    rows = result.row_count
    tooltips: List[str] = []
    for i in range(rows):
        parts = []
        for overlay in result.overlays:
            value = overlay.values[i] if i < len(overlay.values) else ""
            if value == "":
                continue
            prefix = f"{overlay.header}: " if overlay.header else ""
            parts.append(f"{prefix}{value}")
        tooltips.append(TOOLTIP_SEPARATOR.join(parts))

    return ChartView(
        labels=list(result.labels),
        values=[parse_stat(s) for s in result.stats],
        tooltips=tooltips,
        badges=list(result.badges),
        badge_header=result.badge_header,
    )
