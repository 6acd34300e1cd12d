"""
列对齐 - 把数据源返回的二维数组压平成单列字符串
"""
from typing import Any, List, Sequence


def cell_to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _first_cell(row: Any) -> Any:
    if isinstance(row, (list, tuple)) and row:
        return row[0]
    return None


def flatten_column(matrix: Sequence[Sequence[Any]]) -> List[str]:
    """取每行第一个单元格；没有第一个单元格的行直接跳过"""
    out: List[str] = []
    for row in matrix or ():
        value = _first_cell(row)
        if value is None:
            continue
        out.append(cell_to_str(value))
    return out


def flatten_column_preserve_length(matrix: Sequence[Sequence[Any]], expected_count: int) -> List[str]:
    """
    按行号对齐压平，缺失或空的单元格输出空字符串

    用于徽标列：badges[i] 必须与 labels[i] 对应，
    即使中间某些行没有徽标也不能让后面的值前移。
    """
    rows = list(matrix or ())
    out: List[str] = []
    for i in range(max(expected_count, 0)):
        value = _first_cell(rows[i]) if i < len(rows) else None
        text = cell_to_str(value)
        out.append(text if text.strip() else "")
    return out


def fit_to_length(values: Sequence[str], expected_count: int) -> List[str]:
    """截断或在末尾补空字符串，使列长度等于行数"""
    expected_count = max(expected_count, 0)
    out = list(values[:expected_count])
    out.extend("" for _ in range(expected_count - len(out)))
    return out
