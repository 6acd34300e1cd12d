"""
A1 范围解析

支持的格式：
- A2:A13
- C1
- Sheet1!A2:A13
- 'Sheet Name'!A2:A13（单引号内的 '' 表示一个单引号）
"""
import logging
import re
from typing import Optional, Tuple

from .models import RangeAddress, RangeParseResult

logger = logging.getLogger("app.services.sheets.ranges")

_CELL_RANGE_PATTERN = re.compile(r"^([A-Za-z]+)(\d+)(?::([A-Za-z]+)(\d+))?$")
_PLAIN_SHEET_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_CELL_LIKE_PATTERN = re.compile(r"^[A-Za-z]{1,3}\d+$")


def split_sheet_qualifier(range_str: str) -> Tuple[Optional[str], str]:
    """拆分出 sheet 名称（已去引号）与单元格部分；无 '!' 时 sheet 为 None"""
    value = (range_str or "").strip()
    if "!" not in value:
        return None, value
    sheet, _, body = value.rpartition("!")
    return unquote_sheet_name(sheet), body.strip()


def unquote_sheet_name(name: str) -> str:
    name = name.strip()
    if len(name) >= 2 and name.startswith("'") and name.endswith("'"):
        return name[1:-1].replace("''", "'")
    return name


def quote_sheet_name(name: str) -> str:
    """按 A1 语法需要为 sheet 名称加引号"""
    if _PLAIN_SHEET_PATTERN.match(name) and not _CELL_LIKE_PATTERN.match(name):
        return name
    return "'" + name.replace("'", "''") + "'"


def parse_range(range_str: str) -> RangeParseResult:
    """
    解析范围字符串

    Args:
        range_str: 范围字符串，如 "'Sheet1'!A2:A13"

    Returns:
        RangeParseResult；无法匹配时 ok 为 False，调用方自行决定默认窗口
    """
    raw = range_str if isinstance(range_str, str) else ""
    sheet, body = split_sheet_qualifier(raw)
    match = _CELL_RANGE_PATTERN.match(body)
    if not match:
        logger.warning(f"无法解析范围: {raw!r}")
        return RangeParseResult(raw=raw, error=f"unrecognised range: {raw!r}")

    column = match.group(1).upper()
    start_row = int(match.group(2))
    if match.group(3):
        end_column = match.group(3).upper()
        end_row = int(match.group(4))
    else:
        end_column = column
        end_row = start_row

    if start_row < 1 or end_row < 1:
        logger.warning(f"范围行号必须从 1 开始: {raw!r}")
        return RangeParseResult(raw=raw, error=f"row index out of range: {raw!r}")

    if end_row < start_row:
        start_row, end_row = end_row, start_row

    address = RangeAddress(
        column=column,
        start_row=start_row,
        end_row=end_row,
        end_column=end_column,
        sheet_qualifier=sheet or None,
    )
    return RangeParseResult(raw=raw, address=address)


def column_letter(range_str: str) -> Optional[str]:
    """返回范围的起始列字母（大写），无法解析时返回 None"""
    return parse_range(range_str).column_or(None)


def format_range(
    column: str,
    start_row: int,
    end_row: Optional[int] = None,
    sheet_qualifier: Optional[str] = None,
) -> str:
    """按列与行区间拼装范围字符串；单行时输出单个单元格"""
    column = column.upper()
    if end_row is None or end_row == start_row:
        body = f"{column}{start_row}"
    else:
        body = f"{column}{start_row}:{column}{end_row}"
    if sheet_qualifier:
        return f"{quote_sheet_name(sheet_qualifier)}!{body}"
    return body

