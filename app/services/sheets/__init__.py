"""
表格取数模块 - 范围解析、批量请求、对账与列对齐
"""

from .aligner import flatten_column, flatten_column_preserve_length, fit_to_length
from .batch_request import BatchRequest, BatchRequestBuilder
from .models import (
    EchoedRange,
    NormalizedFetchResult,
    OverlayColumn,
    RangeAddress,
    RangeParseResult,
    RangeRole,
    RoleTaggedRange,
)
from .ranges import column_letter, format_range, parse_range
from .reconciler import RangeReconciler
from .sheet_service import SheetDataProvider, SheetService

__all__ = [
    "flatten_column",
    "flatten_column_preserve_length",
    "fit_to_length",
    "BatchRequest",
    "BatchRequestBuilder",
    "EchoedRange",
    "NormalizedFetchResult",
    "OverlayColumn",
    "RangeAddress",
    "RangeParseResult",
    "RangeRole",
    "RoleTaggedRange",
    "column_letter",
    "format_range",
    "parse_range",
    "RangeReconciler",
    "SheetDataProvider",
    "SheetService",
]
