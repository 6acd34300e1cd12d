import os
import sys

import pytest

# Ensure project root is on sys.path when running tests without installing
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


class FakeProvider:
    """按请求范围回显数据的假数据源。

    responses: {请求范围: (回显范围, 二维数组)}；未配置的范围回显为空矩阵。
    """

    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def batch_get_values(self, spreadsheet_id, ranges):
        self.calls.append((spreadsheet_id, list(ranges)))
        if self.error is not None:
            raise self.error
        out = []
        for r in ranges:
            echoed, values = self.responses.get(r, (f"'Sheet1'!{r}", []))
            out.append((echoed, values))
        return out


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def product_provider():
    """三个产品 + 一个价格 overlay，第 2 行有徽标"""
    return FakeProvider({
        "A2:A13": ("'Sheet1'!A2:A13", [["Alpha"], ["Beta"], ["Gamma"]]),
        "O2:O13": ("'Sheet1'!O2:O13", [["4.5"], ["3.9"], ["4.1"]]),
        "C2:C13": ("'Sheet1'!C2:C13", [["$10"], ["$20"], ["$30"]]),
        "B2:B13": ("'Sheet1'!B2:B13", [[], ["Editor's Pick"]]),
        "C1": ("'Sheet1'!C1", [["Price"]]),
        "B1": ("'Sheet1'!B1", [["Badge"]]),
    })
