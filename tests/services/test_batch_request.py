import pytest

from app.services.base import InvalidRangeRequestError
from app.services.sheets import BatchRequestBuilder, RangeRole


def _builder(badge="B"):
    return BatchRequestBuilder(badge_column=badge, default_start_row=2, default_end_row=13)


def test_build_orders_and_derives_ranges():
    req = _builder().build("A2:A13", "O2:O13", ["C2:C13", "D2:D13"])
    assert req.ranges == [
        "A2:A13", "O2:O13", "B2:B13", "C2:C13", "D2:D13", "C1", "D1", "B1",
    ]
    assert req.badge.role is RangeRole.BADGE
    assert [h.range for h in req.overlay_headers] == ["C1", "D1"]
    assert [o.index for o in req.overlays] == [0, 1]


def test_badge_follows_first_overlay_rows():
    req = _builder().build("A2:A13", "O2:O13", ["C5:C9"])
    assert req.badge.range == "B5:B9"


def test_badge_follows_label_without_overlays():
    req = _builder("c").build("A3:A7", "O3:O7")
    assert req.badge.range == "C3:C7"
    assert req.badge_header.range == "C1"


def test_badge_uses_default_window_when_anchor_unparseable():
    req = _builder().build("Products", "O2:O13")
    assert req.badge.range == "B2:B13"


def test_sheet_qualifier_is_carried_to_derived_ranges():
    req = _builder().build("'Data'!A2:A13", "'Data'!O2:O13", ["'Price List'!C2:C13"])
    assert req.badge.range == "'Price List'!B2:B13"
    assert req.overlay_headers[0].range == "'Price List'!C1"
    assert req.badge_header.range == "'Price List'!B1"


def test_duplicate_ranges_are_requested_once():
    req = _builder().build("A2:A13", "A2:A13", ["B2:B13", "C2:C13", "C2:C13"])
    assert req.ranges.count("A2:A13") == 1
    assert req.ranges.count("B2:B13") == 1
    assert req.ranges.count("C2:C13") == 1
    assert req.ranges.count("C1") == 1
    # 每个带角色的范围都在请求列表中
    assert {t.range for t in req.tagged()} <= set(req.ranges)


def test_blank_overlays_are_skipped():
    req = _builder().build("A2:A13", "O2:O13", ["", "  ", "C2:C13"])
    assert [o.range for o in req.overlays] == ["C2:C13"]


def test_unparseable_overlay_has_no_header_but_is_still_requested():
    req = _builder().build("A2:A13", "O2:O13", ["Prices"])
    assert "Prices" in req.ranges
    assert req.overlay_headers == [None]


@pytest.mark.parametrize("label,stat", [("", "O2:O13"), ("A2:A13", " "), (None, "O2:O13")])
def test_missing_label_or_stat_fails_loudly(label, stat):
    with pytest.raises(InvalidRangeRequestError):
        _builder().build(label, stat, [])


def test_invalid_badge_column_rejected():
    with pytest.raises(InvalidRangeRequestError):
        BatchRequestBuilder(badge_column="B1")
