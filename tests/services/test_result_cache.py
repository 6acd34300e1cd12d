import asyncio
import json
import os

from app.services.cache import CacheKeys, FileBlobStore, MemoryBlobStore, ResultCache
from app.services.sheets import NormalizedFetchResult, OverlayColumn


def _result():
    return NormalizedFetchResult(
        labels=["A", "B"],
        stats=["1", "2"],
        badges=["", "Editor's Pick"],
        overlays=[OverlayColumn(range="C2:C13", column="C", header="Price", values=["$1", "$2"])],
        badge_header="Badge",
    )


def test_chart_data_key():
    assert CacheKeys.chart_data_key("abc") == "scb:chart:data:abc"
    assert CacheKeys.chart_data_key("abc", prefix="test") == "test:chart:data:abc"


def test_save_and_load_round_trip():
    cache = ResultCache(MemoryBlobStore())

    async def run():
        await cache.save("block-1", _result())
        return await cache.load("block-1")

    loaded = asyncio.run(run())
    assert loaded == _result()


def test_load_missing_returns_none():
    assert asyncio.run(ResultCache(MemoryBlobStore()).load("nope")) is None


def test_corrupt_entries_are_treated_as_absent():
    store = MemoryBlobStore()
    cache = ResultCache(store)
    bad_payloads = [
        "not json",
        json.dumps([1, 2]),
        json.dumps({"labels": ["A"]}),
        json.dumps({"labels": ["A"], "stats": [], "badges": [""], "overlays": []}),
    ]

    async def run():
        out = []
        for payload in bad_payloads:
            await store.put(cache.key_for("block-1"), payload)
            out.append(await cache.load("block-1"))
        return out

    assert asyncio.run(run()) == [None] * len(bad_payloads)
    assert cache.get_metrics()["corrupt_entries"] == len(bad_payloads)
    # 损坏的数据不会被删除
    assert asyncio.run(store.get(cache.key_for("block-1"))) is not None


def test_file_store_writes_whole_file(tmp_path):
    store = FileBlobStore(str(tmp_path / "cache"))
    cache = ResultCache(store)

    async def run():
        await cache.save("block-1", _result())
        await cache.save("block-1", _result())
        return await cache.load("block-1")

    assert asyncio.run(run()) == _result()
    files = os.listdir(tmp_path / "cache")
    assert files == ["scb_chart_data_block-1.json"]


def test_file_store_missing_key(tmp_path):
    store = FileBlobStore(str(tmp_path))
    assert asyncio.run(store.get("scb:chart:data:none")) is None


def test_serialized_form_uses_api_field_names():
    data = _result().to_dict()
    assert set(data) == {"labels", "stats", "badges", "badgeHeader", "overlays"}
    assert data["overlays"][0] == {
        "range": "C2:C13", "column": "C", "header": "Price", "values": ["$1", "$2"],
    }
