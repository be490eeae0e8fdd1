"""Tests for the recently viewed list."""

import asyncio
import json

import pytest
from ordering.cart.store import MemoryKeyValueStore
from ordering.errors import CatalogUnavailable
from ordering.tracking.items import ItemKind
from ordering.tracking.recently_viewed import MAX_ITEMS, STORAGE_KEY, RecentlyViewed


@pytest.fixture()
def viewed(kv):
    return RecentlyViewed(kv)


def test_newest_first(viewed):
    viewed.add("product", "p-1")
    viewed.add("vehicle", "v-1")
    assert [item.ref.item_id for item in viewed.items] == ["v-1", "p-1"]


def test_viewing_again_moves_to_front_without_duplicates(viewed):
    viewed.add("product", "p-1")
    viewed.add("product", "p-2")
    viewed.add("product", "p-1")
    assert viewed.product_ids() == ["p-1", "p-2"]


def test_same_id_of_different_kinds_are_kept(viewed):
    viewed.add("product", "1")
    viewed.add("vehicle", "1")
    assert viewed.product_ids() == ["1"]
    assert viewed.vehicle_ids() == ["1"]


def test_capped_at_max_items(viewed):
    for i in range(MAX_ITEMS + 3):
        viewed.add(ItemKind.PRODUCT, f"p-{i}")
    assert len(viewed.items) == MAX_ITEMS
    assert viewed.items[0].ref.item_id == f"p-{MAX_ITEMS + 2}"


def test_persists_across_instances(kv, viewed):
    viewed.add("product", "p-1")
    viewed.add("vehicle", "v-1")
    assert RecentlyViewed(kv).vehicle_ids() == ["v-1"]
    assert json.loads(kv.data[STORAGE_KEY])[0]["type"] == "vehicle"


def test_malformed_storage_is_discarded():
    kv = MemoryKeyValueStore({STORAGE_KEY: "not json"})
    viewed = RecentlyViewed(kv)
    assert viewed.items == []
    assert STORAGE_KEY not in kv.data


def test_unknown_kind_in_storage_is_discarded():
    kv = MemoryKeyValueStore({STORAGE_KEY: json.dumps([{"id": "1", "type": "boat", "viewed_at": "2024-01-01T00:00:00"}])})
    assert RecentlyViewed(kv).items == []


def test_clear(kv, viewed):
    viewed.add("product", "p-1")
    viewed.clear()
    assert viewed.items == []
    assert STORAGE_KEY not in kv.data


class TestPrune:
    def test_drops_vanished_items(self, viewed, catalog):
        catalog.add_product("p-1")
        catalog.add_vehicle("v-1")
        catalog.add_vehicle("v-2")
        catalog.soft_delete_vehicle("v-2")
        for kind, item_id in [("product", "p-1"), ("product", "p-gone"), ("vehicle", "v-1"), ("vehicle", "v-2")]:
            viewed.add(kind, item_id)

        dropped = asyncio.run(viewed.prune(catalog))

        assert dropped == 2
        assert viewed.product_ids() == ["p-1"]
        assert viewed.vehicle_ids() == ["v-1"]

    def test_keeps_everything_on_catalog_failure(self, viewed, catalog):
        viewed.add("product", "p-1")
        catalog.configure(should_succeed=False)
        with pytest.raises(CatalogUnavailable):
            asyncio.run(viewed.prune(catalog))
        assert viewed.product_ids() == ["p-1"]

    def test_empty_list_makes_no_calls(self, viewed, catalog):
        assert asyncio.run(viewed.prune(catalog)) == 0
        assert catalog.calls == []
