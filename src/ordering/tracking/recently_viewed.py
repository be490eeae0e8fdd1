"""Recently viewed items — a small per-device list, newest first.

Viewing an item moves it to the front; the list keeps at most
``MAX_ITEMS`` distinct items. It is stored as JSON under a single key of the
client key-value store. Unreadable data is discarded.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from catalogue.port import CatalogPort
from ordering.cart.store import KeyValueStore
from ordering.tracking.items import ItemKind, ItemRef, existing_refs

logger = structlog.get_logger(__name__)

STORAGE_KEY = "recently_viewed_items"
MAX_ITEMS = 10


@dataclass(frozen=True)
class ViewedItem:
    ref: ItemRef
    viewed_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.ref.item_id,
            "type": self.ref.kind.value,
            "viewed_at": self.viewed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "ViewedItem":
        return cls(ItemRef.of(raw["type"], raw["id"]), datetime.fromisoformat(raw["viewed_at"]))


class RecentlyViewed:
    def __init__(self, kv: KeyValueStore, limit: int = MAX_ITEMS):
        self.kv = kv
        self.limit = limit
        self.items: list[ViewedItem] = self._load()

    def _load(self) -> list[ViewedItem]:
        raw = self.kv.get(STORAGE_KEY)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError("recently viewed data is not a list")
            items = [ViewedItem.from_dict(entry) for entry in entries]
        except (ValueError, TypeError, KeyError) as exc:
            logger.warning("Discarding malformed recently viewed data", error=str(exc))
            self.kv.delete(STORAGE_KEY)
            return []
        return items[: self.limit]

    def _save(self) -> None:
        self.kv.set(STORAGE_KEY, json.dumps([item.to_dict() for item in self.items]))

    def add(self, kind, item_id) -> None:
        ref = ItemRef.of(kind, item_id)
        others = [item for item in self.items if item.ref != ref]
        self.items = [ViewedItem(ref, datetime.now(UTC)), *others][: self.limit]
        self._save()

    def clear(self) -> None:
        self.items = []
        self.kv.delete(STORAGE_KEY)

    def _ids_of(self, kind: ItemKind) -> list[str]:
        return [item.ref.item_id for item in self.items if item.ref.kind is kind]

    def product_ids(self) -> list[str]:
        return self._ids_of(ItemKind.PRODUCT)

    def vehicle_ids(self) -> list[str]:
        return self._ids_of(ItemKind.VEHICLE)

    async def prune(self, catalog: CatalogPort) -> int:
        """Forget items the catalogue no longer lists. Returns how many were dropped."""
        if not self.items:
            return 0
        existing = await existing_refs(catalog, [item.ref for item in self.items])
        kept = [item for item in self.items if item.ref in existing]
        dropped = len(self.items) - len(kept)
        if dropped:
            self.items = kept
            self._save()
            logger.info("Recently viewed pruned", dropped=dropped)
        return dropped
