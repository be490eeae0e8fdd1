"""Persistent cart store — write-through serialization of the client cart.

Merchandise and vehicles are kept under two independent keys of a client
key-value store. Every successful cart mutation rewrites the affected
collection in full. On load, an absent or malformed collection yields an
empty one; loading never fails.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

import structlog
from protean.exceptions import ValidationError

from ordering.cart.cart import Cart, CartLineItem, ProductSnapshot, VehicleCartLineItem, VehicleSnapshot

logger = structlog.get_logger(__name__)

MERCHANDISE_KEY = "cart"
VEHICLES_KEY = "vehicle_cart"

_PRODUCT_FIELDS = ("product_id", "name", "price", "discount_percentage", "stock_quantity", "is_active", "tax_rate")
_VEHICLE_FIELDS = ("vehicle_id", "name", "price", "discount_percentage", "is_sold", "tax_rate")


# ---------------------------------------------------------------------------
# Key-value port and adapters
# ---------------------------------------------------------------------------
class KeyValueStore(ABC):
    """Client-scoped string storage. Last write wins per key."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore(KeyValueStore):
    """Key-value store held in memory, for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.write_count += 1

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """Key-value store persisted as a single JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Unreadable key-value file, starting empty", path=str(self.path))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


# ---------------------------------------------------------------------------
# Cart serialization
# ---------------------------------------------------------------------------
def _product_to_dict(snapshot: ProductSnapshot) -> dict:
    return {name: getattr(snapshot, name) for name in _PRODUCT_FIELDS}


def _vehicle_to_dict(snapshot: VehicleSnapshot) -> dict:
    return {name: getattr(snapshot, name) for name in _VEHICLE_FIELDS}


class CartStore:
    """Loads and saves a ``Cart`` through a ``KeyValueStore``."""

    def __init__(self, kv: KeyValueStore, session_id: str | None = None):
        self.kv = kv
        self.session_id = session_id

    def load(self) -> Cart:
        cart = Cart.create(session_id=self.session_id)

        for raw in self._read_collection(MERCHANDISE_KEY):
            cart.add_items(CartLineItem(product=ProductSnapshot(**raw["product"]), quantity=raw["quantity"]))
        for raw in self._read_collection(VEHICLES_KEY, item_key="vehicle"):
            cart.add_vehicles(VehicleCartLineItem(vehicle=VehicleSnapshot(**raw["vehicle"])))

        logger.debug(
            "Cart rehydrated",
            session_id=self.session_id,
            merchandise_lines=len(cart.items),
            vehicle_lines=len(cart.vehicles),
        )
        return cart

    def _read_collection(self, key: str, item_key: str = "product") -> list[dict]:
        """Return the stored entries of one collection, or ``[]`` if absent or malformed.

        Entries are validated up front so that a single bad entry discards the
        whole collection rather than leaving a half-loaded cart.
        """
        raw = self.kv.get(key)
        if not raw:
            return []

        try:
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError("collection is not a list")
            seen = set()
            for entry in entries:
                if item_key == "product":
                    ProductSnapshot(**entry["product"])
                    if not isinstance(entry["quantity"], int) or entry["quantity"] < 1:
                        raise ValueError("quantity must be a positive integer")
                    ref = str(entry["product"]["product_id"])
                else:
                    VehicleSnapshot(**entry["vehicle"])
                    ref = str(entry["vehicle"]["vehicle_id"])
                if ref in seen:
                    raise ValueError(f"duplicate entry {ref}")
                seen.add(ref)
        except (ValueError, TypeError, KeyError, ValidationError) as exc:
            logger.warning("Discarding malformed cart collection", key=key, error=str(exc))
            return []

        return entries

    def _write(self, key: str, payload: list[dict]) -> bool:
        try:
            self.kv.set(key, json.dumps(payload))
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Cart write-through failed", key=key, error=str(exc))
            return False
        return True

    def save_merchandise(self, cart: Cart) -> bool:
        payload = [{"product": _product_to_dict(item.product), "quantity": item.quantity} for item in cart.items]
        return self._write(MERCHANDISE_KEY, payload)

    def save_vehicles(self, cart: Cart) -> bool:
        payload = [{"vehicle": _vehicle_to_dict(line.vehicle)} for line in cart.vehicles]
        return self._write(VEHICLES_KEY, payload)

    def save(self, cart: Cart) -> bool:
        merchandise_ok = self.save_merchandise(cart)
        vehicles_ok = self.save_vehicles(cart)
        return merchandise_ok and vehicles_ok

    def clear(self) -> bool:
        try:
            self.kv.delete(MERCHANDISE_KEY)
            self.kv.delete(VEHICLES_KEY)
        except OSError as exc:
            logger.error("Cart clear failed", error=str(exc))
            return False
        return True
