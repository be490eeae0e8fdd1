"""Fake catalogue adapter — in-memory product and vehicle records for testing."""

import asyncio
from datetime import UTC, datetime

from catalogue.port import CatalogPort


class FakeCatalog(CatalogPort):
    """Catalogue adapter backed by dictionaries, with configurable failures and latency."""

    def __init__(self):
        self.products: dict[str, dict] = {}
        self.vehicles: dict[str, dict] = {}
        self.should_succeed = True
        self.failure_reason = "Catalogue unavailable"
        self.delay = 0.0
        self.unresolved_ids: set[str] = set()
        self.calls: list[tuple[str, list[str]]] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Catalogue unavailable",
        delay: float = 0.0,
        unresolved_ids=None,
    ):
        """Configure the fake adapter behavior for testing.

        ``unresolved_ids`` are silently left out of responses, simulating a
        partial fetch.
        """
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.delay = delay
        self.unresolved_ids = {str(i) for i in (unresolved_ids or ())}

    # -------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------
    def add_product(
        self,
        product_id,
        name="Product",
        price=0.0,
        stock_quantity=1,
        discount_percentage=None,
        is_active=True,
        tax_rate=19.0,
    ) -> dict:
        record = {
            "id": str(product_id),
            "name": name,
            "price": price,
            "discount_percentage": discount_percentage,
            "stock_quantity": stock_quantity,
            "is_active": is_active,
            "tax_rate": tax_rate,
        }
        self.products[str(product_id)] = record
        return record

    def add_vehicle(
        self,
        vehicle_id,
        name="Vehicle",
        price=0.0,
        discount_percentage=None,
        is_sold=False,
        tax_rate=19.0,
    ) -> dict:
        record = {
            "id": str(vehicle_id),
            "name": name,
            "price": price,
            "discount_percentage": discount_percentage,
            "is_sold": is_sold,
            "deleted_at": None,
            "tax_rate": tax_rate,
        }
        self.vehicles[str(vehicle_id)] = record
        return record

    def update_product(self, product_id, **changes) -> None:
        self.products[str(product_id)].update(changes)

    def remove_product(self, product_id) -> None:
        self.products.pop(str(product_id), None)

    def mark_vehicle_sold(self, vehicle_id) -> None:
        self.vehicles[str(vehicle_id)]["is_sold"] = True

    def soft_delete_vehicle(self, vehicle_id) -> None:
        self.vehicles[str(vehicle_id)]["deleted_at"] = datetime.now(UTC).isoformat()

    # -------------------------------------------------------------------
    # Port
    # -------------------------------------------------------------------
    async def _respond(self, kind: str, source: dict, ids: list[str]) -> list[dict]:
        self.calls.append((kind, list(ids)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        return [
            dict(source[str(i)]) for i in ids if str(i) in source and str(i) not in self.unresolved_ids
        ]

    async def fetch_products_by_ids(self, ids: list[str]) -> list[dict]:
        return await self._respond("products", self.products, ids)

    async def fetch_vehicles_by_ids(self, ids: list[str]) -> list[dict]:
        # Soft-deleted vehicles are excluded, as the real catalogue would
        return [v for v in await self._respond("vehicles", self.vehicles, ids) if v.get("deleted_at") is None]

    def reset(self):
        """Clear records and restore default behavior (useful between tests)."""
        self.products.clear()
        self.vehicles.clear()
        self.calls.clear()
        self.configure()
