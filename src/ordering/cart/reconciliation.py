"""Cart reconciliation — repair a persisted cart against current catalogue truth.

The reconciler fetches exactly the products and vehicles referenced by the
cart, then:

* drops merchandise lines whose product is gone, inactive or out of stock,
* refreshes the snapshot of every surviving line and clamps its quantity to
  the available stock,
* drops vehicle lines whose vehicle is gone, sold or soft-deleted.

The whole plan is computed before the cart is touched, so a failed or timed
out catalogue call leaves the cart exactly as it was. Running it twice
against the same catalogue snapshot changes nothing the second time.
"""

import asyncio
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from catalogue.port import CatalogPort
from ordering.cart.cart import Cart, ProductSnapshot
from ordering.errors import CatalogUnavailable

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 5.0


async def fetch_records(fetch, ids: list[str], kind: str, timeout: float = DEFAULT_TIMEOUT) -> dict[str, dict]:
    """Call one catalogue lookup and index the records it returns by id.

    Ids missing from the response are simply absent from the result.

    Raises:
        CatalogUnavailable: the lookup raised or did not answer within ``timeout``.
    """
    if not ids:
        return {}
    try:
        records = await asyncio.wait_for(fetch(ids), timeout=timeout)
    except TimeoutError as exc:
        logger.warning("Catalogue lookup timed out", kind=kind, ids=ids, timeout=timeout)
        raise CatalogUnavailable(f"{kind} lookup timed out") from exc
    except Exception as exc:
        logger.warning("Catalogue lookup failed", kind=kind, ids=ids, error=str(exc))
        raise CatalogUnavailable(f"{kind} lookup failed: {exc}") from exc

    return {str(record["id"]): record for record in records or [] if record.get("id") is not None}


@dataclass(frozen=True)
class ReconciliationReport:
    """Outcome of one reconciliation pass.

    ``removed_merchandise`` counts units (a dropped line of 2 counts as 2);
    ``removed_vehicles`` counts vehicles.
    """

    removed_merchandise: int = 0
    removed_vehicles: int = 0
    clamped: int = 0
    refreshed: int = 0

    @property
    def total_removed(self) -> int:
        return self.removed_merchandise + self.removed_vehicles

    @property
    def changed(self) -> bool:
        return bool(self.total_removed or self.clamped or self.refreshed)

    @property
    def notice(self) -> str | None:
        """Single consolidated message for the user, or ``None`` when nothing was removed."""
        if not self.total_removed:
            return None
        noun = "item" if self.total_removed == 1 else "items"
        return f"{self.total_removed} {noun} removed from your cart because they are no longer available"


class CartReconciler:
    def __init__(self, catalog: CatalogPort, timeout: float = DEFAULT_TIMEOUT):
        self.catalog = catalog
        self.timeout = timeout

    async def reconcile(self, cart: Cart) -> ReconciliationReport:
        """Reconcile ``cart`` in place and report what changed.

        Raises:
            CatalogUnavailable: if either catalogue lookup fails. The cart is
                left untouched.
        """
        product_ids = list(dict.fromkeys(cart.product_ids()))
        vehicle_ids = list(dict.fromkeys(cart.vehicle_ids()))

        products = await fetch_records(self.catalog.fetch_products_by_ids, product_ids, "products", self.timeout)
        vehicles = await fetch_records(self.catalog.fetch_vehicles_by_ids, vehicle_ids, "vehicles", self.timeout)

        # Plan over the lines that were fetched. Lines added while the lookups
        # were pending are left for the next pass.
        fetched_products = set(product_ids)
        fetched_vehicles = set(vehicle_ids)
        drop_products: list[str] = []
        refresh: list[tuple[str, ProductSnapshot, int]] = []
        clamped = 0
        refreshed = 0

        for item in [i for i in cart.items if i.product_id in fetched_products]:
            record = products.get(item.product_id)
            snapshot = _snapshot_or_none(record)
            if snapshot is None or not snapshot.is_active or snapshot.stock_quantity <= 0:
                drop_products.append(item.product_id)
                continue

            quantity = max(1, min(item.quantity, snapshot.stock_quantity))
            if quantity != item.quantity:
                clamped += 1
            if not _same_snapshot(snapshot, item.product):
                refreshed += 1
            refresh.append((item.product_id, snapshot, quantity))

        drop_vehicles = [
            line.vehicle_id
            for line in cart.vehicles
            if line.vehicle_id in fetched_vehicles and _vehicle_gone(vehicles.get(line.vehicle_id))
        ]

        # Apply
        removed_merchandise = sum(cart.drop_merchandise(product_id) for product_id in drop_products)
        for product_id, snapshot, quantity in refresh:
            cart.refresh_merchandise(product_id, snapshot, quantity)
        removed_vehicles = sum(cart.drop_vehicle(vehicle_id) for vehicle_id in drop_vehicles)

        report = ReconciliationReport(
            removed_merchandise=removed_merchandise,
            removed_vehicles=removed_vehicles,
            clamped=clamped,
            refreshed=refreshed,
        )
        if report.changed:
            logger.info(
                "Cart reconciled",
                session_id=cart.session_id,
                removed_merchandise=report.removed_merchandise,
                removed_vehicles=report.removed_vehicles,
                clamped=report.clamped,
                refreshed=report.refreshed,
            )
        return report


def _snapshot_or_none(record: dict | None) -> ProductSnapshot | None:
    if record is None:
        return None
    try:
        return ProductSnapshot.from_record(record)
    except (KeyError, ValidationError) as exc:
        logger.warning("Malformed catalogue product record", product_id=record.get("id"), error=str(exc))
        return None


_SNAPSHOT_FIELDS = ("name", "price", "discount_percentage", "stock_quantity", "is_active", "tax_rate")


def _same_snapshot(a: ProductSnapshot, b: ProductSnapshot) -> bool:
    return all(getattr(a, name) == getattr(b, name) for name in _SNAPSHOT_FIELDS)


def _vehicle_gone(record: dict | None) -> bool:
    return record is None or bool(record.get("is_sold")) or record.get("deleted_at") is not None
