"""Cart manager — the UI-facing surface of the client cart.

One manager is built per client session and handed to the views that need
it. Every operation runs synchronously against the in-memory ``Cart``; a
successful mutation is immediately written through to the ``CartStore``.
Failures never change the cart. They are returned as ``False`` and recorded
as a ``CartNotice`` for the UI to display.

Reconciliation is the only asynchronous operation. Concurrent calls on the
same manager are coalesced into a single pass.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

import structlog
from protean.exceptions import ValidationError

from ordering.cart.cart import Cart, CartTotals, ProductSnapshot, VehicleSnapshot
from ordering.cart.reconciliation import CartReconciler, ReconciliationReport
from ordering.cart.store import CartStore
from ordering.errors import CapacityExceeded, CatalogUnavailable, DuplicateItem, ItemUnavailable, LineNotFound

logger = structlog.get_logger(__name__)


class NoticeKind(Enum):
    LIMIT_REACHED = "limit_reached"
    DUPLICATE_ITEM = "duplicate_item"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    ITEMS_REMOVED = "items_removed"
    CATALOG_UNAVAILABLE = "catalog_unavailable"
    NOT_SAVED = "not_saved"


@dataclass(frozen=True)
class CartNotice:
    kind: NoticeKind
    message: str


def _notice_for(exc: ValidationError) -> CartNotice:
    if isinstance(exc, CapacityExceeded):
        return CartNotice(
            NoticeKind.LIMIT_REACHED,
            f"Only {exc.available} units of this product are available",
        )
    if isinstance(exc, DuplicateItem):
        return CartNotice(NoticeKind.DUPLICATE_ITEM, "This vehicle is already in your cart")
    if isinstance(exc, ItemUnavailable):
        return CartNotice(NoticeKind.UNAVAILABLE, f"This item is no longer available ({exc.reason})")
    if isinstance(exc, LineNotFound):
        return CartNotice(NoticeKind.NOT_FOUND, "This product is not in your cart")
    return CartNotice(NoticeKind.INVALID, str(exc))


class CartManager:
    def __init__(self, cart: Cart, store: CartStore, reconciler: CartReconciler | None = None):
        self.cart = cart
        self.store = store
        self.reconciler = reconciler
        self.notices: list[CartNotice] = []
        self._inflight: asyncio.Task | None = None

    @classmethod
    def open(cls, store: CartStore, reconciler: CartReconciler | None = None) -> "CartManager":
        """Rehydrate the session's cart from ``store``."""
        return cls(store.load(), store, reconciler)

    # -------------------------------------------------------------------
    # Notices
    # -------------------------------------------------------------------
    def _notify(self, notice: CartNotice) -> None:
        self.notices.append(notice)

    def drain_notices(self) -> list[CartNotice]:
        """Return pending notices and forget them."""
        notices, self.notices = self.notices, []
        return notices

    def _reject(self, operation: str, exc: ValidationError) -> bool:
        logger.info("Cart operation rejected", operation=operation, session_id=self.cart.session_id, reason=exc.messages)
        self._notify(_notice_for(exc))
        return False

    def _persist(self, merchandise: bool = False, vehicles: bool = False) -> None:
        ok = True
        if merchandise:
            ok = self.store.save_merchandise(self.cart) and ok
        if vehicles:
            ok = self.store.save_vehicles(self.cart) and ok
        if not ok:
            self._notify(CartNotice(NoticeKind.NOT_SAVED, "Your cart could not be saved on this device"))

    # -------------------------------------------------------------------
    # Merchandise
    # -------------------------------------------------------------------
    def add_merchandise(self, product: ProductSnapshot, quantity: int = 1) -> bool:
        try:
            self.cart.add_merchandise(product, quantity)
        except ValidationError as exc:
            return self._reject("add_merchandise", exc)
        self._persist(merchandise=True)
        return True

    def remove_merchandise(self, product_id) -> None:
        if self.cart.remove_merchandise(product_id):
            self._persist(merchandise=True)

    def update_quantity(self, product_id, quantity: int) -> bool:
        if quantity <= 0:
            self.remove_merchandise(product_id)
            return True
        try:
            self.cart.update_quantity(product_id, quantity)
        except ValidationError as exc:
            return self._reject("update_quantity", exc)
        self._persist(merchandise=True)
        return True

    def quantity_of(self, product_id) -> int:
        return self.cart.quantity_of(product_id)

    # -------------------------------------------------------------------
    # Vehicles
    # -------------------------------------------------------------------
    def add_vehicle(self, vehicle: VehicleSnapshot) -> bool:
        try:
            self.cart.add_vehicle(vehicle)
        except ValidationError as exc:
            return self._reject("add_vehicle", exc)
        self._persist(vehicles=True)
        return True

    def remove_vehicle(self, vehicle_id) -> None:
        if self.cart.remove_vehicle(vehicle_id):
            self._persist(vehicles=True)

    # -------------------------------------------------------------------
    # Whole cart
    # -------------------------------------------------------------------
    def clear(self) -> None:
        self.cart.clear()
        self._persist(merchandise=True, vehicles=True)

    def totals(self) -> CartTotals:
        return self.cart.totals()

    def snapshot(self) -> list[dict]:
        return self.cart.snapshot()

    # -------------------------------------------------------------------
    # Reconciliation
    # -------------------------------------------------------------------
    async def reconcile(self) -> ReconciliationReport | None:
        """Reconcile the cart against the catalogue.

        A call made while another is in flight waits for, and returns, the
        in-flight result. Returns ``None`` when the catalogue could not be
        reached; the cart is then left in its last-known-good state.
        """
        if self.reconciler is None:
            raise RuntimeError("CartManager has no reconciler configured")

        if self._inflight is not None:
            return await self._inflight

        self._inflight = asyncio.ensure_future(self._reconcile_once())
        try:
            return await self._inflight
        finally:
            self._inflight = None

    async def _reconcile_once(self) -> ReconciliationReport | None:
        try:
            report = await self.reconciler.reconcile(self.cart)
        except CatalogUnavailable as exc:
            logger.warning("Cart reconciliation skipped", session_id=self.cart.session_id, error=str(exc))
            self._notify(CartNotice(NoticeKind.CATALOG_UNAVAILABLE, "Availability could not be checked right now"))
            return None

        if report.changed:
            self._persist(merchandise=True, vehicles=True)
        if report.notice:
            self._notify(CartNotice(NoticeKind.ITEMS_REMOVED, report.notice))
        return report
