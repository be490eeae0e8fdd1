"""Catalogue port (abstract interface).

The cart reconciler and the favorites/recently-viewed trackers read current
catalogue truth through this contract. Adapters return only records that
currently exist and are not deleted; an id missing from the response means
the item is gone.

Product records: ``id, name, price, discount_percentage, stock_quantity,
is_active, tax_rate``. Vehicle records: ``id, name, price,
discount_percentage, is_sold, deleted_at, tax_rate``.
"""

from abc import ABC, abstractmethod


class CatalogPort(ABC):
    """Abstract catalogue lookup interface."""

    @abstractmethod
    async def fetch_products_by_ids(self, ids: list[str]) -> list[dict]:
        """Return product records for the ids that still exist."""
        ...

    @abstractmethod
    async def fetch_vehicles_by_ids(self, ids: list[str]) -> list[dict]:
        """Return vehicle records for the ids that still exist."""
        ...
