"""Tagged references to catalogue items shared by favorites and recently viewed."""

from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from catalogue.port import CatalogPort
from ordering.cart.reconciliation import DEFAULT_TIMEOUT, fetch_records


class ItemKind(Enum):
    PRODUCT = "product"
    VEHICLE = "vehicle"


@dataclass(frozen=True)
class ItemRef:
    kind: ItemKind
    item_id: str

    @classmethod
    def of(cls, kind, item_id) -> "ItemRef":
        return cls(ItemKind(kind), str(item_id))


def _still_listed(kind: ItemKind, record: dict | None) -> bool:
    match kind:
        case ItemKind.PRODUCT:
            return record is not None
        case ItemKind.VEHICLE:
            return record is not None and record.get("deleted_at") is None
        case _:
            assert_never(kind)


async def existing_refs(catalog: CatalogPort, refs, timeout: float = DEFAULT_TIMEOUT) -> set[ItemRef]:
    """Return the subset of ``refs`` the catalogue still lists.

    Raises:
        CatalogUnavailable: a lookup failed or timed out.
    """
    refs = list(refs)
    found: set[ItemRef] = set()
    for kind in ItemKind:
        ids = list(dict.fromkeys(ref.item_id for ref in refs if ref.kind is kind))
        match kind:
            case ItemKind.PRODUCT:
                fetch = catalog.fetch_products_by_ids
            case ItemKind.VEHICLE:
                fetch = catalog.fetch_vehicles_by_ids
            case _:
                assert_never(kind)
        records = await fetch_records(fetch, ids, f"{kind.value}s", timeout)
        found.update(ItemRef(kind, item_id) for item_id in ids if _still_listed(kind, records.get(item_id)))
    return found
