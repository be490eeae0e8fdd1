"""Favorites — products and vehicles a signed-in customer bookmarked.

Unlike the cart and the recently viewed list, favorites belong to the user
account and are stored in a repository, so they follow the customer across
devices. A user can favorite each item at most once.
"""

from datetime import UTC, datetime

import structlog
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from catalogue.port import CatalogPort
from ordering.domain import ordering
from ordering.tracking.items import ItemKind, ItemRef, existing_refs

logger = structlog.get_logger(__name__)


@ordering.aggregate
class Favorite:
    user_id = Identifier(required=True)
    item_type = String(required=True, choices=ItemKind)
    item_id = Identifier(required=True)
    created_at = DateTime()

    @property
    def ref(self) -> ItemRef:
        return ItemRef.of(self.item_type, self.item_id)


@ordering.repository(part_of=Favorite)
class FavoriteRepository:
    def for_user(self, user_id) -> list[Favorite]:
        """Favorites of a user, newest first."""
        favorites = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(favorites, key=lambda favorite: favorite.created_at)[::-1]

    def find(self, user_id, ref: ItemRef) -> Favorite | None:
        matches = (
            self._dao.query.filter(user_id=str(user_id), item_type=ref.kind.value, item_id=ref.item_id).all().items
        )
        return matches[0] if matches else None


class Favorites:
    """Favorites of one user. Anonymous visitors (``user_id=None``) have none."""

    def __init__(self, user_id=None):
        self.user_id = str(user_id) if user_id else None

    @property
    def _repo(self) -> FavoriteRepository:
        return current_domain.repository_for(Favorite)

    def add(self, kind, item_id) -> bool:
        """Bookmark an item. Returns ``False`` if it already is one."""
        if self.user_id is None:
            return False
        ref = ItemRef.of(kind, item_id)
        if self._repo.find(self.user_id, ref) is not None:
            logger.info("Favorite already present", user_id=self.user_id, item_type=ref.kind.value, item_id=ref.item_id)
            return False
        self._repo.add(
            Favorite(
                user_id=self.user_id,
                item_type=ref.kind.value,
                item_id=ref.item_id,
                created_at=datetime.now(UTC),
            )
        )
        return True

    def remove(self, kind, item_id) -> bool:
        if self.user_id is None:
            return False
        favorite = self._repo.find(self.user_id, ItemRef.of(kind, item_id))
        if favorite is None:
            return False
        self._repo._dao.delete(favorite)
        return True

    def is_favorite(self, kind, item_id) -> bool:
        if self.user_id is None:
            return False
        return self._repo.find(self.user_id, ItemRef.of(kind, item_id)) is not None

    def toggle(self, kind, item_id) -> bool:
        """Flip an item's favorite state. Returns whether it is now a favorite."""
        if self.is_favorite(kind, item_id):
            self.remove(kind, item_id)
            return False
        return self.add(kind, item_id)

    def entries(self) -> list[Favorite]:
        if self.user_id is None:
            return []
        return self._repo.for_user(self.user_id)

    def product_ids(self) -> list[str]:
        return [str(f.item_id) for f in self.entries() if f.item_type == ItemKind.PRODUCT.value]

    def vehicle_ids(self) -> list[str]:
        return [str(f.item_id) for f in self.entries() if f.item_type == ItemKind.VEHICLE.value]

    async def prune(self, catalog: CatalogPort) -> int:
        """Remove favorites whose item the catalogue no longer lists."""
        favorites = self.entries()
        if not favorites:
            return 0
        existing = await existing_refs(catalog, [favorite.ref for favorite in favorites])
        stale = [favorite for favorite in favorites if favorite.ref not in existing]
        for favorite in stale:
            self._repo._dao.delete(favorite)
        if stale:
            logger.info("Favorites pruned", user_id=self.user_id, dropped=len(stale))
        return len(stale)
