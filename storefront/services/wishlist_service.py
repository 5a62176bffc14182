from typing import Any, List
from ..errors import NotFoundError, ValidationError
from ..storage.base import Storage
from ..storage.records import WishlistRecord


class WishlistService:
    def __init__(self, storage: Storage):
        self._storage = storage

    def list(self, user_id: str) -> List[WishlistRecord]:
        return self._storage.get_wishlist(user_id)

    def add(self, *, user_id: str, product_id: Any) -> WishlistRecord:
        if not product_id:
            raise ValidationError.for_field("productId", "productId is required")
        return self._storage.add_to_wishlist(user_id=user_id, product_id=str(product_id))

    def remove(self, *, user_id: str, product_id: str) -> None:
        if not self._storage.remove_from_wishlist(user_id, product_id):
            raise NotFoundError("Wishlist item not found")
