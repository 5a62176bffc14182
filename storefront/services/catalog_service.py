from datetime import datetime
from typing import Any, Dict, List, Optional
from ..errors import NotFoundError
from ..storage.base import Storage
from ..storage.records import ProductRecord
from ..utils.validators import validate_product_payload
from .logging import log_event


class CatalogService:
    """Catalog reads for the storefront and product management for admins."""

    def __init__(self, storage: Storage):
        self._storage = storage

    def list_products(
        self,
        *,
        category: Optional[str] = None,
        query: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> List[ProductRecord]:
        """Active products, optionally narrowed by category and a name/description search.

        Unknown sort keys fall back to the storage order (newest first).
        """
        category = (category or "").strip().lower()
        if not category or category == "all":
            products = self._storage.get_products()
        else:
            products = self._storage.get_products_by_category(category)

        needle = (query or "").strip().lower()
        if needle:
            products = [
                p for p in products if needle in p.name.lower() or needle in (p.description or "").lower()
            ]

        sort = (sort or "").strip().lower()
        if sort == "price-low":
            products.sort(key=lambda p: p.price)
        elif sort == "price-high":
            products.sort(key=lambda p: p.price, reverse=True)
        elif sort == "newest":
            products.sort(key=lambda p: p.created_at or datetime.min, reverse=True)
        return products

    def get_product(self, product_id: str) -> ProductRecord:
        product = self._storage.get_product(product_id) if product_id else None
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, payload: Dict[str, Any]) -> ProductRecord:
        fields = validate_product_payload(payload)
        product = self._storage.create_product(fields)
        log_event("info", "product.created", product_id=product.id, name=product.name)
        return product

    def update_product(self, product_id: str, payload: Dict[str, Any]) -> ProductRecord:
        fields = validate_product_payload(payload, partial=True)
        product = self._storage.update_product(product_id, fields)
        if product is None:
            raise NotFoundError("Product not found")
        log_event("info", "product.updated", product_id=product_id, fields=sorted(fields))
        return product

    def delete_product(self, product_id: str) -> None:
        if not self._storage.delete_product(product_id):
            raise NotFoundError("Product not found")
        log_event("info", "product.deleted", product_id=product_id)
