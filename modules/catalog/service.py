"""
Catalog Module - Service Layer
================================
Read access to products and options: paged listing, product detail,
and the batch option lookup the cart depends on.
"""

import logging
from typing import Iterable, List

from sqlalchemy.orm import Session, joinedload, selectinload

from common.exceptions import NotFoundError
from modules.catalog.models import Product, ProductOption

logger = logging.getLogger("shop.catalog")


class CatalogService:

    def find_options_by_ids(self, db: Session, ids: Iterable[int]) -> List[ProductOption]:
        """Batch-load options with their product. Missing ids are simply absent from the result."""
        ids = list(ids)
        if not ids:
            return []
        return (
            db.query(ProductOption)
            .options(joinedload(ProductOption.product))
            .filter(ProductOption.id.in_(ids))
            .all()
        )

    def list_products(self, db: Session, page: int = 0, page_size: int = 9) -> List[Product]:
        """Active products, 0-based page, ordered by id."""
        return (
            db.query(Product)
            .filter(Product.is_active == True)  # noqa: E712
            .order_by(Product.id.asc())
            .offset(max(page, 0) * page_size)
            .limit(page_size)
            .all()
        )

    def get_product(self, db: Session, product_id: int) -> Product:
        product = (
            db.query(Product)
            .options(selectinload(Product.options))
            .filter(Product.id == product_id, Product.is_active == True)  # noqa: E712
            .first()
        )
        if not product:
            logger.info(f"Product #{product_id} not found")
            raise NotFoundError(f"Product {product_id} not found.")
        return product


def product_list_item(product: Product) -> dict:
    return {
        "id": product.id,
        "product_name": product.name,
        "description": product.description,
        "image": product.image,
        "price": product.price,
    }


def product_detail(product: Product) -> dict:
    data = product_list_item(product)
    data["options"] = [
        {"id": opt.id, "option_name": opt.name, "price": opt.price}
        for opt in product.options
    ]
    return data


# Singleton
catalog_service = CatalogService()
