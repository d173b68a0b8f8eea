"""
Cart Module - Service Layer
==============================
Cart management for a single user: list, add (merge-by-increment),
update (absolute set), delete.

Every batch is validated in full before the first write, so a rejected
request never leaves a partial change behind. Committing is left to the
caller's unit of work.
"""

import logging
from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from common.exceptions import InvalidArgumentError, NotFoundError
from common.helpers import find_duplicates, now_utc
from config.settings import CART_PRICING_STRATEGY
from modules.cart.models import CartLine, MAX_QUANTITY
from modules.cart.projection import to_cart_products, to_updated_carts
from modules.cart.store import CartLineStore, cart_line_store
from modules.catalog.service import CatalogService, catalog_service
from modules.pricing.calculator import PriceCalculator, get_calculator

logger = logging.getLogger("shop.cart")


class CartService:

    def __init__(
        self,
        calculator: PriceCalculator,
        store: Optional[CartLineStore] = None,
        catalog: Optional[CatalogService] = None,
    ):
        self.calculator = calculator
        self.store = store or cart_line_store
        self.catalog = catalog or catalog_service

    # ==========================================
    # List
    # ==========================================

    def find_all(self, db: Session, user_id: int) -> dict:
        """
        Whole cart grouped by product.
        Returns: {"products": [...], "total_price": int}
        """
        lines = self.store.find_by_user(db, user_id)
        return {
            "products": to_cart_products(lines),
            "total_price": self.calculator.execute(lines),
        }

    # ==========================================
    # Add (quantities accumulate)
    # ==========================================

    def add_items(self, db: Session, user_id: int, requests: Sequence) -> None:
        """
        Add each requested quantity on top of what is already in the cart.
        A line is created at quantity 0 for options not yet in the cart.
        """
        if any(req.quantity < 0 for req in requests):
            logger.warning(f"User #{user_id} add rejected: negative quantity")
            raise InvalidArgumentError("Invalid request: quantity cannot be negative.")
        if any(req.quantity > MAX_QUANTITY for req in requests):
            logger.warning(f"User #{user_id} add rejected: quantity above {MAX_QUANTITY}")
            raise InvalidArgumentError(f"Invalid request: quantity cannot exceed {MAX_QUANTITY}.")

        option_ids = [req.option_id for req in requests]
        if find_duplicates(option_ids):
            logger.warning(f"User #{user_id} add rejected: duplicate options {find_duplicates(option_ids)}")
            raise InvalidArgumentError("Invalid request: duplicate in request.")

        options = {opt.id: opt for opt in self.catalog.find_options_by_ids(db, option_ids)}
        missing = [oid for oid in option_ids if oid not in options]
        if missing:
            logger.warning(f"User #{user_id} add rejected: unknown options {missing}")
            raise NotFoundError(f"Product option not found: {missing[0]}")

        existing = self._lines_by_option(self.store.find_by_user(db, user_id))

        for req in requests:
            line = existing.get(req.option_id)
            if line is not None and line.quantity + req.quantity > MAX_QUANTITY:
                logger.warning(f"User #{user_id} add rejected: option {req.option_id} would exceed {MAX_QUANTITY}")
                raise InvalidArgumentError(f"Invalid request: cart quantity cannot exceed {MAX_QUANTITY}.")

        for req in requests:
            line = existing.get(req.option_id)
            if line is None:
                line = CartLine(user_id=user_id, option=options[req.option_id], quantity=0)
                existing[req.option_id] = line
            line.update_quantity(line.quantity + req.quantity)
            self.store.save(db, line)

        logger.info(f"User #{user_id} added {len(requests)} option(s) to cart")

    # ==========================================
    # Update (quantities replaced)
    # ==========================================

    def update_items(self, db: Session, user_id: int, requests: Sequence) -> dict:
        """
        Set each referenced line to the requested quantity.
        Returns: {"carts": [...updated lines], "total_price": int over the updated lines}
        """
        cart_ids = [req.cart_id for req in requests]
        if find_duplicates(cart_ids):
            logger.warning(f"User #{user_id} update rejected: duplicate lines {find_duplicates(cart_ids)}")
            raise InvalidArgumentError("Invalid request: duplicate in request.")

        saved = self.store.find_by_user(db, user_id)
        if not saved:
            raise NotFoundError("Cart is empty.")
        by_id = {line.id: line for line in saved}

        for req in requests:
            if req.cart_id not in by_id:
                logger.warning(f"User #{user_id} update rejected: unknown cart line {req.cart_id}")
                raise NotFoundError(f"Cart item not found: {req.cart_id}")
            if req.quantity <= 0:
                logger.warning(f"User #{user_id} update rejected: quantity {req.quantity} for line {req.cart_id}")
                raise InvalidArgumentError("Invalid request: quantity must be positive.")
            if req.quantity > MAX_QUANTITY:
                logger.warning(f"User #{user_id} update rejected: quantity {req.quantity} for line {req.cart_id}")
                raise InvalidArgumentError(f"Invalid request: quantity cannot exceed {MAX_QUANTITY}.")

        lines = []
        for req in requests:
            line = by_id[req.cart_id]
            line.update_quantity(req.quantity)
            lines.append(line)
        self.store.save_all(db, lines)

        logger.info(f"User #{user_id} updated {len(lines)} cart line(s)")
        return {
            "carts": to_updated_carts(lines),
            "total_price": self.calculator.execute(lines),
        }

    # ==========================================
    # Delete
    # ==========================================

    def delete_items(self, db: Session, user_id: int, cart_ids: Iterable[int]) -> int:
        """Remove the user's lines by id. Ids that don't exist are ignored."""
        deleted = self.store.delete_all_by_ids(db, user_id, cart_ids)
        logger.info(f"User #{user_id} deleted {deleted} cart line(s)")
        return deleted

    # ==========================================
    # Maintenance
    # ==========================================

    def purge_empty_lines(self, db: Session, ttl_minutes: int) -> int:
        """Drop zero-quantity lines untouched for `ttl_minutes`."""
        return self.store.purge_empty(db, now_utc() - timedelta(minutes=ttl_minutes))

    # ==========================================
    # Private helpers
    # ==========================================

    @staticmethod
    def _lines_by_option(lines: List[CartLine]) -> Dict[int, CartLine]:
        return {line.option_id: line for line in lines}


# Singleton
cart_service = CartService(get_calculator(CART_PRICING_STRATEGY))
