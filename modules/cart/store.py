"""
Cart Module - Line Store
=========================
Persistence access for cart lines. Applies no business rules: it loads
and writes exactly what the cart service hands it.
"""

from datetime import datetime
from typing import Iterable, List

from sqlalchemy.orm import Session, joinedload

from modules.cart.models import CartLine
from modules.catalog.models import ProductOption


class CartLineStore:

    def find_by_user(self, db: Session, user_id: int) -> List[CartLine]:
        """All lines of a user, option and product eagerly loaded, ordered by option id."""
        return (
            db.query(CartLine)
            .options(joinedload(CartLine.option).joinedload(ProductOption.product))
            .filter(CartLine.user_id == user_id)
            .order_by(CartLine.option_id.asc())
            .all()
        )

    def save(self, db: Session, line: CartLine) -> CartLine:
        db.add(line)
        db.flush()
        return line

    def save_all(self, db: Session, lines: Iterable[CartLine]) -> List[CartLine]:
        lines = list(lines)
        db.add_all(lines)
        db.flush()
        return lines

    def delete_all_by_ids(self, db: Session, user_id: int, ids: Iterable[int]) -> int:
        """Delete the user's lines with the given ids. Unknown ids are ignored."""
        ids = list(ids)
        if not ids:
            return 0
        deleted = db.query(CartLine).filter(
            CartLine.user_id == user_id,
            CartLine.id.in_(ids),
        ).delete(synchronize_session=False)
        db.flush()
        return deleted

    def purge_empty(self, db: Session, older_than: datetime) -> int:
        """Delete zero-quantity lines last touched before `older_than`."""
        deleted = db.query(CartLine).filter(
            CartLine.quantity == 0,
            CartLine.updated_at < older_than,
        ).delete(synchronize_session=False)
        db.flush()
        return deleted


# Singleton
cart_line_store = CartLineStore()
