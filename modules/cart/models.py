"""
Cart Module - Models
=====================
One cart line per (user, product option) with a non-negative quantity.
Line price is never stored; see modules.pricing.calculator.line_price.
"""

from sqlalchemy import (
    Column, Integer, ForeignKey, DateTime,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base
from common.helpers import now_utc

# Upper bound of the 32-bit quantity column
MAX_QUANTITY = 2**31 - 1


class CartLine(Base):
    __tablename__ = "cart_lines"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    option_id = Column(Integer, ForeignKey("product_options.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="cart_lines")
    option = relationship("ProductOption")

    __table_args__ = (
        UniqueConstraint("user_id", "option_id", name="uq_cart_user_option"),
        CheckConstraint("quantity >= 0", name="ck_cart_line_qty"),
    )

    def update_quantity(self, quantity: int):
        self.quantity = quantity
        self.updated_at = now_utc()

    def __repr__(self):
        return f"<CartLine user={self.user_id} option={self.option_id} qty={self.quantity}>"
