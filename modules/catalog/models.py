"""
Catalog Module - Models
========================
Product and its purchasable options. Read-only from the cart's point of view.
"""

from sqlalchemy import (
    Column, Integer, String, BigInteger, Boolean, Text,
    ForeignKey,
)
from sqlalchemy.orm import relationship
from config.database import Base


# ==========================================
# 📦 Product
# ==========================================

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)
    price = Column(BigInteger, default=0, nullable=False)   # display price (lowest option)
    is_active = Column(Boolean, default=True, nullable=False)

    options = relationship(
        "ProductOption", back_populates="product",
        cascade="all, delete-orphan", order_by="ProductOption.id",
    )

    def __repr__(self):
        return f"<Product {self.name}>"


# ==========================================
# 🎛️ Product Option (size / color variant)
# ==========================================

class ProductOption(Base):
    __tablename__ = "product_options"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    price = Column(BigInteger, default=0, nullable=False)   # unit price

    product = relationship("Product", back_populates="options")

    def __repr__(self):
        return f"<ProductOption {self.name} ({self.price})>"
