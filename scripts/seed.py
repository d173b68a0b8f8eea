"""
Shop API - Demo Data Seeder
============================
Seeds a demo user and a small catalog, and prints an access token.

Usage:
    python scripts/seed.py          # Seed (idempotent)
    python scripts/seed.py --reset  # Drop all data and reseed
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.database import SessionLocal, Base, engine
from common.security import create_access_token
from modules.user.models import User
from modules.catalog.models import Product, ProductOption
from modules.cart.models import CartLine  # noqa: F401


PRODUCTS = [
    {
        "name": "Wireless Earbuds",
        "description": "Bluetooth 5.3, noise cancelling",
        "image": "/images/1.jpg",
        "options": [("White", 79000), ("Black", 79000), ("Limited Edition", 99000)],
    },
    {
        "name": "Cotton T-Shirt",
        "description": "100% organic cotton",
        "image": "/images/2.jpg",
        "options": [("S", 12900), ("M", 12900), ("L", 13900), ("XL", 14900)],
    },
    {
        "name": "Stainless Tumbler",
        "description": "Keeps drinks cold for 24h",
        "image": "/images/3.jpg",
        "options": [("350ml", 18000), ("500ml", 22000)],
    },
]

DEMO_USER = {"email": "demo@shop.local", "username": "demo"}


def seed():
    db = SessionLocal()
    try:
        print("=" * 50)
        print("  Shop API — Demo Seeder")
        print("=" * 50)

        Base.metadata.create_all(bind=engine)

        print("\n[1/2] Demo User")
        user = db.query(User).filter(User.email == DEMO_USER["email"]).first()
        if not user:
            user = User(**DEMO_USER)
            db.add(user)
            db.flush()
            print(f"  + {user.email}")
        else:
            print(f"  = {user.email} exists")

        print("\n[2/2] Products")
        for data in PRODUCTS:
            if db.query(Product).filter(Product.name == data["name"]).first():
                print(f"  = {data['name']} exists")
                continue
            product = Product(
                name=data["name"],
                description=data["description"],
                image=data["image"],
                price=min(price for _, price in data["options"]),
            )
            product.options = [ProductOption(name=name, price=price) for name, price in data["options"]]
            db.add(product)
            print(f"  + {data['name']} ({len(data['options'])} options)")

        db.commit()
        print("\nAccess token for demo user:")
        print(create_access_token({"sub": str(user.id)}))
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def reset_and_seed():
    """Drop all tables and recreate + seed."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("All tables recreated")
    seed()


if __name__ == "__main__":
    if "--reset" in sys.argv:
        confirm = input("This will DELETE ALL DATA. Type 'yes' to confirm: ")
        if confirm.strip().lower() == "yes":
            reset_and_seed()
        else:
            print("Aborted.")
    else:
        seed()
