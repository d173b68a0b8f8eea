"""Pytest configuration and fixtures"""
import os

# Set test environment variables before any app module is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ.setdefault("PRODUCTS_PAGE_SIZE", "9")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from main import app  # noqa: E402
from config.database import Base, SessionLocal, engine  # noqa: E402
from common.security import create_access_token  # noqa: E402
from modules.user.models import User  # noqa: E402
from modules.catalog.models import Product, ProductOption  # noqa: E402
from modules.cart.models import CartLine  # noqa: E402


@pytest.fixture
def tables():
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(tables):
    """Database session bound to the test engine"""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def user(db):
    u = User(email="buyer@shop.local", username="buyer")
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def other_user(db):
    u = User(email="other@shop.local", username="other")
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def catalog(db):
    """
    Two products with options:
      earbuds: White (10000), Black (12000)
      shirt:   M (5000), L (0)
    Returns dict of name -> ProductOption, plus the products.
    """
    earbuds = Product(name="Wireless Earbuds", description="BT 5.3", image="/images/1.jpg", price=10000)
    earbuds.options = [
        ProductOption(name="White", price=10000),
        ProductOption(name="Black", price=12000),
    ]
    shirt = Product(name="Cotton T-Shirt", description="organic", image="/images/2.jpg", price=0)
    shirt.options = [
        ProductOption(name="M", price=5000),
        ProductOption(name="L", price=0),
    ]
    db.add_all([earbuds, shirt])
    db.commit()
    white, black = earbuds.options
    medium, large = shirt.options
    return {
        "earbuds": earbuds,
        "shirt": shirt,
        "white": white,
        "black": black,
        "medium": medium,
        "large": large,
    }


@pytest.fixture
def add_line(db):
    """Persist a cart line directly, bypassing the service"""
    def _add(user, option, quantity):
        line = CartLine(user_id=user.id, option_id=option.id, quantity=quantity)
        db.add(line)
        db.commit()
        return line
    return _add


@pytest.fixture
def client(tables):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(user):
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}
