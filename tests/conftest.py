"""Pytest configuration and fixtures"""
import os

# Set test environment variables (przed importem shoppingcart.*)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("CART_CURRENCY", "USD")
os.environ.setdefault("CART_TAX_RATE", "10")

from dataclasses import dataclass, field
from decimal import Decimal

import pytest

from shoppingcart.data.database import Base, SessionLocal, engine
from shoppingcart.data.models import ShoppingCartModel  # noqa: F401
from shoppingcart.domain.buyable import ProductBuyable
from shoppingcart.domain.errors import ProductNotFound
from shoppingcart.domain.shopping_cart import CartConfig
from shoppingcart.repos.cart_repo import CartRepo


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repo(db):
    return CartRepo(db)


@pytest.fixture
def config():
    return CartConfig(currency="USD", tax_rate=Decimal("10"))


@dataclass
class FakeProductClient:
    """Product client bez HTTP - produkty z pamieci."""

    products: dict[int, dict] = field(default_factory=dict)
    calls: list[int] = field(default_factory=list)

    def fetch_product(self, product_id: int) -> dict:
        self.calls.append(product_id)
        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFound(f"Product {product_id} not found")
        return product

    def get_buyable(self, product_id: int) -> ProductBuyable:
        return ProductBuyable.model_validate(self.fetch_product(product_id))

    def find_buyable(self, product_id: int) -> ProductBuyable | None:
        try:
            return self.get_buyable(product_id)
        except ProductNotFound:
            return None


@pytest.fixture
def product_client():
    return FakeProductClient(
        products={
            1: {"id": 1, "name": "Keyboard", "price": "199.99", "currency": "USD"},
            2: {"id": 2, "name": "Mouse", "price": "49.50", "currency": "USD"},
        }
    )
