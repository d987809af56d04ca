from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from shoppingcart.domain.money import Money
from shoppingcart.domain.shopping_cart import CartConfig, ShoppingCart
from shoppingcart.repos.cart_repo import CartRepo
from shoppingcart.services.model_resolver import ModelResolver
from shoppingcart.services.product_client import ProductClient
from shoppingcart.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use case'y dla koszyka.
    commands (add_item, add_product, update_item, remove_item, clear) - zapisuja caly koszyk
    query (get_cart) - tylko odczyt, nieistniejacy koszyk zwracany jako pusty
    """

    def __init__(
        self,
        db: Session,
        product_client: ProductClient,
        config: CartConfig,
        resolver: ModelResolver | None = None,
    ):
        self.repo = CartRepo(db)
        self.product_client = product_client
        self.config = config
        self.resolver = resolver or ModelResolver().register("product", product_client.find_buyable)

    def load(self, identifier: str, name: str | None = None) -> ShoppingCart:
        return ShoppingCart.load(
            self.repo,
            identifier,
            name,
            config=self.config,
            resolver=self.resolver,
        )

    #query - odczyt
    def get_cart(self, identifier: str, name: str | None = None) -> Dict[str, Any]:
        return self.load(identifier, name).to_array()

    #commands
    def add_item(
        self,
        identifier: str,
        product_id: int | str,
        name: str,
        item_type: str,
        quantity: int,
        price: Decimal,
        currency: str | None = None,
        uri: str | None = None,
        options: dict[str, Any] | None = None,
        cart_name: str | None = None,
    ) -> Dict[str, Any]:
        cart = self.load(identifier, cart_name)
        unit_price = Money.from_decimal(price, currency or self.config.currency)

        cart.add_item(product_id, name, item_type, quantity, unit_price, uri, options)
        return cart.to_array()

    def add_product(
        self,
        identifier: str,
        product_id: int,
        quantity: int,
        options: dict[str, Any] | None = None,
        cart_name: str | None = None,
    ) -> Dict[str, Any]:
        logger.info(f"Pobieranie danych produktu {product_id} z product-service")
        buyable = self.product_client.get_buyable(product_id)

        cart = self.load(identifier, cart_name)
        cart.add_buyable(buyable, quantity, options)
        return cart.to_array()

    def update_item(
        self,
        identifier: str,
        row_id: str,
        quantity: int,
        options: dict[str, Any] | None = None,
        cart_name: str | None = None,
    ) -> Dict[str, Any]:
        cart = self.load(identifier, cart_name)
        cart.update_item(row_id, quantity, options)
        return cart.to_array()

    def remove_item(self, identifier: str, row_id: str, cart_name: str | None = None) -> Dict[str, Any]:
        cart = self.load(identifier, cart_name)
        cart.remove_item(row_id)
        return cart.to_array()

    def clear(self, identifier: str, cart_name: str | None = None) -> None:
        name = cart_name or ShoppingCart.DEFAULT_NAME
        # 404 dla koszyka, ktory nigdy nie zostal zapisany
        self.repo.get(identifier, name)

        self.load(identifier, name).clear()

    def resolve_item_model(self, identifier: str, row_id: str, cart_name: str | None = None) -> Dict[str, Any] | None:
        cart = self.load(identifier, cart_name)
        model = cart.get_row(row_id).resolve_model(self.resolver)
        if model is None:
            return None
        return model.model_dump(mode="json")
