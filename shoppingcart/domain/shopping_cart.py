# shoppingcart/domain/shopping_cart.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable

from shoppingcart.data.models.shopping_cart import ShoppingCartModel
from shoppingcart.domain.buyable import Buyable
from shoppingcart.domain.cart_item import CartItem
from shoppingcart.domain.errors import CurrencyMismatch, RowNotFound
from shoppingcart.domain.formatting import format_money
from shoppingcart.domain.money import Money, currency_exponent, to_factor
from shoppingcart.domain.schemas import CartContentAdapter
from shoppingcart.repos.cart_repo import CartRepo
from shoppingcart.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CartConfig:
    """Waluta koszyka i stawka podatku nadawana kazdej dodawanej pozycji."""

    currency: str
    tax_rate: Decimal

    def __post_init__(self):
        currency_exponent(self.currency)
        object.__setattr__(self, "tax_rate", to_factor(self.tax_rate))

    @classmethod
    def from_settings(cls) -> "CartConfig":
        from shoppingcart.utils import settings

        return cls(currency=settings.CART_CURRENCY, tax_rate=settings.CART_TAX_RATE)


def encode_content(content: dict[str, CartItem]) -> str:
    snapshots = [item.to_snapshot() for item in content.values()]
    return CartContentAdapter.dump_json(snapshots).decode("utf-8")


def decode_content(raw: str | None) -> dict[str, CartItem]:
    if not raw:
        return {}
    items = (CartItem.from_snapshot(s) for s in CartContentAdapter.validate_json(raw))
    return {item.row_id: item for item in items}


class ShoppingCart:
    """
    Koszyk (identifier, name) zapisywany w calosci jako jeden rekord.

    Kazda komenda (add, update, remove) wczytuje content, zmienia go w pamieci
    i od razu zapisuje calosc. Jeden pisarz na (identifier, name) - rownolegly
    zapis konczy sie StaleCartError z repozytorium.
    """

    DEFAULT_NAME = "default"

    def __init__(
        self,
        repo: CartRepo,
        record: ShoppingCartModel,
        config: CartConfig,
        resolver=None,
    ):
        self.repo = repo
        self.record = record
        self.config = config
        self.resolver = resolver

    @classmethod
    def load(
        cls,
        repo: CartRepo,
        identifier: str,
        name: str | None = None,
        *,
        config: CartConfig,
        resolver=None,
    ) -> "ShoppingCart":
        """Koszyk z bazy, a jesli go nie ma - nowy, pusty i jeszcze niezapisany."""
        name = name or cls.DEFAULT_NAME
        record = repo.find_or_new(identifier, name)
        return cls(repo, record, config, resolver)

    @property
    def identifier(self) -> str:
        return self.record.identifier

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def created_at(self) -> datetime | None:
        return self.record.created_at

    @property
    def updated_at(self) -> datetime | None:
        return self.record.updated_at

    @property
    def exists(self) -> bool:
        return self.record.id is not None

    def get_content(self) -> dict[str, CartItem]:
        return decode_content(self.record.content)

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_item(
        self,
        product_id: int | str,
        name: str | None = None,
        item_type: str | None = None,
        qty: int = 1,
        price: Money | None = None,
        uri: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> "ShoppingCart":
        cart_item = CartItem.from_attributes(product_id, name, item_type, price, uri, options)
        return self._add_item_to_cart(cart_item, qty)

    def add_buyable(
        self,
        item: Buyable,
        qty: int = 1,
        options: dict[str, Any] | None = None,
    ) -> "ShoppingCart":
        cart_item = CartItem.from_buyable(item, options)
        return self._add_item_to_cart(cart_item, qty)

    def _add_item_to_cart(self, cart_item: CartItem, qty: int = 1) -> "ShoppingCart":
        # koszyk trzyma jedna walute - obca odrzucamy zanim cokolwiek sie zapisze
        if cart_item.price.currency != self.config.currency:
            raise CurrencyMismatch(
                f"Cannot add {cart_item.price.currency} item to a {self.config.currency} cart"
            )

        cart_item.set_quantity(qty)
        cart_item.set_tax_rate(self.config.tax_rate)

        content = self.get_content()

        # ta sama pozycja (id + options) - sumujemy ilosci
        if cart_item.row_id in content:
            existing = content[cart_item.row_id]
            logger.info(
                f"Pozycja {cart_item.row_id} juz jest w koszyku {self.identifier}/{self.name}, "
                f"zwiekszam ilosc z {existing.qty} do {existing.qty + cart_item.qty}"
            )
            cart_item.set_quantity(cart_item.qty + existing.qty)
        else:
            logger.info(f"Dodaje pozycje {cart_item.row_id} ({cart_item.id}) do koszyka {self.identifier}/{self.name}")

        content[cart_item.row_id] = cart_item
        self._persist(content)
        return self

    def remove_item(self, row_id: str) -> "ShoppingCart":
        content = self.get_content()

        if row_id in content:
            del content[row_id]
            logger.info(f"Usunieto pozycje {row_id} z koszyka {self.identifier}/{self.name}")
            self._persist(content)

        return self

    def update_item(
        self,
        row_id: str,
        qty: int = 1,
        options: dict[str, Any] | None = None,
    ) -> "ShoppingCart":
        cart_item = self.get_row(row_id)

        # options sie zmieniaja, ale klucz zostaje stary (row_id nie jest przeliczany)
        cart_item.update_item(qty, options)

        content = self.get_content()
        content[cart_item.row_id] = cart_item
        self._persist(content)

        logger.info(f"Zaktualizowano pozycje {row_id} w koszyku {self.identifier}/{self.name}")
        return self

    def get_row(self, row_id: str) -> CartItem:
        content = self.get_content()

        if row_id not in content:
            raise RowNotFound()

        return content[row_id]

    def clear(self) -> None:
        """Usuwa caly rekord koszyka z bazy."""
        self.repo.delete(self.record)
        logger.info(f"Usunieto koszyk {self.identifier}/{self.name}")
        self.record = self.repo.new_record(self.identifier, self.name)

    def _persist(self, content: dict[str, CartItem]) -> None:
        self.record = self.repo.save_content(self.record, encode_content(content))

    # =====================================================
    # QUERIES
    # =====================================================
    def get_item_count(self) -> int:
        """Liczba roznych pozycji, nie suma ilosci."""
        return len(self.get_content())

    def _fold(self, amount_of: Callable[[CartItem], Money]) -> Money:
        result = Money.zero(self.config.currency)
        for cart_item in self.get_content().values():
            # add() rzuca CurrencyMismatch dla pozycji w innej walucie
            result = result.add(amount_of(cart_item))
        return result

    def get_total(self) -> Money:
        return self._fold(CartItem.get_total)

    def get_tax(self) -> Money:
        return self._fold(CartItem.get_tax_total)

    def get_sub_total(self) -> Money:
        return self._fold(CartItem.get_subtotal)

    def to_array(self) -> dict[str, Any]:
        content = self.get_content()
        return {
            "identifier": self.identifier,
            "name": self.name,
            "currency": self.config.currency,
            "item_count": len(content),
            "items": [cart_item.to_array() for cart_item in content.values()],
            "subtotal": format_money(self.get_sub_total()),
            "tax": format_money(self.get_tax()),
            "total": format_money(self.get_total()),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
