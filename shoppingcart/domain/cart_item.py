# shoppingcart/domain/cart_item.py
import hashlib
import json
from decimal import Decimal, InvalidOperation
from typing import Any

from shoppingcart.domain.buyable import Buyable
from shoppingcart.domain.errors import InvalidInput
from shoppingcart.domain.formatting import format_money
from shoppingcart.domain.money import Money, to_factor
from shoppingcart.domain.schemas import LineItemSnapshot, MoneySnapshot
from shoppingcart.utils.logging import get_logger

logger = get_logger(__name__)

_SCALARS = (str, int, float, bool, type(None))


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_options(options: dict[str, Any] | None) -> dict[str, Any]:
    """Opcje pozycji: klucze str, wartosci skalarne (musza przejsc przez JSON w content)."""
    options = dict(options or {})
    for key, value in options.items():
        if not isinstance(key, str) or not isinstance(value, _SCALARS):
            raise InvalidInput(f"Please supply valid options (bad entry for {key!r}).")
    return options


class CartItem:
    """
    Jedna pozycja koszyka.

    row_id liczony jest raz, w konstruktorze, z (id, options) i potem sie
    nie zmienia - rowniez po update_item, ktore nadpisuje options.
    """

    def __init__(
        self,
        product_id: int | str,
        name: str,
        item_type: str,
        price: Money,
        uri: str | None = None,
        options: dict[str, Any] | None = None,
    ):
        if _is_blank(product_id) or isinstance(product_id, bool) or not isinstance(product_id, (int, str)):
            raise InvalidInput("Please supply a valid identifier.")

        if _is_blank(name) or not isinstance(name, str):
            raise InvalidInput("Please supply a valid name.")

        if _is_blank(item_type) or not isinstance(item_type, str):
            raise InvalidInput("Please supply a valid type.")

        if not isinstance(price, Money) or price.is_negative():
            raise InvalidInput("Please supply a valid price.")

        options = validate_options(options)

        self.id = product_id
        self.name = name
        self.type = item_type
        self.price = price
        self.uri = uri
        self.options = options
        self.qty = 1
        self.tax_rate = Decimal(0)
        self.model_type: str | None = None
        self.model_id: int | str | None = None
        self._row_id = self.generate_row_id(product_id, options)

    @property
    def row_id(self) -> str:
        return self._row_id

    @staticmethod
    def generate_row_id(product_id: int | str, options: dict[str, Any]) -> str:
        ordered = dict(sorted(options.items()))
        payload = f"{product_id}{json.dumps(ordered, separators=(',', ':'), ensure_ascii=False)}"
        return hashlib.md5(payload.encode("utf-8")).hexdigest()

    # =====================================================
    # FACTORIES
    # =====================================================
    @classmethod
    def from_attributes(
        cls,
        product_id: int | str,
        name: str,
        item_type: str,
        price: Money,
        uri: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> "CartItem":
        return cls(product_id, name, item_type, price, uri, options)

    @classmethod
    def from_buyable(cls, item: Buyable, options: dict[str, Any] | None = None) -> "CartItem":
        options = dict(options or {})
        cart_item = cls(
            item.get_buyable_identifier(options),
            item.get_buyable_description(options),
            item.get_buyable_type(options),
            item.get_buyable_price(options),
            item.get_buyable_uri(options),
            options,
        )
        cart_item.set_model(item)
        return cart_item

    @classmethod
    def from_snapshot(cls, snapshot: LineItemSnapshot) -> "CartItem":
        item = cls(
            snapshot.id,
            snapshot.name,
            snapshot.type,
            Money(snapshot.price.amount, snapshot.price.currency),
            snapshot.uri,
        )
        # zapisane options i row_id przyjmujemy bez sprawdzania - rekord zawsze musi sie wczytac
        item.options = dict(snapshot.options)
        item._row_id = snapshot.row_id
        item.qty = snapshot.qty
        item.tax_rate = snapshot.tax_rate
        item.model_type = snapshot.model_type
        item.model_id = snapshot.model_id
        return item

    def to_snapshot(self) -> LineItemSnapshot:
        return LineItemSnapshot(
            row_id=self.row_id,
            id=self.id,
            name=self.name,
            type=self.type,
            qty=self.qty,
            price=MoneySnapshot(amount=self.price.amount, currency=self.price.currency),
            uri=self.uri,
            options=self.options,
            model_type=self.model_type,
            model_id=self.model_id,
            tax_rate=self.tax_rate,
        )

    # =====================================================
    # MUTATIONS
    # =====================================================
    def set_quantity(self, qty: int | str) -> "CartItem":
        if _is_blank(qty) or isinstance(qty, bool):
            raise InvalidInput("Please supply a valid quantity.")

        try:
            value = Decimal(str(qty).strip())
        except InvalidOperation:
            raise InvalidInput("Please supply a valid quantity.") from None

        if not value.is_finite() or value != value.to_integral_value() or value < 1:
            raise InvalidInput("Please supply a valid quantity.")

        self.qty = int(value)
        return self

    def update_item(self, qty: int, options: dict[str, Any] | None = None) -> "CartItem":
        # qty bez walidacji, row_id bez przeliczania; options musza dac sie zapisac
        options = validate_options(options)
        self.qty = qty
        self.options = options
        return self

    def set_tax_rate(self, tax_rate: int | str | Decimal) -> "CartItem":
        if _is_blank(tax_rate) or isinstance(tax_rate, bool):
            raise InvalidInput("Please supply a valid tax rate.")

        try:
            rate = to_factor(tax_rate)
        except InvalidInput:
            raise InvalidInput("Please supply a valid tax rate.") from None

        if rate < 0:
            raise InvalidInput("Please supply a valid tax rate.")

        self.tax_rate = rate
        return self

    # =====================================================
    # ASSOCIATED MODEL
    # =====================================================
    def set_model(self, model: Buyable) -> "CartItem":
        self.model_type = model.buyable_model_tag
        self.model_id = model.id
        return self

    def resolve_model(self, resolver) -> Any | None:
        """Zwraca powiazany obiekt albo None - bledy lookupu nie wychodza na zewnatrz."""
        if self.model_type is None or resolver is None:
            return None

        try:
            return resolver.resolve(self.model_type, self.model_id)
        except Exception as e:
            logger.warning(
                f"Nie udalo sie rozwiazac modelu {self.model_type}:{self.model_id} "
                f"dla pozycji {self.row_id}: {e}"
            )
            return None

    # =====================================================
    # MONEY
    # =====================================================
    def get_price(self) -> Money:
        """Cena jednostkowa bez podatku."""
        return self.price

    def get_subtotal(self) -> Money:
        return self.price.multiply(self.qty)

    def get_tax(self) -> Money:
        """Podatek dla jednej sztuki, zaokraglony do jednostek podrzednych."""
        return self.price.multiply(self.tax_rate / Decimal(100))

    def get_tax_total(self) -> Money:
        return self.get_tax().multiply(self.qty)

    def get_price_with_tax(self) -> Money:
        return self.price.add(self.get_tax())

    def get_total(self) -> Money:
        return self.get_price_with_tax().multiply(self.qty)

    def to_array(self) -> dict[str, Any]:
        return {
            "row_id": self.row_id,
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "qty": self.qty,
            "uri": self.uri,
            "value": {
                "currency": self.price.currency,
                "price": format_money(self.get_price()),
                "subtotal": format_money(self.get_subtotal()),
                "taxes": {
                    "tax": format_money(self.get_tax()),
                    "rate": str(self.tax_rate),
                    "total": format_money(self.get_tax_total()),
                },
                "total": format_money(self.get_total()),
            },
            "options": dict(self.options),
        }

    def __repr__(self) -> str:
        return f"CartItem(row_id={self.row_id!r}, id={self.id!r}, qty={self.qty!r})"
