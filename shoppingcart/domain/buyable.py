# shoppingcart/domain/buyable.py
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from shoppingcart.domain.money import Money

Options = dict[str, Any]


@runtime_checkable
class Buyable(Protocol):
    """
    Wszystko co mozna wrzucic do koszyka.
    Kazda metoda dostaje options, wiec cena/nazwa moga zalezec od wariantu.
    """

    # stabilny tag typu uzywany przez ModelResolver
    buyable_model_tag: str

    @property
    def id(self) -> int | str: ...

    def get_buyable_identifier(self, options: Options | None = None) -> int | str: ...

    def get_buyable_description(self, options: Options | None = None) -> str: ...

    def get_buyable_type(self, options: Options | None = None) -> str: ...

    def get_buyable_price(self, options: Options | None = None) -> Money: ...

    def get_buyable_uri(self, options: Options | None = None) -> str | None: ...


class ProductBuyable(BaseModel):
    """Produkt z product-service jako Buyable."""

    buyable_model_tag: str = "product"

    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    currency: str = "USD"

    def get_buyable_identifier(self, options: Options | None = None) -> int:
        return self.id

    def get_buyable_description(self, options: Options | None = None) -> str:
        return self.name

    def get_buyable_type(self, options: Options | None = None) -> str:
        return self.buyable_model_tag

    def get_buyable_price(self, options: Options | None = None) -> Money:
        return Money.from_decimal(self.price, self.currency)

    def get_buyable_uri(self, options: Options | None = None) -> str:
        return f"/products/{self.id}"
