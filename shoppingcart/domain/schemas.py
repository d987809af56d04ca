# shoppingcart/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, TypeAdapter
from typing import Any, List
from decimal import Decimal
from datetime import datetime


# =====================================================
# PERSISTENCE - zawartosc koszyka w kolumnie content
# =====================================================
class MoneySnapshot(BaseModel):
    amount: int
    currency: str


class LineItemSnapshot(BaseModel):
    """Pelny zapis pozycji koszyka; row_id jest przechowywany, nie liczony od nowa."""

    model_config = ConfigDict(protected_namespaces=())

    row_id: str
    id: int | str
    name: str
    type: str
    qty: int
    price: MoneySnapshot
    uri: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)
    model_type: str | None = None
    model_id: int | str | None = None
    tax_rate: Decimal = Decimal(0)


CartContentAdapter = TypeAdapter(List[LineItemSnapshot])

# wartosci opcji pozycji - tylko skalary
OptionValue = str | int | float | bool | None


# =====================================================
# API
# =====================================================
class ItemIn(BaseModel):
    """Schema dla dodawania pozycji po atrybutach."""

    product_id: int | str = Field(..., description="ID produktu")
    name: str = Field(..., min_length=1, description="Nazwa wyswietlana")
    type: str = Field(..., min_length=1, description="Rodzaj pozycji")
    quantity: int = Field(1, gt=0, description="Ilosc (musi byc > 0)")
    price: Decimal = Field(..., ge=0, description="Cena jednostkowa netto w jednostkach glownych")
    currency: str | None = Field(None, description="Waluta; domyslnie waluta koszyka")
    uri: str | None = None
    options: dict[str, OptionValue] = Field(default_factory=dict)


class BuyableIn(BaseModel):
    """Schema dla dodawania produktu z product-service."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(1, gt=0, description="Ilosc (musi byc > 0)")
    options: dict[str, OptionValue] = Field(default_factory=dict)


class UpdateItemIn(BaseModel):
    quantity: int = Field(..., gt=0)
    options: dict[str, OptionValue] = Field(default_factory=dict)


class TaxesOut(BaseModel):
    tax: str
    rate: str
    total: str


class ItemValueOut(BaseModel):
    currency: str
    price: str
    subtotal: str
    taxes: TaxesOut
    total: str


class CartItemOut(BaseModel):
    """Schema dla pozycji w koszyku (response)."""

    row_id: str
    id: int | str
    name: str
    type: str
    qty: int
    uri: str | None = None
    value: ItemValueOut
    options: dict[str, OptionValue]


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    identifier: str
    name: str
    currency: str
    item_count: int
    items: List[CartItemOut]
    subtotal: str
    tax: str
    total: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
