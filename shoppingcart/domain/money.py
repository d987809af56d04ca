"""
Kwoty pieniezne w jednostkach podrzednych (grosze/centy).

Zadnych floatow w arytmetyce - kwota to int, mnozniki to Decimal,
a zaokraglenie do pelnych jednostek podrzednych jest ROUND_HALF_UP.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

from shoppingcart.domain.errors import CurrencyMismatch, InvalidInput

# ISO 4217: liczba miejsc po przecinku
CURRENCY_EXPONENTS: dict[str, int] = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "PLN": 2,
    "CHF": 2,
    "CZK": 2,
    "SEK": 2,
    "NOK": 2,
    "DKK": 2,
    "CAD": 2,
    "AUD": 2,
    "UAH": 2,
    "RUB": 2,
    "TRY": 2,
    "INR": 2,
    "AED": 2,
    "CNY": 2,
    "JPY": 0,
    "KRW": 0,
    "HUF": 2,
    "ISK": 0,
    "CLP": 0,
    "VND": 0,
    "BHD": 3,
    "KWD": 3,
    "JOD": 3,
    "OMR": 3,
    "TND": 3,
}

Factor = Union[int, str, Decimal]


def currency_exponent(currency: str) -> int:
    try:
        return CURRENCY_EXPONENTS[currency]
    except KeyError:
        raise InvalidInput(f"Unknown currency: {currency!r}") from None


def to_factor(value: Factor) -> Decimal:
    """Mnoznik jako Decimal; float przechodzi przez str(), zeby nie ciagnac bledu binarnego."""
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid factor: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        factor = Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInput(f"Invalid factor: {value!r}") from None
    if not factor.is_finite():
        raise InvalidInput(f"Invalid factor: {value!r}")
    return factor


@dataclass(frozen=True)
class Money:
    amount: int
    currency: str

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidInput("Money amount must be an integer number of minor units.")
        currency_exponent(self.currency)

    @classmethod
    def zero(cls, currency: str) -> "Money":
        return cls(0, currency)

    @classmethod
    def from_decimal(cls, value: Factor | float, currency: str) -> "Money":
        """Kwota w jednostkach glownych (np. "19.99") -> Money(1999, ...)."""
        major = to_factor(value)
        minor = major.scaleb(currency_exponent(currency))
        return cls(int(minor.quantize(Decimal(1), rounding=ROUND_HALF_UP)), currency)

    def to_decimal(self) -> Decimal:
        exponent = currency_exponent(self.currency)
        return Decimal(self.amount).scaleb(-exponent).quantize(Decimal(1).scaleb(-exponent))

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_same_currency(self, other: "Money") -> bool:
        return self.currency == other.currency

    def _assert_same_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot combine Money with {type(other).__name__}")
        if not self.is_same_currency(other):
            raise CurrencyMismatch(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    def add(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def multiply(self, factor: Factor) -> "Money":
        product = Decimal(self.amount) * to_factor(factor)
        return Money(int(product.quantize(Decimal(1), rounding=ROUND_HALF_UP)), self.currency)

    def __str__(self) -> str:
        return f"{self.to_decimal()} {self.currency}"
