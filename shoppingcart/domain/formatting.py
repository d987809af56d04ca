# shoppingcart/domain/formatting.py
from shoppingcart.domain.money import Money


def format_money(value: Money) -> str:
    """Kwota jako string dziesietny, np. Money(2000, "USD") -> "20.00"."""
    return str(value.to_decimal())


def format_money_as_array(value: Money) -> dict[str, str]:
    return {
        "amount": format_money(value),
        "currency": value.currency,
    }


def format_money_as_simple_string(value: Money, append_currency: bool = True) -> str:
    """
    "20.00 USD" albo, gdy append_currency=False, "USD 20.00".
    """
    amount = format_money(value)
    if append_currency:
        return f"{amount} {value.currency}"
    return f"{value.currency} {amount}"
