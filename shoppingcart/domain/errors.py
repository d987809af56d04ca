# shoppingcart/domain/errors.py


class ShoppingCartError(Exception):
    """Bazowy wyjatek domeny koszyka."""

    message = "Shopping cart error."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class InvalidInput(ShoppingCartError, ValueError):
    message = "Invalid input for the shopping cart."


class RowNotFound(ShoppingCartError, LookupError):
    message = "Invalid row for this shopping cart."


class ShoppingCartNotFound(ShoppingCartError, LookupError):
    message = "The requested shopping cart does not exist."


class ModelResolutionFailure(ShoppingCartError):
    message = "The associated model could not be resolved."


class CurrencyMismatch(ShoppingCartError, ValueError):
    message = "Money values in different currencies cannot be combined."


class StaleCartError(ShoppingCartError, RuntimeError):
    message = "The shopping cart was modified by another operation."


class ProductNotFound(ShoppingCartError, LookupError):
    message = "The requested product does not exist."
