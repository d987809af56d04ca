#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from shoppingcart.data.models.shopping_cart import ShoppingCartModel

__all__ = ["ShoppingCartModel"]
