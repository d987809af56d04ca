# shoppingcart/data/models/shopping_cart.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, UniqueConstraint

from shoppingcart.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class ShoppingCartModel(Base):
    __tablename__ = "shoppingcarts"

    id = Column(Integer, primary_key=True)
    identifier = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="default")

    # JSON: lista LineItemSnapshot w kolejnosci dodawania
    content = Column(Text, nullable=True)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (UniqueConstraint("identifier", "name", name="u_shoppingcart_identifier_name"),)
