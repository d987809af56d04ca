# shoppingcart/repos/cart_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shoppingcart.data.models.shopping_cart import ShoppingCartModel
from shoppingcart.domain.errors import ShoppingCartNotFound, StaleCartError
from shoppingcart.utils.logging import get_logger

logger = get_logger(__name__)


class CartRepo:
    """
    Zapis koszyka jako jeden rekord (identifier, name) z cala zawartoscia w content.
    Zapis istniejacego rekordu idzie przez optimistic locking na polu version.
    """

    def __init__(self, db: Session):
        self.db = db

    def find(self, identifier: str, name: str) -> ShoppingCartModel | None:
        return self.db.execute(
            select(ShoppingCartModel).where(
                ShoppingCartModel.identifier == identifier,
                ShoppingCartModel.name == name,
            )
        ).scalar_one_or_none()

    def get(self, identifier: str, name: str) -> ShoppingCartModel:
        record = self.find(identifier, name)
        if record is None:
            raise ShoppingCartNotFound()
        return record

    @staticmethod
    def new_record(identifier: str, name: str) -> ShoppingCartModel:
        # niezapisany - trafia do bazy dopiero przy pierwszym save_content
        return ShoppingCartModel(identifier=identifier, name=name, content=None, version=0)

    def find_or_new(self, identifier: str, name: str) -> ShoppingCartModel:
        return self.find(identifier, name) or self.new_record(identifier, name)

    def save_content(self, record: ShoppingCartModel, content: str) -> ShoppingCartModel:
        if record.id is None:
            return self._insert(record, content)

        rowcount = self.update_cart_version(
            cart_id=record.id,
            old_version=record.version,
            new_data={
                "content": content,
                "version": record.version + 1,
                "updated_at": datetime.now(timezone.utc),
            },
        )

        # np. update ... set version 3 where id 1 and version 2
        if rowcount == 0:
            self.rollback()
            raise StaleCartError()

        self.commit()
        self.db.refresh(record)
        return record

    def _insert(self, record: ShoppingCartModel, content: str) -> ShoppingCartModel:
        record.content = content
        record.version = 1
        self.db.add(record)
        try:
            self.commit()
        except IntegrityError:
            # ktos inny utworzyl ten sam (identifier, name) w miedzyczasie
            self.rollback()
            record.version = 0
            raise StaleCartError() from None
        self.db.refresh(record)
        logger.info(f"Utworzono rekord koszyka {record.id} ({record.identifier}/{record.name})")
        return record

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        result = self.db.execute(
            update(ShoppingCartModel)
            .where(
                ShoppingCartModel.id == cart_id,
                ShoppingCartModel.version == old_version,
            )
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete(self, record: ShoppingCartModel) -> None:
        if record.id is None:
            return
        self.db.delete(record)
        self.commit()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
