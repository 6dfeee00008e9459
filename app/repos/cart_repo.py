# app/repos/cart_repo.py
from typing import Iterable, List

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from app.data.models.cart_item import CartItemModel
from app.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def _insert_for_dialect(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        elif dialect in ("mysql", "mariadb"):
            from sqlalchemy.dialects.mysql import insert
        else:
            raise NotImplementedError(f"Upsert koszyka nie jest wspierany dla {dialect}")
        return dialect, insert

    def upsert_add(self, user_id: int, product_id: int, quantity: int) -> int:
        """
        Jedno atomowe zapytanie: insert albo quantity += quantity.
        Zwraca ilosc zapisana w bazie po operacji.
        """
        dialect, insert = self._insert_for_dialect()
        stmt = insert(CartItemModel).values(
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
        )

        if dialect in ("mysql", "mariadb"):
            stmt = stmt.on_duplicate_key_update(
                quantity=CartItemModel.quantity + stmt.inserted.quantity,
            )
            self.db.execute(stmt)
            return self.get_quantity(user_id, product_id)

        stmt = stmt.on_conflict_do_update(
            index_elements=[CartItemModel.user_id, CartItemModel.product_id],
            set_={"quantity": CartItemModel.quantity + stmt.excluded.quantity},
        ).returning(CartItemModel.quantity)

        return self.db.execute(stmt).scalar_one()

    def get_quantity(self, user_id: int, product_id: int) -> int | None:
        return self.db.execute(
            select(CartItemModel.quantity).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def set_quantity(self, user_id: int, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(CartItemModel)
            .where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
            .values(quantity=quantity)
        )
        return result.rowcount

    def delete_item(self, user_id: int, product_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        )
        return result.rowcount

    def lock_user_items(self, user_id: int) -> List[CartItemModel]:
        #SELECT ... FOR UPDATE, nikt nie zmieni koszyka do konca transakcji
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.user_id == user_id)
                .with_for_update()
            ).scalars()
        )

    def clear_user(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.user_id == user_id)
        )
        return result.rowcount

    def get_items_with_products(self, user_id: int, product_ids: Iterable[int] | None = None) -> List[Row]:
        stmt = (
            select(
                CartItemModel.product_id,
                CartItemModel.quantity,
                ProductModel.name,
                ProductModel.description,
                ProductModel.price,
                ProductModel.image,
            )
            .join(ProductModel, ProductModel.id == CartItemModel.product_id)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.product_id)
        )

        if product_ids is not None:
            stmt = stmt.where(CartItemModel.product_id.in_(list(product_ids)))

        return list(self.db.execute(stmt).all())
