# app/repos/order_repo.py
from decimal import Decimal
from typing import Dict, List, Sequence, Tuple

from sqlalchemy import insert, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.data.models.product import ProductModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(
        self,
        user_id: int,
        total_amount: Decimal,
        lines: Sequence[Tuple[int, int, Decimal]],
    ) -> OrderModel:
        """Naglowek + wszystkie pozycje jednym insertem, bez commita."""
        order = OrderModel(user_id=user_id, total_amount=total_amount)
        self.db.add(order)
        self.db.flush()

        self.db.execute(
            insert(OrderItemModel),
            [
                {
                    "order_id": order.id,
                    "product_id": product_id,
                    "quantity": quantity,
                    "price": price,
                }
                for product_id, quantity, price in lines
            ],
        )
        return order

    def get_user_order(self, order_id: int, user_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(
                OrderModel.id == order_id,
                OrderModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def list_user_orders(self, user_id: int) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.order_date.desc(), OrderModel.id.desc())
            ).scalars()
        )

    def get_items_for_orders(self, order_ids: Sequence[int]) -> Dict[int, List[Row]]:
        #jedno zapytanie IN dla wszystkich zamowien zamiast N zapytan
        grouped: Dict[int, List[Row]] = {order_id: [] for order_id in order_ids}
        if not order_ids:
            return grouped

        rows = self.db.execute(
            select(
                OrderItemModel.order_id,
                OrderItemModel.product_id,
                ProductModel.name,
                OrderItemModel.price,
                OrderItemModel.quantity,
                ProductModel.image,
            )
            .outerjoin(ProductModel, ProductModel.id == OrderItemModel.product_id)
            .where(OrderItemModel.order_id.in_(list(order_ids)))
            .order_by(OrderItemModel.order_id, OrderItemModel.id)
        ).all()

        for row in rows:
            grouped[row.order_id].append(row)
        return grouped
