# app/services/order_service.py
from typing import Any, Dict, List

from app.data.database import TransactionProvider
from app.domain.exceptions import NotFoundError, ValidationError
from app.domain.schemas import MAX_DB_INT
from app.repos.order_repo import OrderRepo
from app.services.cart_service import money, require_positive_int
from app.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_PREFIX = "ORD-"


def format_order_id(order_id) -> str:
    """12 -> "ORD-12", "ORD-12" zostaje bez zmian."""
    return f"{ORDER_PREFIX}{parse_order_id(order_id)}"


def parse_order_id(raw) -> int:
    """Przyjmuje 12, "12" albo "ORD-12"."""
    if isinstance(raw, bool):
        raise ValidationError("Invalid order id", field="order_id")
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if text.upper().startswith(ORDER_PREFIX):
            text = text[len(ORDER_PREFIX):]
        #isdigit() przepuszcza np. "²", ktorego int() nie sparsuje
        if not (text.isascii() and text.isdigit()):
            raise ValidationError(f"Invalid order id: {raw}", field="order_id")
        value = int(text)

    if value <= 0 or value > MAX_DB_INT:
        raise ValidationError(f"Invalid order id: {raw}", field="order_id")
    return value


class OrderService:
    """
    Odczyt zamowien (Query), nic tu nie jest zapisywane.
    """

    def __init__(self, provider: TransactionProvider):
        self.provider = provider

    def list_orders(self, user_id: int) -> List[Dict[str, Any]]:
        require_positive_int(user_id, "user_id")

        with self.provider.session() as db:
            repo = OrderRepo(db)
            orders = repo.list_user_orders(user_id)
            items = repo.get_items_for_orders([o.id for o in orders])

        return [self._present(o, items.get(o.id, [])) for o in orders]

    def get_order(self, user_id: int, order_id) -> Dict[str, Any]:
        require_positive_int(user_id, "user_id")
        numeric_id = parse_order_id(order_id)

        with self.provider.session() as db:
            repo = OrderRepo(db)
            #wlasnosc sprawdzana w samym zapytaniu, cudze zamowienie = 404
            order = repo.get_user_order(numeric_id, user_id)
            if not order:
                logger.warning(f"Brak zamowienia {numeric_id} dla uzytkownika {user_id}")
                raise NotFoundError("Order", format_order_id(numeric_id))
            items = repo.get_items_for_orders([order.id])[order.id]

        return self._present(order, items)

    @staticmethod
    def _present(order, items) -> Dict[str, Any]:
        return {
            "id": format_order_id(order.id),
            "date": order.order_date.date().isoformat(),
            "total": money(order.total_amount),
            "items": [
                {
                    "product_id": i.product_id,
                    "name": i.name,
                    "price": money(i.price),
                    "quantity": i.quantity,
                    "image": i.image,
                }
                for i in items
            ],
        }
