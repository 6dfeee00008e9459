# app/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from app.data.database import TransactionProvider
from app.domain.exceptions import NotFoundError, ValidationError
from app.domain.schemas import MAX_DB_INT
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


def money(value) -> Decimal:
    return Decimal(value).quantize(CENT)


def require_positive_int(value, field: str) -> int:
    #bool to podklasa int, wiec odrzucamy go osobno
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    if value <= 0:
        raise ValidationError(f"{field} must be a positive number", field=field)
    if value > MAX_DB_INT:
        raise ValidationError(f"{field} is out of range", field=field)
    return value


def require_int(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    if abs(value) > MAX_DB_INT:
        raise ValidationError(f"{field} is out of range", field=field)
    return value


class CartService:
    """
    Koszyk uzytkownika: wiersz (user, product) -> ilosc
    commands (add_or_merge, set_quantity, remove) w jednej transakcji kazda
    query (list_with_details, list_by_ids) tylko odczyt
    """

    def __init__(self, provider: TransactionProvider):
        self.provider = provider

    #query - odczyt
    def list_with_details(self, user_id: int) -> Dict[str, Any]:
        require_positive_int(user_id, "user_id")

        with self.provider.session() as db:
            rows = CartRepo(db).get_items_with_products(user_id)

        items = [self._line(r) for r in rows]
        total = sum((i["price"] * i["quantity"] for i in items), Decimal("0.00"))

        return {
            "items": items,
            "total_items": len(items),
            "total_value": money(total),
        }

    def list_by_ids(self, user_id: int, product_ids: Iterable[int]) -> List[Dict[str, Any]]:
        require_positive_int(user_id, "user_id")
        ids = [require_positive_int(pid, "product_ids") for pid in product_ids]
        if not ids:
            raise ValidationError("product_ids must not be empty", field="product_ids")

        with self.provider.session() as db:
            rows = CartRepo(db).get_items_with_products(user_id, ids)

        return [{**self._line(r), "description": r.description} for r in rows]

    #commands
    def add_or_merge(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        require_positive_int(user_id, "user_id")
        require_positive_int(product_id, "product_id")
        require_positive_int(quantity, "quantity")

        with self.provider.transaction() as db:
            if not ProductRepo(db).exists(product_id):
                raise NotFoundError("Product", product_id)

            stored = CartRepo(db).upsert_add(user_id, product_id, quantity)

        logger.info(
            f"Koszyk uzytkownika {user_id}: produkt {product_id} +{quantity}, teraz {stored}"
        )
        return {"user_id": user_id, "product_id": product_id, "quantity": stored}

    def set_quantity(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        require_positive_int(user_id, "user_id")
        require_positive_int(product_id, "product_id")
        require_int(quantity, "quantity")

        #ilosc <= 0 to usuniecie, nie wiersz z zerem
        if quantity <= 0:
            deleted = self.remove(user_id, product_id)
            return {"user_id": user_id, "product_id": product_id, "quantity": 0, "deleted_rows": deleted}

        with self.provider.transaction() as db:
            if CartRepo(db).set_quantity(user_id, product_id, quantity) == 0:
                raise NotFoundError("Cart item", product_id)

        logger.info(f"Koszyk uzytkownika {user_id}: produkt {product_id} ustawiony na {quantity}")
        return {"user_id": user_id, "product_id": product_id, "quantity": quantity}

    def remove(self, user_id: int, product_id: int) -> int:
        require_positive_int(user_id, "user_id")
        require_positive_int(product_id, "product_id")

        with self.provider.transaction() as db:
            deleted = CartRepo(db).delete_item(user_id, product_id)
            if deleted == 0:
                raise NotFoundError("Cart item", product_id)

        logger.info(f"Usunieto produkt {product_id} z koszyka uzytkownika {user_id}")
        return deleted

    @staticmethod
    def _line(row) -> Dict[str, Any]:
        return {
            "product_id": row.product_id,
            "quantity": row.quantity,
            "name": row.name,
            "price": money(row.price),
            "image": row.image,
        }
