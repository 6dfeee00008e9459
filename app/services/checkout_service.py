# app/services/checkout_service.py
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from app.data.database import TransactionProvider
from app.domain.exceptions import NotFoundError, ValidationError
from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.services.cart_service import money, require_positive_int
from app.services.notification_service import NotificationService
from app.services.order_service import format_order_id
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Zamiana koszyka (albo pojedynczego produktu) w zamowienie.

    Ceny zawsze z katalogu w tej samej transakcji co insert zamowienia,
    cena przyslana przez klienta jest ignorowana.
    """

    def __init__(self, provider: TransactionProvider, notifier: NotificationService | None = None):
        self.provider = provider
        self.notifier = notifier or NotificationService()

    def place_order(self, user_id: int, items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Use Case: zamowienie z calego koszyka.

        1. Walidacja pozycji (przed jakimkolwiek zapytaniem)
        2. Blokada wierszy koszyka uzytkownika
        3. Ceny z katalogu, total liczony po stronie serwera
        4. Naglowek + pozycje, czyszczenie koszyka, commit
        """
        require_positive_int(user_id, "user_id")
        hints = self._merge_hints(items)

        with self.provider.transaction() as db:
            carts = CartRepo(db)
            locked = carts.lock_user_items(user_id)
            #kopia ilosci z zablokowanych wierszy, to dokladnie to co zostanie usuniete
            cleared_items = {c.product_id: c.quantity for c in locked}

            catalog = ProductRepo(db).get_products(hints)
            for product_id in hints:
                if product_id not in catalog:
                    raise NotFoundError("Product", product_id)

            lines = [
                (product_id, quantity, money(catalog[product_id].price))
                for product_id, (quantity, _) in hints.items()
            ]
            self._warn_on_client_prices(user_id, hints, lines)

            total = self._total(lines)
            order = OrderRepo(db).create_order(user_id, total, lines)
            cleared = carts.clear_user(user_id)

        not_ordered = sorted(set(cleared_items) - set(hints))
        if not_ordered:
            logger.warning(
                f"Uzytkownik {user_id}: produkty {not_ordered} byly w koszyku, ale nie w zamowieniu"
            )

        logger.info(
            f"Order {order.id} placed for user {user_id}: {len(lines)} items, "
            f"total {total}, cleared {cleared} cart rows"
        )
        self.notifier.send_order_notification(user_id, order.id)

        return {
            "order_id": format_order_id(order.id),
            "total_amount": total,
            "cleared_cart_items": cleared,
            "cleared_items": cleared_items,
        }

    def place_single_order(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        """
        Use Case: zakup jednego produktu z pominieciem koszyka.
        Koszyk nie jest ani czytany, ani czyszczony.
        """
        require_positive_int(user_id, "user_id")
        require_positive_int(product_id, "product_id")
        require_positive_int(quantity, "quantity")

        with self.provider.transaction() as db:
            product = ProductRepo(db).get_product(product_id)
            if not product:
                raise NotFoundError("Product", product_id)

            price = money(product.price)
            lines = [(product_id, quantity, price)]
            total = self._total(lines)
            order = OrderRepo(db).create_order(user_id, total, lines)

            result = {
                "id": format_order_id(order.id),
                "user_id": user_id,
                "product_id": product_id,
                "quantity": quantity,
                "total_amount": total,
                "order_date": order.order_date,
                "product_details": {"name": product.name, "image": product.image},
            }

        logger.info(f"Single order {order.id} placed for user {user_id}: product {product_id} x{quantity}")
        self.notifier.send_order_notification(user_id, order.id)
        return result

    @staticmethod
    def _merge_hints(items: Iterable[Mapping[str, Any]] | None) -> Dict[int, Tuple[int, Decimal | None]]:
        """product_id -> (laczna ilosc, cena klienta albo None)."""
        if not items:
            raise ValidationError("Order must contain at least one item", field="items")

        hints: Dict[int, Tuple[int, Decimal | None]] = {}
        for item in items:
            product_id = require_positive_int(item.get("product_id"), "product_id")
            quantity = require_positive_int(item.get("quantity"), "quantity")
            client_price = item.get("price")

            if product_id in hints:
                prev_quantity, prev_price = hints[product_id]
                merged = require_positive_int(prev_quantity + quantity, "quantity")
                hints[product_id] = (merged, prev_price)
            else:
                hints[product_id] = (quantity, None if client_price is None else Decimal(str(client_price)))

        return hints

    @staticmethod
    def _total(lines: List[Tuple[int, int, Decimal]]) -> Decimal:
        return money(sum((price * quantity for _, quantity, price in lines), Decimal("0.00")))

    @staticmethod
    def _warn_on_client_prices(user_id: int, hints, lines) -> None:
        for product_id, _, price in lines:
            client_price = hints[product_id][1]
            if client_price is not None and money(client_price) != price:
                logger.warning(
                    f"Uzytkownik {user_id}: cena klienta {client_price} dla produktu {product_id} "
                    f"rozni sie od katalogowej {price}, uzywam katalogowej"
                )
