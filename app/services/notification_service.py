# app/services/notification_service.py
from kombu.exceptions import OperationalError as BrokerError

from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień o zamówieniach.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int) -> bool:
        """
        Wywoływane po commicie, zamówienie już istnieje.
        Niedostępny broker nie cofa zamówienia, tylko jest logowany.
        """
        try:
            send_order_notification_task.delay(user_id, order_id)
        except BrokerError as e:
            logger.error(f"Nie udalo sie zlecic powiadomienia o zamowieniu {order_id}: {e}")
            return False
        return True


@celery_app.task(name="app.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int):
    """
    Celery task - w prawdziwym systemie wysłałby email/SMS/push.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order ORD-{order_id} has been placed")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
