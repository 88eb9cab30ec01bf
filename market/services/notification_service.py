# market/services/notification_service.py
from market.celery_worker import celery_app
from market.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications.
    Dispatched through Celery so checkout never waits on delivery.
    """

    @staticmethod
    def send_order_created(user_id: int, order_id: int, tracking_number: str):
        send_order_notification_task.delay(user_id, order_id, tracking_number)

    @staticmethod
    def send_status_changed(user_id: int, order_id: int, status: str):
        send_status_notification_task.delay(user_id, order_id, status)


@celery_app.task(name="market.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, tracking_number: str):
    """
    Celery task, a real deployment would hand this to an email/SMS gateway.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} placed, tracking {tracking_number}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="market.services.notification_service.send_status_notification_task")
def send_status_notification_task(user_id: int, order_id: int, status: str):
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} is now {status}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
