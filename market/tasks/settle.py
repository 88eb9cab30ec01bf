# market/tasks/settle.py
from market.celery_worker import celery_app
from market.data.database import SessionLocal
from market.domain.errors import MarketError
from market.services.catalog_service import CatalogService
from market.services.order_service import OrderService
from market.utils.logging import get_logger

logger = get_logger(__name__)


def settle_pending_orders() -> dict:
    """Finish stock decrements and cart clears left behind by interrupted checkouts."""
    db = SessionLocal()
    settled, failed = [], []
    try:
        svc = OrderService(db, CatalogService(db))
        order_ids = svc.list_unsettled()
        logger.info(f"Found {len(order_ids)} orders to settle")

        for order_id in order_ids:
            try:
                svc.settle_order(order_id)
                settled.append(order_id)
            except MarketError as e:
                logger.warning(f"Failed to settle order {order_id}: {e}")
                failed.append(order_id)
    finally:
        db.close()

    return {"settled": settled, "failed": failed}


@celery_app.task(name="market.tasks.settle.settle_pending_orders_task")
def settle_pending_orders_task():
    logger.info("Settle orders task started")
    return settle_pending_orders()
