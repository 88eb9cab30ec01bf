# market/services/order_service.py
from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from market.data.models.cart import CartModel
from market.data.models.order import OrderModel
from market.data.models.order_item import OrderItemModel
from market.domain.errors import (
    ConcurrentModification,
    EmptyCart,
    Forbidden,
    InsufficientStock,
    InternalFailure,
    InvalidArgument,
    MarketError,
    NotFound,
    TrackingNumberConflict,
)
from market.domain.schemas import OrderCreate, OrderStatus, ShippingAddress
from market.repos.cart_repo import CartRepo
from market.repos.order_repo import OrderRepo
from market.services.cart_service import cart_total
from market.services.catalog_service import CatalogService
from market.services.notification_service import NotificationService
from market.utils.logging import get_logger
from market.utils.retry import checkout_retry
from market.utils.settings import TRACKING_PREFIX
from market.utils.tracking import generate_tracking_number

logger = get_logger(__name__)

# target status -> statuses it may be reached from
ALLOWED_TRANSITIONS = {
    OrderStatus.confirmed: {OrderStatus.pending},
    OrderStatus.shipped: {OrderStatus.confirmed},
    OrderStatus.delivered: {OrderStatus.shipped},
    OrderStatus.cancelled: {OrderStatus.pending, OrderStatus.confirmed},
    OrderStatus.pending: set(),
}


class OrderService:
    """
    Order domain: checkout (cart -> order), settlement,
    queries and administrative status changes.
    """

    def __init__(self, db: Session, catalog: CatalogService):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.catalog = catalog
        self.notification_service = NotificationService()

    @checkout_retry()
    def checkout(self, user_id: int, command: OrderCreate) -> OrderModel:
        """
        Use case: place an order from the user's cart.

        1. revalidate every cart line against the current catalog
        2. snapshot lines into order items (title, locked price)
        3. total from locked prices
        4. tracking number
        5. persist the order as pending
        6. decrement stock atomically per product
        7. empty the cart

        All steps share one transaction, any failure rolls everything back.
        """
        self._require_address(command.shipping_address)

        cart = self.carts.get_cart_by_user(user_id)
        if not cart or not cart.items:
            raise EmptyCart()

        tracking_number = generate_tracking_number(TRACKING_PREFIX)
        try:
            titles = self._revalidate(cart)

            address = command.shipping_address
            order = OrderModel(
                user_id=user_id,
                status=OrderStatus.pending.value,
                total_amount=cart_total(cart.items),
                payment_method=command.payment_method.value,
                shipping_street=address.street,
                shipping_city=address.city,
                shipping_region=address.region,
                shipping_phone=address.phone,
                notes=command.notes,
                tracking_number=tracking_number,
                cart_cleared=False,
                items=[
                    OrderItemModel(
                        product_id=item.product_id,
                        title=titles[item.product_id],
                        quantity=item.quantity,
                        price=item.price,
                        stock_committed=False,
                    )
                    for item in cart.items
                ],
            )
            self.repo.add_order(order)
            logger.info(
                f"Order {order.id} ({order.tracking_number}) created from cart {cart.id}, "
                f"total {order.total_amount}"
            )

            self._settle(order, cart)
            self.repo.commit()

        except IntegrityError as e:
            self.repo.rollback()
            if "tracking_number" in str(e.orig):
                logger.warning(f"Tracking number collision for user {user_id}, retrying")
                raise TrackingNumberConflict(tracking_number) from e
            raise InternalFailure("Failed to create order") from e
        except MarketError:
            self.repo.rollback()
            raise

        self._notify(self.notification_service.send_order_created, order.user_id, order.id, order.tracking_number)
        return order

    def settle_order(self, order_id: int) -> OrderModel:
        """
        Apply any stock decrement or cart clear that did not happen yet.
        Safe to call repeatedly; cancelled orders are left alone.
        """
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Order not found")

        if order.status == OrderStatus.cancelled.value:
            logger.info(f"Order {order_id} is cancelled, nothing to settle")
            return order

        try:
            self._settle(order, self.carts.get_cart_by_user(order.user_id))
            self.repo.commit()
        except MarketError:
            self.repo.rollback()
            raise

        logger.info(f"Order {order_id} settled")
        return order

    def list_unsettled(self) -> list[int]:
        return self.repo.list_unsettled_order_ids()

    def list_orders(self, user_id: int) -> list[OrderModel]:
        return self.repo.list_orders_by_user(user_id)

    def get_order(self, order_id: int, user_id: int, is_admin: bool = False) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFound("Order not found")

        if order.user_id != user_id and not is_admin:
            raise Forbidden("Not authorized to view this order")

        return order

    def update_status(self, order_id: int, status: str) -> OrderModel:
        """
        Use case: administrative status change.
        No side effects, a cancelled order is not restocked.
        """
        try:
            target = OrderStatus(status)
        except ValueError:
            raise InvalidArgument(
                "Invalid status",
                details=[f"status must be one of: {', '.join(s.value for s in OrderStatus)}"],
            )

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Order not found")

        current = OrderStatus(order.status)
        if current == target:
            return order

        if current not in ALLOWED_TRANSITIONS[target]:
            raise InvalidArgument(f"Cannot change order status from {current.value} to {target.value}")

        order = self.repo.update_order_status(order, target.value)
        logger.info(f"Order {order_id} status {current.value} -> {target.value}")

        self._notify(self.notification_service.send_status_changed, order.user_id, order.id, order.status)
        return order

    def _require_address(self, address: ShippingAddress | None):
        if address is None:
            raise InvalidArgument("Shipping address is required")
        missing = [
            field
            for field in ("street", "city", "region", "phone")
            if not (getattr(address, field, None) or "").strip()
        ]
        if missing:
            raise InvalidArgument(
                "Validation failed",
                details=[f"{field} is required" for field in missing],
            )

    def _revalidate(self, cart: CartModel) -> dict[int, str]:
        """Check every line against the current catalog, returns product titles."""
        titles = {}
        for item in cart.items:
            product = self.catalog.find_product(item.product_id)
            if not product:
                raise InsufficientStock(item.product_id)
            if not product.in_stock or product.quantity < item.quantity:
                logger.info(
                    f"Checkout of cart {cart.id} refused: product {product.id} has "
                    f"{product.quantity} left, {item.quantity} requested"
                )
                raise InsufficientStock(product.id, product.title)
            titles[item.product_id] = product.title
        return titles

    def _settle(self, order: OrderModel, cart: CartModel | None):
        #each step is guarded by its flag so a repeated run is a no-op
        for item in order.items:
            if item.stock_committed:
                continue
            self.catalog.decrement_stock_if_available(item.product_id, item.quantity, item.title)
            item.stock_committed = True

        if not order.cart_cleared:
            if cart is not None and cart.items:
                self.carts.delete_cart_items(cart)
                rowcount = self.carts.update_cart_version(
                    cart_id=cart.id,
                    old_version=cart.version,
                    new_data={
                        "total_amount": Decimal("0.00"),
                        "version": cart.version + 1,
                        "updated_at": datetime.now(timezone.utc),
                    },
                )
                if rowcount == 0:
                    raise ConcurrentModification(cart.id)
                logger.info(f"Cart {cart.id} emptied after order {order.id}")
            order.cart_cleared = True

    def _notify(self, send, user_id: int, order_id: int, *args):
        try:
            send(user_id, order_id, *args)
        except Exception as e:
            #the order is already committed, a broker outage only loses the notification
            logger.error(f"Failed to dispatch notification for order {order_id}: {e}")
