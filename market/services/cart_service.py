from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from market.data.models.cart import CartModel
from market.data.models.cart_item import CartItemModel
from market.domain.errors import ConcurrentModification, InvalidArgument, NotFound, OutOfStock
from market.repos.cart_repo import CartRepo
from market.services.catalog_service import CatalogService
from market.utils.logging import get_logger

logger = get_logger(__name__)


def cart_total(items: Iterable[CartItemModel]) -> Decimal:
    return sum((Decimal(i.price) * i.quantity for i in items), Decimal("0.00"))


class CartService:
    """
    Use cases for the cart domain.
    commands (add, update, remove, clear) change state,
    get_cart only reads (and lazily creates the cart).
    """

    def __init__(self, db: Session, catalog: CatalogService):
        self.repo = CartRepo(db)
        self.catalog = catalog

    #query
    def get_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        try:
            created = self.repo.create_cart(
                CartModel(user_id=user_id, total_amount=Decimal("0.00"), version=1)
            )
        except IntegrityError:
            #another request created it first
            self.repo.rollback()
            return self.repo.get_cart_by_user(user_id)

        logger.info(f"Created cart {created.id} for user {user_id}")
        return created

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> CartModel:
        if quantity <= 0:
            raise InvalidArgument("Quantity must be greater than 0")

        product = self.catalog.get_product(product_id)
        cart = self.get_cart(user_id)

        existing_item = self.repo.get_cart_item(cart, product_id)
        desired = quantity + (existing_item.quantity if existing_item else 0)

        # stock is checked against the whole quantity the cart would hold
        if not product.in_stock or product.quantity < desired:
            raise OutOfStock(product_id, product.title)

        if existing_item:
            logger.info(
                f"Product {product_id} already in cart {cart.id}, quantity "
                f"{existing_item.quantity} -> {desired}"
            )
            existing_item.quantity = desired
        else:
            logger.info(f"Adding product {product_id} to cart {cart.id} at {product.price}")
            self.repo.add_cart_item(
                cart,
                CartItemModel(product_id=product_id, quantity=quantity, price=product.price),
            )

        return self._save(cart)

    def update_item_quantity(self, user_id: int, product_id: int, quantity: int) -> CartModel:
        if quantity <= 0:
            raise InvalidArgument("Quantity must be greater than 0")

        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFound("Cart not found")

        item = self.repo.get_cart_item(cart, product_id)
        if not item:
            raise NotFound("Item not found in cart")

        # no stock check here, checkout revalidates
        logger.info(f"Setting quantity of product {product_id} in cart {cart.id} to {quantity}")
        item.quantity = quantity
        return self._save(cart)

    def remove_item(self, user_id: int, product_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFound("Cart not found")

        removed = self.repo.delete_cart_item(cart, product_id)
        logger.info(f"Removed product {product_id} from cart {cart.id} ({removed} line(s))")
        return self._save(cart)

    def clear(self, user_id: int) -> None:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return

        self.repo.delete_cart_items(cart)
        self._save(cart)
        logger.info(f"Cleared cart {cart.id}")

    def _save(self, cart: CartModel) -> CartModel:
        """Recompute the total and persist it together with a version bump."""
        total = cart_total(cart.items)

        # optimistic locking, e.g. UPDATE carts SET version 2 WHERE id 1 AND version 1
        try:
            rowcount = self.repo.update_cart_version(
                cart_id=cart.id,
                old_version=cart.version,
                new_data={
                    "total_amount": total,
                    "version": cart.version + 1,
                    "updated_at": datetime.now(timezone.utc),
                },
            )
        except IntegrityError:
            #a concurrent request inserted the same product line first
            self.repo.rollback()
            raise ConcurrentModification(cart.id)

        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrentModification(cart.id)

        self.repo.commit()
        return self.repo.refresh(cart)
