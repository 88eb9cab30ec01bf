# market/repos/cart_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session
from market.data.models.cart import CartModel
from market.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_item(self, cart: CartModel, product_id: int) -> CartItemModel | None:
        for item in cart.items:
            if item.product_id == product_id:
                return item
        return None

    def add_cart_item(self, cart: CartModel, item: CartItemModel) -> None:
        cart.items.append(item)

    def delete_cart_item(self, cart: CartModel, product_id: int) -> int:
        matching = [i for i in cart.items if i.product_id == product_id]
        for item in matching:
            cart.items.remove(item)
        return len(matching)

    def delete_cart_items(self, cart: CartModel) -> None:
        cart.items.clear()

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        #optimistic locking: UPDATE carts SET ... WHERE id = x AND version = old
        self.db.flush()
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount

    def refresh(self, cart: CartModel) -> CartModel:
        self.db.refresh(cart)
        return cart

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
