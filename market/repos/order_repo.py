# market/repos/order_repo.py
from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from market.data.models.order import OrderModel
from market.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        #flush only, the checkout transaction commits
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders_by_user(self, user_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars()
        )

    def list_unsettled_order_ids(self) -> list[int]:
        uncommitted = select(OrderItemModel.order_id).where(
            OrderItemModel.stock_committed.is_(False)
        )
        return list(
            self.db.execute(
                select(OrderModel.id)
                .where(
                    OrderModel.status != "cancelled",
                    or_(
                        OrderModel.cart_cleared.is_(False),
                        OrderModel.id.in_(uncommitted),
                    ),
                )
                .order_by(OrderModel.id)
            ).scalars()
        )

    def update_order_status(self, order: OrderModel, status: str) -> OrderModel:
        order.status = status
        self.db.commit()
        self.db.refresh(order)
        return order

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
