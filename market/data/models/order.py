from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from market.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")  # pending, confirmed, shipped, delivered, cancelled
    total_amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(30), nullable=False, default="cash_on_delivery")

    shipping_street = Column(String, nullable=False)
    shipping_city = Column(String, nullable=False)
    shipping_region = Column(String, nullable=False)
    shipping_phone = Column(String, nullable=False)

    notes = Column(Text, nullable=True)
    tracking_number = Column(String(32), nullable=False)
    cart_cleared = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
        lazy="selectin",
    )

    __table_args__ = (UniqueConstraint("tracking_number", name="uq_orders_tracking_number"),)

    @property
    def shipping_address(self) -> dict:
        return {
            "street": self.shipping_street,
            "city": self.shipping_city,
            "region": self.shipping_region,
            "phone": self.shipping_phone,
        }
