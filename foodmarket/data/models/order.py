from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from foodmarket.data.database import Base


class OrderStatus:
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    DELIVERED = "Delivered"


class DeliveryMethod:
    DELIVERY = "Delivery"
    PICKUP = "Pickup"


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String, nullable=False, default=OrderStatus.PENDING)  # Pending, Accepted, Delivered
    delivery_method = Column(String, nullable=False, default=DeliveryMethod.DELIVERY)
    delivery_location = Column(String, nullable=True)
    total = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    user = relationship("UserModel")
    lines = relationship(
        "OrderLineModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLineModel.id",
    )
