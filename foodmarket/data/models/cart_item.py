from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from foodmarket.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False, default=1)

    user = relationship("UserModel", back_populates="cart_items")

    __table_args__ = (
        UniqueConstraint("user_id", "item_id", name="u_cart_user_item"),
        CheckConstraint("quantity >= 1", name="ck_cart_quantity_positive"),
    )
