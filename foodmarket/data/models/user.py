from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.orm import relationship

from foodmarket.data.database import Base

DEFAULT_WORKOUT_SPLIT = {
    "Sunday": "Rest",
    "Monday": "Chest",
    "Tuesday": "Back",
    "Wednesday": "Legs",
    "Thursday": "Shoulders",
    "Friday": "Arms",
    "Saturday": "Rest",
}


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, nullable=False, unique=True, index=True)
    username = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    location = Column(String, nullable=True)

    workout_split = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_WORKOUT_SPLIT))
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    cart_items = relationship(
        "CartItemModel",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )
