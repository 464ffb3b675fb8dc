from sqlalchemy import Column, Integer, String, Numeric, CheckConstraint

from foodmarket.data.database import Base


class ItemModel(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    photo = Column(String, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    protein = Column(String, nullable=False)  # free text, e.g. "12g per 100g"
    seller = Column(String, nullable=True, index=True)  # seller email
    location = Column(String, nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)

    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_item_quantity_non_negative"),)
