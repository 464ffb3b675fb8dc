# foodmarket/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# upper bound of the 32-bit INTEGER id and quantity columns
MAX_DB_INT = 2_147_483_647

WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


class CamelModel(BaseModel):
    """Wire format is camelCase, Python attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# requests


class CartItemIn(CamelModel):
    """Body of /addtocart and /removefromcart."""

    email: str = Field(..., min_length=1)
    item_id: int = Field(..., gt=0, le=MAX_DB_INT)


class CartQuantityIn(CamelModel):
    email: str = Field(..., min_length=1)
    item_id: int = Field(..., gt=0, le=MAX_DB_INT)
    new_quantity: int = Field(..., ge=-MAX_DB_INT, le=MAX_DB_INT)


class PlaceOrderIn(CamelModel):
    email: str = Field(..., min_length=1)
    delivery_method: Literal["Delivery", "Pickup"] = "Delivery"


class OrderIdIn(CamelModel):
    order_id: int = Field(..., gt=0, le=MAX_DB_INT)


class DeliveryLocationIn(CamelModel):
    order_id: int = Field(..., gt=0, le=MAX_DB_INT)
    location: str = Field(..., min_length=1)


class RegisterIn(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    location: str = Field(..., min_length=1)


class LoginIn(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ItemCreate(CamelModel):
    """Body of /additem; ``itemname`` keeps the name the mobile client sends."""

    name: str = Field(..., min_length=1, alias="itemname")
    photo: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    protein: str = Field(..., min_length=1)
    seller: Optional[str] = None
    location: str = Field(..., min_length=1)
    quantity: int = Field(0, ge=0, le=MAX_DB_INT)


class WorkoutPlanIn(CamelModel):
    email: str = Field(..., min_length=1)


class WorkoutSplitIn(CamelModel):
    workout_split: Dict[str, str]

    @field_validator("workout_split")
    @classmethod
    def check_weekdays(cls, value: Dict[str, str]) -> Dict[str, str]:
        if set(value) != set(WEEKDAYS):
            raise ValueError(f"workoutSplit must have exactly these keys: {', '.join(WEEKDAYS)}")
        return value


# responses


class MessageOut(CamelModel):
    message: str


class ItemOut(CamelModel):
    id: int
    name: str = Field(..., alias="itemname")
    photo: Optional[str] = None
    price: Decimal
    protein: str
    seller: Optional[str] = None
    location: str
    quantity: int


class ItemCreatedOut(CamelModel):
    message: str
    item: ItemOut


class CartLineOut(CamelModel):
    item: ItemOut
    quantity: int


class CartOut(CamelModel):
    message: str
    cart: List[CartLineOut]


class PlaceOrderOut(CamelModel):
    message: str
    order_id: int


class OrderLineOut(CamelModel):
    item_id: int
    quantity: int
    price_at_purchase: Decimal
    item: Optional[ItemOut] = None


class OrderOut(CamelModel):
    id: int
    user_email: str
    status: str
    delivery_method: str
    delivery_location: Optional[str] = None
    total: Decimal
    created_at: datetime
    lines: List[OrderLineOut]


class OrderActionOut(CamelModel):
    message: str
    order: OrderOut


class PendingCountOut(CamelModel):
    count: int


class LoginOut(CamelModel):
    message: str
    username: str
    email: str
    location: Optional[str] = None


class ProfileOut(CamelModel):
    username: str
    email: str
    location: Optional[str] = None
    cart: List[CartLineOut]
    nearby_items: List[ItemOut]


class WorkoutSplitOut(CamelModel):
    email: str
    workout_split: Dict[str, str]


class WorkoutPlanOut(CamelModel):
    daily_protein: int
    muscle_group: str
    plan: dict
