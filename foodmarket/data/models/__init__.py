# import all models so SQLAlchemy registers them in Base.metadata

from foodmarket.data.models.user import UserModel
from foodmarket.data.models.item import ItemModel
from foodmarket.data.models.cart_item import CartItemModel
from foodmarket.data.models.order import OrderModel, OrderStatus, DeliveryMethod
from foodmarket.data.models.order_line import OrderLineModel

__all__ = [
    "UserModel",
    "ItemModel",
    "CartItemModel",
    "OrderModel",
    "OrderLineModel",
    "OrderStatus",
    "DeliveryMethod",
]
