# foodmarket/services/presenters.py
# ORM rows -> plain dicts, validated into response schemas by the routers
from typing import Any, Dict, Iterable, List, Tuple

from foodmarket.data.models.cart_item import CartItemModel
from foodmarket.data.models.item import ItemModel
from foodmarket.data.models.order import OrderModel


def item_to_dict(item: ItemModel) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "photo": item.photo,
        "price": item.price,
        "protein": item.protein,
        "seller": item.seller,
        "location": item.location,
        "quantity": item.quantity,
    }


def cart_to_list(lines: Iterable[Tuple[CartItemModel, ItemModel]]) -> List[Dict[str, Any]]:
    return [{"item": item_to_dict(item), "quantity": line.quantity} for line, item in lines]


def order_to_dict(order: OrderModel, items: Dict[int, ItemModel]) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_email": order.user.email,
        "status": order.status,
        "delivery_method": order.delivery_method,
        "delivery_location": order.delivery_location,
        "total": order.total,
        "created_at": order.created_at,
        "lines": [
            {
                "item_id": line.item_id,
                "quantity": line.quantity,
                "price_at_purchase": line.price_at_purchase,
                "item": item_to_dict(items[line.item_id]) if line.item_id in items else None,
            }
            for line in order.lines
        ],
    }
