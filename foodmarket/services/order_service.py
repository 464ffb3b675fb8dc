# foodmarket/services/order_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from foodmarket.data.models.order import OrderModel, OrderStatus
from foodmarket.domain.errors import InvalidTransitionError, NotFoundError
from foodmarket.repos.item_repo import ItemRepo
from foodmarket.repos.order_repo import OrderRepo
from foodmarket.repos.user_repo import UserRepo
from foodmarket.services.presenters import order_to_dict
from foodmarket.utils.logging import get_logger

logger = get_logger(__name__)

# status -> the only status it may be reached from
_PREVIOUS_STATUS = {
    OrderStatus.ACCEPTED: OrderStatus.PENDING,
    OrderStatus.DELIVERED: OrderStatus.ACCEPTED,
}


class OrderService:
    """
    Order lifecycle (Pending -> Accepted -> Delivered) and order queries.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.items = ItemRepo(db)
        self.users = UserRepo(db)

    # commands
    def accept_order(self, order_id: int) -> Dict[str, Any]:
        return self._transition(order_id, OrderStatus.ACCEPTED)

    def deliver_order(self, order_id: int) -> Dict[str, Any]:
        return self._transition(order_id, OrderStatus.DELIVERED)

    def attach_delivery_location(self, order_id: int, location: str) -> Dict[str, Any]:
        try:
            updated = self.repo.set_delivery_location(order_id, location)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        if updated == 0:
            raise NotFoundError("Order not found")

        logger.info(f"Delivery location set for order {order_id}")
        return self.get_order(order_id)

    def _transition(self, order_id: int, target: str) -> Dict[str, Any]:
        expected = _PREVIOUS_STATUS[target]
        try:
            updated = self.repo.update_status(order_id, expected, target)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        if updated == 0:
            order = self.repo.get_order(order_id)
            if not order:
                raise NotFoundError("Order not found")
            self.db.refresh(order)
            logger.warning(f"Rejected transition of order {order_id}: {order.status} -> {target}")
            raise InvalidTransitionError(order_id, order.status, target)

        logger.info(f"Order {order_id}: {expected} -> {target}")
        return self.get_order(order_id)

    # queries
    def get_order(self, order_id: int) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        # the commit above may have cached the pre-update row
        self.db.refresh(order)
        return self._present([order])[0]

    def seller_active_orders(self, seller_email: str) -> List[Dict[str, Any]]:
        """Pending and Accepted orders containing at least one of the seller's items, newest first."""
        if not self.users.get_user_by_email(seller_email):
            logger.info(f"Seller not found for email: {seller_email}")
            raise NotFoundError("Seller not found")

        item_ids = self.items.seller_item_ids(seller_email)
        if not item_ids:
            return []

        orders = self.repo.list_for_items(item_ids, [OrderStatus.PENDING, OrderStatus.ACCEPTED])
        logger.debug(f"Found {len(orders)} active orders for seller {seller_email}")
        return self._present(orders)

    def seller_pending_count(self, seller_email: str) -> int:
        item_ids = self.items.seller_item_ids(seller_email)
        if not item_ids:
            return 0
        return self.repo.count_for_items(item_ids, OrderStatus.PENDING)

    def buyer_orders(self, email: str) -> List[Dict[str, Any]]:
        user = self.users.get_user_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        return self._present(self.repo.list_for_user(user.id))

    def _present(self, orders: List[OrderModel]) -> List[Dict[str, Any]]:
        items = self.items.get_items(line.item_id for order in orders for line in order.lines)
        return [order_to_dict(order, items) for order in orders]
