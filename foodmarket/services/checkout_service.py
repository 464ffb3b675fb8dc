# foodmarket/services/checkout_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from foodmarket.data.models.order import OrderModel, OrderStatus, DeliveryMethod
from foodmarket.data.models.order_line import OrderLineModel
from foodmarket.data.models.user import UserModel
from foodmarket.domain.errors import EmptyCartError, InsufficientStockError, NotFoundError
from foodmarket.repos.cart_repo import CartRepo
from foodmarket.repos.item_repo import ItemRepo
from foodmarket.repos.order_repo import OrderRepo
from foodmarket.repos.user_repo import UserRepo
from foodmarket.services.lock_service import LockService
from foodmarket.utils.settings import DELIVERY_CHARGE
from foodmarket.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Turns a user's cart into an order.

    The whole checkout is one database transaction: stock decrements, the
    order with its line snapshots and clearing the cart either all commit
    or all roll back.
    """

    def __init__(self, db: Session, lock_service: LockService, delivery_charge: Decimal = DELIVERY_CHARGE):
        self.db = db
        self.carts = CartRepo(db)
        self.items = ItemRepo(db)
        self.orders = OrderRepo(db)
        self.users = UserRepo(db)
        self.lock_service = lock_service
        self.delivery_charge = delivery_charge

    def place_order(self, email: str, delivery_method: str = DeliveryMethod.DELIVERY) -> int:
        """
        Use case: place an order from the cart.

        1. checks every line against current stock before touching anything
        2. decrements stock with a conditional update per line
        3. snapshots price and quantity into order lines
        4. stores the order as Pending and empties the cart

        Returns the new order id.
        """
        user = self.users.get_user_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        with self.lock_service.cart_lock(email):
            try:
                order = self._checkout(user, delivery_method)
                self.db.commit()
            except (EmptyCartError, InsufficientStockError) as e:
                self.db.rollback()
                logger.warning(f"Checkout rejected for {email}: {e}")
                raise
            except Exception:
                self.db.rollback()
                raise

        logger.info(
            f"Order {order.id} placed by {email}: {len(order.lines)} lines, "
            f"total {order.total}, method {delivery_method}"
        )
        return order.id

    def _checkout(self, user: UserModel, delivery_method: str) -> OrderModel:
        lines = self.carts.get_cart_items(user.id)
        if not lines:
            raise EmptyCartError()

        items = self.items.get_items(line.item_id for line in lines)

        # first pass: validate every line, no writes yet
        for line in lines:
            item = items.get(line.item_id)
            if item is None:
                raise NotFoundError(f"Item {line.item_id} in cart no longer exists")
            if item.quantity < line.quantity:
                raise InsufficientStockError(item.id, item.name, item.quantity, line.quantity)

        # second pass: decrement only if stock is still there
        # a concurrent checkout may have taken it since the first pass
        order_lines = []
        for line in lines:
            item = items[line.item_id]
            if self.items.decrement_stock(item.id, line.quantity) == 0:
                self.db.expire(item)
                current = self.items.get_item(item.id)
                if current is None:
                    raise NotFoundError(f"Item {line.item_id} in cart no longer exists")
                raise InsufficientStockError(current.id, current.name, current.quantity, line.quantity)

            logger.debug(f"Reserved {line.quantity} x item {item.id} for {user.email}")
            order_lines.append(
                OrderLineModel(
                    item_id=item.id,
                    quantity=line.quantity,
                    price_at_purchase=item.price,
                )
            )

        total = sum((ol.price_at_purchase * ol.quantity for ol in order_lines), Decimal("0.00"))
        if delivery_method == DeliveryMethod.DELIVERY:
            total += self.delivery_charge

        order = self.orders.add_order(
            OrderModel(
                user_id=user.id,
                status=OrderStatus.PENDING,
                delivery_method=delivery_method,
                total=total,
                lines=order_lines,
            )
        )
        self.carts.clear_cart(user.id)
        return order
