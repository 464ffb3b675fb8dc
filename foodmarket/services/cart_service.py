from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from foodmarket.data.models.cart_item import CartItemModel
from foodmarket.data.models.user import UserModel
from foodmarket.domain.errors import NotFoundError
from foodmarket.repos.cart_repo import CartRepo
from foodmarket.repos.item_repo import ItemRepo
from foodmarket.repos.user_repo import UserRepo
from foodmarket.services.lock_service import LockService
from foodmarket.services.presenters import cart_to_list
from foodmarket.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases, CQRS-style:
    commands (add, remove, set quantity) change state under the user's cart lock,
    the query (get) only reads.
    Every command returns the cart with items resolved.
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.repo = CartRepo(db)
        self.items = ItemRepo(db)
        self.users = UserRepo(db)
        self.lock_service = lock_service

    def _require_user(self, email: str) -> UserModel:
        user = self.users.get_user_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _require_item(self, item_id: int):
        item = self.items.get_item(item_id)
        if not item:
            raise NotFoundError("Item not found")
        return item

    # query
    def get_cart(self, email: str) -> List[Dict[str, Any]]:
        user = self._require_user(email)
        return cart_to_list(self.repo.get_resolved_cart(user.id))

    # commands
    def add_to_cart(self, email: str, item_id: int) -> List[Dict[str, Any]]:
        """Add one unit of an item; a repeated add increments the existing line."""
        self._require_item(item_id)
        user = self._require_user(email)

        with self.lock_service.cart_lock(email):
            try:
                line = self.repo.get_cart_item(user.id, item_id)
                if line:
                    logger.info(
                        f"Item {item_id} already in cart of {email}, quantity "
                        f"{line.quantity} -> {line.quantity + 1}"
                    )
                    line.quantity += 1
                else:
                    logger.info(f"Adding item {item_id} to cart of {email}")
                    self.repo.add_cart_item(CartItemModel(user_id=user.id, item_id=item_id, quantity=1))
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        return self.get_cart(email)

    def remove_from_cart(self, email: str, item_id: int) -> List[Dict[str, Any]]:
        """Drop the whole line; removing an absent line is not an error."""
        user = self._require_user(email)

        with self.lock_service.cart_lock(email):
            self._delete_line(user, item_id)

        return self.get_cart(email)

    def set_quantity(self, email: str, item_id: int, new_quantity: int) -> Tuple[List[Dict[str, Any]], bool]:
        """Set a line to exactly ``new_quantity``; zero or less removes it.

        Returns the cart and whether a new line had to be created.
        """
        user = self._require_user(email)

        if new_quantity <= 0:
            with self.lock_service.cart_lock(email):
                self._delete_line(user, item_id)
            return self.get_cart(email), False

        created = False
        with self.lock_service.cart_lock(email):
            try:
                line = self.repo.get_cart_item(user.id, item_id)
                if line:
                    logger.info(f"Setting item {item_id} in cart of {email} to {new_quantity}")
                    line.quantity = new_quantity
                else:
                    self._require_item(item_id)
                    logger.info(f"Adding item {item_id} to cart of {email} with quantity {new_quantity}")
                    self.repo.add_cart_item(
                        CartItemModel(user_id=user.id, item_id=item_id, quantity=new_quantity)
                    )
                    created = True
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        return self.get_cart(email), created

    def _delete_line(self, user: UserModel, item_id: int) -> None:
        try:
            removed = self.repo.delete_cart_item(user.id, item_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        if removed:
            logger.info(f"Removed item {item_id} from cart of {user.email}")
        else:
            logger.debug(f"Item {item_id} was not in cart of {user.email}")
