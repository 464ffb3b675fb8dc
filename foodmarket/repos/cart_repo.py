# foodmarket/repos/cart_repo.py
from typing import List, Tuple

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from foodmarket.data.models.cart_item import CartItemModel
from foodmarket.data.models.item import ItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_items(self, user_id: int) -> List[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.id)
            ).scalars().all()
        )

    def get_cart_item(self, user_id: int, item_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.item_id == item_id,
            )
        ).scalar_one_or_none()

    def get_resolved_cart(self, user_id: int) -> List[Tuple[CartItemModel, ItemModel]]:
        """Cart lines joined with their items, in insertion order.

        Lines whose item no longer exists are left out.
        """
        rows = self.db.execute(
            select(CartItemModel, ItemModel)
            .join(ItemModel, ItemModel.id == CartItemModel.item_id)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.id)
        ).all()
        return [(line, item) for line, item in rows]

    def add_cart_item(self, cart_item: CartItemModel) -> None:
        self.db.add(cart_item)
        self.db.flush()

    def delete_cart_item(self, user_id: int, item_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.item_id == item_id,
            )
        )
        return result.rowcount

    def clear_cart(self, user_id: int) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
