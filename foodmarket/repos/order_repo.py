# foodmarket/repos/order_repo.py
from typing import List

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from foodmarket.data.models.order import OrderModel
from foodmarket.data.models.order_line import OrderLineModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        """Stage a new order in the current transaction; the caller commits."""
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def update_status(self, order_id: int, expected: str, new_status: str) -> int:
        # conditional update, e.g. set status Accepted where id 1 and status Pending
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == expected)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def set_delivery_location(self, order_id: int, location: str) -> int:
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(delivery_location=location)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def _orders_for_items(self, item_ids: List[int]):
        touching = select(OrderLineModel.order_id).where(OrderLineModel.item_id.in_(item_ids))
        return OrderModel.id.in_(touching)

    def list_for_items(self, item_ids: List[int], statuses: List[str]) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.lines), selectinload(OrderModel.user))
                .where(self._orders_for_items(item_ids), OrderModel.status.in_(statuses))
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def count_for_items(self, item_ids: List[int], status: str) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(
                self._orders_for_items(item_ids), OrderModel.status == status
            )
        ).scalar_one()

    def list_for_user(self, user_id: int) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.lines), selectinload(OrderModel.user))
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def list_for_user_since(self, user_id: int, since) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.lines))
                .where(OrderModel.user_id == user_id, OrderModel.created_at >= since)
                .order_by(OrderModel.id)
            ).scalars().all()
        )

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
