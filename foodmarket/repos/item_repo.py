# foodmarket/repos/item_repo.py
from typing import Dict, Iterable, List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from foodmarket.data.models.item import ItemModel


class ItemRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, item_id: int) -> ItemModel | None:
        return self.db.get(ItemModel, item_id)

    def get_items(self, item_ids: Iterable[int]) -> Dict[int, ItemModel]:
        ids = set(item_ids)
        if not ids:
            return {}
        rows = self.db.execute(select(ItemModel).where(ItemModel.id.in_(ids))).scalars().all()
        return {i.id: i for i in rows}

    def create_item(self, item: ItemModel) -> ItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def list_nearby(self, location: str, exclude_seller: str | None = None) -> List[ItemModel]:
        stmt = select(ItemModel).where(ItemModel.location == location)
        if exclude_seller is not None:
            # seller is optional, so NULL sellers must survive the != filter
            stmt = stmt.where((ItemModel.seller.is_(None)) | (ItemModel.seller != exclude_seller))
        return list(self.db.execute(stmt.order_by(ItemModel.id)).scalars().all())

    def seller_item_ids(self, seller_email: str) -> List[int]:
        return list(
            self.db.execute(
                select(ItemModel.id).where(ItemModel.seller == seller_email)
            ).scalars().all()
        )

    def decrement_stock(self, item_id: int, quantity: int) -> int:
        """Atomically take ``quantity`` units if at least that many are left.

        Returns the number of rows updated: 0 means the stock was too low.
        Runs inside the caller's transaction, no commit here.
        """
        result = self.db.execute(
            update(ItemModel)
            .where(ItemModel.id == item_id, ItemModel.quantity >= quantity)
            .values(quantity=ItemModel.quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
