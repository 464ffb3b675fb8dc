# foodmarket/services/item_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from foodmarket.data.models.item import ItemModel
from foodmarket.domain.schemas import ItemCreate
from foodmarket.repos.item_repo import ItemRepo
from foodmarket.services.presenters import item_to_dict
from foodmarket.utils.logging import get_logger

logger = get_logger(__name__)


class ItemService:
    def __init__(self, db: Session):
        self.repo = ItemRepo(db)

    def create_item(self, payload: ItemCreate) -> Dict[str, Any]:
        item = self.repo.create_item(
            ItemModel(
                name=payload.name,
                photo=payload.photo,
                price=payload.price,
                protein=payload.protein,
                seller=payload.seller,
                location=payload.location,
                quantity=payload.quantity,
            )
        )
        logger.info(f"Item {item.id} '{item.name}' listed by {item.seller or 'anonymous'} at {item.location}")
        return item_to_dict(item)
