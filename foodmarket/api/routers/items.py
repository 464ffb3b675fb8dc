from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodmarket.data.database import get_db
from foodmarket.domain.schemas import ItemCreate, ItemCreatedOut
from foodmarket.services.item_service import ItemService

router = APIRouter(tags=["items"])


@router.post("/additem", response_model=ItemCreatedOut)
def add_item(payload: ItemCreate, db: Session = Depends(get_db)):
    item = ItemService(db).create_item(payload)
    return {"message": "Item added successfully", "item": item}
