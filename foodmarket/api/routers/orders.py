# foodmarket/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodmarket.api.deps import get_lock_service
from foodmarket.data.database import get_db
from foodmarket.domain.errors import InvalidRequestError
from foodmarket.domain.schemas import (
    MAX_DB_INT,
    DeliveryLocationIn,
    OrderActionOut,
    OrderIdIn,
    OrderOut,
    PendingCountOut,
    PlaceOrderIn,
    PlaceOrderOut,
)
from foodmarket.services.checkout_service import CheckoutService
from foodmarket.services.lock_service import LockService
from foodmarket.services.order_service import OrderService

router = APIRouter(tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/placeorder", response_model=PlaceOrderOut)
def place_order(
    payload: PlaceOrderIn,
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    """
    Checkout: turns the cart into a Pending order and decrements stock.
    Not idempotent, clients must not blindly retry it.
    """
    svc = CheckoutService(db=db, lock_service=lock_service)
    order_id = svc.place_order(payload.email, payload.delivery_method)
    return {"message": "Order placed and cart cleared successfully", "order_id": order_id}


@router.post("/acceptorder", response_model=OrderActionOut)
def accept_order(payload: OrderIdIn, db: Session = Depends(get_db)):
    order = get_service(db).accept_order(payload.order_id)
    return {"message": "Order accepted successfully", "order": order}


@router.post("/orders/deliver/{order_id}", response_model=OrderActionOut)
def deliver_order(order_id: int, db: Session = Depends(get_db)):
    if order_id <= 0:
        raise InvalidRequestError("Order ID is required")
    if order_id > MAX_DB_INT:
        raise InvalidRequestError("Order ID is out of range")
    order = get_service(db).deliver_order(order_id)
    return {"message": "Order marked as delivered", "order": order}


@router.post("/sendlocation", response_model=OrderActionOut)
def send_location(payload: DeliveryLocationIn, db: Session = Depends(get_db)):
    order = get_service(db).attach_delivery_location(payload.order_id, payload.location)
    return {"message": "Location sent successfully", "order": order}


# declared before /receivedorders/{seller_email} so "pending-count" is never read as an email
@router.get("/receivedorders/pending-count/{seller_email}", response_model=PendingCountOut)
def pending_count(seller_email: str, db: Session = Depends(get_db)):
    if not seller_email.strip():
        raise InvalidRequestError("Seller email is required")
    return {"count": get_service(db).seller_pending_count(seller_email)}


@router.get("/receivedorders/{seller_email}", response_model=List[OrderOut])
def received_orders(seller_email: str, db: Session = Depends(get_db)):
    return get_service(db).seller_active_orders(seller_email)


@router.get("/userorders/{user_email}", response_model=List[OrderOut])
def user_orders(user_email: str, db: Session = Depends(get_db)):
    return get_service(db).buyer_orders(user_email)
