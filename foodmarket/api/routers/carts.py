# foodmarket/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodmarket.api.deps import get_lock_service
from foodmarket.data.database import get_db
from foodmarket.domain.schemas import CartItemIn, CartQuantityIn, CartOut
from foodmarket.services.cart_service import CartService
from foodmarket.services.lock_service import LockService

router = APIRouter(tags=["cart"])


def get_service(db: Session, lock_service: LockService):
    return CartService(db=db, lock_service=lock_service)


@router.post("/addtocart", response_model=CartOut)
def add_to_cart(
    payload: CartItemIn,
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    cart = svc.add_to_cart(payload.email, payload.item_id)
    return {"message": "Cart updated successfully", "cart": cart}


@router.post("/removefromcart", response_model=CartOut)
def remove_from_cart(
    payload: CartItemIn,
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    cart = svc.remove_from_cart(payload.email, payload.item_id)
    return {"message": "Item fully removed from cart", "cart": cart}


@router.post("/updatecartquantity", response_model=CartOut)
def update_cart_quantity(
    payload: CartQuantityIn,
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    cart, created = svc.set_quantity(payload.email, payload.item_id, payload.new_quantity)
    if payload.new_quantity <= 0:
        message = "Item removed from cart"
    elif created:
        message = "Quantity set successfully"
    else:
        message = "Quantity updated successfully"
    return {"message": message, "cart": cart}
