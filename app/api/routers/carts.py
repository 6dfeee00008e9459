#app/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, Path

from app.data.database import TransactionProvider, get_provider
from app.domain.schemas import (
    MAX_DB_INT,
    CartAddIn,
    CartDetailLineOut,
    CartDetailsIn,
    CartMutationOut,
    CartOut,
    CartRemoveIn,
    CartUpdateIn,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(provider: TransactionProvider = Depends(get_provider)) -> CartService:
    return CartService(provider)


@router.post("", response_model=CartMutationOut, response_model_exclude_none=True)
def add_to_cart(payload: CartAddIn, svc: CartService = Depends(get_service)):
    item = svc.add_or_merge(payload.user_id, payload.product_id, payload.quantity)
    return {"message": "Cart updated successfully", "cart_item": item}


@router.get("/{user_id}", response_model=CartOut)
def get_cart(
    user_id: int = Path(..., gt=0, le=MAX_DB_INT),
    svc: CartService = Depends(get_service),
):
    cart = svc.list_with_details(user_id)
    return {
        "message": None if cart["items"] else "Cart is empty",
        "cart_items": cart["items"],
        "total_items": cart["total_items"],
        "total_value": cart["total_value"],
    }


@router.post("/details", response_model=List[CartDetailLineOut])
def get_cart_details(payload: CartDetailsIn, svc: CartService = Depends(get_service)):
    return svc.list_by_ids(payload.user_id, payload.product_ids)


@router.post("/update", response_model=CartMutationOut, response_model_exclude_none=True)
def update_cart_item(payload: CartUpdateIn, svc: CartService = Depends(get_service)):
    result = svc.set_quantity(payload.user_id, payload.product_id, payload.quantity)
    if "deleted_rows" in result:
        return {"message": "Item removed from cart successfully", "deleted_rows": result["deleted_rows"]}
    return {"message": "Cart item quantity updated successfully", "cart_item": result}


@router.delete("/remove", response_model=CartMutationOut, response_model_exclude_none=True)
def remove_cart_item(payload: CartRemoveIn, svc: CartService = Depends(get_service)):
    deleted = svc.remove(payload.user_id, payload.product_id)
    return {"message": "Item removed from cart successfully", "deleted_rows": deleted}
