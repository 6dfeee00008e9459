# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query

from app.data.database import TransactionProvider, get_provider
from app.domain.schemas import MAX_DB_INT, OrderOut, PlaceOrderIn, PlaceOrderOut, SingleOrderIn, SingleOrderOut
from app.services.checkout_service import CheckoutService
from app.services.order_service import OrderService

router = APIRouter(tags=["orders"])


def get_checkout_service(provider: TransactionProvider = Depends(get_provider)) -> CheckoutService:
    return CheckoutService(provider)


def get_order_service(provider: TransactionProvider = Depends(get_provider)) -> OrderService:
    return OrderService(provider)


@router.post("/orders/place", response_model=PlaceOrderOut)
def place_order(payload: PlaceOrderIn, svc: CheckoutService = Depends(get_checkout_service)):
    """
    Zamowienie z koszyka, ceny brane z katalogu.
    Koszyk uzytkownika jest czyszczony w tej samej transakcji.
    """
    result = svc.place_order(payload.user_id, [item.model_dump() for item in payload.items])
    return {"message": "Order placed successfully", **result}


@router.post("/single-order", response_model=SingleOrderOut, status_code=201)
def place_single_order(payload: SingleOrderIn, svc: CheckoutService = Depends(get_checkout_service)):
    return svc.place_single_order(payload.user_id, payload.product_id, payload.quantity)


@router.get("/orders", response_model=List[OrderOut])
def list_orders(
    user_id: int = Query(..., alias="userId", gt=0, le=MAX_DB_INT),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_orders(user_id)


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    user_id: int = Query(..., alias="userId", gt=0, le=MAX_DB_INT),
    svc: OrderService = Depends(get_order_service),
):
    """
    Przyjmuje "12" albo "ORD-12".
    """
    return svc.get_order(user_id, order_id)
