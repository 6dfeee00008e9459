# app/api/__init__.py
from fastapi import APIRouter

from app.api.routers import carts, orders

api_router = APIRouter(prefix="/api")
api_router.include_router(carts.router)
api_router.include_router(orders.router)
