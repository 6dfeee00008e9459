# app/api/routers/health.py
from fastapi import APIRouter, Depends

from app.data.database import TransactionProvider, get_provider

router = APIRouter(tags=["health"])


@router.get("/health")
def health(provider: TransactionProvider = Depends(get_provider)):
    #ServiceUnavailableError -> 503 przez handler bledow
    provider.ping()
    return {"status": "ok"}
