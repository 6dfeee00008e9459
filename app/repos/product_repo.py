# app/repos/product_repo.py
from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids: Iterable[int]) -> Dict[int, ProductModel]:
        ids = list(product_ids)
        if not ids:
            return {}

        products = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars()
        return {p.id: p for p in products}

    def exists(self, product_id: int) -> bool:
        return self.db.execute(
            select(ProductModel.id).where(ProductModel.id == product_id)
        ).first() is not None
