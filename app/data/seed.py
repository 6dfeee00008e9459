# app/data/seed.py
from decimal import Decimal

from app.data.database import Base, TransactionProvider, get_provider
from app.data.models.product import ProductModel
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_PRODUCTS = [
    {
        "id": 1,
        "name": "Keyboard",
        "category": "Accessories",
        "description": "Mechanical keyboard",
        "price": Decimal("199.99"),
        "image": "/images/keyboard.jpg",
        "specs": [{"label": "Switches", "value": "Brown"}],
    },
    {
        "id": 2,
        "name": "Mouse",
        "category": "Accessories",
        "description": "Wireless mouse",
        "price": Decimal("49.50"),
        "image": "/images/mouse.jpg",
        "specs": None,
    },
    {
        "id": 3,
        "name": "Monitor",
        "category": "Displays",
        "description": "27 inch IPS monitor",
        "price": Decimal("899.00"),
        "image": "/images/monitor.jpg",
        "specs": [{"label": "Resolution", "value": "2560x1440"}],
    },
]


def seed(provider: TransactionProvider | None = None) -> int:
    provider = provider or get_provider()
    Base.metadata.create_all(bind=provider.engine)

    with provider.transaction() as db:
        # not forcing: only seed if empty
        if ProductRepo(db).get_products(p["id"] for p in SAMPLE_PRODUCTS):
            logger.info("Produkty juz istnieja, pomijam seed")
            return 0
        db.add_all(ProductModel(**p) for p in SAMPLE_PRODUCTS)

    logger.info(f"Dodano {len(SAMPLE_PRODUCTS)} produktow")
    return len(SAMPLE_PRODUCTS)


if __name__ == "__main__":
    seed()
