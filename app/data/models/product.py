#app/data/models/product.py
from sqlalchemy import Column, Integer, String, Text, Numeric, JSON

from app.data.database import Base


class ProductModel(Base):
    """Katalog produktow, tylko do odczytu w tym serwisie (zrodlo ceny)."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(500), nullable=True)
    specs = Column(JSON, nullable=True)
