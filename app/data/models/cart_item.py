from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer

from app.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart"

    #jeden wiersz na pare (user, product), upsert opiera sie na tym kluczu
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True)

    quantity = Column(Integer, nullable=False)

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_cart_quantity_positive"),)
