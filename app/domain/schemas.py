# app/domain/schemas.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Annotated, List, Optional
from decimal import Decimal
from datetime import datetime

#kolumny Integer w bazie, wieksze wartosci to blad klienta a nie 500
MAX_DB_INT = 2**31 - 1

PositiveId = Annotated[int, Field(gt=0, le=MAX_DB_INT)]


def _alias(snake: str, camel: str) -> AliasChoices:
    #klienci wysylaja raz userId, raz user_id
    return AliasChoices(camel, snake)


class CartAddIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    user_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=_alias("user_id", "userId"))
    product_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=_alias("product_id", "productId"))
    quantity: int = Field(..., gt=0, le=MAX_DB_INT, description="Ilość produktu (musi być > 0)")


class CartUpdateIn(BaseModel):
    """Ilosc absolutna, <= 0 usuwa pozycje."""

    user_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=_alias("user_id", "userId"))
    product_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=_alias("product_id", "productId"))
    quantity: int = Field(..., ge=-MAX_DB_INT, le=MAX_DB_INT)


class CartRemoveIn(BaseModel):
    user_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=_alias("user_id", "userId"))
    product_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=_alias("product_id", "productId"))


class CartDetailsIn(BaseModel):
    user_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=_alias("user_id", "userId"))
    product_ids: List[PositiveId] = Field(..., min_length=1, validation_alias=_alias("product_ids", "productIds"))


class CartItemOut(BaseModel):
    user_id: int
    product_id: int
    quantity: int


class CartMutationOut(BaseModel):
    message: str
    cart_item: Optional[CartItemOut] = Field(None, serialization_alias="cartItem")
    deleted_rows: Optional[int] = Field(None, serialization_alias="deletedRows")


class CartLineOut(BaseModel):
    """Schema dla produktu w koszyku (response)."""

    product_id: int
    quantity: int
    name: str
    price: Decimal
    image: Optional[str] = None


class CartDetailLineOut(CartLineOut):
    description: Optional[str] = None


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    message: Optional[str] = None
    cart_items: List[CartLineOut] = Field(serialization_alias="cartItems")
    total_items: int = Field(serialization_alias="totalItems")
    total_value: Decimal = Field(serialization_alias="totalValue")


class OrderItemIn(BaseModel):
    """Pozycja zamowienia od klienta, cena jest tylko podpowiedzia."""

    product_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=AliasChoices("id", "productId", "product_id"))
    quantity: int = Field(..., gt=0, le=MAX_DB_INT)
    price: Optional[Decimal] = None


class PlaceOrderIn(BaseModel):
    """Schema dla zamówienia z koszyka."""

    user_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=_alias("user_id", "userId"))
    items: List[OrderItemIn] = Field(..., min_length=1)


class PlaceOrderOut(BaseModel):
    message: str
    order_id: str = Field(serialization_alias="orderId")
    total_amount: Decimal = Field(serialization_alias="totalAmount")


class SingleOrderIn(BaseModel):
    user_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=_alias("user_id", "userId"))
    product_id: int = Field(..., gt=0, le=MAX_DB_INT, validation_alias=_alias("product_id", "productId"))
    quantity: int = Field(..., gt=0, le=MAX_DB_INT)


class ProductDetailsOut(BaseModel):
    name: str
    image: Optional[str] = None


class SingleOrderOut(BaseModel):
    """Schema dla zamówienia jednego produktu (response)."""

    id: str
    user_id: int = Field(serialization_alias="userId")
    product_id: int = Field(serialization_alias="productId")
    quantity: int
    total_amount: Decimal = Field(serialization_alias="totalAmount")
    order_date: datetime = Field(serialization_alias="orderDate")
    product_details: ProductDetailsOut = Field(serialization_alias="productDetails")


class OrderLineOut(BaseModel):
    product_id: int
    name: Optional[str] = None
    price: Decimal
    quantity: int
    image: Optional[str] = None


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: str
    date: str
    total: Decimal
    items: List[OrderLineOut]

    model_config = ConfigDict(from_attributes=True)
