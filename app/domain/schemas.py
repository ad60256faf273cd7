# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, PlainSerializer
from typing import List, Annotated
from decimal import Decimal
from datetime import datetime

from app.utils.settings import CART_MAX_ITEM_QUANTITY


# kwoty trzymamy jako Decimal, w JSON wychodza jako liczby
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CreateCartIn(BaseModel):
    """Schema dla tworzenia koszyka."""

    user_id: int = Field(..., gt=0, description="ID uzytkownika (musi byc > 0)")


class AddItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    user_id: int = Field(..., gt=0)
    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(..., gt=0, le=CART_MAX_ITEM_QUANTITY, description="Ilosc produktu (musi byc > 0)")
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class UpdateItemIn(BaseModel):
    """Schema dla zmiany ilosci produktu w koszyku."""

    user_id: int = Field(..., gt=0)
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0, le=CART_MAX_ITEM_QUANTITY)


class CartItemOut(BaseModel):
    id: int
    product_id: int
    quantity: int
    price: Money
    subtotal: Money


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    cart_id: int
    user_id: int
    items: List[CartItemOut]
    total_amount: Money
    total_items: int

    model_config = ConfigDict(from_attributes=True)


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=5000)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: Money

    model_config = ConfigDict(from_attributes=True)


class SignUpIn(BaseModel):
    """Schema dla rejestracji uzytkownika."""

    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1, max_length=72)
    username: str = Field(..., min_length=1, max_length=100)


class LoginIn(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserRead(BaseModel):
    """Schema dla uzytkownika (response), bez hasla."""

    id: int
    email: str
    username: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    token: str
    user: UserRead
