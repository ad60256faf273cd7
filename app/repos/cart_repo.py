# app/repos/cart_repo.py
from typing import List

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session, selectinload

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel


class CartRepo:
    """
    Dostep do tabel carts i cart_items.
    Repo nie commituje samo (poza commit()), transakcja nalezy do CartStore.
    """

    def __init__(self, db: Session):
        self.db = db

    #odczyt koszyka razem z pozycjami w jednym zapytaniu (selectin)
    def get_cart(self, cart_id: int) -> CartModel | None:
        stmt = (
            select(CartModel)
            .options(selectinload(CartModel.items))
            .where(CartModel.id == cart_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_active_cart_by_user(self, user_id: int, for_update: bool = False) -> CartModel | None:
        stmt = (
            select(CartModel)
            .options(selectinload(CartModel.items))
            .where(CartModel.user_id == user_id, CartModel.is_active.is_(True))
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    #SELECT ... FOR UPDATE na wierszu koszyka, serializuje mutacje tego samego koszyka
    def lock_cart(self, cart_id: int) -> CartModel | None:
        stmt = (
            select(CartModel)
            .where(CartModel.id == cart_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.cart_id == cart_id, CartItemModel.product_id == product_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_cart_items(self, cart_id: int) -> List[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def add_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, cart_id: int, product_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        )
        return result.rowcount

    def delete_cart_items(self, cart_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.cart_id == cart_id)
        )
        return result.rowcount

    def delete_cart(self, cart_id: int) -> int:
        result = self.db.execute(delete(CartModel).where(CartModel.id == cart_id))
        return result.rowcount

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        #np. update carts set version=2, total_amount=... where id=1 and version=1
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
        )
        return result.rowcount

    def flush(self):
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
