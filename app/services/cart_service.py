from contextlib import contextmanager
from decimal import Decimal
from typing import Dict, Any, Tuple
from uuid import uuid4

from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.domain.errors import ConcurrencyConflictError, ConflictError, NotFoundError
from app.repos.user_repo import UserRepo
from app.services.cart_store import CartStore
from app.services.lock_service import LockService
from app.utils.settings import CART_LOCK_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Warstwa use case dla koszyka usera.
    Znajduje aktywny koszyk usera, wola CartStore i sklada widok koszyka.
    Zadnej logiki biznesowej poza tym, cala spojnosc siedzi w CartStore.
    """

    def __init__(self, db: Session, lock_service: LockService | None = None):
        self.store = CartStore(db)
        self.user_repo = UserRepo(db)
        self.lock_service = lock_service

    #query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        return self._render(self.store.get_active_cart(user_id))

    #commands
    def create_cart(self, user_id: int) -> Tuple[Dict[str, Any], bool]:
        """Zwraca (widok, czy_utworzony). Istniejacy aktywny koszyk jest zwracany bez zmian."""
        if not self.user_repo.get_user(user_id):
            raise NotFoundError(f"User {user_id} not found")

        try:
            existing = self.store.get_active_cart(user_id)
            logger.info(f"Uzytkownik {user_id} ma juz aktywny koszyk {existing.id}")
            return self._render(existing), False
        except NotFoundError:
            pass

        try:
            self.store.create_cart(user_id)
        except ConflictError:
            #ktos utworzyl koszyk miedzy naszym odczytem a zapisem
            return self._render(self.store.get_active_cart(user_id)), False

        return self._render(self.store.get_active_cart(user_id)), True

    def add_item(self, user_id: int, product_id: int, quantity: int, price: Decimal) -> Dict[str, Any]:
        cart = self.store.get_active_cart(user_id)
        with self._cart_lock(cart.id):
            self.store.add_item(cart.id, product_id, quantity, price)
        return self.get_cart(user_id)

    def update_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        cart = self.store.get_active_cart(user_id)
        with self._cart_lock(cart.id):
            self.store.update_item(cart.id, product_id, quantity)
        return self.get_cart(user_id)

    def remove_item(self, user_id: int, product_id: int) -> Dict[str, Any]:
        cart = self.store.get_active_cart(user_id)
        with self._cart_lock(cart.id):
            self.store.remove_item(cart.id, product_id)
        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.store.get_active_cart(user_id)
        with self._cart_lock(cart.id):
            self.store.clear_cart(cart.id)
        return self.get_cart(user_id)

    def deactivate_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.store.get_active_cart(user_id)
        with self._cart_lock(cart.id):
            retired = self.store.deactivate_cart(cart.id)
        return self._render(self.store.get_cart(retired.id))

    def delete_cart(self, user_id: int) -> None:
        cart = self.store.get_active_cart(user_id)
        with self._cart_lock(cart.id):
            self.store.delete_cart(cart.id)

    #helpers
    @contextmanager
    def _cart_lock(self, cart_id: int):
        if self.lock_service is None:
            yield
            return

        token = uuid4().hex
        if not self.lock_service.wait_for_cart_lock(cart_id, token, CART_LOCK_TTL_SECONDS):
            logger.warning(f"Koszyk {cart_id} zablokowany przez inna operacje")
            raise ConcurrencyConflictError(cart_id)
        try:
            yield
        finally:
            self.lock_service.release_cart_lock(cart_id, token)

    @staticmethod
    def _render(cart: CartModel) -> Dict[str, Any]:
        #dict przeksztalcany w jsona przez CartOut
        items = [
            {
                "id": i.id,
                "product_id": i.product_id,
                "quantity": i.quantity,
                "price": i.price,
                "subtotal": i.price * i.quantity,
            }
            for i in cart.items
        ]
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "items": items,
            "total_amount": cart.total_amount,
            #suma ilosci, nie liczba roznych produktow
            "total_items": sum(i["quantity"] for i in items),
        }
