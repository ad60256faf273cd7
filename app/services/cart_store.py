# app/services/cart_store.py
from contextlib import contextmanager
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import (
    ConcurrencyConflictError,
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
)
from app.repos.cart_repo import CartRepo
from app.utils.retry import conflict_retry
from app.utils.settings import CART_MAX_ITEM_QUANTITY
from app.utils.logging import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")


def _check_quantity(quantity) -> int:
    #bool to podklasa int, odrzucamy
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidArgumentError("Quantity must be a positive integer")
    if quantity > CART_MAX_ITEM_QUANTITY:
        raise InvalidArgumentError(f"Quantity must not exceed {CART_MAX_ITEM_QUANTITY}")
    return quantity


def _violates_active_cart_index(e: IntegrityError) -> bool:
    #postgres (psycopg2) podaje nazwe constraintu
    diag = getattr(e.orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name:
        return name == "uq_carts_user_active"
    #sqlite podaje tylko kolumne: "UNIQUE constraint failed: carts.user_id"
    return "carts.user_id" in str(e.orig)


def _to_price(price) -> Decimal:
    try:
        value = Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise InvalidArgumentError("Price must be a positive number")
    if not value.is_finite() or value <= 0:
        raise InvalidArgumentError("Price must be a positive number")
    value = value.quantize(CENTS, rounding=ROUND_HALF_UP)
    if value <= 0:
        raise InvalidArgumentError("Price must be a positive number")
    return value


class CartStore:
    """
    Agregat koszyka: koszyk, jego pozycje i wyliczana suma.

    Kazda mutacja to jedna transakcja:
    1. blokada wiersza koszyka (SELECT ... FOR UPDATE)
    2. odczyt/zapis pozycji
    3. przeliczenie total_amount od zera z aktualnych pozycji
    4. podbicie wersji z warunkiem na stara wersje (optimistic locking)

    Gdy wersja sie nie zgadza -> rollback i ConcurrencyConflictError,
    cala operacja jest ponawiana (tenacity). Bledy bazy leca dalej bez ponawiania.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)

    #query
    def get_active_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_active_cart_by_user(user_id)
        if not cart:
            raise NotFoundError(f"Active cart for user {user_id} not found")
        return cart

    def get_cart(self, cart_id: int) -> CartModel:
        cart = self.repo.get_cart(cart_id)
        if not cart:
            raise NotFoundError(f"Cart {cart_id} not found")
        return cart

    #commands
    def create_cart(self, user_id: int) -> CartModel:
        with self._transaction():
            existing = self.repo.get_active_cart_by_user(user_id, for_update=True)
            if existing:
                raise ConflictError(f"User {user_id} already has an active cart")

            cart = CartModel(
                user_id=user_id,
                total_amount=Decimal("0.00"),
                is_active=True,
                version=1,
            )
            try:
                self.repo.add_cart(cart)
            except IntegrityError as e:
                #rownolegly create przeszedl pierwszy, indeks uq_carts_user_active
                #inne naruszenia (np. FK na users) leca dalej jako blad bazy
                if not _violates_active_cart_index(e):
                    raise
                raise ConflictError(f"User {user_id} already has an active cart")
            self.repo.commit()

        logger.info(f"Utworzono koszyk {cart.id} dla uzytkownika {user_id}")
        return cart

    @conflict_retry()
    def add_item(self, cart_id: int, product_id: int, quantity: int, price) -> CartItemModel:
        _check_quantity(quantity)
        price = _to_price(price)

        with self._transaction():
            cart = self._lock_cart(cart_id, require_active=True)
            existing = self.repo.get_cart_item(cart_id, product_id)

            if existing:
                #merge: ilosc sie sumuje, cena zostaje z pierwszego dodania
                logger.info(
                    f"Produkt {product_id} jest juz w koszyku {cart_id}, "
                    f"ilosc {existing.quantity} -> {existing.quantity + quantity}"
                )
                merged = _check_quantity(existing.quantity + quantity)
                return self._update_locked(cart, existing, merged)

            item = self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart_id,
                    product_id=product_id,
                    quantity=quantity,
                    price=price,
                )
            )
            self._finish(cart)

        logger.info(f"Dodano produkt {product_id} x{quantity} do koszyka {cart_id}")
        return item

    @conflict_retry()
    def update_item(self, cart_id: int, product_id: int, quantity: int) -> CartItemModel:
        #brak skrotu "0 = usun", do tego jest remove_item
        _check_quantity(quantity)

        with self._transaction():
            cart = self._lock_cart(cart_id, require_active=True)
            item = self.repo.get_cart_item(cart_id, product_id)
            if not item:
                raise NotFoundError(f"Product {product_id} not found in cart {cart_id}")
            return self._update_locked(cart, item, quantity)

    @conflict_retry()
    def remove_item(self, cart_id: int, product_id: int) -> None:
        with self._transaction():
            cart = self._lock_cart(cart_id, require_active=True)
            if self.repo.delete_cart_item(cart_id, product_id) == 0:
                raise NotFoundError(f"Product {product_id} not found in cart {cart_id}")
            self._finish(cart)

        logger.info(f"Usunieto produkt {product_id} z koszyka {cart_id}")

    @conflict_retry()
    def clear_cart(self, cart_id: int) -> None:
        with self._transaction():
            cart = self._lock_cart(cart_id, require_active=True)
            removed = self.repo.delete_cart_items(cart_id)
            self._finish(cart)

        logger.info(f"Wyczyszczono koszyk {cart_id} ({removed} pozycji)")

    def delete_cart(self, cart_id: int) -> None:
        with self._transaction():
            #najpierw pozycje, potem sam koszyk
            self.repo.delete_cart_items(cart_id)
            if self.repo.delete_cart(cart_id) == 0:
                raise NotFoundError(f"Cart {cart_id} not found")
            self.repo.commit()

        logger.info(f"Usunieto koszyk {cart_id}")

    @conflict_retry()
    def deactivate_cart(self, cart_id: int) -> CartModel:
        """Active -> Inactive, bez drogi powrotnej."""
        with self._transaction():
            cart = self._lock_cart(cart_id)
            if not cart.is_active:
                self.repo.rollback()
                return cart

            old_version = cart.version
            rowcount = self.repo.update_cart_version(
                cart_id=cart_id,
                old_version=old_version,
                new_data={"is_active": False, "version": old_version + 1},
            )
            if rowcount == 0:
                raise ConcurrencyConflictError(cart_id)
            self.repo.commit()

        logger.info(f"Koszyk {cart_id} zdezaktywowany")
        return cart

    @conflict_retry()
    def recompute_total(self, cart_id: int) -> Decimal:
        with self._transaction():
            cart = self._lock_cart(cart_id)
            return self._finish(cart)

    #helpers
    @contextmanager
    def _transaction(self):
        try:
            yield
        except Exception:
            self.repo.rollback()
            raise

    def _lock_cart(self, cart_id: int, require_active: bool = False) -> CartModel:
        cart = self.repo.lock_cart(cart_id)
        if not cart:
            raise NotFoundError(f"Cart {cart_id} not found")
        if require_active and not cart.is_active:
            raise InvalidArgumentError(f"Cart {cart_id} is not active")
        return cart

    def _update_locked(self, cart: CartModel, item: CartItemModel, quantity: int) -> CartItemModel:
        item.quantity = quantity
        self._finish(cart)
        logger.info(f"Ilosc produktu {item.product_id} w koszyku {cart.id} = {quantity}")
        return item

    def _finish(self, cart: CartModel) -> Decimal:
        # total zawsze liczony od nowa z pozycji, nigdy inkrementalnie
        self.repo.flush()
        items = self.repo.get_cart_items(cart.id)
        total = sum((i.price * i.quantity for i in items), Decimal("0.00")).quantize(CENTS)

        old_version = cart.version
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=old_version,
            new_data={"total_amount": total, "version": old_version + 1},
        )
        if rowcount == 0:
            logger.warning(f"Konflikt wersji koszyka {cart.id} (wersja {old_version})")
            raise ConcurrencyConflictError(cart.id)

        self.repo.commit()
        return total
