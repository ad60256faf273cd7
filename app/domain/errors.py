# app/domain/errors.py
"""
Bledy domenowe. Routery mapuja je na statusy HTTP, bledy bazy
(SQLAlchemyError) leca dalej bez zmian.
"""


class DomainError(Exception):
    pass


class NotFoundError(DomainError):
    """Koszyk, pozycja, produkt lub user nie istnieje."""


class InvalidArgumentError(DomainError):
    """Niedodatnia ilosc/cena albo modyfikacja nieaktywnego koszyka."""


class ConflictError(DomainError):
    """Naruszenie unikalnosci (aktywny koszyk, email)."""


class ConcurrencyConflictError(ConflictError):
    """Wersja koszyka zmienila sie w trakcie operacji."""

    def __init__(self, cart_id: int):
        super().__init__(f"Cart {cart_id} was modified concurrently")
        self.cart_id = cart_id


class AuthenticationError(DomainError):
    pass
