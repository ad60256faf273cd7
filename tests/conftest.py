"""Pytest configuration and fixtures"""
import os

# Baza w pamieci zamiast postgresa, ustawione przed importem app.*
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CART_LOCK_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from app.data.database import Base, SessionLocal, engine
from app.data.models import UserModel
from app.services.cart_store import CartStore


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def store(db) -> CartStore:
    return CartStore(db)


@pytest.fixture
def client():
    from app.main import app

    return TestClient(app)


@pytest.fixture
def make_user():
    """Factory inserting a user row directly (no bcrypt round)."""
    counter = {"n": 0}

    def _make(email: str | None = None) -> int:
        counter["n"] += 1
        session = SessionLocal()
        try:
            user = UserModel(
                email=email or f"user{counter['n']}@example.com",
                username=f"user{counter['n']}",
                password_hash="not-a-real-hash",
            )
            session.add(user)
            session.commit()
            return user.id
        finally:
            session.close()

    return _make


@pytest.fixture
def user_id(make_user) -> int:
    return make_user()
