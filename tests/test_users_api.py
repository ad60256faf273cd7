"""Component tests for the /users endpoints"""
from fastapi.testclient import TestClient

from app.services.user_service import STUB_TOKEN

SIGNUP = {"email": "Ann@Example.com", "password": "s3cret", "username": "ann"}


class TestSignUp:
    def test_signup_returns_stub_token_and_user(self, client: TestClient):
        response = client.post("/users/signup", json=SIGNUP)

        assert response.status_code == 201
        data = response.json()
        assert data["token"] == STUB_TOKEN
        assert data["user"]["email"] == "ann@example.com"
        assert data["user"]["username"] == "ann"
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    def test_duplicate_email(self, client: TestClient):
        client.post("/users/signup", json=SIGNUP)

        response = client.post("/users/signup", json={**SIGNUP, "email": "ann@example.com"})

        assert response.status_code == 409

    def test_missing_fields(self, client: TestClient):
        response = client.post("/users/signup", json={"email": "a@b.c"})

        assert response.status_code == 400

    def test_invalid_email(self, client: TestClient):
        response = client.post("/users/signup", json={**SIGNUP, "email": "nope"})

        assert response.status_code == 400


class TestLogin:
    def test_login(self, client: TestClient):
        user_id = client.post("/users/signup", json=SIGNUP).json()["user"]["id"]

        response = client.post("/users/login", json={"email": "ann@example.com", "password": "s3cret"})

        assert response.status_code == 200
        assert response.json()["user"]["id"] == user_id
        assert response.json()["token"] == STUB_TOKEN

    def test_wrong_password_and_unknown_email_look_the_same(self, client: TestClient):
        client.post("/users/signup", json=SIGNUP)

        wrong = client.post("/users/login", json={"email": "ann@example.com", "password": "bad"})
        unknown = client.post("/users/login", json={"email": "bob@example.com", "password": "s3cret"})

        assert wrong.status_code == 401
        assert unknown.status_code == 401
        assert wrong.json() == unknown.json()


class TestGetUser:
    def test_get_user(self, client: TestClient):
        user_id = client.post("/users/signup", json=SIGNUP).json()["user"]["id"]

        response = client.get(f"/users/{user_id}")

        assert response.status_code == 200
        assert response.json()["username"] == "ann"

    def test_unknown_user(self, client: TestClient):
        assert client.get("/users/404").status_code == 404

    def test_signed_up_user_can_own_a_cart(self, client: TestClient):
        user_id = client.post("/users/signup", json=SIGNUP).json()["user"]["id"]

        response = client.post("/carts/", json={"user_id": user_id})

        assert response.status_code == 201
