"""Component tests for the /products endpoints"""
from fastapi.testclient import TestClient


def create(client: TestClient, name="Keyboard", price=199.99, description="Mechanical"):
    return client.post("/products/", json={"name": name, "price": price, "description": description})


class TestProducts:
    def test_create_and_get(self, client: TestClient):
        created = create(client)

        assert created.status_code == 201
        product = created.json()
        assert product["name"] == "Keyboard"
        assert product["price"] == 199.99

        response = client.get(f"/products/{product['id']}")
        assert response.status_code == 200
        assert response.json() == product

    def test_list(self, client: TestClient):
        create(client, name="Keyboard")
        create(client, name="Mouse", price=49.50)

        response = client.get("/products/")

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Keyboard", "Mouse"]

    def test_update(self, client: TestClient):
        product_id = create(client).json()["id"]

        response = client.put(
            f"/products/{product_id}",
            json={"name": "Monitor", "price": 899.00, "description": "27 inch"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Monitor"
        assert response.json()["price"] == 899.00

    def test_delete(self, client: TestClient):
        product_id = create(client).json()["id"]

        assert client.delete(f"/products/{product_id}").status_code == 204
        assert client.get(f"/products/{product_id}").status_code == 404

    def test_missing_product(self, client: TestClient):
        assert client.get("/products/999").status_code == 404
        assert client.delete("/products/999").status_code == 404
        assert client.put(
            "/products/999", json={"name": "X", "price": 1.0}
        ).status_code == 404

    def test_invalid_product(self, client: TestClient):
        assert create(client, name="").status_code == 400
        assert create(client, price=0).status_code == 400
        assert create(client, price=-1).status_code == 400
