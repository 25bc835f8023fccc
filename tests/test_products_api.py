"""HTTP tests for the /api/products endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.product_api.api.http.deps import get_db_session


class TestListProducts:
    def test_empty_list(self, client: TestClient):
        response = client.get("/api/products")

        assert response.status_code == 200
        assert response.json() == []

    def test_lists_created_products_in_id_order(self, client: TestClient, create_product):
        create_product("Monitor", 300)
        create_product("Keyboard", 49.5)

        response = client.get("/api/products")

        assert response.status_code == 200
        products = response.json()
        assert [(p["name"], p["price"]) for p in products] == [
            ("Monitor", 300),
            ("Keyboard", 49.5),
        ]
        assert products[0]["id"] < products[1]["id"]

    def test_trailing_slash_is_accepted(self, client: TestClient, create_product):
        create_product()

        response = client.get("/api/products/", follow_redirects=False)

        assert response.status_code == 200
        assert len(response.json()) == 1


class TestGetProduct:
    def test_get_existing_product(self, client: TestClient, create_product):
        created = create_product("Monitor", 300)

        response = client.get(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing_product(self, client: TestClient):
        response = client.get("/api/products/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"

    def test_non_integer_id_never_touches_database(self, app: FastAPI):
        calls = []

        def fake_session():
            calls.append(True)
            yield None

        app.dependency_overrides[get_db_session] = fake_session
        with TestClient(app) as client:
            response = client.get("/api/products/not-a-number")

        assert response.status_code == 400
        assert response.json() == {
            "errors": [
                {
                    "field": "id",
                    "message": "Invalid ID",
                    "location": "params",
                    "value": "not-a-number",
                }
            ]
        }
        assert calls == []


class TestCreateProduct:
    def test_create_product(self, client: TestClient):
        response = client.post("/api/products", json={"name": "Monitor", "price": 300})

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Monitor"
        assert data["price"] == 300
        assert data["availability"] is True
        assert isinstance(data["id"], int)

    def test_create_with_trailing_slash(self, client: TestClient):
        response = client.post("/api/products/", json={"name": "Mouse", "price": 20})
        assert response.status_code == 201

    def test_numeric_string_price_is_stored_as_number(self, client: TestClient):
        response = client.post("/api/products", json={"name": "Cable", "price": "12.5"})

        assert response.status_code == 201
        assert response.json()["price"] == 12.5

    @pytest.mark.parametrize("price", [0.00001, 5e-05, 1e16, 2.5e16])
    def test_small_and_large_float_prices_are_accepted(self, client: TestClient, price):
        response = client.post("/api/products", json={"name": "Tiny", "price": price})

        assert response.status_code == 201, response.text
        assert response.json()["price"] == price

    def test_availability_in_body_is_ignored(self, client: TestClient):
        response = client.post(
            "/api/products", json={"name": "Lamp", "price": 10, "availability": False}
        )

        assert response.status_code == 201
        assert response.json()["availability"] is True

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ({"name": "Monitor", "price": 0}, [("price", "Invalid price")]),
            ({"name": "Monitor", "price": -10}, [("price", "Invalid price")]),
            ({"name": "", "price": 300}, [("name", "Product name cannot be empty")]),
            (
                {"name": "Monitor", "price": "abc"},
                [("price", "Invalid price"), ("price", "Invalid price")],
            ),
            (
                {},
                [
                    ("name", "Product name cannot be empty"),
                    ("price", "Invalid price"),
                    ("price", "Product price cannot be empty"),
                    ("price", "Invalid price"),
                ],
            ),
        ],
    )
    def test_invalid_body_is_rejected_without_creating(
        self, client: TestClient, payload, expected
    ):
        response = client.post("/api/products", json=payload)

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert [(e["field"], e["message"]) for e in errors] == expected
        assert client.get("/api/products").json() == []

    def test_malformed_json(self, client: TestClient):
        response = client.post(
            "/api/products",
            content=b"{name: Monitor",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "Malformed JSON body"

    def test_name_of_wrong_type(self, client: TestClient):
        response = client.post("/api/products", json={"name": {"en": "Monitor"}, "price": 5})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"


class TestUpdateProduct:
    def test_full_update(self, client: TestClient, create_product):
        created = create_product("Monitor", 300)

        response = client.put(
            f"/api/products/{created['id']}",
            json={"name": "Curved Monitor", "price": 450, "availability": False},
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": created["id"],
            "name": "Curved Monitor",
            "price": 450,
            "availability": False,
        }
        assert client.get(f"/api/products/{created['id']}").json()["name"] == "Curved Monitor"

    def test_update_missing_product_creates_nothing(self, client: TestClient):
        response = client.put(
            "/api/products/123",
            json={"name": "Ghost", "price": 10, "availability": True},
        )

        assert response.status_code == 404
        assert client.get("/api/products").json() == []

    def test_update_requires_availability(self, client: TestClient, create_product):
        created = create_product()

        response = client.put(
            f"/api/products/{created['id']}", json={"name": "Monitor", "price": 10}
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {
                "field": "availability",
                "message": "Invalid availability value",
                "location": "body",
                "value": None,
            }
        ]

    def test_update_with_invalid_id_and_body(self, client: TestClient):
        response = client.put("/api/products/abc", json={"name": "", "price": -1})

        assert response.status_code == 400
        fields = [e["field"] for e in response.json()["errors"]]
        assert fields == ["id", "name", "price", "availability"]


class TestPatchAvailability:
    def test_two_patches_restore_original_value(self, client: TestClient, create_product):
        created = create_product()
        url = f"/api/products/{created['id']}"

        first = client.patch(url)
        second = client.patch(url)

        assert first.status_code == 200
        assert first.json()["availability"] is False
        assert second.status_code == 200
        assert second.json()["availability"] is True

    def test_patch_only_touches_availability(self, client: TestClient, create_product):
        created = create_product("Monitor", 300)

        response = client.patch(
            f"/api/products/{created['id']}", json={"name": "Ignored", "price": 1}
        )

        assert response.json() == {**created, "availability": False}

    def test_patch_missing_product(self, client: TestClient):
        assert client.patch("/api/products/77").status_code == 404

    def test_patch_invalid_id(self, client: TestClient):
        response = client.patch("/api/products/1.5")

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "Invalid ID"


class TestDeleteProduct:
    def test_delete_then_get_returns_404(self, client: TestClient, create_product):
        created = create_product()
        url = f"/api/products/{created['id']}"

        response = client.delete(url)

        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted"}
        assert client.get(url).status_code == 404

    def test_delete_missing_product(self, client: TestClient):
        assert client.delete("/api/products/5").status_code == 404

    def test_delete_invalid_id(self, client: TestClient):
        assert client.delete("/api/products/five").status_code == 400

    def test_deleted_id_is_not_reused(self, client: TestClient, create_product):
        create_product("First")
        second = create_product("Second")
        client.delete(f"/api/products/{second['id']}")

        third = create_product("Third")

        assert third["id"] > second["id"]


class TestIdsBeyondColumnRange:
    HUGE_ID = "99999999999999999999"

    @pytest.mark.parametrize("method", ["get", "patch", "delete"])
    def test_reports_not_found(self, client: TestClient, create_product, method):
        create_product()

        response = client.request(method.upper(), f"/api/products/{self.HUGE_ID}")

        assert response.status_code == 404
        assert response.json() == {"detail": "Product not found"}

    def test_update_reports_not_found(self, client: TestClient):
        response = client.put(
            f"/api/products/-{self.HUGE_ID}",
            json={"name": "Ghost", "price": 10, "availability": True},
        )

        assert response.status_code == 404
