"""Integration tests for the FastAPI endpoints."""
import pytest
from kombu.exceptions import OperationalError as BrokerError

from app.data.database import TransactionProvider, get_provider, make_engine
from app.main import create_app
from app.services import notification_service
from fastapi.testclient import TestClient


def add(client, user_id, product_id, quantity):
    return client.post("/api/cart", json={"user_id": user_id, "product_id": product_id, "quantity": quantity})


class UnreachableBrokerTask:
    def delay(self, *args, **kwargs):
        raise BrokerError("Connection refused")


@pytest.fixture
def broker_down(monkeypatch):
    monkeypatch.setattr(notification_service, "send_order_notification_task", UnreachableBrokerTask())


class TestCartEndpoints:
    def test_add_and_merge(self, client):
        assert add(client, 1, 1, 2).status_code == 200

        response = add(client, 1, 1, 3)

        assert response.status_code == 200
        assert response.json()["cartItem"] == {"user_id": 1, "product_id": 1, "quantity": 5}

    def test_add_accepts_camel_case_keys(self, client):
        response = client.post("/api/cart", json={"userId": 1, "productId": 2, "quantity": "2"})

        assert response.status_code == 200
        assert response.json()["cartItem"]["quantity"] == 2

    @pytest.mark.parametrize("quantity", [0, -1, "abc", None])
    def test_add_invalid_quantity(self, client, quantity):
        response = add(client, 1, 1, quantity)

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"
        assert "stack" not in response.json()

    def test_add_missing_fields(self, client):
        response = client.post("/api/cart", json={"user_id": 1})

        assert response.status_code == 400

    def test_add_unknown_product(self, client):
        response = add(client, 1, 999, 1)

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_empty_cart(self, client):
        response = client.get("/api/cart/1")

        assert response.status_code == 200
        body = response.json()
        assert body["cartItems"] == []
        assert body["totalItems"] == 0
        assert body["totalValue"] == "0.00"

    def test_cart_with_items(self, client):
        add(client, 1, 1, 2)
        add(client, 1, 2, 1)

        body = client.get("/api/cart/1").json()

        assert body["totalItems"] == 2
        assert body["totalValue"] == "25.00"
        assert body["cartItems"][0] == {
            "product_id": 1,
            "quantity": 2,
            "name": "Tee",
            "price": "10.00",
            "image": "/img/tee.jpg",
        }
        assert body["message"] is None

    def test_cart_invalid_user_id(self, client):
        assert client.get("/api/cart/abc").status_code == 400

    def test_ids_out_of_range(self, client):
        assert add(client, 2**70, 1, 1).status_code == 400
        assert add(client, 1, 2**31, 1).status_code == 400
        assert add(client, 1, 1, 2**31).status_code == 400
        assert client.get(f"/api/cart/{2**31}").status_code == 400
        assert client.post("/api/cart/details", json={"userId": 1, "productIds": [2**70]}).status_code == 400

    def test_details(self, client):
        add(client, 1, 1, 1)
        add(client, 1, 3, 2)

        response = client.post("/api/cart/details", json={"userId": 1, "productIds": [3]})

        assert response.status_code == 200
        assert [line["product_id"] for line in response.json()] == [3]
        assert response.json()[0]["description"] == "Desk lamp"

    def test_update_sets_quantity(self, client):
        add(client, 1, 1, 1)

        response = client.post("/api/cart/update", json={"userId": 1, "productId": 1, "quantity": 4})

        assert response.status_code == 200
        assert response.json()["cartItem"]["quantity"] == 4

    def test_update_to_zero_removes(self, client):
        add(client, 1, 1, 1)

        response = client.post("/api/cart/update", json={"userId": 1, "productId": 1, "quantity": 0})

        assert response.status_code == 200
        assert response.json()["deletedRows"] == 1
        assert client.get("/api/cart/1").json()["cartItems"] == []

    def test_update_missing_item(self, client):
        response = client.post("/api/cart/update", json={"userId": 1, "productId": 1, "quantity": 2})

        assert response.status_code == 404

    def test_remove(self, client):
        add(client, 1, 2, 1)

        response = client.request("DELETE", "/api/cart/remove", json={"userId": 1, "productId": 2})
        assert response.status_code == 200
        assert response.json()["deletedRows"] == 1

        again = client.request("DELETE", "/api/cart/remove", json={"userId": 1, "productId": 2})
        assert again.status_code == 404


class TestOrderEndpoints:
    def place(self, client, user_id=1, items=None):
        items = items if items is not None else [
            {"id": 1, "price": 10.00, "quantity": 2},
            {"id": 2, "price": 5.00, "quantity": 1},
        ]
        return client.post("/api/orders/place", json={"userId": user_id, "items": items})

    def test_place_order(self, client):
        add(client, 1, 1, 2)
        add(client, 1, 2, 1)

        response = self.place(client)

        assert response.status_code == 200
        body = response.json()
        assert body["orderId"].startswith("ORD-")
        assert body["totalAmount"] == "25.00"
        assert client.get("/api/cart/1").json()["cartItems"] == []

    def test_place_order_empty_items(self, client):
        response = self.place(client, items=[])

        assert response.status_code == 400
        assert client.get("/api/orders", params={"userId": 1}).json() == []

    def test_place_order_unknown_product(self, client):
        response = self.place(client, items=[{"id": 404, "quantity": 1}])

        assert response.status_code == 404
        assert client.get("/api/orders", params={"userId": 1}).json() == []

    def test_single_order(self, client):
        add(client, 1, 1, 1)

        response = client.post("/api/single-order", json={"userId": 1, "productId": 3, "quantity": 2})

        assert response.status_code == 201
        body = response.json()
        assert body["id"].startswith("ORD-")
        assert body["userId"] == 1
        assert body["productId"] == 3
        assert body["totalAmount"] == "199.98"
        assert body["productDetails"] == {"name": "Lamp", "image": None}
        assert "orderDate" in body
        assert len(client.get("/api/cart/1").json()["cartItems"]) == 1

    def test_single_order_unknown_product(self, client):
        response = client.post("/api/single-order", json={"userId": 1, "productId": 999, "quantity": 1})

        assert response.status_code == 404
        assert client.get("/api/orders", params={"userId": 1}).json() == []

    def test_list_orders(self, client):
        first = self.place(client).json()["orderId"]
        second = client.post("/api/single-order", json={"userId": 1, "productId": 2, "quantity": 1}).json()["id"]

        response = client.get("/api/orders", params={"userId": 1})

        assert response.status_code == 200
        body = response.json()
        assert [o["id"] for o in body] == [second, first]
        assert body[1]["total"] == "25.00"
        assert len(body[1]["items"]) == 2

    def test_list_orders_requires_user(self, client):
        assert client.get("/api/orders").status_code == 400

    def test_get_order(self, client):
        order_id = self.place(client).json()["orderId"]
        numeric = order_id.replace("ORD-", "")

        by_display = client.get(f"/api/orders/{order_id}", params={"userId": 1})
        by_number = client.get(f"/api/orders/{numeric}", params={"userId": 1})

        assert by_display.status_code == 200
        assert by_display.json() == by_number.json()
        assert by_display.json()["id"] == order_id

    def test_get_order_of_other_user(self, client):
        order_id = self.place(client).json()["orderId"]

        response = client.get(f"/api/orders/{order_id}", params={"userId": 2})

        assert response.status_code == 404
        assert "items" not in response.json()

    def test_get_order_malformed_id(self, client):
        assert client.get("/api/orders/ORD-abc", params={"userId": 1}).status_code == 400

    @pytest.mark.parametrize("order_id", ["ORD-²", f"ORD-{2**70}", str(2**31)])
    def test_get_order_id_not_a_db_integer(self, client, order_id):
        response = client.get(f"/api/orders/{order_id}", params={"userId": 1})

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_user_id_out_of_range(self, client):
        assert client.get("/api/orders", params={"userId": 2**70}).status_code == 400
        assert client.get("/api/orders/ORD-1", params={"userId": 2**31}).status_code == 400
        assert self.place(client, user_id=2**70).status_code == 400

    def test_order_survives_unreachable_broker(self, client, broker_down):
        add(client, 1, 1, 2)
        add(client, 1, 2, 1)

        placed = self.place(client)
        single = client.post("/api/single-order", json={"userId": 1, "productId": 3, "quantity": 1})

        assert placed.status_code == 200
        assert single.status_code == 201
        orders = client.get("/api/orders", params={"userId": 1}).json()
        assert [o["id"] for o in orders] == [single.json()["id"], placed.json()["orderId"]]
        assert client.get("/api/cart/1").json()["cartItems"] == []


class TestHealth:
    def test_ok(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_database_down(self, tmp_path):
        engine = make_engine(f"sqlite:///{tmp_path / 'missing' / 'shop.db'}")
        api = create_app()
        api.dependency_overrides[get_provider] = lambda: TransactionProvider(engine, retries=1, retry_delay=0)

        response = TestClient(api).get("/health")

        assert response.status_code == 503
        assert response.json()["error"] == "SERVICE_UNAVAILABLE"
        engine.dispose()
