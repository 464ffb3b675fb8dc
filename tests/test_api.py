"""HTTP tests for the marketplace endpoints via TestClient."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from argon2.exceptions import VerificationError
from fastapi.testclient import TestClient

from foodmarket.api.deps import get_lock_service
from foodmarket.domain.errors import ServiceUnavailableError
from foodmarket.services import user_service

SELLER = "seller@example.com"
BUYER = "buyer@example.com"


def _register(client, email, username="someone", location="Kochi"):
    response = client.post(
        "/register",
        json={"username": username, "email": email, "password": "secret123", "location": location},
    )
    assert response.status_code == 200
    return response


def _add_item(client, **overrides):
    body = {
        "itemname": "Paneer",
        "price": "12.50",
        "protein": "25g",
        "seller": SELLER,
        "location": "Kochi",
        "quantity": 5,
    }
    body.update(overrides)
    response = client.post("/additem", json=body)
    assert response.status_code == 200
    return response.json()["item"]


@pytest.fixture
def market(client):
    _register(client, SELLER, username="seller")
    _register(client, BUYER, username="buyer")
    return _add_item(client)


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestUsers:
    def test_register_and_login(self, client):
        _register(client, BUYER, username="buyer")

        response = client.post("/login", json={"email": BUYER, "password": "secret123"})
        assert response.status_code == 200
        assert response.json() == {
            "message": "Login successful",
            "username": "buyer",
            "email": BUYER,
            "location": "Kochi",
        }

    def test_wrong_password(self, client):
        _register(client, BUYER)
        response = client.post("/login", json={"email": BUYER, "password": "wrong-password"})
        assert response.status_code == 401

    def test_unknown_user_login(self, client):
        response = client.post("/login", json={"email": "ghost@example.com", "password": "secret123"})
        assert response.status_code == 401

    def test_duplicate_email(self, client):
        _register(client, BUYER)
        response = client.post(
            "/register",
            json={"username": "again", "email": BUYER, "password": "secret123", "location": "Kochi"},
        )
        assert response.status_code == 409
        assert response.json()["message"] == "Email already exists"

    def test_missing_fields_are_400(self, client):
        response = client.post("/register", json={"email": BUYER})
        assert response.status_code == 400
        assert "password" in response.json()["message"]

    def test_unverifiable_hash_is_401(self, client, monkeypatch):
        _register(client, BUYER)
        hasher = MagicMock()
        hasher.verify.side_effect = VerificationError("unsupported parameters")
        monkeypatch.setattr(user_service, "_hasher", hasher)

        response = client.post("/login", json={"email": BUYER, "password": "secret123"})
        assert response.status_code == 401

    def test_profile_lists_nearby_items_from_others(self, client, market):
        _add_item(client, itemname="Own Tofu", seller=BUYER)
        _add_item(client, itemname="Far Eggs", location="Delhi")

        response = client.get(f"/profile/{BUYER}")
        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "buyer"
        assert body["cart"] == []
        assert [i["itemname"] for i in body["nearbyItems"]] == ["Paneer"]

    def test_profile_unknown_user(self, client):
        assert client.get("/profile/ghost@example.com").status_code == 404


class TestItems:
    def test_add_item(self, client):
        item = _add_item(client)
        assert item["itemname"] == "Paneer"
        assert Decimal(item["price"]) == Decimal("12.50")
        assert item["quantity"] == 5

    def test_missing_name(self, client):
        response = client.post("/additem", json={"price": "1.00", "protein": "2g", "location": "Kochi"})
        assert response.status_code == 400


class TestCartEndpoints:
    def test_add_twice_gives_one_line(self, client, market):
        client.post("/addtocart", json={"email": BUYER, "itemId": market["id"]})
        response = client.post("/addtocart", json={"email": BUYER, "itemId": market["id"]})

        assert response.status_code == 200
        cart = response.json()["cart"]
        assert len(cart) == 1
        assert cart[0]["quantity"] == 2
        assert cart[0]["item"]["itemname"] == "Paneer"

    def test_add_unknown_item(self, client, market):
        response = client.post("/addtocart", json={"email": BUYER, "itemId": 999})
        assert response.status_code == 404
        assert response.json() == {"message": "Item not found"}

    def test_add_unknown_user(self, client, market):
        response = client.post("/addtocart", json={"email": "ghost@example.com", "itemId": market["id"]})
        assert response.status_code == 404

    def test_add_missing_item_id(self, client, market):
        response = client.post("/addtocart", json={"email": BUYER})
        assert response.status_code == 400

    def test_update_quantity_and_remove(self, client, market):
        response = client.post(
            "/updatecartquantity", json={"email": BUYER, "itemId": market["id"], "newQuantity": 3}
        )
        assert response.json()["message"] == "Quantity set successfully"
        assert response.json()["cart"][0]["quantity"] == 3

        response = client.post(
            "/updatecartquantity", json={"email": BUYER, "itemId": market["id"], "newQuantity": 4}
        )
        assert response.json()["message"] == "Quantity updated successfully"
        assert response.json()["cart"][0]["quantity"] == 4

        response = client.post(
            "/updatecartquantity", json={"email": BUYER, "itemId": market["id"], "newQuantity": 0}
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Item removed from cart", "cart": []}

    def test_remove_from_cart(self, client, market):
        client.post("/addtocart", json={"email": BUYER, "itemId": market["id"]})
        response = client.post("/removefromcart", json={"email": BUYER, "itemId": market["id"]})
        assert response.status_code == 200
        assert response.json()["cart"] == []

    def test_remove_unknown_user(self, client):
        response = client.post("/removefromcart", json={"email": "ghost@example.com", "itemId": 1})
        assert response.status_code == 404

    def test_busy_cart_is_409(self, client, market, lock_service):
        lock_service.acquire_cart_lock(BUYER, "other-device")
        response = client.post("/addtocart", json={"email": BUYER, "itemId": market["id"]})
        assert response.status_code == 409


class TestOrderFlow:
    def _checkout(self, client, item_id, quantity=3, method="Delivery"):
        client.post("/updatecartquantity", json={"email": BUYER, "itemId": item_id, "newQuantity": quantity})
        response = client.post("/placeorder", json={"email": BUYER, "deliveryMethod": method})
        assert response.status_code == 200
        return response.json()["orderId"]

    def test_place_order(self, client, market):
        order_id = self._checkout(client, market["id"])

        orders = client.get(f"/userorders/{BUYER}").json()
        assert [o["id"] for o in orders] == [order_id]
        order = orders[0]
        assert order["status"] == "Pending"
        assert order["deliveryMethod"] == "Delivery"
        assert Decimal(order["total"]) == Decimal("57.50")
        assert order["lines"][0]["quantity"] == 3
        assert Decimal(order["lines"][0]["priceAtPurchase"]) == Decimal("12.50")
        assert order["lines"][0]["item"]["quantity"] == 2

        assert client.get(f"/profile/{BUYER}").json()["cart"] == []

    def test_empty_cart(self, client, market):
        response = client.post("/placeorder", json={"email": BUYER})
        assert response.status_code == 400
        assert response.json() == {"message": "Cart is empty"}

    def test_insufficient_stock(self, client, market):
        client.post("/updatecartquantity", json={"email": BUYER, "itemId": market["id"], "newQuantity": 6})
        response = client.post("/placeorder", json={"email": BUYER, "deliveryMethod": "Pickup"})

        assert response.status_code == 400
        assert "Paneer" in response.json()["message"]
        assert client.get(f"/userorders/{BUYER}").json() == []

    def test_bad_delivery_method(self, client, market):
        response = client.post("/placeorder", json={"email": BUYER, "deliveryMethod": "Drone"})
        assert response.status_code == 400

    def test_seller_lifecycle(self, client, market):
        order_id = self._checkout(client, market["id"], method="Pickup")

        received = client.get(f"/receivedorders/{SELLER}").json()
        assert [o["id"] for o in received] == [order_id]
        assert client.get(f"/receivedorders/pending-count/{SELLER}").json() == {"count": 1}

        response = client.post("/acceptorder", json={"orderId": order_id})
        assert response.status_code == 200
        assert response.json()["order"]["status"] == "Accepted"
        assert client.get(f"/receivedorders/pending-count/{SELLER}").json() == {"count": 0}

        assert client.post("/acceptorder", json={"orderId": order_id}).status_code == 409

        response = client.post(f"/orders/deliver/{order_id}")
        assert response.status_code == 200
        assert response.json()["order"]["status"] == "Delivered"

        assert client.get(f"/receivedorders/{SELLER}").json() == []
        assert client.post(f"/orders/deliver/{order_id}").status_code == 409

    def test_send_location(self, client, market):
        order_id = self._checkout(client, market["id"])

        response = client.post("/sendlocation", json={"orderId": order_id, "location": "Gate 2"})
        assert response.status_code == 200
        assert response.json()["order"]["deliveryLocation"] == "Gate 2"
        assert response.json()["order"]["status"] == "Pending"

    def test_send_location_missing_fields(self, client):
        assert client.post("/sendlocation", json={"orderId": 1}).status_code == 400

    def test_unknown_order(self, client, market):
        assert client.post("/acceptorder", json={"orderId": 404}).status_code == 404
        assert client.post("/orders/deliver/404").status_code == 404
        assert client.post("/sendlocation", json={"orderId": 404, "location": "x"}).status_code == 404

    def test_accept_missing_id(self, client):
        assert client.post("/acceptorder", json={}).status_code == 400

    def test_unknown_people(self, client):
        assert client.get("/receivedorders/ghost@example.com").status_code == 404
        assert client.get("/userorders/ghost@example.com").status_code == 404
        assert client.get("/receivedorders/pending-count/ghost@example.com").json() == {"count": 0}


class TestIntegerBounds:
    HUGE = 2**70

    @pytest.mark.parametrize(
        "path, body",
        [
            ("/addtocart", {"email": BUYER, "itemId": HUGE}),
            ("/removefromcart", {"email": BUYER, "itemId": HUGE}),
            ("/updatecartquantity", {"email": BUYER, "itemId": 1, "newQuantity": HUGE}),
            ("/updatecartquantity", {"email": BUYER, "itemId": 1, "newQuantity": -HUGE}),
            ("/updatecartquantity", {"email": BUYER, "itemId": 2_147_483_648, "newQuantity": 1}),
            ("/acceptorder", {"orderId": HUGE}),
            ("/sendlocation", {"orderId": HUGE, "location": "Gate 2"}),
            ("/additem", {"itemname": "Tofu", "price": "1.00", "protein": "8g", "location": "Kochi", "quantity": HUGE}),
        ],
    )
    def test_out_of_range_is_400(self, client, market, path, body):
        response = client.post(path, json=body)
        assert response.status_code == 400

    def test_out_of_range_deliver_path_is_400(self, client, market):
        assert client.post(f"/orders/deliver/{self.HUGE}").status_code == 400
        assert client.post("/orders/deliver/2147483648").status_code == 400

    def test_largest_id_is_just_not_found(self, client, market):
        response = client.post("/addtocart", json={"email": BUYER, "itemId": 2_147_483_647})
        assert response.status_code == 404


class TestWorkoutEndpoints:
    def test_split_defaults_and_update(self, client, market):
        split = client.get(f"/workoutsplit/{BUYER}").json()["workoutSplit"]
        assert split["Monday"] == "Chest"
        assert split["Sunday"] == "Rest"

        legs = {day: "Legs" for day in split}
        response = client.put(f"/workoutsplit/{BUYER}", json={"workoutSplit": legs})
        assert response.status_code == 200
        assert response.json()["workoutSplit"] == legs

    def test_split_needs_all_weekdays(self, client, market):
        response = client.put(f"/workoutsplit/{BUYER}", json={"workoutSplit": {"Monday": "Chest"}})
        assert response.status_code == 400

    def test_workout_plan(self, client, market, ai_client):
        legs = {day: "Legs" for day in client.get(f"/workoutsplit/{BUYER}").json()["workoutSplit"]}
        client.put(f"/workoutsplit/{BUYER}", json={"workoutSplit": legs})
        client.post("/updatecartquantity", json={"email": BUYER, "itemId": market["id"], "newQuantity": 2})
        client.post("/placeorder", json={"email": BUYER, "deliveryMethod": "Pickup"})
        ai_client.generate_plan.return_value = {"focus": "Legs", "exercises": []}

        response = client.post("/workoutplan", json={"email": BUYER})

        assert response.status_code == 200
        assert response.json() == {
            "dailyProtein": 50,
            "muscleGroup": "Legs",
            "plan": {"focus": "Legs", "exercises": []},
        }
        prompt = ai_client.generate_plan.call_args.args[0]
        assert "50 g" in prompt
        assert "Legs" in prompt

    def test_planner_unavailable(self, client, market, ai_client):
        ai_client.generate_plan.side_effect = ServiceUnavailableError("Workout planner is not configured")
        response = client.post("/workoutplan", json={"email": BUYER})
        assert response.status_code == 503


class TestUnexpectedErrors:
    def test_internal_errors_are_generic_500(self, app, market):
        class BrokenLock:
            def cart_lock(self, email):
                raise RuntimeError("redis exploded with secrets")

        app.dependency_overrides[get_lock_service] = lambda: BrokenLock()
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post("/addtocart", json={"email": BUYER, "itemId": market["id"]})
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error"}
