"""End-to-end flows through the HTTP gateway."""

import pytest

BASE = "/api/v1/gateway"


def _submit(api, auth, quantities, client_id="c1", note=None):
    """Fill s1's cart through the API and submit it."""
    for product_id, qty in quantities.items():
        r = api.post(f"{BASE}/cart/items/{product_id}", headers=auth("s1"))
        assert r.status_code == 200, r.text
        if qty != 1:
            r = api.put(f"{BASE}/cart/items/{product_id}", json={"quantity": qty}, headers=auth("s1"))
            assert r.status_code == 200, r.text
    r = api.post(f"{BASE}/cart/submit", json={"client_id": client_id, "note": note}, headers=auth("s1"))
    assert r.status_code == 201, r.text
    return r.json()


class TestIdentity:

    def test_missing_identity_header_is_401(self, api, seeded):
        assert api.get(f"{BASE}/users/me").status_code == 401

    def test_me_reports_role_and_dashboard(self, api, seeded, auth):
        body = api.get(f"{BASE}/users/me", headers=auth("adm")).json()
        assert body["role"] == "admin"
        assert body["dashboard"] == "/dashboard/admin"

    def test_first_sign_in_creates_supervisor_profile(self, api, seeded):
        r = api.get(f"{BASE}/users/me", headers={"X-User-Id": "novo", "X-User-Email": "joao.souza@example.com"})
        assert r.status_code == 200
        assert r.json()["role"] == "supervisor"
        assert r.json()["display_name"] == "joao.souza"


class TestHappyPath:

    def test_cart_to_export(self, api, seeded, auth):
        order = _submit(api, auth, {"p1": 1})
        assert order["status"] == "pending"
        assert order["client_name"] == "Setor A"
        assert order["products"] == [
            {"productId": "p1", "name": "Detergente", "quantity": 1, "approvedQuantity": None}
        ]

        # submitted cart is emptied
        assert api.get(f"{BASE}/cart/", headers=auth("s1")).json() == {"items": [], "total_quantity": 0}

        pending = api.get(f"{BASE}/orders/", headers=auth("a1")).json()
        assert [o["id"] for o in pending] == [order["id"]]
        assert pending[0]["allowed_actions"] == ["approve", "reject"]

        r = api.post(f"{BASE}/orders/{order['id']}/approve", headers=auth("a1"))
        assert r.status_code == 200
        assert r.json()["status"] == "approved"
        assert r.json()["products"][0]["approvedQuantity"] == 1
        assert r.json()["approved_at"] is not None

        approved = api.get(f"{BASE}/orders/", headers=auth("b1")).json()
        assert [o["id"] for o in approved] == [order["id"]]
        assert approved[0]["allowed_actions"] == ["complete"]

        r = api.post(f"{BASE}/orders/{order['id']}/complete", headers=auth("b1"))
        assert r.status_code == 200
        assert r.json()["status"] == "completed"
        assert r.json()["allowed_actions"] == []

        r = api.get(f"{BASE}/orders/{order['id']}/export", headers=auth("b1"))
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/csv")
        assert "pedido_Setor_A_" in r.headers["content-disposition"]
        assert "Detergente,1,1" in r.text.splitlines()

    def test_partial_approval(self, api, seeded, auth):
        order = _submit(api, auth, {"p1": 5, "p2": 2})
        r = api.post(
            f"{BASE}/orders/{order['id']}/approve",
            json={"approved_quantities": {"p1": 0}},
            headers=auth("a1"),
        )
        assert r.status_code == 200
        lines = {p["productId"]: p for p in r.json()["products"]}
        assert lines["p1"]["quantity"] == 5
        assert lines["p1"]["approvedQuantity"] == 0
        assert lines["p2"]["approvedQuantity"] == 2

    def test_approval_above_requested_is_422(self, api, seeded, auth):
        order = _submit(api, auth, {"p1": 2})
        r = api.post(
            f"{BASE}/orders/{order['id']}/approve",
            json={"approved_quantities": {"p1": 3}},
            headers=auth("a1"),
        )
        assert r.status_code == 422
        assert r.json()["error"] == "ValidationError"
        assert api.get(f"{BASE}/orders/{order['id']}", headers=auth("a1")).json()["status"] == "pending"

    def test_rejection_appends_note(self, api, seeded, auth):
        order = _submit(api, auth, {"p2": 1}, note="urgente")
        r = api.post(f"{BASE}/orders/{order['id']}/reject", json={"note": "sem verba"}, headers=auth("a1"))
        assert r.status_code == 200
        assert r.json()["status"] == "rejected"
        assert r.json()["note"] == "urgente\nsem verba"


class TestConflicts:

    def test_second_approver_gets_409(self, api, seeded, auth):
        order = _submit(api, auth, {"p1": 1})
        assert api.post(f"{BASE}/orders/{order['id']}/approve", headers=auth("a1")).status_code == 200

        r = api.post(f"{BASE}/orders/{order['id']}/reject", headers=auth("a2"))
        assert r.status_code == 409
        assert r.json()["error"] == "InvalidTransition"
        assert r.json()["current_status"] == "approved"

    def test_complete_pending_is_409(self, api, seeded, auth):
        order = _submit(api, auth, {"p1": 1})
        r = api.post(f"{BASE}/orders/{order['id']}/complete", headers=auth("b1"))
        assert r.status_code == 409
        assert r.json()["current_status"] == "pending"

    def test_export_before_approval_is_refused(self, api, seeded, auth):
        order = _submit(api, auth, {"p1": 1})
        r = api.get(f"{BASE}/orders/{order['id']}/export", headers=auth("adm"))
        assert r.status_code == 422

    def test_unknown_order_is_404(self, api, seeded, auth):
        r = api.post(f"{BASE}/orders/nope/approve", headers=auth("a1"))
        assert r.status_code == 404
        assert r.json()["error"] == "NotFound"


class TestRoles:

    @pytest.mark.parametrize("uid,action", [
        ("s1", "approve"),
        ("b1", "approve"),
        ("a1", "complete"),
        ("s1", "complete"),
    ])
    def test_wrong_role_is_403(self, api, seeded, auth, uid, action):
        order = _submit(api, auth, {"p1": 1})
        r = api.post(f"{BASE}/orders/{order['id']}/{action}", headers=auth(uid))
        assert r.status_code == 403
        assert r.json()["error"] == "AuthorizationDenied"

    def test_cart_is_supervisor_only(self, api, seeded, auth):
        assert api.get(f"{BASE}/cart/", headers=auth("a1")).status_code == 403

    def test_supervisor_has_no_order_listing(self, api, seeded, auth):
        assert api.get(f"{BASE}/orders/", headers=auth("s1")).status_code == 403

    def test_approver_cannot_export(self, api, seeded, auth):
        order = _submit(api, auth, {"p1": 1})
        api.post(f"{BASE}/orders/{order['id']}/approve", headers=auth("a1"))
        assert api.get(f"{BASE}/orders/{order['id']}/export", headers=auth("a1")).status_code == 403


class TestCartApi:

    def test_empty_cart_submit_is_422(self, api, seeded, auth):
        r = api.post(f"{BASE}/cart/submit", json={"client_id": "c1"}, headers=auth("s1"))
        assert r.status_code == 422
        assert r.json()["error"] == "ValidationError"

    def test_submit_without_client_keeps_cart(self, api, seeded, auth):
        api.post(f"{BASE}/cart/items/p1", headers=auth("s1"))
        r = api.post(f"{BASE}/cart/submit", json={}, headers=auth("s1"))
        assert r.status_code == 422
        assert api.get(f"{BASE}/cart/", headers=auth("s1")).json()["total_quantity"] == 1

    def test_foreign_client_is_404_and_keeps_cart(self, api, seeded, auth):
        api.post(f"{BASE}/cart/items/p1", headers=auth("s1"))
        r = api.post(f"{BASE}/cart/submit", json={"client_id": "c2"}, headers=auth("s1"))
        assert r.status_code == 404
        assert api.get(f"{BASE}/cart/", headers=auth("s1")).json()["total_quantity"] == 1

    def test_adding_twice_increments(self, api, seeded, auth):
        api.post(f"{BASE}/cart/items/p1", headers=auth("s1"))
        body = api.post(f"{BASE}/cart/items/p1", headers=auth("s1")).json()
        assert body["items"] == [{"productId": "p1", "name": "Detergente", "quantity": 2}]

    def test_zero_quantity_removes_line(self, api, seeded, auth):
        api.post(f"{BASE}/cart/items/p1", headers=auth("s1"))
        body = api.put(f"{BASE}/cart/items/p1", json={"quantity": 0}, headers=auth("s1")).json()
        assert body["items"] == []

    def test_carts_are_per_user(self, api, seeded, auth):
        api.post(f"{BASE}/cart/items/p1", headers=auth("s1"))
        assert api.get(f"{BASE}/cart/", headers=auth("s2")).json()["items"] == []

    def test_direct_order_creation(self, api, seeded, auth):
        r = api.post(
            f"{BASE}/orders/",
            json={"client_id": "c1", "items": [{"product_id": "p2", "quantity": 3}]},
            headers=auth("s1"),
        )
        assert r.status_code == 201
        assert r.json()["products"][0]["name"] == "Desinfetante"

    def test_direct_order_ignores_submitted_name(self, api, seeded, auth):
        r = api.post(
            f"{BASE}/orders/",
            json={"client_id": "c1", "items": [{"product_id": "p1", "quantity": 2, "name": "Whisky 12 anos"}]},
            headers=auth("s1"),
        )
        assert r.status_code == 201
        assert r.json()["products"][0]["name"] == "Detergente"


def test_health(api):
    body = api.get("/health").json()
    assert body["service"] == "purchase-order-api"
    assert "database" in body
