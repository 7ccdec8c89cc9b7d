"""Tests for the FastAPI front end."""
import pytest
from fastapi.testclient import TestClient

from checkout_tool.api.main import app
from checkout_tool.api.state import get_checkout
from checkout_tool.engine import Checkout


@pytest.fixture
def client(checkout):
    app.dependency_overrides[get_checkout] = lambda: checkout
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_scan_and_total(client):
    for sku in ["A", "A", "A", "A", "B", "B", "B", "C", "D"]:
        response = client.post("/cart/scan", json={"sku": sku})
        assert response.status_code == 200

    response = client.get("/cart/total")
    assert response.json() == {"total": 290, "items": 9, "closed": False}


def test_scan_unknown_sku(client):
    response = client.post("/cart/scan", json={"sku": "ZZZ"})

    assert response.status_code == 404
    assert "ZZZ" in response.json()["detail"]
    assert client.get("/cart/total").json()["total"] == 0


def test_remove_nothing(client):
    response = client.post("/cart/remove", json={"sku": "A"})
    assert response.status_code == 409


def test_remove_item(client):
    client.post("/cart/scan", json={"sku": "B"})
    client.post("/cart/scan", json={"sku": "B"})

    response = client.post("/cart/remove", json={"sku": "B"})
    assert response.status_code == 200
    assert response.json()["total"] == 30


def test_cart_receipt(client):
    for _ in range(4):
        client.post("/cart/scan", json={"sku": "A"})

    data = client.get("/cart").json()
    assert data["total"] == 180
    line = data["lines"][0]
    assert line["sku"] == "A"
    assert line["bundles"] == 1
    assert line["remainder"] == 1


def test_checkout_closes_cart(client):
    client.post("/cart/scan", json={"sku": "C"})

    response = client.post("/cart/checkout")
    assert response.status_code == 200
    assert response.json()["total"] == 20
    assert response.json()["closed"] is True

    response = client.post("/cart/scan", json={"sku": "C"})
    assert response.status_code == 409


def test_list_rules(client):
    data = client.get("/api/rules").json()

    assert [r["sku"] for r in data] == ["A", "B", "C", "D"]
    assert data[0]["special_count"] == 3
    assert data[2]["special_price"] is None


def test_get_rule(client):
    assert client.get("/api/rules/B").json()["unit_price"] == 30
    assert client.get("/api/rules/X").status_code == 404


def test_rule_stats(client):
    stats = client.get("/api/rules/stats").json()

    assert stats["total"] == 4
    assert stats["with_special"] == 2


def test_reload_reports_errors(client, rules_file):
    assert client.post("/api/rules/reload").json()["rules_count"] == 4

    rules_file.write_text("items: [", encoding="utf-8")
    assert client.post("/api/rules/reload").status_code == 422

    rules_file.unlink()
    assert client.post("/api/rules/reload").status_code == 503


def test_strict_scan_reports_success_when_rules_break_afterwards(rules_file, monkeypatch):
    """A scan that went through answers 200 even if the rule file breaks right after."""
    co = Checkout(rules_file, strict_refresh=True)
    scan = co.scan

    def scan_then_break_rules(sku):
        receipt = scan(sku)
        rules_file.write_text("items: [", encoding="utf-8")
        return receipt

    monkeypatch.setattr(co, "scan", scan_then_break_rules)
    app.dependency_overrides[get_checkout] = lambda: co
    try:
        response = TestClient(app).post("/cart/scan", json={"sku": "A"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["total"] == 50
    assert co.quantities() == {"A": 1}
