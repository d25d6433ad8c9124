from fastapi.testclient import TestClient

from kitchenunits.api.app import app
from kitchenunits.version import __version__

client = TestClient(app)


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "status": "ok", "version": __version__}


def test_normalize_recognized_quantity():
    response = client.post("/v1/quantities/normalize", json={"text": "40ml"})
    assert response.status_code == 200
    assert response.json() == {"quantity": "4cl", "kind": "volume", "unit_key": "volume", "diagnostics": []}


def test_normalize_reports_unrecognized_units():
    response = client.post("/v1/quantities/normalize", json={"text": "6 gousses"})
    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "unknown"
    assert data["unit_key"] == "gousses"
    assert data["diagnostics"] == ["Unrecognized unit: gousses"]


def test_normalize_rejects_garbage():
    response = client.post("/v1/quantities/normalize", json={"text": "beaucoup"})
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Invalid quantity: beaucoup"


def test_normalize_rejects_overflowing_counts():
    response = client.post("/v1/quantities/normalize", json={"text": "1" + "0" * 400 + "g"})
    assert response.status_code == 422
    assert response.json()["detail"]["message"].startswith("Invalid quantity: 1000")


def test_sum():
    response = client.post("/v1/quantities/sum", json={"items": ["4cl", "1 c-à-s"]})
    assert response.status_code == 200
    assert response.json() == {"quantity": "5.5cl"}


def test_sum_with_conversions():
    response = client.post("/v1/quantities/sum", json={"items": ["1l", "1kg"], "conversions": "1l/1kg"})
    assert response.status_code == 200
    assert response.json() == {"quantity": "2l"}


def test_sum_errors():
    incompatible = client.post("/v1/quantities/sum", json={"items": ["1l", "1kg"]})
    assert incompatible.status_code == 400
    assert incompatible.json()["detail"]["message"] == "Incompatible types: volume vs. mass"

    empty = client.post("/v1/quantities/sum", json={"items": []})
    assert empty.status_code == 422

    bad_rule = client.post("/v1/quantities/sum", json={"items": ["1l"], "conversions": "1l"})
    assert bad_rule.status_code == 422
    assert bad_rule.json()["detail"]["message"] == "Invalid conversion rule: 1l"


def test_mixed_sum_and_scale():
    summed = client.post("/v1/quantities/mixed/sum", json={"items": ["4.2cl|300g", "6 gousses|4|3 pièces"]})
    assert summed.status_code == 200
    assert summed.json() == {"quantity": "4.2cl|300g|6 gousses|4|3 pièces"}

    scaled = client.post("/v1/quantities/mixed/scale", json={"text": "200g|2", "factor": 1.5})
    assert scaled.status_code == 200
    assert scaled.json() == {"quantity": "300g|3"}


def test_ratio():
    response = client.post("/v1/quantities/ratio", json={"numerator": "1l", "denominator": "25cl"})
    assert response.status_code == 200
    assert response.json() == {"ratio": 4.0}

    zero = client.post("/v1/quantities/ratio", json={"numerator": "1l", "denominator": "0ml"})
    assert zero.status_code == 400


def test_price_total():
    response = client.post(
        "/v1/prices/total",
        json={"price": "10$/50cl", "quantity": "1l|1kg", "conversions": "1cl/10g"},
    )
    assert response.status_code == 200
    assert response.json() == {"ok": True, "total": "40$", "value": 40.0, "currency": "$", "diagnostics": []}


def test_price_total_incompatible():
    response = client.post("/v1/prices/total", json={"price": "5€/6mg", "quantity": "4"})
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is False
    assert data["total"] is None
    assert len(data["diagnostics"]) == 1


def test_price_total_rejects_bad_price():
    response = client.post("/v1/prices/total", json={"price": "Coucou !", "quantity": "4"})
    assert response.status_code == 422


def test_resize_recipe():
    response = client.post(
        "/v1/recipes/resize",
        json={
            "name": "Soupe",
            "people": "4p",
            "target": "2p",
            "ingredients": [{"name": "carottes", "quantity": "400g"}, {"name": "sel"}],
        },
    )
    assert response.status_code == 200
    assert response.json() == {
        "name": "Soupe",
        "people": "2p",
        "ingredients": [{"name": "carottes", "quantity": "200g"}, {"name": "sel", "quantity": None}],
    }


def test_resize_recipe_rejects_bad_servings():
    response = client.post(
        "/v1/recipes/resize",
        json={"name": "Soupe", "people": "4p", "target": "zero", "ingredients": []},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Invalid servings: zero"
