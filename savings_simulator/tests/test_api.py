from __future__ import annotations

from flask.testing import FlaskClient

from savings_simulator.app import create_app
from savings_simulator.config import Settings


def projection_payload() -> dict:
    return {
        "initial_deposit": 2000,
        "monthly_deposit": 1000,
        "term_years": 2,
        "annual_yield_percent": 0,
        "annual_contribution_limit": 8000,
    }


def test_ping_returns_pong(client: FlaskClient):
    response = client.get("/api/ping")

    assert response.status_code == 200
    assert response.json == {"message": "pong"}


def test_request_id_is_echoed(client: FlaskClient):
    response = client.get("/api/ping", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"

    generated = client.get("/api/ping")
    assert generated.headers["X-Request-ID"]


def test_goals_listed_in_priority_order(client: FlaskClient):
    response = client.get("/api/goals")

    assert response.status_code == 200
    assert [goal["id"] for goal in response.json] == [
        "maxima_disponibilidad",
        "maximizar_beneficios",
        "ahorrar_jubilacion",
        "mas_retorno",
    ]
    assert response.json[1]["label"] == "Maximizar beneficios fiscales"


def test_products_filtered_by_goal(client: FlaskClient):
    response = client.get("/api/products?goal=maximizar_beneficios")

    assert response.status_code == 200
    entries = response.json["products"]
    assert [entry["product"]["id"] for entry in entries] == ["pias", "sialp"]
    assert entries[0]["defaults"] == {"initial_deposit": 100.0, "monthly_deposit": 50.0, "term_years": 1}


def test_products_apply_query_overrides(client: FlaskClient):
    response = client.get(
        "/api/products?goal=maximizar_beneficios&sialp-hidden=yes&pias-product_annual_yield=3.3"
    )

    entries = response.json["products"]
    assert [entry["product"]["id"] for entry in entries] == ["pias"]
    assert entries[0]["product"]["annual_yield"] == 3.3


def test_bad_override_returns_422(client: FlaskClient):
    response = client.get("/api/products?pias-product_annual_yield=high")

    assert response.status_code == 422
    assert "detail" in response.json


def test_projection_endpoint(client: FlaskClient):
    response = client.post("/api/projection", json=projection_payload())

    assert response.status_code == 200
    body = response.json
    assert body["final_amount"] == 20000.0
    assert body["total_contributions"] == 20000.0
    assert body["generated_interest"] == 0.0
    assert body["term_months"] == 24
    assert len(body["monthly_series"]) == 25
    assert body["monthly_series"][7] == {"month": 7, "value": 8000.0}
    assert [point["month"] for point in body["yearly_series"]] == [0, 12, 24]


def test_projection_uses_yield_tier(client: FlaskClient):
    payload = {
        "initial_deposit": 1000,
        "term_years": 10,
        "annual_yield_percent": 3.0,
        "yield_5_plus_years": 3.5,
        "yield_10_plus_years": 4.0,
    }
    response = client.post("/api/projection", json=payload)

    assert response.status_code == 200
    assert response.json["annual_yield"] == 4.0


def test_invalid_projection_payload_returns_400(client: FlaskClient):
    payload = projection_payload()
    payload["monthly_deposit"] = -10

    response = client.post("/api/projection", json=payload)
    assert response.status_code == 400
    assert response.json["detail"][0]["loc"] == ["monthly_deposit"]


def test_unknown_projection_field_returns_400(client: FlaskClient):
    payload = projection_payload()
    payload["currency"] = "USD"

    response = client.post("/api/projection", json=payload)
    assert response.status_code == 400


def test_simulation_endpoint(client: FlaskClient):
    payload = {
        "goal": "maximizar_beneficios",
        "selections": [
            {"product_id": "pias", "initial_deposit": 100, "monthly_deposit": 3000, "term_years": 2},
            {"product_id": "sialp", "initial_deposit": 500, "monthly_deposit": 0, "term_years": 1},
        ],
    }
    response = client.post("/api/simulation", json=payload)

    assert response.status_code == 200
    body = response.json
    pias = body["results"][0]
    assert pias["total_contributions"] == 8000.0 + 12 * 3000.0
    assert pias["contribution_limit"]["partial_first_year_amount"] == 1900.0
    assert [row["month"] for row in body["chart_data"]] == [0, 12, 24]
    assert body["highest_final_amount"] == pias["final_amount"]


def test_simulation_rejects_product_outside_goal(client: FlaskClient):
    payload = {
        "goal": "mas_retorno",
        "selections": [
            {"product_id": "pias", "initial_deposit": 100, "monthly_deposit": 50, "term_years": 1},
        ],
    }
    response = client.post("/api/simulation", json=payload)

    assert response.status_code == 422
    assert response.json["detail"] == ["unknown product pias"]


def test_simulation_respects_hidden_override(client: FlaskClient):
    payload = {
        "selections": [
            {"product_id": "sialp", "initial_deposit": 500, "monthly_deposit": 0, "term_years": 1},
        ],
    }
    response = client.post("/api/simulation?sialp-hidden=yes", json=payload)

    assert response.status_code == 422


def test_simulation_limit_comes_from_settings():
    app = create_app(Settings(env="test", log_level="WARNING", max_selected_products=1))
    payload = {
        "selections": [
            {"product_id": "pias", "initial_deposit": 100, "monthly_deposit": 50, "term_years": 1},
            {"product_id": "sialp", "initial_deposit": 500, "monthly_deposit": 0, "term_years": 1},
        ],
    }
    with app.test_client() as client:
        response = client.post("/api/simulation", json=payload)

    assert response.status_code == 422
    assert "select at most 1 products" in response.json["detail"]


def test_empty_selection_list_returns_400(client: FlaskClient):
    response = client.post("/api/simulation", json={"selections": []})
    assert response.status_code == 400
