"""Tests for the HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from conftest import make_catalog, product
from recipe_catalog import RecipeCatalog
from recipe_server import create_app
from recipe_suggestions import RecipeSuggestionService


@pytest.fixture
def service(baking_context):
    catalog = make_catalog(
        {
            "cake": [("flour", 300, "g"), ("sugar", 200, "g")],
            "cookies": [("flour", 200, "g"), ("sugar", 100, "g")],
        },
        context=baking_context,
        product_units={"flour": ["cup", "g", "ml"]},
    )
    return RecipeSuggestionService(catalog, baking_context)


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


class TestRecipeServer:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "recipes": 2, "products": 2}

    def test_products(self, client):
        response = client.get("/products")
        assert response.status_code == 200
        assert response.json() == ["flour", "sugar"]

    def test_units(self, client):
        response = client.post("/units", json={"product": "plain flour"})
        assert response.status_code == 200
        assert response.json() == ["cup", "g", "ml"]

    def test_units_for_unknown_product(self, client):
        response = client.post("/units", json={"product": "saffron"})
        assert response.status_code == 200
        assert response.json() == []

    def test_recipes(self, client):
        payload = {
            "numberOfServings": 1,
            "availableProducts": {
                "flour": {"quantity": 500, "unit": "g"},
                "sugar": {"quantity": 200, "unit": "g"},
            },
        }
        response = client.post("/recipes", json=payload)

        assert response.status_code == 200
        assert response.json() == [
            [{"name": "cake", "source": "cake source"}],
            [{"name": "cookies", "source": "cookies source"}],
        ]

    def test_recipes_default_servings(self, client):
        payload = {
            "availableProducts": {
                "plain flour": {"quantity": 5, "unit": "cups"},
                "sugar": {"quantity": 300, "unit": "g"},
            }
        }
        response = client.post("/recipes", json=payload)

        assert response.status_code == 200
        assert response.json() == [
            [
                {"name": "cake", "source": "cake source"},
                {"name": "cookies", "source": "cookies source"},
            ]
        ]

    def test_recipes_with_servings(self, client):
        payload = {
            "numberOfServings": 2,
            "availableProducts": {
                "flour": {"quantity": 500, "unit": "g"},
                "sugar": {"quantity": 200, "unit": "g"},
            },
        }
        response = client.post("/recipes", json=payload)
        assert response.json() == [[{"name": "cookies", "source": "cookies source"}]]

    def test_malformed_payload(self, client):
        payload = {"availableProducts": {"flour": {"quantity": "lots of"}}}
        response = client.post("/recipes", json=payload)
        assert response.status_code == 422

    def test_negative_quantity_is_a_client_error(self, client):
        payload = {"availableProducts": {"flour": {"quantity": -5, "unit": "g"}}}
        response = client.post("/recipes", json=payload)

        assert response.status_code == 400
        assert response.json()["status"] == "error"

    def test_nan_quantity_is_a_client_error(self, client):
        body = '{"availableProducts": {"flour": {"quantity": NaN, "unit": "g"}}}'
        response = client.post(
            "/recipes", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["status"] == "error"

    def test_missing_source_is_a_server_error(self, baking_context):
        catalog = RecipeCatalog({"toast": {"bread": product("bread", 1, "slice")}}, {})
        client = TestClient(create_app(RecipeSuggestionService(catalog, baking_context)))

        payload = {"availableProducts": {"bread": {"quantity": 2, "unit": "slice"}}}
        response = client.post("/recipes", json=payload)

        assert response.status_code == 500
        assert "toast" in response.json()["message"]


class TestCors:
    def test_origin_header_when_configured(self, service):
        client = TestClient(create_app(service, http_origin="http://meals.example"))
        response = client.get("/products", headers={"Origin": "http://meals.example"})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://meals.example"

    def test_wildcard_origin(self, service):
        client = TestClient(create_app(service, http_origin="*"))
        response = client.get("/products", headers={"Origin": "http://anywhere.example"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_no_origin_header_by_default(self, client):
        response = client.get("/products", headers={"Origin": "http://meals.example"})
        assert "access-control-allow-origin" not in response.headers
