"""End-to-end tests through the FastAPI application."""

from unittest.mock import MagicMock

import pytest
import redis
from fastapi.testclient import TestClient

from src.config import Settings
from src.main import create_app

ADMIN_PASSWORD = "s3nha-forte"
# Larger than any INTEGER column
HUGE = "99999999999999999999"


@pytest.fixture
def settings(db):
    return Settings(
        DATABASE_URL=db.url,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        JWT_SECRET="test-secret",
        REDIS_URL="",
        ENVIRONMENT="test",
    )


@pytest.fixture
def client(settings, catalog):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


class TestPublicApi:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "OK"

    def test_list_products_envelope(self, client):
        body = client.get("/api/products").json()

        assert body["success"] is True
        assert body["pagination"] == {
            "currentPage": 1,
            "perPage": 12,
            "totalItems": 3,
            "totalPages": 1,
            "hasNext": False,
            "hasPrev": False,
        }
        product = body["data"][0]
        assert {"affiliateUrl", "storeId", "isActive", "createdAt", "store", "categories"} <= product.keys()

    def test_list_products_second_page(self, client):
        body = client.get("/api/products", params={"page": "2", "perPage": "2"}).json()

        assert len(body["data"]) == 1
        assert body["pagination"]["totalPages"] == 2
        assert body["pagination"]["hasPrev"] is True

    def test_garbage_pagination_uses_defaults(self, client):
        body = client.get("/api/products", params={"page": "abc", "perPage": "500"}).json()
        assert body["pagination"]["currentPage"] == 1
        assert body["pagination"]["perPage"] == 12

    def test_category_filter_repeated_params(self, client, catalog):
        categories = catalog["categories"]
        response = client.get(
            "/api/products", params=[("categoryIds", categories["casa"]), ("categoryIds", categories["esportes"])]
        )
        assert response.json()["pagination"]["totalItems"] == 2

    def test_search(self, client):
        body = client.get("/api/products", params={"q": "fone"}).json()
        assert [product["title"] for product in body["data"]] == ["Fone de Ouvido Bluetooth JBL Tune 510BT"]

    def test_get_product_invalid_id(self, client):
        response = client.get("/api/products/abc")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_get_product_not_found(self, client):
        response = client.get("/api/products/9999")
        assert response.status_code == 404
        assert response.json()["error"] == "Product not found"

    def test_public_categories(self, client):
        body = client.get("/api/products/categories").json()
        assert body["count"] == 3
        assert {category["slug"] for category in body["data"]} == {"eletronicos", "casa-jardim", "esportes-lazer"}

    def test_track_click(self, client, catalog):
        product_id = catalog["products"]["fone"]
        response = client.post("/api/products/track-click", json={"productId": product_id})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["productId"] == product_id
        assert data["totalClicks"] == 1
        assert data["affiliateUrl"] == "https://amzn.to/teste"

    @pytest.mark.parametrize("payload", [{}, {"productId": "5"}, {"productId": 0}, {"productId": 1.5}])
    def test_track_click_invalid_payload(self, client, payload):
        response = client.post("/api/products/track-click", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid data"

    def test_track_click_inactive_product(self, client, catalog):
        response = client.post("/api/products/track-click", json={"productId": catalog["products"]["fone_inativo"]})
        assert response.status_code == 404

    def test_stores(self, client, catalog):
        stores = client.get("/api/stores").json()["data"]
        assert {store["name"]: store["productCount"] for store in stores} == {"AliExpress": 2, "Amazon Brasil": 1}

        detail = client.get(f"/api/stores/{catalog['stores']['amazon']}").json()["data"]
        assert [product["title"] for product in detail["products"]] == ["Fone de Ouvido Bluetooth JBL Tune 510BT"]

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json()["error"] == "Route not found"


class TestRateLimiting:
    def test_blocked_client(self, client):
        client.app.state.redis_client = MagicMock(rate_limit_check=MagicMock(return_value=False))

        response = client.get("/api/products")

        assert response.status_code == 429
        assert response.json()["error"] == "Too many requests"

    def test_redis_outage_fails_open(self, client):
        client.app.state.redis_client = MagicMock(rate_limit_check=MagicMock(side_effect=redis.ConnectionError("down")))
        assert client.get("/api/products").status_code == 200


class TestAdminApi:
    def test_login_wrong_password(self, client):
        response = client.post("/api/admin/login", json={"password": "errada"})
        assert response.status_code == 401

    def test_missing_token(self, client):
        response = client.get("/api/admin/dashboard")
        assert response.status_code == 401
        assert response.json()["error"] == "Access token required"

    def test_invalid_token(self, client):
        response = client.get("/api/admin/dashboard", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 403

    def test_test_token(self, client, admin_headers):
        body = client.get("/api/admin/test-token", headers=admin_headers).json()
        assert body["data"]["user"]["role"] == "admin"

    def test_dashboard(self, client, admin_headers):
        stats = client.get("/api/admin/dashboard", headers=admin_headers).json()["data"]["stats"]
        assert stats == {"totalProducts": 4, "totalStores": 2, "totalClicks": 0}

    def test_create_product(self, client, admin_headers, catalog):
        payload = {
            "title": "Air Fryer Mondial Family",
            "description": "Fritadeira elétrica sem óleo de 3.5L",
            "price": 249.9,
            "imageUrl": "https://images.example.com/airfryer.jpg",
            "affiliateUrl": "https://amzn.to/airfryer",
            "storeId": catalog["stores"]["amazon"],
            "categoryIds": [catalog["categories"]["casa"]],
        }
        response = client.post("/api/admin/products", json=payload, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["price"] == 249.9
        assert [category["slug"] for category in data["categories"]] == ["casa-jardim"]

    def test_create_product_with_five_categories(self, client, admin_headers, catalog):
        payload = {
            "title": "Produto exagerado",
            "description": "Produto com categorias demais",
            "price": 10,
            "imageUrl": "https://images.example.com/x.jpg",
            "affiliateUrl": "https://amzn.to/x",
            "storeId": catalog["stores"]["amazon"],
            "categoryIds": [1, 2, 3, 4, 5],
        }
        response = client.post("/api/admin/products", json=payload, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Too many categories"

    def test_delete_store_with_products(self, client, admin_headers, catalog):
        response = client.delete(f"/api/admin/stores/{catalog['stores']['amazon']}", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Store has products"

    def test_duplicate_category(self, client, admin_headers):
        response = client.post("/api/admin/categories", json={"name": "Eletrônicos"}, headers=admin_headers)
        assert response.status_code == 409

    def test_clicks_report(self, client, admin_headers, catalog):
        client.post("/api/products/track-click", json={"productId": catalog["products"]["tenis"]})

        report = client.get("/api/admin/reports/clicks", headers=admin_headers).json()["data"]

        assert report["summary"]["totalClicks"] == 1
        assert report["products"][0]["storeName"] == "AliExpress"


class TestOversizedIntegers:
    def test_page_falls_back_to_first(self, client):
        body = client.get("/api/products", params={"page": HUGE}).json()
        assert body["pagination"]["currentPage"] == 1
        assert body["pagination"]["totalItems"] == 3

    def test_store_filter_is_ignored(self, client):
        response = client.get("/api/products", params={"storeId": HUGE})
        assert response.status_code == 200
        assert response.json()["pagination"]["totalItems"] == 3

    def test_category_entry_is_dropped(self, client, catalog):
        response = client.get(
            "/api/products", params=[("categoryIds", HUGE), ("categoryIds", catalog["categories"]["esportes"])]
        )
        assert response.status_code == 200
        assert response.json()["pagination"]["totalItems"] == 1

    def test_product_lookup(self, client):
        response = client.get(f"/api/products/{HUGE}")
        assert response.status_code == 400

    def test_store_lookup(self, client):
        assert client.get(f"/api/stores/{HUGE}").status_code == 400

    def test_track_click(self, client):
        response = client.post("/api/products/track-click", json={"productId": int(HUGE)})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid data"

    def test_admin_category_ids(self, client, admin_headers, catalog):
        payload = {
            "title": "Produto com categoria inexistente",
            "description": "Categoria fora do intervalo",
            "price": 10,
            "imageUrl": "https://images.example.com/x.jpg",
            "affiliateUrl": "https://amzn.to/x",
            "storeId": catalog["stores"]["amazon"],
            "categoryIds": [int(HUGE)],
        }
        response = client.post("/api/admin/products", json=payload, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid categories"
