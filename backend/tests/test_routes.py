# Overview: HTTP-level tests for status codes and the JSON error envelope.

"""
Route tests via the Flask test client.

Services are covered in depth elsewhere; these check wiring: URL shapes,
status codes and that domain errors come back as {"error", "field"}.
"""

import httpx
import pytest

from dealership.services.price_reference_service import PriceReferenceClient

VEHICLE = {"plate": "ABC-1234", "brand": "Honda", "model": "Civic EX", "color": "Prata", "price_cents": 50000}


def create_vehicle(client, **fields):
    response = client.post("/api/vehicles", json=dict(VEHICLE, **fields))
    assert response.status_code == 201
    return response.get_json()["vehicle"]


class TestSystem:
    def test_health(self, client, db_session):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json()["checks"]["database"]["status"] == "healthy"

    def test_version(self, client):
        assert client.get("/version").get_json()["api_version"] == "1.0.0"


class TestVehicleRoutes:
    def test_create_get_list(self, client, db_session):
        created = create_vehicle(client)
        assert created["status"] == "AWAITING_PREP"

        detail = client.get(f"/api/vehicles/{created['id']}").get_json()["vehicle"]
        assert detail["plate"] == "ABC-1234"
        assert detail["expenses"] == []

        listing = client.get("/api/vehicles?search=civic").get_json()
        assert listing["count"] == 1

    def test_duplicate_plate_is_409(self, client, db_session):
        create_vehicle(client)
        response = client.post("/api/vehicles", json=VEHICLE)
        assert response.status_code == 409
        assert response.get_json()["field"] == "plate"

    def test_validation_error_is_400(self, client, db_session):
        response = client.post("/api/vehicles", json={"plate": "ABC-1234"})
        assert response.status_code == 400
        body = response.get_json()
        assert body["error"].startswith("Missing required fields")
        assert body["field"] == "brand"

    def test_missing_vehicle_is_404(self, client, db_session):
        assert client.get("/api/vehicles/9999").status_code == 404
        assert client.get("/api/vehicles/by-plate/NOPE-000").status_code == 404

    def test_update_and_delete(self, client, db_session):
        created = create_vehicle(client)
        response = client.put(f"/api/vehicles/{created['id']}", json={"status": "AVAILABLE"})
        assert response.status_code == 200
        assert response.get_json()["vehicle"]["status"] == "AVAILABLE"

        assert client.put(f"/api/vehicles/{created['id']}", json={"status": "SOLD"}).status_code == 409

        assert client.delete(f"/api/vehicles/{created['id']}").status_code == 204
        assert client.get(f"/api/vehicles/{created['id']}").status_code == 404

    def test_sell_flow(self, client, db_session):
        created = create_vehicle(client, status="AVAILABLE")
        client.post("/api/expenses", json={"vehicle_id": created["id"], "description": "Polimento", "amount_cents": 5000})

        response = client.post(f"/api/vehicles/{created['id']}/sell", json={
            "sale_price_cents": 60000,
            "trade_in_vehicle": {"plate": "XYZ-999", "brand": "Fiat", "model": "Uno", "color": "Branco"},
        })
        assert response.status_code == 200
        assert response.get_json()["vehicle"]["status"] == "SOLD"

        detail = client.get(f"/api/vehicles/{created['id']}").get_json()["vehicle"]
        assert detail["profit_cents"] == 55000

        trade_in = client.get("/api/vehicles/by-plate/XYZ-999").get_json()["vehicle"]
        assert trade_in["status"] == "AWAITING_PREP"

        again = client.post(f"/api/vehicles/{created['id']}/sell", json={"sale_price_cents": 70000})
        assert again.status_code == 409

    def test_sell_zero_price_is_400(self, client, db_session):
        created = create_vehicle(client, status="AVAILABLE")
        response = client.post(f"/api/vehicles/{created['id']}/sell", json={"sale_price_cents": 0})
        assert response.status_code == 400
        assert response.get_json()["field"] == "sale_price_cents"

    def test_vehicle_expenses_listing(self, client, db_session):
        created = create_vehicle(client)
        response = client.post("/api/expenses", json={"vehicle_id": created["id"], "description": "Lavagem", "amount_cents": 1500})
        assert response.status_code == 201
        expense_id = response.get_json()["expense"]["id"]

        listing = client.get(f"/api/vehicles/{created['id']}/expenses").get_json()
        assert listing["count"] == 1

        assert client.delete(f"/api/expenses/{expense_id}").status_code == 204
        assert client.delete(f"/api/expenses/{expense_id}").status_code == 404


class TestOtherRoutes:
    def test_people_crud_and_search(self, client, db_session):
        response = client.post("/api/people", json={
            "name": "Maria Oliveira",
            "phone": "11988887777",
            "type": "OWNER",
            "document": "987.654.321-99",
        })
        assert response.status_code == 201
        person_id = response.get_json()["person"]["id"]

        found = client.get("/api/people/search-by-document?document=98765432199").get_json()
        assert found["person"]["id"] == person_id

        assert client.get("/api/people?type=CLIENT").get_json()["count"] == 0

        create_vehicle(client, owner_id=person_id)
        assert client.delete(f"/api/people/{person_id}").status_code == 409

    def test_store_expenses(self, client, db_session):
        response = client.post("/api/store-expenses", json={
            "description": "Conta de luz",
            "category": "ELECTRICITY",
            "amount_cents": 25000,
        })
        assert response.status_code == 201
        assert client.get("/api/store-expenses?category=ELECTRICITY").get_json()["count"] == 1

    def test_intermediaries(self, client, db_session):
        response = client.post("/api/intermediaries", json={"name": "Pedro", "document": "555"})
        assert response.status_code == 201
        intermediary_id = response.get_json()["intermediary"]["id"]
        assert client.get(f"/api/intermediaries/{intermediary_id}").status_code == 200
        assert client.delete(f"/api/intermediaries/{intermediary_id}").status_code == 204

    def test_dashboard_and_reports(self, client, db_session):
        create_vehicle(client, status="AVAILABLE")
        stats = client.get("/api/dashboard").get_json()
        assert stats["total_vehicles"] == 1
        assert stats["total_available"] == 1

        assert "net_profit_cents" in client.get("/api/reports/financial").get_json()
        assert len(client.get("/api/reports/monthly?months=6").get_json()["rows"]) == 6

        bad = client.get("/api/reports/monthly?months=0")
        assert bad.status_code == 400
        assert bad.get_json()["field"] == "months"

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert "error" in response.get_json()


class TestPriceReferenceRoutes:
    @pytest.fixture
    def fipe(self, app, monkeypatch):
        def handler(request):
            if request.url.path.endswith("/cars/brands"):
                return httpx.Response(200, json=[{"code": "59", "name": "VW - VolksWagen"}])
            return httpx.Response(500)

        client = PriceReferenceClient(app.config["PRICE_REFERENCE_BASE_URL"], transport=httpx.MockTransport(handler))
        monkeypatch.setitem(app.extensions, "price_reference_client", client)
        yield client
        client.close()

    def test_brands(self, client, fipe):
        body = client.get("/api/price-reference/cars/brands").get_json()
        assert body["items"] == [{"code": "59", "name": "VW - VolksWagen"}]

    def test_upstream_error_is_502(self, client, fipe):
        response = client.get("/api/price-reference/cars/brands/59/models")
        assert response.status_code == 502
        assert "error" in response.get_json()

    def test_bad_vehicle_type_is_400(self, client, fipe):
        response = client.get("/api/price-reference/boats/brands")
        assert response.status_code == 400
        assert response.get_json()["field"] == "vehicle_type"
