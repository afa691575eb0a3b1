"""
Tests for the payments HTTP API.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from payments.exceptions import StorageFailure
from payments.main import create_app

VISA = {"ccNumber": "4111111111111111", "amount": "9.99"}
VISA_FINGERPRINT = "4be9a4092ae3333d5ff289c053ee266a42469c9b276790c243b2c6ede0415bb2"
REQUIRED_ERROR = {"error": "ccNumber and amount are required."}


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


class TestCreatePayment:
    """Tests for POST /payment."""
    
    def test_first_submission_returns_201(self, client):
        response = client.post("/payment", json=VISA)
        
        assert response.status_code == 201
        body = response.json()
        assert body["uuid"] == VISA_FINGERPRINT
        assert body["message"] == "Data successfully created."
        assert body["data"]["id"] == VISA_FINGERPRINT
        assert body["data"]["ccNumber"] == "4111111111111111"
        assert body["data"]["amount"] == "9.99"
        assert body["data"]["createdAt"].endswith("Z")
    
    def test_repeat_returns_200_with_same_record(self, client):
        first = client.post("/payment", json=VISA).json()
        response = client.post("/payment", json=VISA)
        
        assert response.status_code == 200
        body = response.json()
        assert body["uuid"] == first["uuid"]
        assert body["data"] == first["data"]
        assert body["message"] == "Idempotent response: Data already exists."
    
    def test_extra_fields_ignored(self, client):
        response = client.post("/payment", json={**VISA, "note": "retry"})
        assert response.json()["uuid"] == VISA_FINGERPRINT
    
    @pytest.mark.parametrize(
        "body",
        [
            {"amount": "9.99"},
            {"ccNumber": "4111111111111111"},
            {"ccNumber": "", "amount": "10"},
            {"ccNumber": "4111111111111111", "amount": 9.99},
            {"cc_number": "4111111111111111", "amount": "9.99"},
            {},
            ["4111111111111111", "9.99"],
        ],
    )
    def test_missing_fields_return_400(self, client, body):
        response = client.post("/payment", json=body)
        
        assert response.status_code == 400
        assert response.json() == REQUIRED_ERROR
    
    def test_invalid_json_returns_400(self, client):
        response = client.post(
            "/payment",
            content=b"ccNumber=4111",
            headers={"Content-Type": "application/json"},
        )
        
        assert response.status_code == 400
        assert response.json() == REQUIRED_ERROR
    
    def test_lone_surrogate_returns_400(self, client):
        response = client.post(
            "/payment",
            content=b'{"ccNumber":"\\ud800","amount":"1"}',
            headers={"Content-Type": "application/json"},
        )
        
        assert response.status_code == 400
        assert response.json() == REQUIRED_ERROR
    
    def test_rejected_payload_not_stored(self, client):
        client.post("/payment", json={"ccNumber": "", "amount": "10"})
        
        body = client.get("/all-data").json()
        assert body == {"cache": [], "database": []}
    
    def test_storage_failure_returns_500(self, client):
        store = client.app.state.store
        failure = StorageFailure("get", "disk I/O error")
        
        with patch.object(store, "get", AsyncMock(side_effect=failure)):
            response = client.post("/payment", json=VISA)
        
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to record payment"}


class TestRestart:
    """Records survive a new application over the same database."""
    
    def test_store_hit_after_restart(self, settings):
        with TestClient(create_app(settings)) as client:
            first = client.post("/payment", json=VISA).json()
        
        with TestClient(create_app(settings)) as client:
            response = client.post("/payment", json=VISA)
            assert client.get("/all-data").json()["cache"] == [[VISA_FINGERPRINT, first["data"]]]
        
        assert response.status_code == 200
        assert response.json()["message"] == "Idempotent response: Data fetched from database."
        assert response.json()["data"] == first["data"]


class TestAllData:
    """Tests for GET /all-data."""
    
    def test_empty(self, client):
        response = client.get("/all-data")
        
        assert response.status_code == 200
        assert response.json() == {"cache": [], "database": []}
    
    def test_lists_cache_and_database(self, client):
        created = client.post("/payment", json=VISA).json()
        client.post("/payment", json={"ccNumber": "5500000000000004", "amount": "1.00"})
        
        body = client.get("/all-data").json()
        
        assert len(body["database"]) == 2
        assert len(body["cache"]) == 2
        assert body["cache"][0] == [VISA_FINGERPRINT, created["data"]]
        assert created["data"] in body["database"]
    
    def test_storage_failure_returns_500(self, client):
        store = client.app.state.store
        failure = StorageFailure("list_all", "disk I/O error")
        
        with patch.object(store, "list_all", AsyncMock(side_effect=failure)):
            response = client.get("/all-data")
        
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch data"}


class TestServiceRoutes:
    """Tests for health and root routes."""
    
    def test_health(self, client):
        response = client.get("/health")
        
        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "app": "idempotent-payments",
            "env": "development",
        }
    
    def test_root(self, client):
        response = client.get("/")
        
        assert response.status_code == 200
        assert "payments" in response.text
