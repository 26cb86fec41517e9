"""
API tests for sleeve endpoints.

Tests cover:
- Create sleeve (success + validation errors)
- List / get / update / delete
- Error responses (400, 404, 422)
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def securities(security_factory):
    for ticker in ("VTI", "ITOT", "SCHB", "BND"):
        security_factory(ticker, "100")


def _payload(name="US Total", tickers=("VTI", "ITOT", "SCHB")):
    return {
        "name": name,
        "members": [{"ticker": t, "rank": i + 1} for i, t in enumerate(tickers)],
    }


# =============================================================================
# CREATE SLEEVE TESTS
# =============================================================================


class TestCreateSleeveAPI:
    """Tests for POST /sleeves endpoint."""

    def test_create_sleeve_success(self, client: TestClient, securities):
        """
        GIVEN securities exist
        WHEN I POST /sleeves with ranked members
        THEN response is 201 with the sleeve
        """
        response = client.post("/sleeves/", json=_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "US Total"
        assert [m["ticker"] for m in data["members"]] == ["VTI", "ITOT", "SCHB"]
        assert data["members"][0]["is_legacy"] is False
        assert data["sleeve_id"]

    def test_unknown_ticker_returns_400(self, client: TestClient, securities):
        response = client.post("/sleeves/", json=_payload(tickers=("VTI", "ZZZZ")))

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["message"] == "Invalid tickers (not found in securities): ZZZZ"

    def test_duplicate_ticker_returns_400(self, client: TestClient, securities):
        response = client.post("/sleeves/", json=_payload(tickers=("VTI", "VTI")))

        assert response.status_code == 400

    def test_missing_name_returns_422(self, client: TestClient, securities):
        response = client.post("/sleeves/", json={"members": []})

        assert response.status_code == 422


# =============================================================================
# READ / UPDATE / DELETE TESTS
# =============================================================================


class TestSleeveCrudAPI:
    """Tests for GET/PUT/DELETE /sleeves."""

    def test_list_sleeves(self, client: TestClient, securities):
        client.post("/sleeves/", json=_payload())
        client.post("/sleeves/", json=_payload(name="Bonds", tickers=("BND",)))

        response = client.get("/sleeves/")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [s["name"] for s in data["sleeves"]] == ["Bonds", "US Total"]

    def test_get_missing_sleeve_returns_404(self, client: TestClient):
        response = client.get("/sleeves/nope")

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_update_sleeve(self, client: TestClient, securities):
        sleeve_id = client.post("/sleeves/", json=_payload()).json()["sleeve_id"]

        response = client.put(f"/sleeves/{sleeve_id}", json=_payload(tickers=("SCHB", "VTI")))

        assert response.status_code == 200
        assert [m["ticker"] for m in response.json()["members"]] == ["SCHB", "VTI"]

    def test_delete_sleeve(self, client: TestClient, securities):
        sleeve_id = client.post("/sleeves/", json=_payload()).json()["sleeve_id"]

        response = client.delete(f"/sleeves/{sleeve_id}")

        assert response.status_code == 204
        assert client.get(f"/sleeves/{sleeve_id}").status_code == 404

    def test_delete_sleeve_in_model_returns_400(self, client: TestClient, securities):
        sleeve_id = client.post("/sleeves/", json=_payload()).json()["sleeve_id"]
        client.post("/models/equal-weight", json={"name": "All US", "sleeve_ids": [sleeve_id]})

        response = client.delete(f"/sleeves/{sleeve_id}")

        assert response.status_code == 400
        assert "All US" in response.json()["message"]
