"""
API tests for allocation model endpoints.

Tests cover:
- Create model with explicit weights
- Weight sum validation
- Equal-weight model creation
- Get / update / delete
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def sleeve_ids(security_factory, sleeve_factory) -> list[str]:
    for ticker in ("VTI", "ITOT", "BND", "AGG", "VXUS"):
        security_factory(ticker, "100")
    return [
        sleeve_factory("US", ["VTI", "ITOT"]).sleeve_id,
        sleeve_factory("Bonds", ["BND", "AGG"]).sleeve_id,
        sleeve_factory("Intl", ["VXUS"]).sleeve_id,
    ]


class TestCreateModelAPI:
    """Tests for POST /models."""

    def test_create_model_success(self, client: TestClient, sleeve_ids):
        response = client.post("/models/", json={
            "name": "60/40",
            "members": [
                {"sleeve_id": sleeve_ids[0], "target_weight_bps": 6000},
                {"sleeve_id": sleeve_ids[1], "target_weight_bps": 4000},
            ],
        })

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "60/40"
        assert [m["target_weight_bps"] for m in data["members"]] == [6000, 4000]

    def test_weights_must_sum_to_10000(self, client: TestClient, sleeve_ids):
        """
        GIVEN two sleeves
        WHEN I POST weights of 6000 + 3999
        THEN response is 400 explaining the sum
        """
        response = client.post("/models/", json={
            "name": "Off by one",
            "members": [
                {"sleeve_id": sleeve_ids[0], "target_weight_bps": 6000},
                {"sleeve_id": sleeve_ids[1], "target_weight_bps": 3999},
            ],
        })

        assert response.status_code == 400
        assert response.json()["message"] == (
            "Target weights must sum to 100% (10000 basis points), got 99.99%"
        )

    def test_unknown_sleeve_returns_400(self, client: TestClient, sleeve_ids):
        response = client.post("/models/", json={
            "name": "Ghost",
            "members": [{"sleeve_id": "missing", "target_weight_bps": 10000}],
        })

        assert response.status_code == 400


class TestEqualWeightModelAPI:
    """Tests for POST /models/equal-weight."""

    def test_equal_weight_three_sleeves(self, client: TestClient, sleeve_ids):
        response = client.post("/models/equal-weight", json={
            "name": "Thirds",
            "sleeve_ids": sleeve_ids,
        })

        assert response.status_code == 201
        weights = [m["target_weight_bps"] for m in response.json()["members"]]
        assert weights == [3334, 3333, 3333]
        assert sum(weights) == 10000

    def test_empty_sleeve_list_returns_422(self, client: TestClient):
        response = client.post("/models/equal-weight", json={"name": "Nothing", "sleeve_ids": []})

        assert response.status_code == 422


class TestModelCrudAPI:
    """Tests for GET/PUT/DELETE /models."""

    def test_get_list_update_delete(self, client: TestClient, sleeve_ids):
        model_id = client.post(
            "/models/equal-weight",
            json={"name": "Halves", "sleeve_ids": sleeve_ids[:2]},
        ).json()["model_id"]

        assert client.get(f"/models/{model_id}").json()["name"] == "Halves"
        assert client.get("/models/").json()["count"] == 1

        updated = client.put(f"/models/{model_id}", json={
            "name": "Halves",
            "description": "Tilted to stocks",
            "members": [
                {"sleeve_id": sleeve_ids[0], "target_weight_bps": 7000},
                {"sleeve_id": sleeve_ids[1], "target_weight_bps": 3000},
            ],
        })
        assert updated.status_code == 200
        assert updated.json()["description"] == "Tilted to stocks"

        assert client.delete(f"/models/{model_id}").status_code == 204
        assert client.get(f"/models/{model_id}").status_code == 404
