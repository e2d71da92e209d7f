"""Unit tests for API error handling."""

import pytest
from fastapi.testclient import TestClient

from stableswap.api.endpoints import get_clock
from stableswap.api.main import app
from tests.helpers import make_pool_payload


@pytest.fixture
def client():
    """Create a test client for the API."""
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestSwapErrorHandling:
    """Swap errors map to 400 with their kind."""

    def test_error_body_shape(self, client):
        response = client.post(
            "/quote/withdraw",
            json={"pool": make_pool_payload(supply=0), "poolTokenAmount": "1"},
        )
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "empty_pool"
        assert data["detail"]
        assert "expected" not in data
        assert "actual" not in data

    def test_clock_override_used(self, client):
        """The clock dependency drives ramp evaluation when "now" is absent."""
        pool = make_pool_payload()
        pool["amp"] = {
            "initialAmpFactor": 10,
            "targetAmpFactor": 100,
            "startRampTs": 1_000,
            "stopRampTs": 2_000,
        }
        body = {"pool": pool, "amountIn": "500000000", "direction": "a_to_b"}

        app.dependency_overrides[get_clock] = lambda: lambda: 1_000
        at_start = client.post("/quote/swap", json=body).json()
        app.dependency_overrides[get_clock] = lambda: lambda: 2_000
        at_stop = client.post("/quote/swap", json=body).json()

        assert int(at_start["amountSwapped"]) < int(at_stop["amountSwapped"])


class TestInvalidJsonSchema:
    """Malformed requests are rejected before quoting."""

    def test_missing_pool(self, client):
        response = client.post("/quote/swap", json={"amountIn": "1", "direction": "a_to_b"})
        assert response.status_code == 422

    def test_mixed_fee_formats(self, client):
        pool = make_pool_payload()
        pool["fees"]["packed"] = "0x" + "00" * 64
        response = client.post(
            "/quote/swap",
            json={"pool": pool, "amountIn": "1", "direction": "a_to_b"},
        )
        assert response.status_code == 422

    def test_invalid_json(self, client):
        response = client.post(
            "/quote/swap",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422
