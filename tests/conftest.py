"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from stableswap.api.endpoints import get_clock
from stableswap.api.main import app
from stableswap.state import PoolConfig, ReserveSnapshot
from tests.helpers import NOW, make_config, make_reserves


@pytest.fixture
def balanced_reserves() -> ReserveSnapshot:
    """1e9 of each asset with LP supply equal to D."""
    return make_reserves()


@pytest.fixture
def fee_free_config() -> PoolConfig:
    """Fixed amp 100 with zero fees."""
    return make_config()


@pytest.fixture
def fee_config() -> PoolConfig:
    """Fixed amp 100, 4 bp trade fee, 10 bp withdraw fee, half of each to admin."""
    return make_config(trade_fee=4, withdraw_fee=10, admin_trade_fee=5_000, admin_withdraw_fee=5_000)


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Create a test client with the clock pinned to NOW."""
    app.dependency_overrides[get_clock] = lambda: lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()
