"""
Shared pytest fixtures for the Star Registry test suite.

This module provides fixtures that are automatically available to all test files:
- A controllable clock so time-window behaviour is deterministic
- Fresh Ledger and StarRegistry instances per test
- Deterministic development wallets (private key + address)
- A FastAPI TestClient bound to an isolated registry

Every fixture is function-scoped: each test gets its own chain.
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from star_registry.core.registry import StarRegistry
from star_registry.crypto import address_from_private_key, sign_message
from star_registry.ledger import Ledger

# ============================================================================
# CLOCK
# ============================================================================


class FakeClock:
    """Callable clock returning a settable Unix time in seconds."""

    def __init__(self, now: int = 1000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at Unix time 1000 until a test advances it."""
    return FakeClock(1000)


# ============================================================================
# WALLETS
# ============================================================================


@dataclass(frozen=True)
class Wallet:
    """A development key pair used to sign challenges in tests."""

    private_key: bytes
    address: str
    compressed: bool = True

    def sign(self, message: str) -> str:
        return sign_message(self.private_key, message, compressed=self.compressed)


def _wallet(seed: int, compressed: bool = True) -> Wallet:
    private_key = seed.to_bytes(32, "big")
    return Wallet(
        private_key=private_key,
        address=address_from_private_key(private_key, compressed=compressed),
        compressed=compressed,
    )


@pytest.fixture
def alice() -> Wallet:
    return _wallet(0xA11CE)


@pytest.fixture
def bob() -> Wallet:
    return _wallet(0xB0B)


# ============================================================================
# LEDGER AND REGISTRY
# ============================================================================


@pytest.fixture
def ledger(clock: FakeClock) -> Ledger:
    """A fresh ledger holding only the genesis block."""
    return Ledger(clock=clock)


@pytest.fixture
def registry(clock: FakeClock) -> StarRegistry:
    """A registry with a fresh ledger, real signature checks and a 300s window."""
    return StarRegistry(clock=clock, challenge_window_seconds=300)


@pytest.fixture
def sample_star() -> dict:
    return {
        "dec": "68° 52' 56.9",
        "ra": "16h 29m 1.0s",
        "story": "Found star using https://www.google.com/sky/",
    }


# ============================================================================
# FASTAPI TEST CLIENT
# ============================================================================


@pytest.fixture
def test_client(registry: StarRegistry) -> TestClient:
    """
    Create a FastAPI TestClient bound to the per-test registry.

    Example:
        def test_height(test_client):
            response = test_client.get("/block/height/0")
            assert response.status_code == 200
    """
    from star_registry.api.server import create_app

    return TestClient(create_app(registry))
