"""Pytest configuration and fixtures."""

import pytest

from lunarswap import Lunarswap
from lunarswap.storage import InMemoryStore
from lunarswap.tokens import InMemoryTokenLedger
from tests.helpers import DUST, NIGHT, make_exchange, make_pool


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def tokens() -> InMemoryTokenLedger:
    """Empty in-memory token ledger."""
    return InMemoryTokenLedger()


@pytest.fixture
def exchange() -> Lunarswap:
    """Exchange with default config and ALICE/BOB funded in every test color."""
    return make_exchange()


@pytest.fixture
def night_dust(exchange: Lunarswap) -> Lunarswap:
    """Exchange with a NIGHT/DUST pair seeded at (10000, 5000) by ALICE."""
    make_pool(exchange, NIGHT, DUST, 10_000, 5_000)
    return exchange
