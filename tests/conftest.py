"""Pytest fixtures for flower market tests.

Common fixtures for building a ledger, a registry and the market endpoint.
"""

from __future__ import annotations

from typing import Iterator

import pytest
from dotenv import load_dotenv

from flowermarket import config as config_module
from flowermarket.config_schema import MarketConfig
from flowermarket.market.endpoint import FlowerMarketEndpoint
from flowermarket.market.ledger import TokenLedger
from flowermarket.market.registry import FlowerRegistry

# Load environment variables from .env before any tests run
load_dotenv()

REGISTRY_ID = "flower_registry"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "feature(name): mark test as belonging to a feature. "
        "Usage: @pytest.mark.feature('purchase')"
    )


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add custom command-line options."""
    parser.addoption(
        "--feature",
        action="store",
        type=str,
        default=None,
        help="Run tests for a specific feature (e.g., --feature purchase)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Filter tests based on --feature."""
    feature_filter = config.getoption("--feature")
    if feature_filter is None:
        return
    selected = []
    deselected = []
    for item in items:
        marker = item.get_closest_marker("feature")
        if marker is not None and marker.args and marker.args[0] == feature_filter:
            selected.append(item)
        else:
            deselected.append(item)
    config.hook.pytest_deselected(items=deselected)
    items[:] = selected


@pytest.fixture(autouse=True)
def fresh_config() -> Iterator[None]:
    """Drop any globally cached config between tests."""
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def token_ledger() -> TokenLedger:
    """Create a TokenLedger with three funded accounts.

    - alice: 100
    - bob: 200
    - carol: 5
    """
    ledger = TokenLedger()
    ledger.create_account("alice", starting_balance=100)
    ledger.create_account("bob", starting_balance=200)
    ledger.create_account("carol", starting_balance=5)
    return ledger


@pytest.fixture
def registry(token_ledger: TokenLedger) -> FlowerRegistry:
    """Create an empty strict registry paying through token_ledger."""
    return FlowerRegistry(token_ledger, registry_id=REGISTRY_ID)


@pytest.fixture
def market(registry: FlowerRegistry) -> FlowerMarketEndpoint:
    """Create a market endpoint with default method descriptions."""
    return FlowerMarketEndpoint(registry, MarketConfig())
