"""Pytest configuration and fixtures."""

import os

import pytest

os.environ.setdefault("GRID_API_URL", "https://grid.test/graphql")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from backend.catalog import gateway  # noqa: E402
from backend.use_cases import CategoryDefinition, UseCaseTemplate  # noqa: E402


@pytest.fixture
def trading_template():
    return UseCaseTemplate(
        id="trading",
        name="Trading Stack",
        description="Wallets, DEXs and bridges",
        icon="TrendingUp",
        categories=(
            CategoryDefinition(name="Wallet", product_type_ids=("692",), required=True),
            CategoryDefinition(name="DEX", product_type_ids=("25",), required=True),
            CategoryDefinition(name="Bridge", product_type_ids=("23",), required=False),
        ),
    )


@pytest.fixture(autouse=True)
def fresh_catalog_cache():
    """Each test starts with an empty category cache."""
    gateway._cache = None
    yield
    gateway._cache = None
