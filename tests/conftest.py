# tests/conftest.py
import sys
from pathlib import Path

# ---------------------------------------------------------
# Ensure project root is on PYTHONPATH BEFORE app imports
# ---------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from models.shop import Product
from services.mutation_handler import MutationHandler
from services.pending_actions import PendingActionStore
from tests.fakes import FakeClock, FakeLanguageModel, InMemoryShopRepository


BLUE_SHIRT = Product(id="p-blue", name="Blue Cotton Shirt", price=899.0, stock=5, category="men", product_type="shirt")
RED_KURTA = Product(id="p-red", name="Red Silk Kurta", price=1499.5, stock=0, category="women", product_type="kurta")
KIDS_JEANS = Product(id="p-jeans", name="Kids Denim Jeans", price=650.0, stock=2, category="children", product_type="jeans")


@pytest.fixture
def clock():
    return FakeClock(start=1_000_000.0)


@pytest.fixture
def store(clock):
    return PendingActionStore(ttl_seconds=300, clock=clock)


@pytest.fixture
def repository():
    return InMemoryShopRepository(products=[BLUE_SHIRT, RED_KURTA, KIDS_JEANS])


@pytest.fixture
def mutations(repository, store):
    return MutationHandler(repository, store)


@pytest.fixture
def llm():
    return FakeLanguageModel()
