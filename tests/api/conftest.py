import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from API_LAYER.app import app


@pytest.fixture(scope="session")
def client():
    # API tests must NOT hit real DB; startup is never run outside a `with` block
    app.state.db = MagicMock()
    return TestClient(app)


@pytest.fixture
def install_orchestrator():
    """Put an orchestrator on app.state for one test, then remove it."""
    def install(orchestrator):
        app.state.chat_orchestrator = orchestrator
        return orchestrator

    yield install
    app.state.chat_orchestrator = None
