"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Keep test runs off disk and off the network regardless of local .env
os.environ["SITETAGS_LOG_FILE_ENABLED"] = "false"
os.environ["SITETAGS_PAYMENT_SINK"] = "burn"
os.environ["SITETAGS_COST_SIGNAL"] = "static"

from fastapi.testclient import TestClient

from sitetags.core.config import Settings
from sitetags.core.errors import PaymentSinkError
from sitetags.registry.service import CatalogService
from sitetags.registry.sinks import BurnSink, StaticCostSignal


class FailingSink:
    """Sink whose ledger is always unreachable"""

    name = "failing"

    def __init__(self):
        self.calls = 0

    def burn(self, amount: int) -> None:
        self.calls += 1
        raise PaymentSinkError("ledger unreachable")


@pytest.fixture(scope="function")
def sink() -> BurnSink:
    return BurnSink()


@pytest.fixture(scope="function")
def catalog(sink) -> CatalogService:
    """Fresh catalog with a zero static cost signal"""
    return CatalogService(sink=sink, cost_signal=StaticCostSignal(0))


@pytest.fixture(scope="function")
def failing_sink() -> FailingSink:
    return FailingSink()


@pytest.fixture(scope="function")
def settings() -> Settings:
    return Settings(_env_file=None, log_format="text")


@pytest.fixture(scope="function")
def client(settings, catalog):
    """Test client over an app serving the `catalog` fixture"""
    from sitetags.main import create_app

    app = create_app(settings=settings, catalog=catalog)
    with TestClient(app) as test_client:
        yield test_client
