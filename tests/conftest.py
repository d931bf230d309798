"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from pathlib import Path
from typing import Callable
from fastapi.testclient import TestClient
from receivables_risk.api.main import create_app
from receivables_risk.api.dependencies import get_portfolio_repository
from receivables_risk.infrastructure.storage.repositories import PortfolioRepository
from receivables_risk.domain.models import ClientInput, ClientRecord
from receivables_risk.domain.scoring import assess_client

SAMPLE_CSV_PATH = Path(__file__).resolve().parents[1] / "data" / "sample_clients.csv"
AS_OF = datetime(2024, 4, 1)


@pytest.fixture
def as_of() -> datetime:
    """Fixed 'now' so days-past-due is reproducible"""
    return AS_OF


@pytest.fixture
def sample_csv() -> str:
    """Eight-client export covering every risk band"""
    return SAMPLE_CSV_PATH.read_text(encoding="utf-8")


@pytest.fixture
def make_client() -> Callable[..., ClientRecord]:
    """Build a scored client; defaults describe a healthy, paid-on-time account"""

    def _make(**overrides) -> ClientRecord:
        fields = dict(
            id="C000",
            name="Default Client",
            email="ap@default.example",
            phone_number="555-0000",
            invoice_amount=1000.0,
            invoice_date="2024-01-01",
            due_date="2024-01-31",
            payment_date="2024-01-31",
            avg_orders_60_days=20.0,
            reminders_count=0,
            credit_limit=10000.0,
            credit_used=1000.0,
        )
        fields.update(overrides)
        return assess_client(ClientInput(**fields), AS_OF)

    return _make


@pytest.fixture
def repository() -> PortfolioRepository:
    return PortfolioRepository()


@pytest.fixture
def client(repository: PortfolioRepository) -> TestClient:
    """Create FastAPI test client with an isolated portfolio store"""
    app = create_app()
    app.dependency_overrides[get_portfolio_repository] = lambda: repository
    return TestClient(app)
