"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from receivables_risk.infrastructure.clients.csv_source import CsvSourceClient
from receivables_risk.infrastructure.storage.repositories import PortfolioRepository

_portfolio_repository = PortfolioRepository()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_csv_source_client() -> CsvSourceClient:
    """Provide remote CSV client instance"""
    return CsvSourceClient()


def get_portfolio_repository() -> PortfolioRepository:
    """Provide the process-wide in-memory portfolio store"""
    return _portfolio_repository
