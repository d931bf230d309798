"""Unit tests for the in-memory portfolio store"""

import pytest
from receivables_risk.domain.exceptions import PortfolioNotFoundError
from receivables_risk.infrastructure.storage.repositories import PortfolioRepository


def test_store_evicts_oldest_past_limit(as_of):
    repository = PortfolioRepository(max_portfolios=3)

    ids = [repository.create_portfolio([], as_of=as_of).portfolio_id for _ in range(5)]

    assert repository.count() == 3
    assert repository.find_portfolio(ids[0]) is None
    assert repository.find_portfolio(ids[1]) is None
    assert [repository.get_portfolio(i).portfolio_id for i in ids[2:]] == ids[2:]


def test_store_stays_bounded_under_many_uploads(as_of):
    repository = PortfolioRepository(max_portfolios=10)

    for _ in range(1000):
        repository.create_portfolio([], as_of=as_of)

    assert repository.count() == 10


def test_delete_portfolio(as_of, make_client):
    repository = PortfolioRepository()
    portfolio = repository.create_portfolio([make_client()], as_of=as_of)

    repository.delete_portfolio(portfolio.portfolio_id)

    assert repository.count() == 0
    with pytest.raises(PortfolioNotFoundError):
        repository.get_portfolio(portfolio.portfolio_id)


def test_delete_unknown_portfolio_raises():
    with pytest.raises(PortfolioNotFoundError):
        PortfolioRepository().delete_portfolio("missing")
