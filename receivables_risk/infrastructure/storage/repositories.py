"""In-memory storage for parsed portfolios (no persistence across restarts)"""

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from receivables_risk.config import settings
from receivables_risk.domain.exceptions import PortfolioNotFoundError
from receivables_risk.domain.models import ClientRecord
from receivables_risk.utils.date_utils import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Portfolio:
    """One parsed batch of clients, scored against `as_of`"""

    portfolio_id: str
    clients: List[ClientRecord]
    as_of: datetime
    created_at: datetime
    source: str  # "upload" or the import URL


class PortfolioRepository:
    """
    Repository for parsed portfolios.

    Holds at most `max_portfolios` batches; storing one more evicts the oldest.
    """

    def __init__(self, max_portfolios: Optional[int] = None):
        self.max_portfolios = max_portfolios or settings.max_portfolios
        self._portfolios: "OrderedDict[str, Portfolio]" = OrderedDict()
        self._lock = threading.Lock()

    def create_portfolio(
        self,
        clients: List[ClientRecord],
        as_of: datetime,
        source: str = "upload",
    ) -> Portfolio:
        """Store a scored batch under a new id"""
        portfolio = Portfolio(
            portfolio_id=str(uuid.uuid4()),
            clients=list(clients),
            as_of=as_of,
            created_at=utc_now(),
            source=source,
        )
        with self._lock:
            self._portfolios[portfolio.portfolio_id] = portfolio
            while len(self._portfolios) > self.max_portfolios:
                evicted_id, _ = self._portfolios.popitem(last=False)
                logger.info("Evicted portfolio %s (store limit %d)", evicted_id, self.max_portfolios)
        return portfolio

    def find_portfolio(self, portfolio_id: str) -> Optional[Portfolio]:
        with self._lock:
            return self._portfolios.get(portfolio_id)

    def get_portfolio(self, portfolio_id: str) -> Portfolio:
        """
        Fetch a stored portfolio.

        Raises:
            PortfolioNotFoundError: Unknown id
        """
        portfolio = self.find_portfolio(portfolio_id)
        if portfolio is None:
            raise PortfolioNotFoundError(f"Portfolio {portfolio_id} not found")
        return portfolio

    def delete_portfolio(self, portfolio_id: str) -> None:
        """
        Drop a stored portfolio.

        Raises:
            PortfolioNotFoundError: Unknown id
        """
        with self._lock:
            if self._portfolios.pop(portfolio_id, None) is None:
                raise PortfolioNotFoundError(f"Portfolio {portfolio_id} not found")

    def count(self) -> int:
        with self._lock:
            return len(self._portfolios)
