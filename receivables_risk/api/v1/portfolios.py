"""/v1/portfolios - upload, import, and browse scored client portfolios"""

import time
import logging
from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from receivables_risk.api.v1.schemas import (
    ClientListResponse,
    ClientSchema,
    PortfolioImportRequest,
    PortfolioResponse,
    PortfolioUploadRequest,
    SummarySchema,
)
from receivables_risk.api.dependencies import get_csv_source_client, get_portfolio_repository, get_request_id
from receivables_risk.infrastructure.clients.csv_source import CsvSourceClient
from receivables_risk.infrastructure.storage.repositories import Portfolio, PortfolioRepository
from receivables_risk.domain.parsing import parse_portfolio
from receivables_risk.domain.portfolio import ClientFilter, apply_filters, summarize_portfolio
from receivables_risk.domain.exceptions import DataSourceError, EmptyPortfolioError, PortfolioNotFoundError
from receivables_risk.infrastructure.observability.metrics import record_portfolio, csv_fetch_failures_counter
from receivables_risk.infrastructure.observability.logging import log_portfolio_scored
from receivables_risk.utils.date_utils import to_naive_utc, utc_now

router = APIRouter()


def portfolio_response(portfolio: Portfolio) -> PortfolioResponse:
    return PortfolioResponse(
        portfolio_id=portfolio.portfolio_id,
        client_count=len(portfolio.clients),
        as_of=portfolio.as_of.isoformat(),
        created_at=portfolio.created_at.isoformat(),
        source=portfolio.source,
        summary=SummarySchema.from_summary(summarize_portfolio(portfolio.clients)),
    )


def load_portfolio(repository: PortfolioRepository, portfolio_id: str) -> Portfolio:
    """Fetch a portfolio or raise 404"""
    try:
        return repository.get_portfolio(portfolio_id)
    except PortfolioNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def score_and_store(
    csv_text: str,
    as_of: Optional[datetime],
    source: str,
    repository: PortfolioRepository,
    request_id: str,
) -> PortfolioResponse:
    """
    Parse, score and store a CSV portfolio.

    Flow:
    1. Freeze "now" (request value or current time) for days-past-due
    2. Parse + score every row
    3. Store batch in memory
    4. Record metrics and logs
    """
    start_time = time.time()
    as_of = to_naive_utc(as_of) if as_of else utc_now()

    try:
        clients = parse_portfolio(csv_text, now=as_of)
    except EmptyPortfolioError as e:
        logging.warning(f"Empty portfolio: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    portfolio = repository.create_portfolio(clients, as_of=as_of, source=source)
    response = portfolio_response(portfolio)

    duration_ms = (time.time() - start_time) * 1000
    record_portfolio(clients)
    log_portfolio_scored(
        request_id,
        portfolio.portfolio_id,
        len(clients),
        response.summary.high_risk_count,
        duration_ms,
    )

    return response


@router.post("/portfolios", response_model=PortfolioResponse, status_code=201)
def upload_portfolio(
    request_body: PortfolioUploadRequest,
    request: Request,
    repository: PortfolioRepository = Depends(get_portfolio_repository),
):
    """Score an uploaded CSV export and keep it for later queries."""
    return score_and_store(
        request_body.csv_text,
        request_body.as_of,
        "upload",
        repository,
        get_request_id(request),
    )


@router.post("/portfolios/import", response_model=PortfolioResponse, status_code=201)
async def import_portfolio(
    request_body: PortfolioImportRequest,
    request: Request,
    repository: PortfolioRepository = Depends(get_portfolio_repository),
    csv_client: CsvSourceClient = Depends(get_csv_source_client),
):
    """Fetch a CSV export from a remote URL, then score and store it."""
    request_id = get_request_id(request)

    try:
        csv_text = await csv_client.fetch_csv(request_body.url)
    except DataSourceError as e:
        csv_fetch_failures_counter.inc()
        logging.error(f"CSV source error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="CSV source unavailable")

    return score_and_store(csv_text, request_body.as_of, request_body.url, repository, request_id)


@router.get("/portfolios/{portfolio_id}", response_model=PortfolioResponse)
def get_portfolio(
    portfolio_id: str,
    repository: PortfolioRepository = Depends(get_portfolio_repository),
):
    """Portfolio metadata and summary metrics."""
    return portfolio_response(load_portfolio(repository, portfolio_id))


@router.delete("/portfolios/{portfolio_id}", status_code=204)
def delete_portfolio(
    portfolio_id: str,
    request: Request,
    repository: PortfolioRepository = Depends(get_portfolio_repository),
):
    """Discard a stored portfolio and its client records."""
    try:
        repository.delete_portfolio(portfolio_id)
    except PortfolioNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logging.info(f"Deleted portfolio {portfolio_id}", extra={"request_id": get_request_id(request)})
    return Response(status_code=204)


@router.get("/portfolios/{portfolio_id}/clients", response_model=ClientListResponse)
def list_clients(
    portfolio_id: str,
    search: str = Query("", description="Substring of name, email or phone"),
    risk_category: str = Query("all", pattern="^(all|Low|Medium|High)$"),
    days_past_due_min: int = Query(0, ge=0),
    days_past_due_max: int = Query(180, ge=0),
    credit_utilization_min: int = Query(0, ge=0),
    credit_utilization_max: int = Query(100, ge=0),
    date_from: Optional[date] = Query(None, description="Earliest due date"),
    date_to: Optional[date] = Query(None, description="Latest due date"),
    repository: PortfolioRepository = Depends(get_portfolio_repository),
):
    """
    List scored clients in upload order, narrowed by optional filters.

    Defaults mirror the dashboard filter panel (0-180 days past due, 0-100% utilization).
    """
    portfolio = load_portfolio(repository, portfolio_id)
    criteria = ClientFilter(
        search=search,
        risk_category=risk_category,
        days_past_due_min=days_past_due_min,
        days_past_due_max=days_past_due_max,
        credit_utilization_min=credit_utilization_min,
        credit_utilization_max=credit_utilization_max,
        date_from=date_from,
        date_to=date_to,
    )
    clients = apply_filters(portfolio.clients, criteria)

    return ClientListResponse(
        portfolio_id=portfolio_id,
        total=len(clients),
        clients=[ClientSchema.from_record(c) for c in clients],
    )
