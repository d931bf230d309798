"""POST /v1/portfolios/{portfolio_id}/query - chat context for a free-text question"""

from fastapi import APIRouter, Depends, Request

from receivables_risk.api.v1.schemas import ClientSchema, QueryRequest, QueryResponse
from receivables_risk.api.v1.portfolios import load_portfolio
from receivables_risk.api.dependencies import get_portfolio_repository, get_request_id
from receivables_risk.infrastructure.storage.repositories import PortfolioRepository
from receivables_risk.domain.chat_context import build_chat_context
from receivables_risk.infrastructure.observability.metrics import record_query
from receivables_risk.infrastructure.observability.logging import log_query_filtered

router = APIRouter()


@router.post("/portfolios/{portfolio_id}/query", response_model=QueryResponse)
def query_portfolio(
    portfolio_id: str,
    request_body: QueryRequest,
    request: Request,
    repository: PortfolioRepository = Depends(get_portfolio_repository),
):
    """
    Select the clients relevant to a question and build the analyst system prompt.

    The caller forwards `system_prompt` plus the question to its chat model; this
    service never talks to the model itself.
    """
    portfolio = load_portfolio(repository, portfolio_id)
    context = build_chat_context(request_body.question, portfolio.clients)
    result = context.filter_result

    record_query(result)
    log_query_filtered(
        get_request_id(request),
        portfolio_id,
        result.rule,
        len(result.clients),
        result.was_truncated,
    )

    return QueryResponse(
        portfolio_id=portfolio_id,
        question=context.question,
        rule=result.rule,
        filter_description=result.description,
        total_matched=result.total_matched,
        was_truncated=result.was_truncated,
        clients=[ClientSchema.from_record(c) for c in result.clients],
        system_prompt=context.system_prompt,
    )
