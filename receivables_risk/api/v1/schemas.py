"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, List, Optional

from receivables_risk.domain.models import ClientRecord, PortfolioSummary


class PortfolioUploadRequest(BaseModel):
    """Request body for POST /v1/portfolios"""

    csv_text: str = Field(..., min_length=1, description="CSV export with a header row")
    as_of: Optional[datetime] = Field(None, description="Moment unpaid invoices are measured against (default: now)")


class PortfolioImportRequest(BaseModel):
    """Request body for POST /v1/portfolios/import"""

    url: str = Field(..., min_length=1, description="HTTP(S) URL serving the CSV export")
    as_of: Optional[datetime] = None


class QueryRequest(BaseModel):
    """Request body for POST /v1/portfolios/{portfolio_id}/query"""

    question: str = Field("", description="Free-text question from the chat user")


class ClientSchema(BaseModel):
    """Scored client record"""

    id: str
    name: str
    email: str
    phone_number: str
    invoice_amount: float
    invoice_date: str
    due_date: str
    payment_date: str
    avg_orders_60_days: float
    reminders_count: int
    credit_limit: float
    credit_used: float
    days_past_due: int
    credit_utilization: int
    risk_score: int
    risk_category: str
    risk_rationale: str

    @classmethod
    def from_record(cls, record: ClientRecord) -> "ClientSchema":
        return cls(
            id=record.id,
            name=record.name,
            email=record.email,
            phone_number=record.phone_number,
            invoice_amount=record.invoice_amount,
            invoice_date=record.invoice_date,
            due_date=record.due_date,
            payment_date=record.payment_date,
            avg_orders_60_days=record.avg_orders_60_days,
            reminders_count=record.reminders_count,
            credit_limit=record.credit_limit,
            credit_used=record.credit_used,
            days_past_due=record.days_past_due,
            credit_utilization=record.credit_utilization,
            risk_score=record.risk_score,
            risk_category=record.risk_category.value,
            risk_rationale=record.risk_rationale,
        )


class SummarySchema(BaseModel):
    """Portfolio-level metrics"""

    total_ar: float
    avg_risk_score: int
    high_risk_count: int
    active_clients: int
    category_counts: Dict[str, int]
    category_amounts: Dict[str, float]
    overdue_buckets: Dict[str, int]

    @classmethod
    def from_summary(cls, summary: PortfolioSummary) -> "SummarySchema":
        return cls(
            total_ar=summary.total_ar,
            avg_risk_score=summary.avg_risk_score,
            high_risk_count=summary.high_risk_count,
            active_clients=summary.active_clients,
            category_counts=summary.category_counts,
            category_amounts=summary.category_amounts,
            overdue_buckets=summary.overdue_buckets,
        )


class PortfolioResponse(BaseModel):
    """Response for portfolio creation and GET /v1/portfolios/{portfolio_id}"""

    portfolio_id: str
    client_count: int
    as_of: str
    created_at: str
    source: str
    summary: SummarySchema


class ClientListResponse(BaseModel):
    """Response for GET /v1/portfolios/{portfolio_id}/clients"""

    portfolio_id: str
    total: int
    clients: List[ClientSchema]


class QueryResponse(BaseModel):
    """Response for POST /v1/portfolios/{portfolio_id}/query"""

    portfolio_id: str
    question: str
    rule: str
    filter_description: str
    total_matched: int
    was_truncated: bool
    clients: List[ClientSchema]
    system_prompt: str
