"""Portfolio-level summary metrics and list filtering over scored clients"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from receivables_risk.domain.models import ClientRecord, PortfolioSummary, RiskCategory
from receivables_risk.utils.date_utils import parse_date, to_naive_utc
from receivables_risk.utils.numbers import round_half_up


@dataclass
class ClientFilter:
    """Criteria for narrowing a client list; every set criterion must pass"""

    search: str = ""
    risk_category: str = "all"
    days_past_due_min: int = 0
    days_past_due_max: int = 180
    credit_utilization_min: int = 0
    credit_utilization_max: int = 100
    date_from: Optional[date] = None
    date_to: Optional[date] = None


def summarize_portfolio(clients: Sequence[ClientRecord]) -> PortfolioSummary:
    """
    Aggregate AR value, average score, category distribution and overdue buckets.

    Overdue buckets are disjoint: 90+, 60-89, 30-59 days.
    """
    total_ar = sum(c.invoice_amount for c in clients)
    avg_risk_score = round_half_up(sum(c.risk_score for c in clients) / len(clients)) if clients else 0

    category_counts = {category.value: 0 for category in RiskCategory}
    category_amounts = {category.value: 0.0 for category in RiskCategory}
    for client in clients:
        category_counts[client.risk_category.value] += 1
        category_amounts[client.risk_category.value] += client.invoice_amount

    overdue_buckets = {
        "90+": sum(1 for c in clients if c.days_past_due >= 90),
        "60-89": sum(1 for c in clients if 60 <= c.days_past_due < 90),
        "30-59": sum(1 for c in clients if 30 <= c.days_past_due < 60),
    }

    return PortfolioSummary(
        total_ar=round(total_ar, 2),
        avg_risk_score=avg_risk_score,
        high_risk_count=category_counts[RiskCategory.HIGH.value],
        active_clients=len(clients),
        category_counts=category_counts,
        category_amounts={k: round(v, 2) for k, v in category_amounts.items()},
        overdue_buckets=overdue_buckets,
    )


def _matches(client: ClientRecord, criteria: ClientFilter) -> bool:
    if criteria.search:
        needle = criteria.search.lower()
        haystacks = (client.name, client.email, client.phone_number)
        if not any(needle in value.lower() for value in haystacks):
            return False

    if criteria.risk_category != "all" and client.risk_category.value != criteria.risk_category:
        return False

    if not criteria.days_past_due_min <= client.days_past_due <= criteria.days_past_due_max:
        return False

    if not criteria.credit_utilization_min <= client.credit_utilization <= criteria.credit_utilization_max:
        return False

    if criteria.date_from or criteria.date_to:
        due = parse_date(client.due_date)
        if due is None:
            return False
        if criteria.date_from and due < to_naive_utc(criteria.date_from):
            return False
        if criteria.date_to and due > to_naive_utc(criteria.date_to):
            return False

    return True


def apply_filters(clients: Sequence[ClientRecord], criteria: ClientFilter) -> List[ClientRecord]:
    """Clients passing every criterion, in input order"""
    return [client for client in clients if _matches(client, criteria)]
