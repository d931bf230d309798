"""Prometheus metrics for scoring volume, risk mix, and query routing"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from receivables_risk.domain.models import ClientRecord, FilterResult

# Scoring metrics
clients_scored_counter = Counter(
    "receivables_clients_scored_total",
    "Client records parsed and scored",
    ["category"],  # Low | Medium | High
)

portfolio_size_histogram = Histogram(
    "receivables_portfolio_size_clients",
    "Client rows per uploaded portfolio",
    buckets=[10, 50, 100, 500, 1000, 5000, 10000],
)

# Query metrics
relevance_rule_counter = Counter(
    "receivables_query_rule_total",
    "Chat questions answered by each relevance rule",
    ["rule"],
)

query_truncated_counter = Counter(
    "receivables_query_truncated_total",
    "Chat questions whose matching clients exceeded the context cap",
)

# CSV source metrics
csv_fetch_failures_counter = Counter(
    "csv_fetch_failures_total",
    "Failed remote CSV imports",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_portfolio(clients: Iterable[ClientRecord]) -> None:
    """Record risk mix of a freshly scored portfolio"""
    count = 0
    for client in clients:
        clients_scored_counter.labels(category=client.risk_category.value).inc()
        count += 1
    portfolio_size_histogram.observe(count)


def record_query(result: FilterResult) -> None:
    relevance_rule_counter.labels(rule=result.rule).inc()
    if result.was_truncated:
        query_truncated_counter.inc()
