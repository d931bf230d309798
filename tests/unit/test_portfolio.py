"""Unit tests for portfolio summary metrics and list filters"""

import pytest
from datetime import date
from receivables_risk.domain.parsing import parse_csv
from receivables_risk.domain.portfolio import ClientFilter, apply_filters, summarize_portfolio


@pytest.fixture
def clients(sample_csv, as_of):
    return parse_csv(sample_csv, now=as_of)


def test_summarize_portfolio(clients):
    summary = summarize_portfolio(clients)

    assert summary.active_clients == 8
    assert summary.total_ar == pytest.approx(81860.74)
    assert summary.high_risk_count == 3
    assert summary.category_counts == {"Low": 3, "Medium": 2, "High": 3}
    assert summary.category_amounts["High"] == pytest.approx(12500.00 + 32000.00 + 760.25)
    assert summary.overdue_buckets == {"90+": 1, "60-89": 1, "30-59": 2}
    assert 0 <= summary.avg_risk_score <= 100


def test_summarize_empty_portfolio():
    summary = summarize_portfolio([])

    assert summary.active_clients == 0
    assert summary.avg_risk_score == 0
    assert summary.total_ar == 0
    assert summary.category_counts == {"Low": 0, "Medium": 0, "High": 0}


def test_summary_average_rounds_half_up(make_client):
    # Scores 3 and 50 -> 26.5 -> 27
    clients = [
        make_client(id="A"),
        make_client(id="B", due_date="2024-01-01", payment_date="2024-03-31", credit_used=0, avg_orders_60_days=20),
    ]
    assert [c.risk_score for c in clients] == [3, 50]

    assert summarize_portfolio(clients).avg_risk_score == 27


def test_default_filter_keeps_everyone_within_default_ranges(clients):
    # C008 has 100% utilization (no limit), still inside the 0-100 default
    assert len(apply_filters(clients, ClientFilter())) == 8


def test_filter_search_matches_name_email_or_phone(clients):
    assert [c.id for c in apply_filters(clients, ClientFilter(search="ACME"))] == ["C001"]
    assert [c.id for c in apply_filters(clients, ClientFilter(search="globex.example"))] == ["C002"]
    assert [c.id for c in apply_filters(clients, ClientFilter(search="555-0107"))] == ["C007"]


def test_filter_by_category(clients):
    result = apply_filters(clients, ClientFilter(risk_category="Medium"))

    assert [c.id for c in result] == ["C003", "C007"]


def test_filter_by_days_past_due_range(clients):
    result = apply_filters(clients, ClientFilter(days_past_due_min=30, days_past_due_max=60))

    assert [c.id for c in result] == ["C003", "C008"]


def test_filter_by_utilization_range(clients):
    result = apply_filters(clients, ClientFilter(credit_utilization_min=70, credit_utilization_max=95))

    assert [c.id for c in result] == ["C001", "C003", "C006"]


def test_filter_by_due_date_range(clients):
    result = apply_filters(clients, ClientFilter(date_from=date(2024, 3, 1), date_to=date(2024, 3, 31)))

    assert [c.id for c in result] == ["C004", "C005", "C007"]


def test_date_filter_excludes_unparseable_due_dates(make_client):
    clients = [make_client(id="bad", due_date="soon"), make_client(id="ok", due_date="2024-01-31")]

    result = apply_filters(clients, ClientFilter(date_from=date(2024, 1, 1)))

    assert [c.id for c in result] == ["ok"]


def test_filters_combine(clients):
    criteria = ClientFilter(search="example", risk_category="High", days_past_due_min=60)

    assert [c.id for c in apply_filters(clients, criteria)] == ["C001", "C006"]
