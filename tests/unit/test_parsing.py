"""Unit tests for CSV parsing into scored client records"""

import pytest
from receivables_risk.domain.exceptions import EmptyPortfolioError
from receivables_risk.domain.models import RiskCategory
from receivables_risk.domain.parsing import parse_csv, parse_portfolio
from receivables_risk.domain.scoring import UTILIZATION_OVERFLOW

HEADER = (
    "CustomerID,Name,Email,PhoneNumber,InvoiceAmount,InvoiceDate,DueDate,PaymentDate,"
    "AvgOrders60Days,RemindersCount,CreditLimit,CreditUsed"
)


def test_parse_sample_csv_keeps_row_order(sample_csv, as_of):
    records = parse_csv(sample_csv, now=as_of)

    assert [r.id for r in records] == ["C001", "C002", "C003", "C004", "C005", "C006", "C007", "C008"]


def test_parse_sample_csv_scores(sample_csv, as_of):
    records = {r.id: r for r in parse_csv(sample_csv, now=as_of)}

    acme = records["C001"]
    assert acme.days_past_due == 91
    assert acme.credit_utilization == 90
    assert acme.risk_score == 100
    assert acme.risk_category == RiskCategory.HIGH

    globex = records["C002"]
    assert globex.days_past_due == 0
    assert globex.risk_score == 6
    assert globex.risk_category == RiskCategory.LOW

    assert records["C003"].risk_score == 64
    assert records["C003"].risk_category == RiskCategory.MEDIUM

    # No credit limit -> 100% utilization
    assert records["C008"].credit_utilization == 100
    assert records["C008"].risk_category == RiskCategory.HIGH


def test_parse_quoted_comma_in_name(sample_csv, as_of):
    records = {r.id: r for r in parse_csv(sample_csv, now=as_of)}

    umbrella = records["C004"]
    assert umbrella.name == "Umbrella, Inc."
    assert umbrella.email == "ar@umbrella.example"
    assert umbrella.days_past_due == 18
    assert umbrella.credit_utilization == 52


def test_parse_missing_columns_use_defaults(as_of):
    records = parse_csv("Name,InvoiceAmount\nLonely Client,250\n", now=as_of)

    assert len(records) == 1
    record = records[0]
    assert record.id == "client-0"
    assert record.name == "Lonely Client"
    assert record.email == ""
    assert record.invoice_amount == 250.0
    assert record.reminders_count == 0
    assert record.days_past_due == 0
    # No credit limit column -> treated as no limit
    assert record.credit_utilization == 100


def test_parse_missing_ids_are_positional(as_of):
    csv_text = f"{HEADER}\n,A,,,,,,,,,,\n,B,,,,,,,,,,\n"

    records = parse_csv(csv_text, now=as_of)

    assert [r.id for r in records] == ["client-0", "client-1"]


def test_parse_malformed_numbers_default_to_zero(as_of):
    csv_text = f"{HEADER}\nC1,Bad Data,,,abc,2024-01-01,2024-01-31,2024-01-31,NaN,lots,inf,12x\n"

    record = parse_csv(csv_text, now=as_of)[0]

    assert record.invoice_amount == 0.0
    assert record.avg_orders_60_days == 0.0
    assert record.reminders_count == 0
    assert record.credit_limit == 0.0
    assert record.credit_used == 0.0
    assert isinstance(record.risk_score, int)
    assert 0 <= record.risk_score <= 100


def test_parse_decimal_reminders_truncates(as_of):
    csv_text = f"{HEADER}\nC1,X,,,100,2024-01-01,2024-01-31,2024-01-31,10,2.7,1000,100\n"

    assert parse_csv(csv_text, now=as_of)[0].reminders_count == 2


def test_parse_short_rows_and_blank_lines(as_of):
    csv_text = f"{HEADER}\r\nC1,Short Row\r\n\r\nC2,Another,,,50\r\n"

    records = parse_csv(csv_text, now=as_of)

    assert [r.id for r in records] == ["C1", "C2"]
    assert records[0].due_date == ""
    assert records[1].invoice_amount == 50.0


def test_parse_strips_header_whitespace(as_of):
    records = parse_csv(" CustomerID , Name \n C9 , Spaced Out \n", now=as_of)

    assert records[0].id == "C9"
    assert records[0].name == "Spaced Out"


def test_parse_empty_text_returns_no_records(as_of):
    assert parse_csv("", now=as_of) == []
    assert parse_csv(HEADER, now=as_of) == []


def test_parse_portfolio_rejects_empty_csv(as_of):
    with pytest.raises(EmptyPortfolioError):
        parse_portfolio(HEADER + "\n", now=as_of)


def test_parse_is_deterministic_for_fixed_now(sample_csv, as_of):
    assert parse_csv(sample_csv, now=as_of) == parse_csv(sample_csv, now=as_of)


def test_parse_overflowing_utilization_does_not_abort_batch(as_of):
    csv_text = (
        f"{HEADER}\n"
        "C1,Big Spender,,,100,2024-01-01,2024-01-31,2024-01-31,10,0,0.01,1e306\n"
        "C2,Normal,,,100,2024-01-01,2024-01-31,2024-01-31,10,0,1000,100\n"
    )

    records = parse_csv(csv_text, now=as_of)

    assert [r.id for r in records] == ["C1", "C2"]
    assert records[0].credit_utilization == UTILIZATION_OVERFLOW
    # Utilization sub-score saturates at 100: 0.25*100 + 0.10*67 = 31.7
    assert records[0].risk_score == 32
    assert records[1].credit_utilization == 10


def test_parse_strips_leading_byte_order_mark(sample_csv, as_of):
    records = parse_csv("\ufeff" + sample_csv, now=as_of)

    assert [r.id for r in records][:2] == ["C001", "C002"]
    assert records[0].name == "Acme Corp"
