"""Risk scoring engine - core business logic for receivables credit risk"""

import math
from datetime import datetime
from typing import Dict, NamedTuple, Optional

from receivables_risk.domain.models import ClientInput, ClientRecord, RiskCategory
from receivables_risk.domain.rationale import generate_risk_rationale
from receivables_risk.utils.date_utils import ceil_days_between, parse_date, to_naive_utc, utc_now
from receivables_risk.utils.numbers import round_half_up


class NormalizationRange(NamedTuple):
    min: float
    max: float
    inverse: bool = False


# Domain ranges; values outside are clamped to the nearest bound
NORMALIZATION: Dict[str, NormalizationRange] = {
    "days_past_due": NormalizationRange(0, 90),
    "credit_utilization": NormalizationRange(0, 85),
    "reminders_count": NormalizationRange(0, 3),
    "avg_orders_60_days": NormalizationRange(5, 20, inverse=True),  # fewer orders = riskier
}

# Fixed weights, must sum to 1.0
WEIGHTS: Dict[str, float] = {
    "days_past_due": 0.50,
    "credit_utilization": 0.25,
    "reminders_count": 0.15,
    "avg_orders_60_days": 0.10,
}

HIGH_RISK_THRESHOLD = 65
MEDIUM_RISK_THRESHOLD = 35

# Reported utilization (%) when used/limit overflows a float
UTILIZATION_OVERFLOW = 1_000_000_000


def normalize(value: float, min_value: float, max_value: float, inverse: bool = False) -> int:
    """
    Clamp value into [min_value, max_value] and rescale linearly to 0-100.

    With inverse=True the scale is flipped so that low raw values score high.
    A degenerate range (max == min) acts as a step at the bound instead of dividing by zero.
    """
    clamped = max(min_value, min(value, max_value))

    if max_value == min_value:
        scaled = 100.0 if value >= max_value else 0.0
    else:
        scaled = (clamped - min_value) / (max_value - min_value) * 100

    if inverse:
        scaled = 100 - scaled

    return round_half_up(scaled)


def calculate_days_past_due(due_date: str, payment_date: str, now: datetime) -> int:
    """
    Days between due date and the effective payment moment, floored at 0.

    An empty or unparseable payment date means "unpaid", so `now` is used instead.
    An unparseable due date yields 0.
    """
    due = parse_date(due_date)
    if due is None:
        return 0

    payment = parse_date(payment_date) or to_naive_utc(now)

    # Negative means paid early
    return max(0, ceil_days_between(due, payment))


def calculate_credit_utilization(credit_used: float, credit_limit: float) -> int:
    """
    Percentage of credit limit drawn; no limit counts as fully utilized. Not capped at 100.

    A ratio that overflows to infinity (e.g. 1e306 used on a 0.01 limit) saturates at
    UTILIZATION_OVERFLOW, which still normalizes to the maximum sub-score.
    """
    if credit_limit <= 0:
        return 100
    ratio = credit_used / credit_limit * 100
    if not math.isfinite(ratio):
        return UTILIZATION_OVERFLOW if ratio > 0 else -UTILIZATION_OVERFLOW
    return round_half_up(ratio)


def calculate_risk_score(
    days_past_due: int,
    credit_utilization: int,
    reminders_count: int,
    avg_orders_60_days: float,
) -> int:
    """
    Weighted risk score from 0 (lowest risk) to 100 (highest risk).

    Scoring weights:
    - 50%: Days past due (0-90)
    - 25%: Credit utilization (0-85%)
    - 15%: Payment reminders sent (0-3)
    - 10%: Average orders in last 60 days (5-20, inverted)
    """
    dpd = normalize(days_past_due, *NORMALIZATION["days_past_due"])
    cu = normalize(credit_utilization, *NORMALIZATION["credit_utilization"])
    rc = normalize(reminders_count, *NORMALIZATION["reminders_count"])
    ao = normalize(avg_orders_60_days, *NORMALIZATION["avg_orders_60_days"])

    score = (
        (dpd * WEIGHTS["days_past_due"])
        + (cu * WEIGHTS["credit_utilization"])
        + (rc * WEIGHTS["reminders_count"])
        + (ao * WEIGHTS["avg_orders_60_days"])
    )

    return round_half_up(score)


def determine_risk_category(score: int) -> RiskCategory:
    """
    Map risk score to a category band (lower bound inclusive).

    - 65+:   High
    - 35-64: Medium
    - <35:   Low
    """
    if score >= HIGH_RISK_THRESHOLD:
        return RiskCategory.HIGH
    elif score >= MEDIUM_RISK_THRESHOLD:
        return RiskCategory.MEDIUM
    else:
        return RiskCategory.LOW


def assess_client(client: ClientInput, now: Optional[datetime] = None) -> ClientRecord:
    """
    Main entry point: derive metrics, score, category and rationale for one client.

    `now` is the moment unpaid invoices are measured against; pass it explicitly to
    get reproducible results.
    """
    if now is None:
        now = utc_now()

    days_past_due = calculate_days_past_due(client.due_date, client.payment_date, now)
    credit_utilization = calculate_credit_utilization(client.credit_used, client.credit_limit)
    risk_score = calculate_risk_score(
        days_past_due,
        credit_utilization,
        client.reminders_count,
        client.avg_orders_60_days,
    )
    risk_category = determine_risk_category(risk_score)
    risk_rationale = generate_risk_rationale(
        days_past_due,
        credit_utilization,
        client.reminders_count,
        client.avg_orders_60_days,
        risk_score,
    )

    return ClientRecord(
        id=client.id,
        name=client.name,
        email=client.email,
        phone_number=client.phone_number,
        invoice_amount=client.invoice_amount,
        invoice_date=client.invoice_date,
        due_date=client.due_date,
        payment_date=client.payment_date,
        avg_orders_60_days=client.avg_orders_60_days,
        reminders_count=client.reminders_count,
        credit_limit=client.credit_limit,
        credit_used=client.credit_used,
        days_past_due=days_past_due,
        credit_utilization=credit_utilization,
        risk_score=risk_score,
        risk_category=risk_category,
        risk_rationale=risk_rationale,
    )
