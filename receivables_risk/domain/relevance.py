"""
Query relevance filter - picks a bounded, question-relevant subset of clients.

Keeps the context handed to a text generator small even for portfolios with
thousands of clients. Rules are tried in order and the first match wins; the
order matters (a named client beats any keyword bucket).
"""

import re
from typing import Callable, List, Optional, Sequence

from receivables_risk.domain.models import ClientRecord, FilterResult, RiskCategory

MAX_RECORDS = 200
MAX_NAME_MATCHES = 20
DEFAULT_SUPERLATIVE_COUNT = 10

CATEGORY_PATTERNS = [
    (re.compile(r"\bhigh[\s-]?risk\b"), RiskCategory.HIGH),
    (re.compile(r"\bmedium[\s-]?risk\b"), RiskCategory.MEDIUM),
    (re.compile(r"\blow[\s-]?risk\b"), RiskCategory.LOW),
]
OVERDUE_PATTERN = re.compile(r"\b(overdue|past\s*due|late|delinquent)\b")
OVERDUE_DAY_THRESHOLDS = (90, 60, 30)
UTILIZATION_PATTERN = re.compile(r"\b(utilization|credit\s*us|maxed|over[\s-]?limit)\b")
HIGH_SUPERLATIVE_PATTERN = re.compile(r"\b(top|worst|highest|riskiest)\b")
LOW_SUPERLATIVE_PATTERN = re.compile(r"\b(best|lowest|safest|healthiest)\b")
REMINDER_PATTERN = re.compile(r"\breminder")
NUMBER_PATTERN = re.compile(r"\b(\d+)\b")


def _by_risk_desc(clients: Sequence[ClientRecord]) -> List[ClientRecord]:
    return sorted(clients, key=lambda c: -c.risk_score)


def _bucket_result(filtered: Sequence[ClientRecord], label: str, rule: str) -> FilterResult:
    """Sort a keyword bucket by risk and cap it at MAX_RECORDS"""
    ranked = _by_risk_desc(filtered)
    truncated = len(ranked) > MAX_RECORDS

    if truncated:
        description = f"Showing top {MAX_RECORDS} of {len(ranked)} {label} clients (sorted by risk score)."
    else:
        description = f"All {len(ranked)} {label} client(s)."

    return FilterResult(
        clients=ranked[:MAX_RECORDS],
        description=description,
        total_matched=len(ranked),
        was_truncated=truncated,
        rule=rule,
    )


def _extract_number(text: str) -> Optional[int]:
    match = NUMBER_PATTERN.search(text)
    return int(match.group(1)) if match else None


def _mentions(question: str, value: str) -> bool:
    value = value.lower()
    return bool(value) and value in question


def match_names(question: str, clients: Sequence[ClientRecord]) -> List[ClientRecord]:
    """Clients whose (non-empty) name or id appears in the lowercased question"""
    return [c for c in clients if _mentions(question, c.name) or _mentions(question, c.id)]


def _superlative_result(
    clients: Sequence[ClientRecord],
    question: str,
    highest_first: bool,
) -> FilterResult:
    # Requested count is not capped at MAX_RECORDS
    count = _extract_number(question) or DEFAULT_SUPERLATIVE_COUNT
    key: Callable[[ClientRecord], int] = (lambda c: -c.risk_score) if highest_first else (lambda c: c.risk_score)
    ranked = sorted(clients, key=key)
    label = "highest" if highest_first else "lowest"

    return FilterResult(
        clients=ranked[:count],
        description=f"Top {count} {label}-risk clients.",
        total_matched=count,
        was_truncated=False,
        rule="top" if highest_first else "bottom",
    )


def filter_clients_for_query(question: str, clients: Sequence[ClientRecord]) -> FilterResult:
    """
    Select the clients most relevant to a free-text question.

    Rules (first match wins):
    1. Client name/ID mentioned (1-20 matches, returned as-is)
    2. "high/medium/low risk" -> that category
    3. "overdue/past due/late/delinquent" (+ optional 90/60/30) -> days past due
    4. "utilization/credit use/maxed/over-limit" -> utilization >= 70%
    5. "top/worst/highest/riskiest" -> N highest scores (default 10)
    6. "best/lowest/safest/healthiest" -> N lowest scores (default 10)
    7. "reminder" -> 2+ reminders
    8. Default -> highest scores, capped at MAX_RECORDS

    Never raises; any question (including "") falls through to the default rule.
    """
    q = question.lower()

    named = match_names(q, clients)
    if 0 < len(named) <= MAX_NAME_MATCHES:
        return FilterResult(
            clients=named,
            description=f"Showing {len(named)} client(s) matching the name/ID in the question.",
            total_matched=len(named),
            was_truncated=False,
            rule="name_match",
        )

    for pattern, category in CATEGORY_PATTERNS:
        if pattern.search(q):
            return _bucket_result(
                [c for c in clients if c.risk_category == category],
                f"{category.value} Risk",
                "risk_category",
            )

    if OVERDUE_PATTERN.search(q):
        for days in OVERDUE_DAY_THRESHOLDS:
            if re.search(rf"\b{days}\b", q):
                return _bucket_result(
                    [c for c in clients if c.days_past_due >= days],
                    f"{days}+ days overdue",
                    "overdue",
                )
        return _bucket_result([c for c in clients if c.days_past_due > 0], "all overdue", "overdue")

    if UTILIZATION_PATTERN.search(q):
        return _bucket_result(
            [c for c in clients if c.credit_utilization >= 70],
            "credit utilization ≥ 70%",
            "utilization",
        )

    if HIGH_SUPERLATIVE_PATTERN.search(q):
        return _superlative_result(clients, q, highest_first=True)

    if LOW_SUPERLATIVE_PATTERN.search(q):
        return _superlative_result(clients, q, highest_first=False)

    if REMINDER_PATTERN.search(q):
        return _bucket_result(
            [c for c in clients if c.reminders_count >= 2],
            "clients with 2+ reminders",
            "reminders",
        )

    # Default: highest-risk clients, capped
    ranked = _by_risk_desc(clients)
    total = len(clients)
    truncated = total > MAX_RECORDS
    if truncated:
        description = (
            f"Showing top {MAX_RECORDS} highest-risk clients out of {total} total (sorted by risk). "
            "Ask about a specific risk category, client name, or overdue range to see targeted results."
        )
    else:
        description = f"All {total} clients included."

    return FilterResult(
        clients=ranked[:MAX_RECORDS],
        description=description,
        total_matched=min(total, MAX_RECORDS),
        was_truncated=truncated,
        rule="default",
    )
