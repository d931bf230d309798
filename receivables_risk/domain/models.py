"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class RiskCategory(str, Enum):
    """Coarse three-band classification of a risk score"""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class ClientInput:
    """Raw fields of one CSV row, after type coercion"""

    id: str
    name: str = ""
    email: str = ""
    phone_number: str = ""
    invoice_amount: float = 0.0
    invoice_date: str = ""
    due_date: str = ""
    payment_date: str = ""  # empty = unpaid as of now
    avg_orders_60_days: float = 0.0
    reminders_count: int = 0
    credit_limit: float = 0.0
    credit_used: float = 0.0


@dataclass(frozen=True)
class ClientRecord:
    """Client invoice relationship with its derived risk fields.

    Build through ``assess_client`` so derived fields always agree with the raw inputs.
    """

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

    # Derived
    days_past_due: int
    credit_utilization: int
    risk_score: int
    risk_category: RiskCategory
    risk_rationale: str


@dataclass
class FilterResult:
    """Bounded subset of clients selected for a free-text question"""

    clients: List[ClientRecord]
    description: str
    total_matched: int
    was_truncated: bool
    rule: str  # name_match | risk_category | overdue | utilization | top | bottom | reminders | default


@dataclass
class PortfolioSummary:
    """Aggregate metrics over a batch of clients"""

    total_ar: float
    avg_risk_score: int
    high_risk_count: int
    active_clients: int
    category_counts: Dict[str, int] = field(default_factory=dict)
    category_amounts: Dict[str, float] = field(default_factory=dict)
    overdue_buckets: Dict[str, int] = field(default_factory=dict)


@dataclass
class ChatContext:
    """Everything a downstream text generator needs to answer one question"""

    question: str
    filter_result: FilterResult
    data_summary: str
    system_prompt: str
