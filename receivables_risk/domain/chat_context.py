"""Prompt assembly for the conversational query layer.

The hosted chat model is an external text generator; this module only builds the
strings it consumes: a data summary of the relevant clients and the analyst
system prompt that embeds it.
"""

from typing import List, Sequence

from receivables_risk.domain.models import ChatContext, ClientRecord, FilterResult
from receivables_risk.domain.portfolio import summarize_portfolio
from receivables_risk.domain.relevance import filter_clients_for_query

SYSTEM_PROMPT_TEMPLATE = """You are an expert credit risk analyst assistant helping users analyze their accounts receivable data. You provide actionable insights about client risk, payment behaviors, and collection strategies.

## Current Data Context
{data_summary}

## Risk Scoring Methodology
The risk score (0-100) is calculated using a weighted formula:
- Days Past Due (50% weight): 0-90+ days normalized to 0-50 points
- Credit Utilization (25% weight): 0-85%+ normalized to 0-25 points
- Reminders Count (15% weight): 0-3+ reminders normalized to 0-15 points
- Average Orders 60 Days (10% weight): Lower orders = higher risk, normalized to 0-10 points

## Risk Category Thresholds
- High Risk: Score >= 65 (requires immediate attention)
- Medium Risk: Score 35-64 (monitor closely)
- Low Risk: Score < 35 (healthy accounts)

## Your Responsibilities
1. Answer questions about client risk patterns, overdue payments, and credit utilization
2. Provide specific recommendations for collection prioritization
3. Explain why specific clients have their risk scores
4. Identify trends and patterns in the data
5. Suggest actionable next steps for risk mitigation

## Response Guidelines
- Be concise and actionable
- Use specific numbers from the data when relevant
- Prioritize insights that help with collection decisions
- When asked "why" about a risk score, explain which factors contributed most
- If you don't have enough information to answer precisely, say so and explain what data would be needed"""


def format_client_line(client: ClientRecord) -> str:
    return (
        f"- {client.id} | {client.name or 'Unknown'} | score {client.risk_score} ({client.risk_category.value}) | "
        f"{client.days_past_due} days past due | utilization {client.credit_utilization}% | "
        f"{client.reminders_count} reminders | {client.avg_orders_60_days:.1f} orders/60d | "
        f"invoice ${client.invoice_amount:,.2f} | {client.risk_rationale}"
    )


def build_data_summary(result: FilterResult, clients: Sequence[ClientRecord]) -> str:
    """Portfolio totals over all clients, then the filtered client lines"""
    summary = summarize_portfolio(clients)
    counts = summary.category_counts

    lines: List[str] = [
        f"Portfolio: {summary.active_clients} clients, total AR ${summary.total_ar:,.2f}, "
        f"average risk score {summary.avg_risk_score}/100.",
        f"Risk distribution: High {counts['High']}, Medium {counts['Medium']}, Low {counts['Low']}.",
        f"Overdue: 90+ days {summary.overdue_buckets['90+']}, 60-89 days {summary.overdue_buckets['60-89']}, "
        f"30-59 days {summary.overdue_buckets['30-59']}.",
        "",
        result.description,
    ]
    lines.extend(format_client_line(client) for client in result.clients)
    return "\n".join(lines)


def build_system_prompt(data_summary: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(data_summary=data_summary)


def build_chat_context(question: str, clients: Sequence[ClientRecord]) -> ChatContext:
    """Filter clients for the question and render the prompt strings"""
    result = filter_clients_for_query(question, clients)
    data_summary = build_data_summary(result, clients)

    return ChatContext(
        question=question,
        filter_result=result,
        data_summary=data_summary,
        system_prompt=build_system_prompt(data_summary),
    )
