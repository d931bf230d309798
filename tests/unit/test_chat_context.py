"""Unit tests for chat prompt assembly"""

from receivables_risk.domain.chat_context import build_chat_context, build_data_summary, build_system_prompt
from receivables_risk.domain.parsing import parse_csv
from receivables_risk.domain.relevance import filter_clients_for_query


def test_data_summary_lists_portfolio_totals_and_selected_clients(sample_csv, as_of):
    clients = parse_csv(sample_csv, now=as_of)
    result = filter_clients_for_query("high risk", clients)

    summary = build_data_summary(result, clients)

    assert "Portfolio: 8 clients, total AR $81,860.74" in summary
    assert "Risk distribution: High 3, Medium 2, Low 3." in summary
    assert result.description in summary
    client_lines = [line for line in summary.splitlines() if line.startswith("- ")]
    assert len(client_lines) == 3
    assert client_lines[0].startswith("- C001 | Acme Corp | score 100 (High)")
    assert "Severely overdue (91 days)" in client_lines[0]


def test_system_prompt_embeds_summary_and_methodology():
    prompt = build_system_prompt("DATA BLOCK {not a placeholder}")

    assert "## Current Data Context\nDATA BLOCK {not a placeholder}" in prompt
    assert "Days Past Due (50% weight)" in prompt
    assert "High Risk: Score >= 65" in prompt


def test_build_chat_context_routes_question(sample_csv, as_of):
    clients = parse_csv(sample_csv, now=as_of)

    context = build_chat_context("Why is Initech medium risk?", clients)

    assert context.question == "Why is Initech medium risk?"
    assert context.filter_result.rule == "name_match"
    assert [c.id for c in context.filter_result.clients] == ["C003"]
    assert context.data_summary in context.system_prompt
    assert "- C003 | Initech" in context.system_prompt
