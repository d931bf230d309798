"""Human-readable explanation of which factors drove a client's risk score"""

from typing import List

from receivables_risk.utils.numbers import format_half_up

GOOD_STANDING = "Good standing - no significant risk factors identified."


def generate_risk_rationale(
    days_past_due: int,
    credit_utilization: int,
    reminders_count: int,
    avg_orders_60_days: float,
    risk_score: int,
) -> str:
    """
    Describe the risk drivers as short sentences.

    Thresholds are coarser than the scorer's normalization bands; this text is for skimming.
    `risk_score` is accepted for signature parity with the scorer and not used.
    """
    factors: List[str] = []

    if days_past_due >= 90:
        factors.append(f"Severely overdue ({days_past_due} days)")
    elif days_past_due >= 60:
        factors.append(f"Significantly overdue ({days_past_due} days)")
    elif days_past_due >= 30:
        factors.append(f"Overdue by {days_past_due} days")
    elif days_past_due > 0:
        factors.append(f"Slightly overdue ({days_past_due} days)")

    if credit_utilization >= 85:
        factors.append(f"Very high credit utilization ({credit_utilization}%)")
    elif credit_utilization >= 70:
        factors.append(f"High credit utilization ({credit_utilization}%)")
    elif credit_utilization >= 50:
        factors.append(f"Moderate credit utilization ({credit_utilization}%)")

    if reminders_count >= 3:
        factors.append(f"Multiple payment reminders sent ({reminders_count})")
    elif reminders_count >= 2:
        factors.append(f"{reminders_count} reminders sent")

    # Lower order frequency = higher risk
    if avg_orders_60_days < 5:
        factors.append(f"Very low order frequency ({format_half_up(avg_orders_60_days)} avg/60 days)")
    elif avg_orders_60_days < 10:
        factors.append(f"Below average order frequency ({format_half_up(avg_orders_60_days)} avg/60 days)")

    if not factors:
        return GOOD_STANDING

    return ". ".join(factors) + "."
