"""CSV parsing - turns uploaded invoice rows into scored client records"""

import csv
import io
import logging
from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional

from receivables_risk.domain.exceptions import EmptyPortfolioError
from receivables_risk.domain.models import ClientInput, ClientRecord
from receivables_risk.domain.scoring import assess_client
from receivables_risk.utils.date_utils import utc_now
from receivables_risk.utils.numbers import safe_float, safe_int

logger = logging.getLogger(__name__)

# Recognized headers (case-sensitive)
CSV_COLUMNS = (
    "CustomerID",
    "Name",
    "Email",
    "PhoneNumber",
    "InvoiceAmount",
    "InvoiceDate",
    "DueDate",
    "PaymentDate",
    "AvgOrders60Days",
    "RemindersCount",
    "CreditLimit",
    "CreditUsed",
)


def row_to_client_input(row: Dict[str, str], index: int) -> ClientInput:
    """Coerce one header-keyed row; missing text -> "", missing/bad numbers -> 0"""
    return ClientInput(
        id=row.get("CustomerID") or f"client-{index}",
        name=row.get("Name", ""),
        email=row.get("Email", ""),
        phone_number=row.get("PhoneNumber", ""),
        invoice_amount=safe_float(row.get("InvoiceAmount")),
        invoice_date=row.get("InvoiceDate", ""),
        due_date=row.get("DueDate", ""),
        payment_date=row.get("PaymentDate", ""),
        avg_orders_60_days=safe_float(row.get("AvgOrders60Days")),
        reminders_count=safe_int(row.get("RemindersCount")),
        credit_limit=safe_float(row.get("CreditLimit")),
        credit_used=safe_float(row.get("CreditUsed")),
    )


def parse_csv(csv_text: str, now: Optional[datetime] = None) -> List[ClientRecord]:
    """
    Parse CSV text (header row required) into scored client records.

    Quoted fields may contain commas. A leading byte order mark and blank lines are
    skipped. Malformed rows never raise; they degrade to documented defaults. Output
    keeps input row order.
    """
    if now is None:
        now = utc_now()

    # Excel exports often start with a UTF-8 byte order mark
    reader = csv.reader(io.StringIO(csv_text.lstrip("\ufeff").strip()))
    header = next(reader, None)
    if not header:
        return []
    columns = [name.strip() for name in header]

    records: List[ClientRecord] = []
    index = 0
    for values in reader:
        if not any(value.strip() for value in values):
            continue

        row = {
            column: values[i].strip() if i < len(values) else ""
            for i, column in enumerate(columns)
        }
        records.append(assess_client(row_to_client_input(row, index), now))
        index += 1

    return records


def parse_portfolio(csv_text: str, now: Optional[datetime] = None) -> List[ClientRecord]:
    """
    Parse an uploaded portfolio, rejecting files with no client rows.

    Raises:
        EmptyPortfolioError: CSV had no header or no data rows
    """
    records = parse_csv(csv_text, now)
    if not records:
        raise EmptyPortfolioError("CSV contains no client rows")

    categories = Counter(record.risk_category.value for record in records)
    logger.info(
        "Parsed %d client rows (high=%d, medium=%d, low=%d)",
        len(records),
        categories["High"],
        categories["Medium"],
        categories["Low"],
    )
    return records
