from datetime import date
from typing import Optional, Union

from dateutil import parser as date_parser

STATUS_ADEQUATE = "adequate"
STATUS_LOW = "low"
STATUS_CRITICAL = "critical"

DateLike = Union[date, str, None]


def calculate_inventory_status(current_stock: float, min_stock: float) -> str:
    """
    Classify a stock level against its reorder threshold.

    Empty stock is always critical. Otherwise stock at or below half the
    threshold is critical and stock at or below the threshold is low. A zero
    threshold therefore marks any positive stock as adequate, and negative
    stock (over-consumption) lands in critical.
    """
    if current_stock == 0:
        return STATUS_CRITICAL
    if current_stock <= min_stock * 0.5:
        return STATUS_CRITICAL
    if current_stock <= min_stock:
        return STATUS_LOW
    return STATUS_ADEQUATE


def _month_day(value: DateLike) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.strftime("%m%d")
    try:
        return date_parser.isoparse(value).strftime("%m%d")
    except (ValueError, OverflowError):
        return None


def format_display_id(document_id: str, when: DateLike) -> str:
    """#XXXX-MMDD built from the first four characters of the store id."""
    id_part = document_id[:4].upper()
    date_part = _month_day(when) or "0000"
    return f"#{id_part}-{date_part}"


def format_inventory_display_id(
    document_id: str,
    created_at: DateLike = None,
    last_restocked: DateLike = None,
    display_id: Optional[str] = None,
) -> str:
    if display_id:
        return display_id.upper()
    date_source = created_at if created_at not in (None, "") else last_restocked
    return format_display_id(document_id, date_source)


def format_sales_transaction_id(document_id: str, sale_date: DateLike) -> str:
    return format_display_id(document_id, sale_date)


def format_peso(amount: Optional[float]) -> str:
    if amount is None:
        return ""
    return f"₱{amount:,.2f}"
