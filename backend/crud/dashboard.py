"""
Recent-activity feed for the dashboard.

Like the notification feed it is assembled per request: recent rooster
arrivals and sales, one summary line for stock alerts and one for flock
health. A source that fails to load is logged and skipped.
"""
import logging
from datetime import timedelta
from typing import Callable, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.inventory_items import InventoryItem
from models.roosters import Rooster
from models.sales_transactions import SalesTransaction
from utils.formatting import STATUS_CRITICAL, STATUS_LOW, format_peso
from utils.permissions import DASHBOARD_POLICY, assert_permission
from utils.time_utils import ensure_aware, format_time_ago, now

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=30)
ROOSTER_LIMIT = 3
SALES_LIMIT = 2
FEED_LIMIT = 10


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def _activity(action: str, detail: str, when, icon: str, reference) -> Dict:
    when = ensure_aware(when)
    return {
        "action": action,
        "detail": detail,
        "time": format_time_ago(when, reference),
        "timestamp": int(when.timestamp() * 1000),
        "icon": icon,
    }


def _new_roosters(db: Session, reference) -> List[Dict]:
    since = (reference - RECENT_WINDOW).date()
    roosters = (
        db.query(Rooster)
        .filter(Rooster.date_added >= since)
        .order_by(Rooster.date_added.desc())
        .limit(ROOSTER_LIMIT)
        .all()
    )
    return [
        _activity("New rooster added", f"{rooster.breed} breed - {rooster.id}", rooster.date_added, "Bird", reference)
        for rooster in roosters
    ]


def _recent_sales(db: Session, reference) -> List[Dict]:
    since = (reference - RECENT_WINDOW).date()
    sales = (
        db.query(SalesTransaction)
        .filter(SalesTransaction.date >= since)
        .order_by(SalesTransaction.date.desc())
        .limit(SALES_LIMIT)
        .all()
    )
    return [
        _activity("Sale completed", f"{sale.breed} breed - {format_peso(sale.amount)}", sale.date, "PhilippinePeso", reference)
        for sale in sales
    ]


def _inventory_alert(db: Session, reference) -> List[Dict]:
    items = db.query(InventoryItem).filter(InventoryItem.status.in_([STATUS_LOW, STATUS_CRITICAL])).all()
    if not items:
        return []

    critical = sum(1 for item in items if item.status == STATUS_CRITICAL)
    low = len(items) - critical
    if critical:
        summary = _plural(critical, "critical item")
        if low:
            summary += f" and {_plural(low, 'low stock item')}"
    else:
        summary = _plural(low, "low stock item")

    # Items never restocked count as alerting right now
    latest = max(ensure_aware(item.last_restocked) if item.last_restocked else reference for item in items)
    return [_activity("Inventory alert", f"Stock below threshold: {summary}", latest, "Package", reference)]


def _health_check(db: Session, reference) -> List[Dict]:
    quarantined = db.query(Rooster).filter(Rooster.status == "Quarantine").count()
    if quarantined:
        return [_activity("Health check completed", f"{_plural(quarantined, 'rooster')} in quarantine", reference, "Users", reference)]

    total = db.query(Rooster).count()
    if not total:
        return []
    return [_activity("Health check completed", f"{_plural(total, 'rooster')} examined", reference - timedelta(days=1), "Users", reference)]


SOURCES: Dict[str, Callable[[Session, object], List[Dict]]] = {
    "roosters": _new_roosters,
    "sales": _recent_sales,
    "inventory": _inventory_alert,
    "health": _health_check,
}


def get_recent_activity(db: Session, user) -> List[Dict]:
    assert_permission(user, "read", DASHBOARD_POLICY, "activity")
    reference = now()

    activities = []
    for name, source in SOURCES.items():
        try:
            activities.extend(source(db, reference))
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Error fetching {name} for dashboard activity")

    activities.sort(key=lambda a: a["timestamp"], reverse=True)
    return activities[:FEED_LIMIT]
