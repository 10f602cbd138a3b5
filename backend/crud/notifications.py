"""
Dashboard notification feed.

Notifications are not stored. Each request assembles them from four sources
(stock alerts, recent sales, recent reviews, quarantined roosters), newest
first. A source that fails to load is logged and left out so the rest of the
feed still renders.
"""
import logging
from datetime import timedelta
from typing import Callable, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.inventory_items import InventoryItem
from models.reviews import Review
from models.roosters import Rooster
from models.sales_transactions import SalesTransaction
from utils.formatting import STATUS_CRITICAL, STATUS_LOW, format_peso, format_sales_transaction_id
from utils.permissions import NOTIFICATION_POLICY, assert_permission
from utils.time_utils import ensure_aware, format_time_ago, now

logger = logging.getLogger(__name__)

PER_SOURCE_LIMIT = 5
FEED_LIMIT = 20
RECENT_WINDOW = timedelta(days=7)


def _notification(kind: str, notification_id: str, title: str, description: str, when, reference) -> Dict:
    when = ensure_aware(when) if when is not None else reference
    return {
        "id": notification_id,
        "type": kind,
        "title": title,
        "description": description,
        "time": format_time_ago(when, reference),
        "timestamp": int(when.timestamp() * 1000),
        "read": False,
    }


def _inventory_alerts(db: Session, reference) -> List[Dict]:
    items = (
        db.query(InventoryItem)
        .filter(InventoryItem.status.in_([STATUS_LOW, STATUS_CRITICAL]))
        .limit(PER_SOURCE_LIMIT)
        .all()
    )
    return [
        _notification(
            "inventory",
            f"inventory-{item.id}",
            "Critical Stock Alert" if item.status == STATUS_CRITICAL else "Low Stock Alert",
            f"{item.name} running low. Only {item.current_stock:g} {item.unit} remaining.",
            item.last_restocked,
            reference,
        )
        for item in items
    ]


def _recent_sales(db: Session, reference) -> List[Dict]:
    since = (reference - RECENT_WINDOW).date()
    sales = (
        db.query(SalesTransaction)
        .filter(SalesTransaction.date >= since)
        .order_by(SalesTransaction.date.desc())
        .limit(PER_SOURCE_LIMIT)
        .all()
    )
    return [
        _notification(
            "sales",
            f"sale-{sale.id}",
            "New Sale Completed",
            f"Rooster {sale.transaction_id or format_sales_transaction_id(sale.id, sale.date)} sold for {format_peso(sale.amount)}",
            sale.date,
            reference,
        )
        for sale in sales
    ]


def _recent_reviews(db: Session, reference) -> List[Dict]:
    since = (reference - RECENT_WINDOW).date()
    reviews = (
        db.query(Review)
        .filter(Review.date >= since)
        .order_by(Review.date.desc())
        .limit(PER_SOURCE_LIMIT)
        .all()
    )
    return [
        _notification(
            "feedback",
            f"review-{review.id}",
            "New Customer Review",
            f"{review.rating}-star rating from {review.customer or 'Customer'} on {review.rooster or 'recent purchase'}",
            review.date,
            reference,
        )
        for review in reviews
    ]


def _health_alerts(db: Session, reference) -> List[Dict]:
    roosters = db.query(Rooster).filter(Rooster.status == "Quarantine").limit(PER_SOURCE_LIMIT).all()
    return [
        _notification(
            "health",
            f"health-{rooster.id}",
            "Health Check Reminder",
            f"Rooster {rooster.id} ({rooster.breed or 'Unknown breed'}) is in quarantine",
            rooster.date_added,
            reference,
        )
        for rooster in roosters
    ]


SOURCES: Dict[str, Callable[[Session, object], List[Dict]]] = {
    "sales": _recent_sales,
    "inventory": _inventory_alerts,
    "reviews": _recent_reviews,
    "roosters": _health_alerts,
}


def get_notifications(db: Session, user) -> List[Dict]:
    assert_permission(user, "read", NOTIFICATION_POLICY, "notifications")
    reference = now()

    notifications = []
    for name, source in SOURCES.items():
        try:
            notifications.extend(source(db, reference))
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Error fetching {name} for notifications")

    notifications.sort(key=lambda n: n["timestamp"], reverse=True)
    return notifications[:FEED_LIMIT]
