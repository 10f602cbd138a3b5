import logging
import math
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.inventory_activity import InventoryActivity
from models.inventory_items import InventoryItem
from models.inventory_meta import INVENTORY_STATS_DOC_ID, InventoryMeta
from schemas.base import MAX_NUMBER
from schemas.inventory_items import (
    CONSUME_REASONS,
    RESTOCK_REASONS,
    InventoryItemCreate,
    InventoryItemUpdate,
    InventoryStats,
)
from utils import generate_document_id, sqlalchemy_to_dict
from utils.errors import ServiceError
from utils.formatting import (
    STATUS_CRITICAL,
    STATUS_LOW,
    calculate_inventory_status,
    format_inventory_display_id,
)
from utils.permissions import INVENTORY_POLICY, assert_permission
from utils.retry import run_in_transaction
from utils.time_utils import now, today

logger = logging.getLogger(__name__)

RESOURCE = "inventory items"

# Fields a null in an update cannot clear; null leaves them unchanged
REQUIRED_FIELDS = {"name", "category", "current_stock", "min_stock", "unit", "supplier", "last_restocked"}


def _is_positive_amount(amount) -> bool:
    return (
        isinstance(amount, (int, float))
        and not isinstance(amount, bool)
        and math.isfinite(amount)
        and 0 < amount <= MAX_NUMBER
    )


def _ensure_in_range(value: float, what: str) -> None:
    if not math.isfinite(value) or abs(value) > MAX_NUMBER:
        raise ServiceError("INVALID_REQUEST", f"Resulting {what} is out of range.")


def _get_item_for_update(db: Session, item_id: str) -> InventoryItem:
    db_item = db.query(InventoryItem).filter(InventoryItem.id == item_id).with_for_update().first()
    if db_item is None:
        raise ServiceError("NOT_FOUND", "Inventory item not found.")
    return db_item


def recalculate_inventory_stats(db: Session) -> InventoryStats:
    """Fold over every item; no incremental counters are trusted."""
    total_items = 0
    low_stock_alerts = 0
    critical_items = 0
    monthly_spend = 0.0

    rows = db.query(InventoryItem.status, InventoryItem.price, InventoryItem.current_stock).all()
    for status, price, current_stock in rows:
        total_items += 1
        if status == STATUS_LOW:
            low_stock_alerts += 1
        if status == STATUS_CRITICAL:
            critical_items += 1
        if price is not None:
            monthly_spend += price * current_stock

    return InventoryStats(
        total_items=total_items,
        low_stock_alerts=low_stock_alerts,
        critical_items=critical_items,
        monthly_spend=monthly_spend,
    )


def _write_stats(db: Session, stats: InventoryStats) -> None:
    meta = db.get(InventoryMeta, INVENTORY_STATS_DOC_ID)
    if meta is None:
        meta = InventoryMeta(id=INVENTORY_STATS_DOC_ID)
        db.add(meta)
    meta.total_items = stats.total_items
    meta.low_stock_alerts = stats.low_stock_alerts
    meta.critical_items = stats.critical_items
    meta.monthly_spend = stats.monthly_spend
    meta.updated_at = now()


def _refresh_stats(db: Session) -> InventoryStats:
    # Pending item writes must be visible to the scan
    db.flush()
    stats = recalculate_inventory_stats(db)
    if not math.isfinite(stats.monthly_spend):
        raise ServiceError("INVALID_REQUEST", "Resulting monthly spend is out of range.")
    _write_stats(db, stats)
    return stats


def _record_activity(db: Session, user, db_item: InventoryItem, activity_type: str, amount: float, reason: str, previous_stock: float) -> None:
    """Append the audit record after the stock change committed.

    Best effort: a failure here is logged and does not undo the stock change.
    """
    try:
        db.add(InventoryActivity(
            item_id=db_item.id,
            item_name=db_item.name,
            type=activity_type,
            amount=amount,
            unit=db_item.unit,
            reason=reason,
            previous_stock=previous_stock,
            new_stock=db_item.current_stock,
            performed_by=user.identifier,
            performed_at=now(),
        ))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to record {activity_type} activity for inventory item {db_item.id}")


def get_inventory_items(db: Session, user) -> List[InventoryItem]:
    assert_permission(user, "read", INVENTORY_POLICY, RESOURCE)
    return db.query(InventoryItem).all()


def get_inventory_item(db: Session, user, item_id: str) -> InventoryItem:
    assert_permission(user, "read", INVENTORY_POLICY, RESOURCE)
    db_item = db.get(InventoryItem, item_id)
    if db_item is None:
        raise ServiceError("NOT_FOUND", "Inventory item not found.")
    return db_item


def create_inventory_item(db: Session, user, item: InventoryItemCreate) -> InventoryItem:
    assert_permission(user, "create", INVENTORY_POLICY, RESOURCE)

    item_id = generate_document_id()
    created_at = today()
    last_restocked = item.last_restocked or created_at
    display_id = format_inventory_display_id(item_id, created_at=created_at, last_restocked=last_restocked)
    data = item.model_dump(exclude={"last_restocked"})

    def work(session: Session) -> InventoryItem:
        db_item = InventoryItem(
            id=item_id,
            display_id=display_id,
            created_at=created_at,
            last_restocked=last_restocked,
            status=calculate_inventory_status(item.current_stock, item.min_stock),
            updated_by=user.identifier,
            **data,
        )
        session.add(db_item)
        _refresh_stats(session)
        return db_item

    db_item = run_in_transaction(db, work)
    logger.info(f"Inventory item '{db_item.name}' (ID: {item_id}) created by {user.identifier}")
    return db_item


def apply_inventory_update(db_item: InventoryItem, update_data: dict) -> None:
    """
    Merge the fields present in `update_data` onto `db_item` and re-derive status.

    Absent keys are untouched. A None on an optional field clears it; a None on
    a required field is ignored.
    """
    for key, value in update_data.items():
        if value is None and key in REQUIRED_FIELDS:
            continue
        setattr(db_item, key, value)
    db_item.status = calculate_inventory_status(db_item.current_stock, db_item.min_stock)


def update_inventory_item(db: Session, user, item_id: str, item: InventoryItemUpdate) -> InventoryItem:
    assert_permission(user, "update", INVENTORY_POLICY, RESOURCE)
    update_data = item.model_dump(exclude_unset=True)

    def work(session: Session) -> InventoryItem:
        db_item = _get_item_for_update(session, item_id)
        old_values = sqlalchemy_to_dict(db_item)
        apply_inventory_update(db_item, update_data)
        db_item.updated_at = now()
        db_item.updated_by = user.identifier
        _refresh_stats(session)
        changed = sorted(k for k, v in sqlalchemy_to_dict(db_item).items() if old_values.get(k) != v and k not in ("updated_at", "updated_by"))
        logger.debug(f"Inventory item {item_id} changed fields: {changed}")
        return db_item

    db_item = run_in_transaction(db, work)
    logger.info(f"Inventory item '{db_item.name}' (ID: {item_id}) updated by {user.identifier}")
    return db_item


def delete_inventory_item(db: Session, user, item_id: str) -> None:
    assert_permission(user, "delete", INVENTORY_POLICY, RESOURCE)

    def work(session: Session) -> str:
        db_item = _get_item_for_update(session, item_id)
        name = db_item.name
        session.delete(db_item)
        _refresh_stats(session)
        return name

    name = run_in_transaction(db, work)
    logger.info(f"Inventory item '{name}' (ID: {item_id}) deleted by {user.identifier}")


def restock_inventory_item(db: Session, user, item_id: str, amount: float, reason: str) -> InventoryItem:
    assert_permission(user, "restock", INVENTORY_POLICY, RESOURCE)

    if not _is_positive_amount(amount):
        raise ServiceError("INVALID_RESTOCK_AMOUNT")
    if not reason or not reason.strip():
        raise ServiceError("REASON_REQUIRED")

    def work(session: Session):
        db_item = _get_item_for_update(session, item_id)
        previous_stock = db_item.current_stock
        _ensure_in_range(previous_stock + amount, "stock")
        apply_inventory_update(db_item, {
            "current_stock": previous_stock + amount,
            "last_restocked": today(),
        })
        db_item.updated_at = now()
        db_item.updated_by = user.identifier
        _refresh_stats(session)
        return db_item, previous_stock

    db_item, previous_stock = run_in_transaction(db, work)
    _record_activity(db, user, db_item, "restock", amount, reason.strip(), previous_stock)
    logger.info(f"Inventory item '{db_item.name}' (ID: {item_id}) restocked by {amount} {db_item.unit} by {user.identifier}")
    return db_item


def consume_inventory_item(db: Session, user, item_id: str, amount: float, reason: str) -> InventoryItem:
    """
    Take `amount` out of stock.

    Stock is not clamped at zero: consuming more than is on hand leaves a
    negative level, which the status formula reports as critical.
    """
    assert_permission(user, "consume", INVENTORY_POLICY, RESOURCE)

    if not _is_positive_amount(amount):
        raise ServiceError("INVALID_CONSUME_AMOUNT")
    if not reason or not reason.strip():
        raise ServiceError("REASON_REQUIRED")

    def work(session: Session):
        db_item = _get_item_for_update(session, item_id)
        previous_stock = db_item.current_stock
        _ensure_in_range(previous_stock - amount, "stock")
        apply_inventory_update(db_item, {"current_stock": previous_stock - amount})
        db_item.updated_at = now()
        db_item.updated_by = user.identifier
        _refresh_stats(session)
        return db_item, previous_stock

    db_item, previous_stock = run_in_transaction(db, work)
    if db_item.current_stock < 0:
        logger.warning(f"Inventory item '{db_item.name}' (ID: {item_id}) over-consumed, stock now {db_item.current_stock}")
    _record_activity(db, user, db_item, "consume", amount, reason.strip(), previous_stock)
    logger.info(f"Inventory item '{db_item.name}' (ID: {item_id}) consumed {amount} {db_item.unit} by {user.identifier}")
    return db_item


def get_inventory_stats(db: Session, user) -> InventoryStats:
    """Recompute from a full scan, persist the fresh value, return it."""
    assert_permission(user, "readStats", INVENTORY_POLICY, RESOURCE)
    return run_in_transaction(db, _refresh_stats)


def get_inventory_activity(db: Session, user, item_id: Optional[str] = None, limit: int = 50) -> List[InventoryActivity]:
    assert_permission(user, "readActivity", INVENTORY_POLICY, RESOURCE)
    query = db.query(InventoryActivity)
    if item_id:
        query = query.filter(InventoryActivity.item_id == item_id)
    return query.order_by(InventoryActivity.performed_at.desc()).limit(limit).all()


def get_reason_options(user) -> dict:
    """Suggested reasons for the restock and consume forms; free text is still accepted."""
    assert_permission(user, "read", INVENTORY_POLICY, RESOURCE)
    return {"restock": list(RESTOCK_REASONS), "consume": list(CONSUME_REASONS)}
